"""
Value validation for a single imported cell.

``validate_value(column, raw)`` checks a raw cell against its column's type
and returns either a ``ValidValue`` carrying the coerced value or a
``ValidationFailure``. Dispatch is a table keyed by every ``ColumnType``
member; a missing entry fails at import time.

Coercions:
- text: trimmed string
- number: int (thousands separators and an all-zero fraction accepted)
- decimal: ``Decimal`` built from the cleaned string, never from a float
- date: ``datetime.date`` from the first matching configured format
- boolean: bool from a fixed token vocabulary
- enum: canonical enum value token
"""

from __future__ import annotations

import math
from datetime import date
from functools import lru_cache
from typing import Any, Callable, Dict, Optional, Sequence

from dept_data_hub.config import get_settings
from dept_data_hub.infrastructure.schema import ColumnDefinition, ColumnType
from dept_data_hub.utils.column_normalizer import normalize_header
from dept_data_hub.utils.date_parser import parse_date
from dept_data_hub.utils.numeric_parser import parse_decimal, parse_integer

from .types import (
    ABSENT,
    EnumViolation,
    MissingRequiredField,
    TypeMismatch,
    UnparseableDate,
    ValidationResult,
    ValidValue,
)

TRUE_TOKENS = frozenset({"true", "yes", "1", "y", "t"})
FALSE_TOKENS = frozenset({"false", "no", "0", "n", "f"})

_Validator = Callable[[ColumnDefinition, Any, Sequence[str]], ValidationResult]


def is_empty(raw: Any) -> bool:
    """None, blank strings and NaN cells count as empty."""
    if raw is None:
        return True
    if isinstance(raw, str):
        return not raw.strip()
    if isinstance(raw, float):
        return math.isnan(raw)
    return False


def _type_mismatch(column: ColumnDefinition, raw: Any, detail: str) -> TypeMismatch:
    return TypeMismatch(
        column_id=column.id,
        raw_value=raw,
        message=detail,
        expected_type=column.column_type.value,
    )


def _validate_text(column: ColumnDefinition, raw: Any, formats: Sequence[str]) -> ValidationResult:
    return ValidValue(column.id, str(raw).strip())


def _validate_number(column: ColumnDefinition, raw: Any, formats: Sequence[str]) -> ValidationResult:
    try:
        return ValidValue(column.id, parse_integer(raw))
    except ValueError as e:
        return _type_mismatch(column, raw, f"Expected an integer: {e}")


def _validate_decimal(column: ColumnDefinition, raw: Any, formats: Sequence[str]) -> ValidationResult:
    try:
        return ValidValue(column.id, parse_decimal(raw))
    except ValueError as e:
        return _type_mismatch(column, raw, f"Expected a decimal number: {e}")


def _validate_date(column: ColumnDefinition, raw: Any, formats: Sequence[str]) -> ValidationResult:
    try:
        return ValidValue(column.id, parse_date(raw, formats))
    except ValueError as e:
        return UnparseableDate(
            column_id=column.id,
            raw_value=raw,
            message=str(e),
            formats=tuple(formats),
        )


def _validate_boolean(column: ColumnDefinition, raw: Any, formats: Sequence[str]) -> ValidationResult:
    if isinstance(raw, bool):
        return ValidValue(column.id, raw)
    token = str(raw).strip().lower()
    if token in TRUE_TOKENS:
        return ValidValue(column.id, True)
    if token in FALSE_TOKENS:
        return ValidValue(column.id, False)
    return _type_mismatch(
        column,
        raw,
        f"Expected a boolean ({'/'.join(sorted(TRUE_TOKENS))} or "
        f"{'/'.join(sorted(FALSE_TOKENS))}), got {raw!r}",
    )


@lru_cache(maxsize=None)
def _enum_lookup(column: ColumnDefinition) -> Dict[str, str]:
    # Canonical values take precedence over a label that happens to spell
    # another value.
    lookup: Dict[str, str] = {}
    for enum_value in column.enum_values or ():
        for text in (enum_value.label, enum_value.localized_label):
            key = normalize_header(text)
            if key:
                lookup.setdefault(key, enum_value.value)
    for enum_value in column.enum_values or ():
        lookup[normalize_header(enum_value.value)] = enum_value.value
    return lookup


def _validate_enum(column: ColumnDefinition, raw: Any, formats: Sequence[str]) -> ValidationResult:
    canonical = _enum_lookup(column).get(normalize_header(raw))
    if canonical is not None:
        return ValidValue(column.id, canonical)
    permitted = tuple(column.permitted_values())
    return EnumViolation(
        column_id=column.id,
        raw_value=raw,
        message=f"Value {raw!r} is not permitted. Permitted values: {', '.join(permitted)}",
        permitted_values=permitted,
    )


_VALIDATORS: Dict[ColumnType, _Validator] = {
    ColumnType.TEXT: _validate_text,
    ColumnType.NUMBER: _validate_number,
    ColumnType.DECIMAL: _validate_decimal,
    ColumnType.DATE: _validate_date,
    ColumnType.BOOLEAN: _validate_boolean,
    ColumnType.ENUM: _validate_enum,
}

_missing = set(ColumnType) - set(_VALIDATORS)
if _missing:
    raise RuntimeError(
        f"No validator registered for column types: {sorted(t.value for t in _missing)}"
    )


def validate_value(
    column: ColumnDefinition,
    raw: Any,
    date_formats: Optional[Sequence[str]] = None,
) -> ValidationResult:
    """
    Validate and coerce one raw cell against its column.

    Args:
        column: Resolved column definition
        raw: Raw cell value (usually a string)
        date_formats: strptime patterns for date columns; defaults to
            ``Settings.date_formats``

    Returns:
        ``ValidValue`` or a ``ValidationFailure`` subclass. Empty input gives
        ``MissingRequiredField`` for required columns and
        ``ValidValue(ABSENT)`` otherwise.
    """
    if is_empty(raw):
        if column.required:
            return MissingRequiredField(
                column_id=column.id,
                raw_value=raw,
                message=f"Required field '{column.label}' is empty",
            )
        return ValidValue(column.id, ABSENT)

    formats = date_formats or get_settings().date_formats
    return _VALIDATORS[column.column_type](column, raw, formats)


def to_iso(value: Any) -> Any:
    """Serialize a coerced value for display: ISO dates, "" for ABSENT."""
    if value is ABSENT:
        return ""
    if isinstance(value, date):
        return value.isoformat()
    return value


__all__ = [
    "TRUE_TOKENS",
    "FALSE_TOKENS",
    "is_empty",
    "validate_value",
    "to_iso",
]
