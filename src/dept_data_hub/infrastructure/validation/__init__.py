"""Typed value validation and batch reporting for imports.

Usage:
    >>> from dept_data_hub.infrastructure.validation import (
    ...     validate_value,
    ...     validate_rows,
    ...     check_threshold,
    ...     ABSENT,
    ...     MissingRequiredField,
    ... )
    >>> validate_value(column, "").value is ABSENT  # non-required column
    True
"""

from .row_validator import RowResult, ValidationReport, check_threshold, validate_rows
from .types import (
    ABSENT,
    EnumViolation,
    MissingRequiredField,
    TypeMismatch,
    UnparseableDate,
    ValidationErrorDetail,
    ValidationFailure,
    ValidationResult,
    ValidationSummary,
    ValidationThresholdExceeded,
    ValidValue,
)
from .value_validator import FALSE_TOKENS, TRUE_TOKENS, is_empty, to_iso, validate_value

__all__ = [
    "ABSENT",
    "ValidValue",
    "ValidationFailure",
    "TypeMismatch",
    "UnparseableDate",
    "EnumViolation",
    "MissingRequiredField",
    "ValidationResult",
    "ValidationErrorDetail",
    "ValidationSummary",
    "ValidationThresholdExceeded",
    "TRUE_TOKENS",
    "FALSE_TOKENS",
    "is_empty",
    "validate_value",
    "to_iso",
    "RowResult",
    "ValidationReport",
    "validate_rows",
    "check_threshold",
]
