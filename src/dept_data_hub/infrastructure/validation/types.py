"""Validation types for imported cell values.

Per-cell outcomes:
- ValidValue: coerced, typed value (or the ``ABSENT`` marker)
- ValidationFailure subclasses: TypeMismatch, UnparseableDate, EnumViolation,
  MissingRequiredField

Batch reporting (shared with the row validator and the CLI):
- ValidationErrorDetail: one failed cell, flattened for reports
- ValidationSummary: aggregated statistics for a batch
- ValidationThresholdExceeded: raised when a batch's failure rate is too high

Cell outcomes are returned, never raised, so a bulk import can collect every
problem of every row.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Tuple, Union


class _AbsentType(Enum):
    ABSENT = "absent"

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False


# Value of an empty cell in a non-required column. Distinct from None, 0, ""
# and False so aggregations cannot mistake it for a real value.
ABSENT = _AbsentType.ABSENT


@dataclass(frozen=True)
class ValidValue:
    """A cell that conforms to its column's type.

    Attributes:
        column_id: Column the value was validated against
        value: Coerced value (str, int, Decimal, date, bool, enum token) or
            ``ABSENT``
    """

    column_id: str
    value: Any

    @property
    def is_absent(self) -> bool:
        return self.value is ABSENT


@dataclass(frozen=True)
class ValidationFailure:
    """Base class for a cell that does not conform to its column."""

    column_id: str
    raw_value: Any
    message: str

    @property
    def kind(self) -> str:
        return type(self).__name__


@dataclass(frozen=True)
class TypeMismatch(ValidationFailure):
    """Raw value cannot be coerced to the column's type."""

    expected_type: str = ""


@dataclass(frozen=True)
class UnparseableDate(ValidationFailure):
    """Raw value matches none of the configured date formats."""

    formats: Tuple[str, ...] = ()


@dataclass(frozen=True)
class EnumViolation(ValidationFailure):
    """Raw value is not one of the column's enum values or labels."""

    permitted_values: Tuple[str, ...] = ()


@dataclass(frozen=True)
class MissingRequiredField(ValidationFailure):
    """Required column received an empty or missing value."""


ValidationResult = Union[ValidValue, ValidationFailure]


@dataclass
class ValidationErrorDetail:
    """One failed cell, flattened for reports and CSV export.

    Attributes:
        row_index: 0-indexed data row (None for header-level problems)
        field_name: Column id
        error_type: Failure kind (e.g. 'TypeMismatch', 'EnumViolation')
        error_message: Human-readable description
        original_value: Raw cell value

    Example:
        >>> error = ValidationErrorDetail(
        ...     row_index=15,
        ...     field_name='movement_date',
        ...     error_type='UnparseableDate',
        ...     error_message="Cannot parse 'INVALID' as date",
        ...     original_value='INVALID'
        ... )
    """

    row_index: Optional[int]
    field_name: str
    error_type: str
    error_message: str
    original_value: Any

    @classmethod
    def from_failure(
        cls, failure: ValidationFailure, row_index: Optional[int] = None
    ) -> "ValidationErrorDetail":
        return cls(
            row_index=row_index,
            field_name=failure.column_id,
            error_type=failure.kind,
            error_message=failure.message,
            original_value=failure.raw_value,
        )


@dataclass
class ValidationSummary:
    """Aggregated validation statistics.

    Attributes:
        total_rows: Total number of rows processed
        valid_rows: Number of rows that passed validation
        failed_rows: Number of rows with at least one failed cell
        error_count: Total failed cells (can exceed failed_rows)
        error_rate: Ratio of failed rows to total rows (0.0 to 1.0)
    """

    total_rows: int
    valid_rows: int
    failed_rows: int
    error_count: int
    error_rate: float


class ValidationThresholdExceeded(Exception):
    """Raised when a batch's failed-row rate reaches the configured threshold.

    Attributes:
        error_rate: The actual failed-row rate
        threshold: The configured threshold that was reached
        failed_rows: Number of rows that failed validation
        total_rows: Total number of rows processed

    Example:
        >>> raise ValidationThresholdExceeded(
        ...     "Validation failure rate 15.0% exceeds threshold 10.0%",
        ...     error_rate=0.15,
        ...     threshold=0.10,
        ...     failed_rows=150,
        ...     total_rows=1000
        ... )
    """

    def __init__(
        self,
        message: str,
        *,
        error_rate: float = 0.0,
        threshold: float = 0.0,
        failed_rows: int = 0,
        total_rows: int = 0,
    ) -> None:
        super().__init__(message)
        self.error_rate = error_rate
        self.threshold = threshold
        self.failed_rows = failed_rows
        self.total_rows = total_rows


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
]
