"""Batch validation of imported rows against a table schema.

Every cell of every row is validated; failures are collected into a report
instead of stopping at the first bad cell. The failure-rate gate
(``check_threshold``) is applied separately so callers decide whether a
partially bad batch is acceptable.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from dept_data_hub.config import get_settings
from dept_data_hub.infrastructure.resolution import HeaderMapping
from dept_data_hub.infrastructure.schema import ReadOnlyTableError, TableSchema
from dept_data_hub.utils.logging import get_logger

from .types import (
    ValidationErrorDetail,
    ValidationFailure,
    ValidationSummary,
    ValidationThresholdExceeded,
    ValidValue,
)
from .value_validator import validate_value

logger = get_logger(__name__)


@dataclass
class RowResult:
    """Outcome of one row: coerced values of valid cells plus any failures."""

    row_index: int
    values: Dict[str, Any] = field(default_factory=dict)
    failures: List[ValidationFailure] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.failures


@dataclass
class ValidationReport:
    """Complete outcome of a batch."""

    table_id: str
    rows: List[RowResult]
    summary: ValidationSummary
    ignored_fields: List[str] = field(default_factory=list)

    @property
    def valid_rows(self) -> List[Dict[str, Any]]:
        return [row.values for row in self.rows if row.is_valid]

    @property
    def errors(self) -> List[ValidationErrorDetail]:
        return [
            ValidationErrorDetail.from_failure(failure, row.row_index)
            for row in self.rows
            for failure in row.failures
        ]


def _summarize(rows: Sequence[RowResult]) -> ValidationSummary:
    total_rows = len(rows)
    failed_rows = sum(1 for row in rows if not row.is_valid)
    return ValidationSummary(
        total_rows=total_rows,
        valid_rows=total_rows - failed_rows,
        failed_rows=failed_rows,
        error_count=sum(len(row.failures) for row in rows),
        error_rate=failed_rows / total_rows if total_rows else 0.0,
    )


def _keyed_by_column(
    row: Mapping[str, Any], header_mapping: Optional[HeaderMapping], ignored: Dict[str, None]
) -> Dict[str, Any]:
    if header_mapping is None:
        return dict(row)
    keyed: Dict[str, Any] = {}
    for header, raw in row.items():
        column_id = header_mapping.column_for(header)
        if column_id is None:
            ignored.setdefault(header)
            continue
        keyed[column_id] = raw
    return keyed


def validate_rows(
    table: TableSchema,
    rows: Iterable[Mapping[str, Any]],
    header_mapping: Optional[HeaderMapping] = None,
    date_formats: Optional[Sequence[str]] = None,
) -> ValidationReport:
    """
    Validate a batch of rows against an owned table.

    Args:
        table: Target table; must not be a linked table
        rows: Row mappings keyed by header (when ``header_mapping`` is given)
            or by column id
        header_mapping: Result of ``build_header_mapping`` for the file's
            header row; headers it does not map are ignored
        date_formats: Overrides ``Settings.date_formats``

    Returns:
        ``ValidationReport`` with per-row results and a summary

    Raises:
        ReadOnlyTableError: If ``table`` is a linked table
    """
    if table.is_linked:
        raise ReadOnlyTableError(table.id, table.linked_department_id)

    formats = list(date_formats or get_settings().date_formats)
    ignored: Dict[str, None] = {}
    results: List[RowResult] = []

    for row_index, row in enumerate(rows):
        keyed = _keyed_by_column(row, header_mapping, ignored)
        result = RowResult(row_index=row_index)
        for column in table.columns:
            outcome = validate_value(column, keyed.get(column.id), formats)
            if isinstance(outcome, ValidValue):
                result.values[column.id] = outcome.value
            else:
                result.failures.append(outcome)
        if header_mapping is None:
            for key in keyed:
                if table.get_column(key) is None:
                    ignored.setdefault(key)
        results.append(result)

    summary = _summarize(results)
    logger.info(
        "row_validator.summary",
        table_id=table.id,
        total_rows=summary.total_rows,
        failed_rows=summary.failed_rows,
        error_count=summary.error_count,
        error_rate=f"{summary.error_rate:.1%}",
        ignored_fields=list(ignored),
    )
    return ValidationReport(
        table_id=table.id, rows=results, summary=summary, ignored_fields=list(ignored)
    )


def check_threshold(
    report: Union[ValidationReport, ValidationSummary],
    threshold: Optional[float] = None,
) -> ValidationSummary:
    """
    Reject a batch whose failed-row rate reaches the threshold.

    Args:
        report: Batch report or its summary
        threshold: Maximum acceptable failed-row rate; defaults to
            ``Settings.failure_rate_threshold``

    Returns:
        The summary, when the batch is acceptable

    Raises:
        ValidationThresholdExceeded: If failed rows / total rows >= threshold
    """
    summary = report.summary if isinstance(report, ValidationReport) else report
    if threshold is None:
        threshold = get_settings().failure_rate_threshold

    if summary.total_rows and summary.failed_rows and summary.error_rate >= threshold:
        logger.error(
            "row_validator.threshold_exceeded",
            error_rate=f"{summary.error_rate:.1%}",
            threshold=f"{threshold:.1%}",
            failed_rows=summary.failed_rows,
        )
        raise ValidationThresholdExceeded(
            f"Validation failure rate {summary.error_rate:.1%} exceeds "
            f"threshold {threshold:.1%} "
            f"({summary.failed_rows}/{summary.total_rows} rows failed)",
            error_rate=summary.error_rate,
            threshold=threshold,
            failed_rows=summary.failed_rows,
            total_rows=summary.total_rows,
        )
    return summary


__all__ = ["RowResult", "ValidationReport", "validate_rows", "check_threshold"]
