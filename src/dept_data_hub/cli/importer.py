"""
CLI for checking import files against a department table.

Usage:
    python -m dept_data_hub.cli map-headers inventory inventory_items items.csv
    python -m dept_data_hub.cli validate inventory inventory_items items.csv

CSV files are read with every cell kept as a string; typing is the
validator's job. The first row is the header row.
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd

from dept_data_hub.infrastructure.resolution import HeaderMapping, build_header_mapping
from dept_data_hub.infrastructure.schema import SchemaCatalog, TableSchema, get_catalog
from dept_data_hub.infrastructure.validation import (
    ValidationThresholdExceeded,
    check_threshold,
    validate_rows,
)
from dept_data_hub.utils.logging import get_logger

logger = get_logger(__name__)

# Failures printed before the listing is truncated
MAX_PRINTED_ERRORS = 50


def read_csv_rows(path: Path) -> Tuple[List[str], List[Dict[str, Any]]]:
    """
    Read a CSV file into its header row and row dicts keyed by header.

    Duplicate headers are kept as written (pandas would rename them), so the
    header mapping can report them. For duplicates the first cell wins.
    """
    frame = pd.read_csv(
        path,
        header=None,
        dtype=str,
        keep_default_na=False,
        encoding="utf-8-sig",
        skip_blank_lines=True,
    )
    if frame.empty:
        return [], []

    headers = [str(h) for h in frame.iloc[0].tolist()]
    rows: List[Dict[str, Any]] = []
    for values in frame.iloc[1:].itertuples(index=False, name=None):
        row: Dict[str, Any] = {}
        for header, value in zip(headers, values):
            row.setdefault(header, value)
        rows.append(row)
    return headers, rows


def _print_mapping(mapping: HeaderMapping) -> None:
    for header, match in mapping.matches.items():
        print(
            f"  {header!r:<30} -> {match.column_id:<24} "
            f"{match.confidence.value} ({match.score:.2f})"
        )
    for header, column_ids in mapping.ambiguous.items():
        print(f"  {header!r:<30} AMBIGUOUS: {', '.join(column_ids)}")
    for header, column_id in mapping.duplicates.items():
        print(f"  {header!r:<30} DUPLICATE of {column_id} (ignored)")
    for header in mapping.unmatched:
        print(f"  {header!r:<30} UNMATCHED")
    if mapping.missing_required:
        print(f"  missing required columns: {', '.join(mapping.missing_required)}")


def _target_table(args: argparse.Namespace, catalog: Optional[SchemaCatalog]) -> TableSchema:
    return (catalog or get_catalog()).get_table(args.department, args.table)


def map_headers_command(
    args: argparse.Namespace, catalog: Optional[SchemaCatalog] = None
) -> int:
    """Resolve a CSV header row and print the mapping report."""
    table = _target_table(args, catalog)
    headers, _ = read_csv_rows(Path(args.csv))
    mapping = build_header_mapping(table, headers, fuzzy_threshold=args.threshold)
    print(f"Header mapping for {table.id} ({len(headers)} headers)")
    _print_mapping(mapping)
    return 0 if mapping.is_complete else 1


def validate_command(
    args: argparse.Namespace, catalog: Optional[SchemaCatalog] = None
) -> int:
    """Map headers, validate every row and print the summary and failures."""
    table = _target_table(args, catalog)
    headers, rows = read_csv_rows(Path(args.csv))
    mapping = build_header_mapping(table, headers, fuzzy_threshold=args.threshold)
    report = validate_rows(table, rows, header_mapping=mapping)

    summary = report.summary
    print(f"Header mapping for {table.id} ({len(headers)} headers)")
    _print_mapping(mapping)
    print("")
    print(
        f"Rows: {summary.total_rows}  valid: {summary.valid_rows}  "
        f"failed: {summary.failed_rows}  errors: {summary.error_count}  "
        f"failure rate: {summary.error_rate:.1%}"
    )

    errors = report.errors
    for error in errors[:MAX_PRINTED_ERRORS]:
        # Row numbers as seen in a spreadsheet: header is row 1
        print(
            f"  row {error.row_index + 2 if error.row_index is not None else '-'}: "
            f"{error.field_name} [{error.error_type}] {error.error_message}"
        )
    if len(errors) > MAX_PRINTED_ERRORS:
        print(f"  ... {len(errors) - MAX_PRINTED_ERRORS} more")

    if args.max_failure_rate is not None:
        try:
            check_threshold(report, args.max_failure_rate)
        except ValidationThresholdExceeded as e:
            print(f"REJECTED: {e}")
            return 1

    return 0 if summary.failed_rows == 0 else 1
