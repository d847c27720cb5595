"""
CLI for browsing the department schema catalog.

Usage:
    python -m dept_data_hub.cli departments
    python -m dept_data_hub.cli tables sales
    python -m dept_data_hub.cli describe inventory inventory_items --locale ar
"""

from __future__ import annotations

import argparse
from typing import List, Optional

from dept_data_hub.infrastructure.schema import (
    SchemaCatalog,
    TableSchema,
    get_catalog,
)


def _catalog(catalog: Optional[SchemaCatalog]) -> SchemaCatalog:
    return catalog or get_catalog()


def list_departments_command(
    args: argparse.Namespace, catalog: Optional[SchemaCatalog] = None
) -> int:
    """Print every department with its owned/linked table counts."""
    catalog = _catalog(catalog)
    for department_id in catalog.list_departments():
        registry = catalog.get_registry(department_id)
        print(
            f"{department_id:<12} {registry.display_name(args.locale):<24} "
            f"owned={len(registry.owned_tables)} linked={len(registry.linked_tables)}"
        )
    return 0


def list_tables_command(
    args: argparse.Namespace, catalog: Optional[SchemaCatalog] = None
) -> int:
    """Print owned tables followed by linked tables of one department."""
    catalog = _catalog(catalog)
    for table in catalog.list_tables(args.department):
        marker = f"linked from {table.linked_department_id}" if table.is_linked else "owned"
        print(
            f"{table.id:<24} {table.display_name(args.locale):<28} "
            f"{len(table.columns):>3} columns  {marker}"
        )
    return 0


def _describe_lines(table: TableSchema, locale: Optional[str]) -> List[str]:
    lines = [
        f"{table.display_name(locale)} ({table.id})",
        table.display_description(locale),
        "",
    ]
    for column in table.columns:
        flag = "required" if column.required else "optional"
        lines.append(
            f"  {column.id:<24} {column.column_type.value:<8} {flag:<8} "
            f"{column.display_label(locale)}"
        )
        if column.enum_values:
            values = ", ".join(
                f"{ev.value} ({ev.display_label(locale)})" for ev in column.enum_values
            )
            lines.append(f"      values: {values}")
        if column.alternatives:
            lines.append(f"      alternatives: {', '.join(column.alternatives)}")
        if column.source_column:
            lines.append(
                f"      projects: {table.linked_department_id}."
                f"{table.source_table_id}.{column.source_column}"
            )
    return lines


def describe_table_command(
    args: argparse.Namespace, catalog: Optional[SchemaCatalog] = None
) -> int:
    """Print a table's columns with type, required flag and alternatives."""
    catalog = _catalog(catalog)
    table = catalog.get_table(args.department, args.table)
    for line in _describe_lines(table, args.locale):
        print(line)
    if args.template:
        print("")
        print(",".join(table.template_headers(args.locale)))
    return 0
