"""Authoring checks for schema definitions that are reported, not rejected."""

from __future__ import annotations

from typing import Dict, List

from dept_data_hub.utils.column_normalizer import normalize_header

from .core import TableSchema


def find_alternative_collisions(table: TableSchema) -> Dict[str, List[str]]:
    """
    List alternatives shared by two or more columns of a table.

    Returns:
        Mapping normalized alternative -> column ids (table order) that list it

    Example:
        >>> find_alternative_collisions(sales_orders)
        {'customer': ['customer_id', 'customer_name']}
    """
    owners: Dict[str, List[str]] = {}
    for column in table.columns:
        for alternative in {normalize_header(a) for a in column.alternatives}:
            if alternative:
                owners.setdefault(alternative, []).append(column.id)
    return {alt: ids for alt, ids in owners.items() if len(ids) > 1}


def find_label_collisions(table: TableSchema) -> Dict[str, List[str]]:
    """List normalized ids/labels shared by two or more columns of a table."""
    owners: Dict[str, List[str]] = {}
    for column in table.columns:
        for key in {normalize_header(column.id), normalize_header(column.label)}:
            if key:
                owners.setdefault(key, []).append(column.id)
    return {key: ids for key, ids in owners.items() if len(ids) > 1}


__all__ = ["find_alternative_collisions", "find_label_collisions"]
