"""Core schema types for department data tables.

Column definitions, table schemas and department registries are immutable:
they are built once from the static definitions and shared read-only by the
resolver, the validator and every dashboard that lists them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

from .exceptions import SchemaDefinitionError

# Locale whose display strings come from the ``localized_*`` fields.
LOCALIZED_LOCALE = "ar"

# Width used by the dashboards when a column carries no width hint.
DEFAULT_DISPLAY_WIDTH = 150


def _is_localized(locale: Optional[str]) -> bool:
    return bool(locale) and locale.lower().split("-")[0] == LOCALIZED_LOCALE


def _pick(english: str, localized: str, locale: Optional[str]) -> str:
    if _is_localized(locale) and localized.strip():
        return localized
    return english


class ColumnType(Enum):
    """Supported column types for department tables."""

    TEXT = "text"
    NUMBER = "number"
    DECIMAL = "decimal"
    DATE = "date"
    BOOLEAN = "boolean"
    ENUM = "enum"


@dataclass(frozen=True)
class EnumValue:
    """One permitted value of an enum column."""

    value: str
    label: str
    localized_label: str = ""

    def display_label(self, locale: Optional[str] = None) -> str:
        return _pick(self.label, self.localized_label, locale)


@dataclass(frozen=True)
class ColumnDefinition:
    """Definition of a single column in a table schema.

    ``source_column`` is only set on columns of linked tables and names the
    column of the owning table that this column projects.
    """

    id: str
    label: str
    column_type: ColumnType
    localized_label: str = ""
    required: bool = False
    description: str = ""
    alternatives: Tuple[str, ...] = ()
    enum_values: Optional[Tuple[EnumValue, ...]] = None
    display_width: Optional[int] = None
    source_column: Optional[str] = None

    def __post_init__(self) -> None:
        # Lists from callers become tuples so columns stay hashable
        object.__setattr__(self, "alternatives", tuple(self.alternatives))
        if self.enum_values is not None:
            object.__setattr__(self, "enum_values", tuple(self.enum_values))
        if not self.id or not self.id.strip():
            raise SchemaDefinitionError("Column id must be a non-empty string")
        if not isinstance(self.column_type, ColumnType):
            raise SchemaDefinitionError(
                f"Unsupported column type {self.column_type!r}", column_id=self.id
            )
        if self.column_type is ColumnType.ENUM:
            if not self.enum_values:
                raise SchemaDefinitionError(
                    "Enum columns must declare enum_values", column_id=self.id
                )
            seen = set()
            for enum_value in self.enum_values:
                if enum_value.value in seen:
                    raise SchemaDefinitionError(
                        f"Duplicate enum value '{enum_value.value}'",
                        column_id=self.id,
                    )
                seen.add(enum_value.value)
        elif self.enum_values is not None:
            raise SchemaDefinitionError(
                f"Only enum columns may declare enum_values, got type "
                f"'{self.column_type.value}'",
                column_id=self.id,
            )
        if self.display_width is not None and self.display_width <= 0:
            raise SchemaDefinitionError(
                "display_width must be positive", column_id=self.id
            )

    @property
    def type(self) -> ColumnType:
        return self.column_type

    @property
    def source_column_id(self) -> str:
        """Owner column id for projected columns, own id otherwise."""
        return self.source_column or self.id

    def display_label(self, locale: Optional[str] = None) -> str:
        return _pick(self.label, self.localized_label, locale)

    def width_or_default(self) -> int:
        return self.display_width or DEFAULT_DISPLAY_WIDTH

    def permitted_values(self) -> List[str]:
        """Canonical enum tokens, empty for non-enum columns."""
        return [ev.value for ev in self.enum_values or ()]


@dataclass(frozen=True)
class TableSchema:
    """Ordered set of column definitions describing one logical table."""

    id: str
    name: str
    columns: Tuple[ColumnDefinition, ...]
    localized_name: str = ""
    description: str = ""
    localized_description: str = ""
    is_linked: bool = False
    linked_department_id: Optional[str] = None
    linked_table_id: Optional[str] = None
    _by_id: Dict[str, ColumnDefinition] = field(
        init=False, repr=False, compare=False, hash=False, default_factory=dict
    )

    def __post_init__(self) -> None:
        object.__setattr__(self, "columns", tuple(self.columns))
        if not self.id or not self.id.strip():
            raise SchemaDefinitionError("Table id must be a non-empty string")
        if not self.columns:
            raise SchemaDefinitionError("Tables must declare columns", table_id=self.id)
        for column in self.columns:
            if column.id in self._by_id:
                raise SchemaDefinitionError(
                    "Duplicate column id", table_id=self.id, column_id=column.id
                )
            self._by_id[column.id] = column
        if self.is_linked != bool(self.linked_department_id):
            raise SchemaDefinitionError(
                "Linked tables must name linked_department_id and only linked "
                "tables may do so",
                table_id=self.id,
            )
        if self.linked_table_id and not self.is_linked:
            raise SchemaDefinitionError(
                "linked_table_id requires a linked table", table_id=self.id
            )
        if not self.is_linked:
            projected = [c.id for c in self.columns if c.source_column]
            if projected:
                raise SchemaDefinitionError(
                    f"source_column is only allowed on linked tables: {projected}",
                    table_id=self.id,
                )

    @property
    def source_table_id(self) -> str:
        """Table id inside the owning department (own id when not linked)."""
        return self.linked_table_id or self.id

    def get_column(self, column_id: str) -> Optional[ColumnDefinition]:
        return self._by_id.get(column_id)

    @property
    def column_ids(self) -> List[str]:
        return [c.id for c in self.columns]

    @property
    def required_columns(self) -> List[ColumnDefinition]:
        return [c for c in self.columns if c.required]

    def display_name(self, locale: Optional[str] = None) -> str:
        return _pick(self.name, self.localized_name, locale)

    def display_description(self, locale: Optional[str] = None) -> str:
        return _pick(self.description, self.localized_description, locale)

    def template_headers(self, locale: Optional[str] = None) -> List[str]:
        """Header row for an import template, in display order."""
        return [c.display_label(locale) for c in self.columns]


@dataclass(frozen=True)
class SchemaRegistry:
    """All table schemas owned or linked by one department."""

    department_id: str
    department_name: str
    owned_tables: Tuple[TableSchema, ...]
    linked_tables: Tuple[TableSchema, ...] = ()
    localized_department_name: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "owned_tables", tuple(self.owned_tables))
        object.__setattr__(self, "linked_tables", tuple(self.linked_tables))
        if not self.department_id or not self.department_id.strip():
            raise SchemaDefinitionError("Department id must be a non-empty string")
        seen = set()
        for table in self.owned_tables:
            if table.is_linked:
                raise SchemaDefinitionError(
                    "Owned tables cannot be linked",
                    department_id=self.department_id,
                    table_id=table.id,
                )
        for table in self.linked_tables:
            if not table.is_linked:
                raise SchemaDefinitionError(
                    "Linked tables must set is_linked",
                    department_id=self.department_id,
                    table_id=table.id,
                )
            if table.linked_department_id == self.department_id:
                raise SchemaDefinitionError(
                    "A department cannot link its own tables",
                    department_id=self.department_id,
                    table_id=table.id,
                )
        for table in self.owned_tables + self.linked_tables:
            if table.id in seen:
                raise SchemaDefinitionError(
                    "Duplicate table id",
                    department_id=self.department_id,
                    table_id=table.id,
                )
            seen.add(table.id)

    def list_tables(self) -> List[TableSchema]:
        """Owned tables followed by linked tables."""
        return list(self.owned_tables) + list(self.linked_tables)

    def find_table(self, table_id: str) -> Optional[TableSchema]:
        for table in self.list_tables():
            if table.id == table_id:
                return table
        return None

    def display_name(self, locale: Optional[str] = None) -> str:
        return _pick(self.department_name, self.localized_department_name, locale)


__all__ = [
    "ColumnType",
    "EnumValue",
    "ColumnDefinition",
    "TableSchema",
    "SchemaRegistry",
    "DEFAULT_DISPLAY_WIDTH",
    "LOCALIZED_LOCALE",
]
