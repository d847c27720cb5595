"""
YAML loader for department schema definitions.

Each ``*.yml`` file under the definitions directory describes one department:
its identity, its owned tables and the tables it links from other departments.
Files are validated with Pydantic models first, then converted into the frozen
types from ``core.py`` (which enforce the structural invariants).
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Literal, Optional, Union

import structlog
import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .core import ColumnDefinition, ColumnType, EnumValue, SchemaRegistry, TableSchema
from .exceptions import DefinitionsLoadError, SchemaDefinitionError

logger = structlog.get_logger(__name__)

DEFINITION_SUFFIXES = (".yml", ".yaml")


class EnumValueConfig(BaseModel):
    """Schema for one enum value entry."""

    model_config = ConfigDict(extra="forbid")

    value: str = Field(..., min_length=1, description="Canonical stored token")
    label: str = Field(..., description="English display label")
    localized_label: str = Field("", description="Arabic display label")


class ColumnConfig(BaseModel):
    """Schema for one column entry."""

    model_config = ConfigDict(extra="forbid")

    id: str = Field(..., min_length=1)
    label: str = Field(..., min_length=1)
    localized_label: str = ""
    type: Literal["text", "number", "decimal", "date", "boolean", "enum"]
    required: bool = False
    description: str = ""
    alternatives: List[str] = Field(default_factory=list)
    enum_values: Optional[List[EnumValueConfig]] = None
    display_width: Optional[int] = Field(None, gt=0)
    source_column: Optional[str] = None

    @field_validator("alternatives")
    @classmethod
    def strip_alternatives(cls, v: List[str]) -> List[str]:
        return [alt.strip() for alt in v if alt and alt.strip()]


class TableConfig(BaseModel):
    """Schema for one table entry."""

    model_config = ConfigDict(extra="forbid")

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    localized_name: str = ""
    description: str = ""
    localized_description: str = ""
    linked_department_id: Optional[str] = None
    linked_table_id: Optional[str] = None
    columns: List[ColumnConfig] = Field(..., min_length=1)


class DepartmentConfig(BaseModel):
    """Schema for a complete department definitions file."""

    model_config = ConfigDict(extra="forbid")

    department_id: str = Field(..., min_length=1)
    department_name: str = Field(..., min_length=1)
    localized_department_name: str = ""
    tables: List[TableConfig] = Field(default_factory=list)
    linked_tables: List[TableConfig] = Field(default_factory=list)


def _build_column(config: ColumnConfig) -> ColumnDefinition:
    enum_values = None
    if config.enum_values is not None:
        enum_values = tuple(
            EnumValue(
                value=ev.value, label=ev.label, localized_label=ev.localized_label
            )
            for ev in config.enum_values
        )
    return ColumnDefinition(
        id=config.id,
        label=config.label,
        localized_label=config.localized_label,
        column_type=ColumnType(config.type),
        required=config.required,
        description=config.description,
        alternatives=tuple(config.alternatives),
        enum_values=enum_values,
        display_width=config.display_width,
        source_column=config.source_column,
    )


def _build_table(config: TableConfig, linked: bool) -> TableSchema:
    try:
        return TableSchema(
            id=config.id,
            name=config.name,
            localized_name=config.localized_name,
            description=config.description,
            localized_description=config.localized_description,
            columns=tuple(_build_column(c) for c in config.columns),
            is_linked=linked,
            linked_department_id=config.linked_department_id,
            linked_table_id=config.linked_table_id,
        )
    except SchemaDefinitionError as e:
        if e.table_id is None:
            raise SchemaDefinitionError(
                e.message, table_id=config.id, column_id=e.column_id
            ) from e
        raise


def build_registry(config: DepartmentConfig) -> SchemaRegistry:
    """Convert a validated department config into a ``SchemaRegistry``."""
    return SchemaRegistry(
        department_id=config.department_id,
        department_name=config.department_name,
        localized_department_name=config.localized_department_name,
        owned_tables=tuple(_build_table(t, linked=False) for t in config.tables),
        linked_tables=tuple(_build_table(t, linked=True) for t in config.linked_tables),
    )


def load_registry_file(path: Union[str, Path]) -> SchemaRegistry:
    """
    Load a single department definitions file.

    Args:
        path: Path to the YAML file

    Returns:
        The department's ``SchemaRegistry``

    Raises:
        DefinitionsLoadError: If the file is missing, is not valid YAML, or does
            not match the definitions schema
        SchemaDefinitionError: If the content breaks a structural invariant
    """
    file_path = Path(path)
    if not file_path.exists():
        raise DefinitionsLoadError("Definitions file not found", path=str(file_path))

    try:
        with open(file_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger.error(
            "schema_loader.yaml_parse_error", file_path=str(file_path), error=str(e)
        )
        raise DefinitionsLoadError(f"Invalid YAML: {e}", path=str(file_path)) from e

    if not isinstance(data, dict):
        raise DefinitionsLoadError(
            f"Expected a mapping at top level, got {type(data).__name__}",
            path=str(file_path),
        )

    try:
        config = DepartmentConfig(**data)
    except ValidationError as e:
        raise DefinitionsLoadError(
            f"Definitions validation failed: {e}", path=str(file_path)
        ) from e

    registry = build_registry(config)
    logger.debug(
        "schema_loader.file_loaded",
        file_path=str(file_path),
        department_id=registry.department_id,
        owned_tables=len(registry.owned_tables),
        linked_tables=len(registry.linked_tables),
    )
    return registry


def load_definitions_dir(directory: Union[str, Path]) -> List[SchemaRegistry]:
    """
    Load every department definitions file in a directory, sorted by file name.

    Raises:
        DefinitionsLoadError: If the directory does not exist or holds no
            definitions files
    """
    dir_path = Path(directory)
    if not dir_path.is_dir():
        raise DefinitionsLoadError(
            "Definitions directory not found", path=str(dir_path)
        )

    files = sorted(
        p for p in dir_path.iterdir() if p.is_file() and p.suffix in DEFINITION_SUFFIXES
    )
    if not files:
        raise DefinitionsLoadError(
            "No definitions files found", path=str(dir_path)
        )

    return [load_registry_file(p) for p in files]


__all__ = [
    "EnumValueConfig",
    "ColumnConfig",
    "TableConfig",
    "DepartmentConfig",
    "build_registry",
    "load_registry_file",
    "load_definitions_dir",
]
