"""Department schema registry.

Immutable table schemas per department, loaded from the packaged YAML
definitions and composed into a ``SchemaCatalog`` that checks cross-department
links. Other layers import from here rather than from the submodules.
"""

from .audit import find_alternative_collisions, find_label_collisions
from .core import (
    DEFAULT_DISPLAY_WIDTH,
    LOCALIZED_LOCALE,
    ColumnDefinition,
    ColumnType,
    EnumValue,
    SchemaRegistry,
    TableSchema,
)
from .exceptions import (
    DanglingLinkError,
    DefinitionsLoadError,
    NotFoundError,
    ReadOnlyTableError,
    SchemaDefinitionError,
    SchemaRegistryError,
)
from .loader import build_registry, load_definitions_dir, load_registry_file
from .registry import (
    SchemaCatalog,
    get_catalog,
    get_registry,
    get_table,
    list_departments,
    list_tables,
    resolve_linked_schema,
)

__all__ = [
    "ColumnType",
    "EnumValue",
    "ColumnDefinition",
    "TableSchema",
    "SchemaRegistry",
    "DEFAULT_DISPLAY_WIDTH",
    "LOCALIZED_LOCALE",
    "SchemaRegistryError",
    "SchemaDefinitionError",
    "NotFoundError",
    "DanglingLinkError",
    "ReadOnlyTableError",
    "DefinitionsLoadError",
    "build_registry",
    "load_registry_file",
    "load_definitions_dir",
    "SchemaCatalog",
    "get_catalog",
    "get_registry",
    "list_departments",
    "list_tables",
    "get_table",
    "resolve_linked_schema",
    "find_alternative_collisions",
    "find_label_collisions",
]
