"""
Department schema catalog.

A ``SchemaCatalog`` holds every department's ``SchemaRegistry`` and checks
cross-department link integrity when it is composed. It is immutable after
construction and can be passed to callers explicitly; the module-level
functions below delegate to a default catalog that is loaded once from the
configured definitions directory.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from dept_data_hub.config import get_settings
from dept_data_hub.utils.logging import get_logger

from .audit import find_alternative_collisions
from .core import SchemaRegistry, TableSchema
from .exceptions import DanglingLinkError, NotFoundError, SchemaDefinitionError
from .loader import load_definitions_dir

logger = get_logger(__name__)


class SchemaCatalog:
    """
    Read-only collection of department registries.

    Composition checks (fatal, raised from the constructor):
    - department ids are unique
    - every linked table resolves to an existing owner department and table
    - every projected column exists in the owner table with the same type

    Alternatives shared by several columns of one table are logged as
    warnings: they are resolved as ambiguous matches at import time.
    """

    def __init__(self, registries: Iterable[SchemaRegistry], validate_links: bool = True):
        self._registries: Dict[str, SchemaRegistry] = {}
        for registry in registries:
            if registry.department_id in self._registries:
                raise SchemaDefinitionError(
                    "Department is defined more than once",
                    department_id=registry.department_id,
                )
            self._registries[registry.department_id] = registry

        if validate_links:
            self.validate_links()
        self._report_alternative_collisions()

    @classmethod
    def from_directory(cls, directory: Union[str, Path]) -> "SchemaCatalog":
        """Load and compose every department definitions file in a directory."""
        catalog = cls(load_definitions_dir(directory))
        logger.info(
            "schema_catalog.loaded",
            definitions_dir=str(directory),
            departments=catalog.list_departments(),
            table_count=sum(len(r.owned_tables) for r in catalog.registries),
        )
        return catalog

    @property
    def registries(self) -> List[SchemaRegistry]:
        return list(self._registries.values())

    def list_departments(self) -> List[str]:
        """List all department ids, sorted."""
        return sorted(self._registries.keys())

    def get_registry(self, department_id: str) -> SchemaRegistry:
        """
        Retrieve a department's registry.

        Raises:
            NotFoundError: If the department is unknown
        """
        registry = self._registries.get(department_id)
        if registry is None:
            available = self.list_departments()
            raise NotFoundError(
                f"Department not found in catalog. Available: {available}",
                department_id=department_id,
            )
        return registry

    def list_tables(self, registry: Union[SchemaRegistry, str]) -> List[TableSchema]:
        """Owned tables followed by linked tables for a registry or department id."""
        if isinstance(registry, str):
            registry = self.get_registry(registry)
        return registry.list_tables()

    def get_table(self, department_id: str, table_id: str) -> TableSchema:
        """
        Retrieve a table (owned or linked) of a department.

        Raises:
            NotFoundError: If the department or table is unknown
        """
        registry = self.get_registry(department_id)
        table = registry.find_table(table_id)
        if table is None:
            available = [t.id for t in registry.list_tables()]
            raise NotFoundError(
                f"Table not found. Available: {available}",
                department_id=department_id,
                table_id=table_id,
            )
        return table

    def resolve_linked_schema(self, table: TableSchema) -> TableSchema:
        """
        Return the authoritative schema for a table.

        Linked tables are projections; the owning department's table is the
        source of truth for validation. Non-linked tables are returned as-is.

        Raises:
            DanglingLinkError: If the owner department or table does not exist
        """
        if not table.is_linked:
            return table

        owner_id = table.linked_department_id or ""
        owner = self._registries.get(owner_id)
        if owner is None:
            raise DanglingLinkError(
                "Owning department does not exist",
                table_id=table.id,
                linked_department_id=owner_id,
                linked_table_id=table.source_table_id,
            )

        for candidate in owner.owned_tables:
            if candidate.id == table.source_table_id:
                return candidate

        raise DanglingLinkError(
            "Owning department does not define the linked table",
            table_id=table.id,
            linked_department_id=owner_id,
            linked_table_id=table.source_table_id,
        )

    def validate_links(self) -> None:
        """
        Check referential integrity of every linked table.

        Raises:
            DanglingLinkError: On the first unresolved link or projected column
        """
        for registry in self._registries.values():
            for table in registry.linked_tables:
                owner_table = self.resolve_linked_schema(table)
                for column in table.columns:
                    source = owner_table.get_column(column.source_column_id)
                    if source is None:
                        raise DanglingLinkError(
                            f"Projected column '{column.id}' maps to missing "
                            f"owner column '{column.source_column_id}'",
                            table_id=table.id,
                            linked_department_id=table.linked_department_id,
                            linked_table_id=owner_table.id,
                        )
                    if source.column_type is not column.column_type:
                        raise DanglingLinkError(
                            f"Projected column '{column.id}' is "
                            f"'{column.column_type.value}' but owner column "
                            f"'{source.id}' is '{source.column_type.value}'",
                            table_id=table.id,
                            linked_department_id=table.linked_department_id,
                            linked_table_id=owner_table.id,
                        )
                logger.debug(
                    "schema_catalog.link_resolved",
                    department_id=registry.department_id,
                    table_id=table.id,
                    owner_department_id=table.linked_department_id,
                    owner_table_id=owner_table.id,
                )

    def _report_alternative_collisions(self) -> None:
        for registry in self._registries.values():
            for table in registry.owned_tables:
                for alternative, column_ids in find_alternative_collisions(table).items():
                    logger.warning(
                        "schema_catalog.alternative_collision",
                        department_id=registry.department_id,
                        table_id=table.id,
                        alternative=alternative,
                        column_ids=column_ids,
                    )


@lru_cache()
def get_catalog() -> SchemaCatalog:
    """Default catalog, loaded once from ``Settings.definitions_dir``."""
    return SchemaCatalog.from_directory(get_settings().definitions_dir)


def get_registry(department_id: str, catalog: Optional[SchemaCatalog] = None) -> SchemaRegistry:
    """Retrieve a department registry from the given or default catalog."""
    return (catalog or get_catalog()).get_registry(department_id)


def list_departments(catalog: Optional[SchemaCatalog] = None) -> List[str]:
    """List all department ids."""
    return (catalog or get_catalog()).list_departments()


def list_tables(registry: Union[SchemaRegistry, str], catalog: Optional[SchemaCatalog] = None) -> List[TableSchema]:
    """Owned tables followed by linked tables."""
    if isinstance(registry, SchemaRegistry):
        return registry.list_tables()
    return (catalog or get_catalog()).list_tables(registry)


def get_table(department_id: str, table_id: str, catalog: Optional[SchemaCatalog] = None) -> TableSchema:
    """Retrieve a department's table."""
    return (catalog or get_catalog()).get_table(department_id, table_id)


def resolve_linked_schema(table: TableSchema, catalog: Optional[SchemaCatalog] = None) -> TableSchema:
    """Return the authoritative schema for a (possibly linked) table."""
    return (catalog or get_catalog()).resolve_linked_schema(table)


__all__ = [
    "SchemaCatalog",
    "get_catalog",
    "get_registry",
    "list_departments",
    "list_tables",
    "get_table",
    "resolve_linked_schema",
]
