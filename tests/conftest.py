"""Shared pytest fixtures.

The packaged definitions are loaded once per session into a catalog that is
passed to code under test explicitly. Settings and resolver caches are reset
around every test so ``monkeypatch.setenv`` on ``DDH_*`` variables is picked up.
"""

from __future__ import annotations

from typing import Iterator

import pytest

from dept_data_hub.config import get_settings
from dept_data_hub.infrastructure.resolution import resolver as resolver_module
from dept_data_hub.infrastructure.schema import SchemaCatalog, TableSchema, get_catalog
from dept_data_hub.infrastructure.schema.definitions import DEFINITIONS_DIR


@pytest.fixture(autouse=True)
def _reset_caches() -> Iterator[None]:
    get_settings.cache_clear()
    resolver_module._cached_resolver.cache_clear()
    get_catalog.cache_clear()
    yield
    get_settings.cache_clear()
    resolver_module._cached_resolver.cache_clear()
    get_catalog.cache_clear()


@pytest.fixture(scope="session")
def catalog() -> SchemaCatalog:
    """Catalog built from the packaged department definitions."""
    return SchemaCatalog.from_directory(DEFINITIONS_DIR)


@pytest.fixture
def inventory_items(catalog: SchemaCatalog) -> TableSchema:
    return catalog.get_table("inventory", "inventory_items")


@pytest.fixture
def sales_orders(catalog: SchemaCatalog) -> TableSchema:
    return catalog.get_table("sales", "sales_orders")


@pytest.fixture
def promotions(catalog: SchemaCatalog) -> TableSchema:
    return catalog.get_table("sales", "promotions")


@pytest.fixture
def all_tables(catalog: SchemaCatalog):
    """Every (department_id, table) pair in the catalog, linked tables included."""
    return [
        (department_id, table)
        for department_id in catalog.list_departments()
        for table in catalog.list_tables(department_id)
    ]
