"""
Unit tests for the YAML schema definitions loader.

Covers load_registry_file() and load_definitions_dir(), including the error
paths that turn malformed files into DefinitionsLoadError.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from dept_data_hub.infrastructure.schema import (
    ColumnType,
    DefinitionsLoadError,
    SchemaDefinitionError,
    load_definitions_dir,
    load_registry_file,
)
from dept_data_hub.infrastructure.schema.definitions import DEFINITIONS_DIR

VALID_DEPARTMENT = """
department_id: warehouse
department_name: Warehouse
localized_department_name: "المستودع"
tables:
  - id: bins
    name: Bins
    columns:
      - id: bin_id
        label: Bin ID
        type: text
        required: true
        alternatives: ["Bin", "  Location Code  ", ""]
      - id: bin_state
        label: State
        type: enum
        enum_values:
          - {value: open, label: Open, localized_label: "مفتوح"}
          - {value: closed, label: Closed}
linked_tables:
  - id: items
    name: Items
    linked_department_id: inventory
    linked_table_id: inventory_items
    columns:
      - id: item_id
        label: Item ID
        type: text
        source_column: item_id
"""


@pytest.fixture
def temp_definitions_dir(tmp_path: Path) -> Path:
    """Create a temporary definitions directory for testing."""
    definitions_dir = tmp_path / "definitions"
    definitions_dir.mkdir()
    return definitions_dir


@pytest.fixture
def valid_file(temp_definitions_dir: Path) -> Path:
    file_path = temp_definitions_dir / "warehouse.yml"
    file_path.write_text(VALID_DEPARTMENT, encoding="utf-8")
    return file_path


@pytest.mark.unit
class TestLoadRegistryFile:
    """Tests for load_registry_file()."""

    def test_loads_valid_file(self, valid_file: Path) -> None:
        registry = load_registry_file(valid_file)

        assert registry.department_id == "warehouse"
        assert registry.display_name("ar") == "المستودع"
        assert [t.id for t in registry.owned_tables] == ["bins"]
        assert [t.id for t in registry.linked_tables] == ["items"]

    def test_alternatives_are_stripped_and_blank_dropped(self, valid_file: Path) -> None:
        bins = load_registry_file(valid_file).owned_tables[0]
        assert bins.get_column("bin_id").alternatives == ("Bin", "Location Code")

    def test_enum_values_converted(self, valid_file: Path) -> None:
        state = load_registry_file(valid_file).owned_tables[0].get_column("bin_state")
        assert state.column_type is ColumnType.ENUM
        assert state.permitted_values() == ["open", "closed"]
        assert state.enum_values[1].localized_label == ""

    def test_linked_table_reference(self, valid_file: Path) -> None:
        items = load_registry_file(valid_file).linked_tables[0]
        assert items.is_linked
        assert items.linked_department_id == "inventory"
        assert items.source_table_id == "inventory_items"
        assert items.columns[0].source_column == "item_id"

    def test_missing_file(self, temp_definitions_dir: Path) -> None:
        with pytest.raises(DefinitionsLoadError, match="not found"):
            load_registry_file(temp_definitions_dir / "missing.yml")

    def test_invalid_yaml(self, temp_definitions_dir: Path, caplog) -> None:
        file_path = temp_definitions_dir / "broken.yml"
        file_path.write_text("department_id: [unclosed\n", encoding="utf-8")

        with pytest.raises(DefinitionsLoadError, match="Invalid YAML") as exc_info:
            load_registry_file(file_path)

        assert exc_info.value.path == str(file_path)
        assert "schema_loader.yaml_parse_error" in caplog.text

    def test_top_level_must_be_mapping(self, temp_definitions_dir: Path) -> None:
        file_path = temp_definitions_dir / "list.yml"
        file_path.write_text("- a\n- b\n", encoding="utf-8")

        with pytest.raises(DefinitionsLoadError, match="Expected a mapping"):
            load_registry_file(file_path)

    def test_unknown_keys_rejected(self, temp_definitions_dir: Path) -> None:
        file_path = temp_definitions_dir / "extra.yml"
        file_path.write_text(
            VALID_DEPARTMENT.replace("type: text\n        required: true", "type: text\n        colour: red"),
            encoding="utf-8",
        )

        with pytest.raises(DefinitionsLoadError, match="validation failed"):
            load_registry_file(file_path)

    def test_unknown_type_rejected(self, temp_definitions_dir: Path) -> None:
        file_path = temp_definitions_dir / "bad_type.yml"
        file_path.write_text(
            VALID_DEPARTMENT.replace("type: text", "type: money", 1), encoding="utf-8"
        )

        with pytest.raises(DefinitionsLoadError, match="validation failed"):
            load_registry_file(file_path)

    def test_structural_error_names_table(self, temp_definitions_dir: Path) -> None:
        file_path = temp_definitions_dir / "dup.yml"
        file_path.write_text(
            VALID_DEPARTMENT.replace("id: bin_state", "id: bin_id"), encoding="utf-8"
        )

        with pytest.raises(SchemaDefinitionError) as exc_info:
            load_registry_file(file_path)

        assert exc_info.value.table_id == "bins"
        assert exc_info.value.column_id == "bin_id"
        assert str(exc_info.value) == "Duplicate column id (table='bins', column='bin_id')"


@pytest.mark.unit
class TestLoadDefinitionsDir:
    """Tests for load_definitions_dir()."""

    def test_loads_sorted_by_file_name(self, temp_definitions_dir: Path) -> None:
        for name in ("zeta", "alpha"):
            (temp_definitions_dir / f"{name}.yaml").write_text(
                VALID_DEPARTMENT.replace("department_id: warehouse", f"department_id: {name}"),
                encoding="utf-8",
            )
        (temp_definitions_dir / "notes.txt").write_text("ignored", encoding="utf-8")

        registries = load_definitions_dir(temp_definitions_dir)

        assert [r.department_id for r in registries] == ["alpha", "zeta"]

    def test_missing_directory(self, tmp_path: Path) -> None:
        with pytest.raises(DefinitionsLoadError, match="directory not found"):
            load_definitions_dir(tmp_path / "nope")

    def test_empty_directory(self, temp_definitions_dir: Path) -> None:
        with pytest.raises(DefinitionsLoadError, match="No definitions files"):
            load_definitions_dir(temp_definitions_dir)

    def test_packaged_definitions_cover_six_departments(self) -> None:
        registries = load_definitions_dir(DEFINITIONS_DIR)
        assert sorted(r.department_id for r in registries) == [
            "customers",
            "expenses",
            "inventory",
            "purchases",
            "sales",
            "suppliers",
        ]

    def test_packaged_enum_values_pairwise_distinct(self) -> None:
        for registry in load_definitions_dir(DEFINITIONS_DIR):
            for table in registry.list_tables():
                for column in table.columns:
                    if column.column_type is ColumnType.ENUM:
                        values = column.permitted_values()
                        assert len(values) == len(set(values)), (table.id, column.id)
