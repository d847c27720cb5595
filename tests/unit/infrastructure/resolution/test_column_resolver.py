"""Tests for header-to-column resolution.

Covers the tier order (exact, alternative, fuzzy), the ambiguity policy for
shared alternatives, deterministic tie-breaking of fuzzy ties and whole-row
header mapping.
"""

from __future__ import annotations

import logging

import pytest

from dept_data_hub.infrastructure.resolution import (
    AmbiguousMatchError,
    ColumnMatch,
    ColumnResolver,
    MatchTier,
    Unmatched,
    build_header_mapping,
    resolve_column,
)
from dept_data_hub.infrastructure.schema import (
    ColumnDefinition,
    ColumnType,
    TableSchema,
    find_alternative_collisions,
)
from dept_data_hub.utils.column_normalizer import normalize_header


def _table(*columns: ColumnDefinition) -> TableSchema:
    return TableSchema(id="synthetic", name="Synthetic", columns=tuple(columns))


def _column(column_id: str, required: bool = False, alternatives=()) -> ColumnDefinition:
    return ColumnDefinition(
        id=column_id,
        label=column_id,
        column_type=ColumnType.TEXT,
        required=required,
        alternatives=tuple(alternatives),
    )


@pytest.mark.unit
class TestTierProperties:
    """Properties that hold for every packaged table."""

    def test_identity_round_trip(self, all_tables) -> None:
        for _, table in all_tables:
            for column in table.columns:
                result = resolve_column(table, normalize_header(column.id))
                assert isinstance(result, ColumnMatch), (table.id, column.id, result)
                assert result.column is column
                assert result.confidence is MatchTier.EXACT

    def test_raw_ids_and_labels_resolve_exactly(self, all_tables) -> None:
        for _, table in all_tables:
            for column in table.columns:
                for header in (column.id, column.label, column.label.upper()):
                    result = resolve_column(table, header)
                    assert isinstance(result, ColumnMatch)
                    assert result.column_id == column.id
                    assert result.confidence is MatchTier.EXACT

    def test_shared_alternatives_are_ambiguous(self, all_tables) -> None:
        checked = 0
        for _, table in all_tables:
            exact_keys = {
                normalize_header(raw)
                for column in table.columns
                for raw in (column.id, column.label, column.localized_label)
            }
            for alternative, column_ids in find_alternative_collisions(table).items():
                if alternative in exact_keys:
                    continue
                result = resolve_column(table, alternative)
                assert isinstance(result, AmbiguousMatchError), (table.id, alternative)
                assert result.confidence is MatchTier.ALTERNATIVE
                assert list(result.column_ids) == column_ids
                checked += 1
        assert checked > 0

    def test_nonexistent_header_unmatched_everywhere(self, all_tables) -> None:
        for _, table in all_tables:
            result = resolve_column(table, "xyz-nonexistent-header")
            assert isinstance(result, Unmatched), (table.id, result)


@pytest.mark.unit
class TestResolveColumn:
    """Concrete resolutions against the packaged definitions."""

    def test_sku_resolves_to_item_id_by_alternative(self, inventory_items: TableSchema) -> None:
        result = resolve_column(inventory_items, "sku")

        assert isinstance(result, ColumnMatch)
        assert result.column_id == "item_id"
        assert result.confidence is MatchTier.ALTERNATIVE
        assert result.matched_on == "SKU"
        assert result.score == 1.0

    @pytest.mark.parametrize(
        "header",
        ["SKU", "  Stock_Code ", "PART-NUMBER", "barcode"],
    )
    def test_alternative_normalization(self, inventory_items: TableSchema, header: str) -> None:
        result = resolve_column(inventory_items, header)
        assert isinstance(result, ColumnMatch)
        assert result.column_id == "item_id"

    def test_localized_label_resolves_exactly(self, inventory_items: TableSchema) -> None:
        result = resolve_column(inventory_items, "رقم الصنف")

        assert isinstance(result, ColumnMatch)
        assert result.column_id == "item_id"
        assert result.confidence is MatchTier.EXACT

    def test_exact_tier_wins_over_shared_alternative(self, catalog) -> None:
        movements = catalog.get_table("inventory", "inventory_movements")

        # "Type" is movement_type's label and also an alternative of direction
        result = resolve_column(movements, "Type")

        assert isinstance(result, ColumnMatch)
        assert result.column_id == "movement_type"
        assert result.confidence is MatchTier.EXACT

    def test_customer_is_ambiguous_on_sales_orders(self, sales_orders: TableSchema) -> None:
        result = resolve_column(sales_orders, "Customer")

        assert isinstance(result, AmbiguousMatchError)
        assert result.column_ids == ("customer_id", "customer_name")
        assert "customer_id, customer_name" in result.message

    @pytest.mark.parametrize(
        "header,expected",
        [
            ("Amount", ("discount_value", "revenue_generated")),
            ("Sales", ("orders_generated", "revenue_generated")),
        ],
    )
    def test_promotions_collisions(self, promotions: TableSchema, header, expected) -> None:
        result = resolve_column(promotions, header)
        assert isinstance(result, AmbiguousMatchError)
        assert result.column_ids == expected

    def test_fuzzy_match_on_typo(self, inventory_items: TableSchema) -> None:
        result = resolve_column(inventory_items, "Quantty On Hand")

        assert isinstance(result, ColumnMatch)
        assert result.column_id == "quantity_on_hand"
        assert result.confidence is MatchTier.FUZZY
        assert result.score == pytest.approx(15 / 16)

    def test_fuzzy_match_on_reordered_words(self, sales_orders: TableSchema) -> None:
        result = resolve_column(sales_orders, "Name Customer")

        assert isinstance(result, ColumnMatch)
        assert result.column_id == "customer_name"
        assert result.confidence is MatchTier.FUZZY

    def test_below_threshold_reports_closest(self, inventory_items: TableSchema) -> None:
        result = resolve_column(inventory_items, "Quantty On Hand", fuzzy_threshold=0.95)

        assert isinstance(result, Unmatched)
        assert result.closest_column_id == "quantity_on_hand"
        assert result.best_score == pytest.approx(15 / 16)

    def test_threshold_is_inclusive(self, inventory_items: TableSchema) -> None:
        result = resolve_column(inventory_items, "Quantty On Hand", fuzzy_threshold=15 / 16)
        assert isinstance(result, ColumnMatch)

    def test_threshold_from_settings(self, inventory_items: TableSchema, monkeypatch) -> None:
        monkeypatch.setenv("DDH_FUZZY_MATCH_THRESHOLD", "0.99")

        assert isinstance(resolve_column(inventory_items, "Quantty On Hand"), Unmatched)

    @pytest.mark.parametrize("header", ["", "   ", "---", None])
    def test_blank_headers_unmatched(self, inventory_items: TableSchema, header) -> None:
        result = resolve_column(inventory_items, header)
        assert isinstance(result, Unmatched)
        assert result.normalized == ""


@pytest.mark.unit
class TestTieBreak:
    """Equal fuzzy scores resolve deterministically."""

    def test_required_column_preferred(self) -> None:
        table = _table(_column("alpha"), _column("alphas", required=True))

        result = ColumnResolver(table).resolve("alphax")

        assert isinstance(result, ColumnMatch)
        assert result.column_id == "alphas"

    def test_shorter_id_preferred_when_required_equal(self) -> None:
        table = _table(_column("alphas"), _column("alpha"))

        result = ColumnResolver(table).resolve("alphax")

        assert result.column_id == "alpha"

    def test_table_order_breaks_remaining_ties(self) -> None:
        table = _table(_column("betax"), _column("betay"))

        result = ColumnResolver(table).resolve("betaz")

        assert result.column_id == "betax"

    def test_shared_alternative_within_same_column_not_ambiguous(self) -> None:
        table = _table(_column("code", alternatives=("Ref", "REF ")), _column("name"))

        result = ColumnResolver(table).resolve("ref")

        assert isinstance(result, ColumnMatch)
        assert result.confidence is MatchTier.ALTERNATIVE

    def test_shared_label_is_ambiguous_at_exact_tier(self) -> None:
        first = ColumnDefinition(id="ref_a", label="Reference", column_type=ColumnType.TEXT)
        second = ColumnDefinition(id="ref_b", label="Reference", column_type=ColumnType.TEXT)

        result = ColumnResolver(_table(first, second)).resolve("reference")

        assert isinstance(result, AmbiguousMatchError)
        assert result.confidence is MatchTier.EXACT
        assert result.column_ids == ("ref_a", "ref_b")

    def test_model_built_from_lists(self) -> None:
        table = TableSchema(
            id="synthetic",
            name="Synthetic",
            columns=[
                ColumnDefinition(
                    id="item_id",
                    label="Item ID",
                    column_type=ColumnType.TEXT,
                    alternatives=["SKU"],
                )
            ],
        )

        result = resolve_column(table, "sku")

        assert isinstance(result, ColumnMatch)
        assert result.column_id == "item_id"
        assert result.confidence is MatchTier.ALTERNATIVE

    def test_invalid_threshold_rejected(self) -> None:
        with pytest.raises(ValueError, match="fuzzy_threshold"):
            ColumnResolver(_table(_column("a")), fuzzy_threshold=0)


@pytest.mark.unit
class TestBuildHeaderMapping:
    """Whole header row resolution."""

    HEADERS = [
        "SKU",
        "Item Name",
        "Category",
        "Unit",
        "Cost",
        "QOH",
        "Reorder Point",
        "Reorder Qty",
        "Lead Time",
        "Warehouse",
        "Status",
        "Barcode",
        "Mystery Column",
    ]

    def test_complete_mapping(self, inventory_items: TableSchema) -> None:
        mapping = build_header_mapping(inventory_items, self.HEADERS)

        assert mapping.mapping["SKU"] == "item_id"
        assert mapping.mapping["Cost"] == "cost_price"
        assert mapping.mapping["QOH"] == "quantity_on_hand"
        assert mapping.mapping["Lead Time"] == "lead_time_days"
        assert mapping.matches["Lead Time"].confidence is MatchTier.ALTERNATIVE
        assert mapping.duplicates == {"Barcode": "item_id"}
        assert mapping.unmatched == ["Mystery Column"]
        assert mapping.missing_required == []
        assert mapping.is_complete

    def test_missing_required_reported(self, inventory_items: TableSchema) -> None:
        headers = [h for h in self.HEADERS if h not in ("Cost", "Status")]

        mapping = build_header_mapping(inventory_items, headers)

        assert mapping.missing_required == ["cost_price", "status"]
        assert not mapping.is_complete

    def test_ambiguous_headers_reported(self, sales_orders: TableSchema) -> None:
        mapping = build_header_mapping(
            sales_orders, ["Order ID", "Date", "Customer", "Amount"]
        )

        assert mapping.ambiguous == {"Customer": ["customer_id", "customer_name"]}
        assert mapping.column_for("Customer") is None
        assert mapping.missing_required == ["customer_id", "status"]

    def test_summary_logged(self, inventory_items: TableSchema, caplog) -> None:
        caplog.set_level(logging.INFO)
        build_header_mapping(inventory_items, self.HEADERS)
        assert "header_mapping.built" in caplog.text
