"""Tests for the fuzzy-tier similarity functions."""

import pytest

from dept_data_hub.infrastructure.resolution import (
    levenshtein_distance,
    levenshtein_ratio,
    similarity,
    token_overlap,
)


@pytest.mark.unit
@pytest.mark.parametrize(
    "a,b,expected",
    [
        ("", "", 0),
        ("abc", "", 3),
        ("kitten", "sitting", 3),
        ("flaw", "lawn", 2),
        ("item id", "item id", 0),
    ],
)
def test_levenshtein_distance(a, b, expected):
    assert levenshtein_distance(a, b) == expected
    assert levenshtein_distance(b, a) == expected


@pytest.mark.unit
def test_levenshtein_ratio_bounds():
    assert levenshtein_ratio("", "") == 1.0
    assert levenshtein_ratio("abc", "xyz") == 0.0
    assert levenshtein_ratio("quantty", "quantity") == pytest.approx(0.875)


@pytest.mark.unit
def test_token_overlap_ignores_order():
    assert token_overlap("customer name", "name customer") == 1.0
    assert token_overlap("unit cost", "cost") == pytest.approx(0.5)
    assert token_overlap("", "cost") == 0.0


@pytest.mark.unit
def test_similarity_takes_better_measure():
    assert similarity("name customer", "customer name") == 1.0
    assert similarity("quantty on hand", "quantity on hand") == pytest.approx(15 / 16)
    assert similarity("", "anything") == 0.0
