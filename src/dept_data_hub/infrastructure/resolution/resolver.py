"""
Column resolution: map free-text import headers onto a table's columns.

Resolution is tiered (normalize, then rank):

1. EXACT: the normalized header equals a column's id, label or localized
   label. Short-circuits the search.
2. ALTERNATIVE: the normalized header equals one of a column's alternatives.
3. FUZZY: best similarity over every candidate string of every column, kept
   when it reaches the configured threshold.

Several columns matching at the EXACT or ALTERNATIVE tier is an authoring
defect and comes back as ``AmbiguousMatchError``. Equal fuzzy scores are
broken deterministically: required columns first, then the shorter id, then
table order.

Usage:
    >>> resolver = ColumnResolver(get_table("inventory", "inventory_items"))
    >>> resolver.resolve("SKU").column_id
    'item_id'
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Dict, Iterable, List, Optional, Tuple

from dept_data_hub.config import get_settings
from dept_data_hub.infrastructure.schema import ColumnDefinition, TableSchema
from dept_data_hub.utils.column_normalizer import normalize_header, normalize_headers
from dept_data_hub.utils.logging import get_logger

from .similarity import similarity
from .types import (
    AmbiguousMatchError,
    ColumnMatch,
    MatchTier,
    ResolutionResult,
    Unmatched,
)

logger = get_logger(__name__)

# Scores closer than this are treated as ties.
_SCORE_EPSILON = 1e-9

# normalized key -> [(column, original candidate string)], table order
_CandidateIndex = Dict[str, List[Tuple[ColumnDefinition, str]]]


def _index_candidates(pairs: Iterable[Tuple[ColumnDefinition, str]]) -> _CandidateIndex:
    index: _CandidateIndex = {}
    for column, raw in pairs:
        key = normalize_header(raw)
        if not key:
            continue
        owners = index.setdefault(key, [])
        if all(existing.id != column.id for existing, _ in owners):
            owners.append((column, raw))
    return index


class ColumnResolver:
    """
    Resolves headers against one table.

    Normalized candidates are computed once per table so a bulk import can
    resolve every header of every file without re-normalizing the schema.

    The EXACT tier indexes ``localized_label`` next to ``id`` and ``label``,
    so headers from the Arabic import template match without fuzzy scoring.

    Args:
        table: Table whose columns are the resolution targets
        fuzzy_threshold: Minimum similarity for a FUZZY match; defaults to
            ``Settings.fuzzy_match_threshold``. Inclusive: a score equal to
            the threshold matches.
    """

    def __init__(self, table: TableSchema, fuzzy_threshold: Optional[float] = None):
        if fuzzy_threshold is None:
            fuzzy_threshold = get_settings().fuzzy_match_threshold
        if not 0.0 < fuzzy_threshold <= 1.0:
            raise ValueError(
                f"fuzzy_threshold must be in (0, 1], got {fuzzy_threshold}"
            )

        self.table = table
        self.fuzzy_threshold = fuzzy_threshold
        self._order = {column.id: position for position, column in enumerate(table.columns)}

        self._exact = _index_candidates(
            (column, raw)
            for column in table.columns
            for raw in (column.id, column.label, column.localized_label)
        )
        self._alternatives = _index_candidates(
            (column, raw) for column in table.columns for raw in column.alternatives
        )
        self._fuzzy_candidates: List[Tuple[ColumnDefinition, str, str]] = [
            (column, key, raw)
            for index in (self._exact, self._alternatives)
            for key, owners in index.items()
            for column, raw in owners
        ]

    def _tie_break_key(self, column: ColumnDefinition) -> Tuple[bool, int, int]:
        return (not column.required, len(column.id), self._order[column.id])

    def _from_index(
        self, header: str, key: str, index: _CandidateIndex, tier: MatchTier
    ) -> Optional[ResolutionResult]:
        owners = index.get(key)
        if not owners:
            return None
        if len(owners) > 1:
            result = AmbiguousMatchError(
                header=header,
                confidence=tier,
                candidates=tuple(column for column, _ in owners),
                matched_on=owners[0][1],
            )
            logger.debug(
                "column_resolver.ambiguous_match",
                table_id=self.table.id,
                header=header,
                tier=tier.value,
                column_ids=list(result.column_ids),
            )
            return result
        column, raw = owners[0]
        return ColumnMatch(
            header=header, column=column, confidence=tier, score=1.0, matched_on=raw
        )

    def _fuzzy(self, header: str, key: str) -> ResolutionResult:
        best: Dict[str, Tuple[float, ColumnDefinition, str]] = {}
        for column, candidate_key, raw in self._fuzzy_candidates:
            score = similarity(key, candidate_key)
            current = best.get(column.id)
            if current is None or score > current[0] + _SCORE_EPSILON:
                best[column.id] = (score, column, raw)

        if not best:
            return Unmatched(header=header, normalized=key)

        top_score = max(score for score, _, _ in best.values())
        tied = sorted(
            (entry for entry in best.values() if entry[0] >= top_score - _SCORE_EPSILON),
            key=lambda entry: self._tie_break_key(entry[1]),
        )
        score, column, raw = tied[0]

        if score + _SCORE_EPSILON < self.fuzzy_threshold:
            return Unmatched(
                header=header,
                normalized=key,
                best_score=score,
                closest_column_id=column.id,
            )

        logger.debug(
            "column_resolver.fuzzy_match",
            table_id=self.table.id,
            header=header,
            column_id=column.id,
            score=round(score, 4),
            tied_columns=len(tied),
        )
        return ColumnMatch(
            header=header,
            column=column,
            confidence=MatchTier.FUZZY,
            score=score,
            matched_on=raw,
        )

    def resolve(self, raw_header: Any) -> ResolutionResult:
        """Resolve one header. Never raises for any header value."""
        header = "" if raw_header is None else str(raw_header)
        key = normalize_header(header)
        if not key:
            return Unmatched(header=header, normalized=key)

        for index, tier in (
            (self._exact, MatchTier.EXACT),
            (self._alternatives, MatchTier.ALTERNATIVE),
        ):
            result = self._from_index(header, key, index, tier)
            if result is not None:
                return result

        return self._fuzzy(header, key)


@lru_cache(maxsize=128)
def _cached_resolver(table: TableSchema, fuzzy_threshold: float) -> ColumnResolver:
    return ColumnResolver(table, fuzzy_threshold)


def get_resolver(table: TableSchema, fuzzy_threshold: Optional[float] = None) -> ColumnResolver:
    """Shared resolver for a table; tables are immutable so resolvers are reused."""
    if fuzzy_threshold is None:
        fuzzy_threshold = get_settings().fuzzy_match_threshold
    return _cached_resolver(table, fuzzy_threshold)


def resolve_column(
    table: TableSchema, raw_header: Any, fuzzy_threshold: Optional[float] = None
) -> ResolutionResult:
    """
    Resolve a raw header against a table.

    Returns:
        ``ColumnMatch``, ``AmbiguousMatchError`` or ``Unmatched``
    """
    return get_resolver(table, fuzzy_threshold).resolve(raw_header)


@dataclass
class HeaderMapping:
    """Resolution of a complete header row.

    Attributes:
        table_id: Table the headers were resolved against
        mapping: header -> column id for every accepted match
        matches: header -> ``ColumnMatch`` for every accepted match
        unmatched: headers with no confident match
        ambiguous: header -> tied column ids
        duplicates: header -> column id already claimed by an earlier header
        missing_required: required column ids no header maps to
    """

    table_id: str
    mapping: Dict[str, str] = field(default_factory=dict)
    matches: Dict[str, ColumnMatch] = field(default_factory=dict)
    unmatched: List[str] = field(default_factory=list)
    ambiguous: Dict[str, List[str]] = field(default_factory=dict)
    duplicates: Dict[str, str] = field(default_factory=dict)
    missing_required: List[str] = field(default_factory=list)

    @property
    def is_complete(self) -> bool:
        """True when every required column is mapped and nothing is ambiguous."""
        return not self.missing_required and not self.ambiguous

    def column_for(self, header: str) -> Optional[str]:
        return self.mapping.get(header)


def build_header_mapping(
    table: TableSchema,
    headers: Iterable[Any],
    fuzzy_threshold: Optional[float] = None,
) -> HeaderMapping:
    """
    Resolve a header row into a mapping report.

    When two headers resolve to the same column the first one wins; later
    ones are reported in ``duplicates``.
    """
    header_list = ["" if h is None else str(h) for h in headers]
    normalize_headers(header_list)
    resolver = get_resolver(table, fuzzy_threshold)

    result = HeaderMapping(table_id=table.id)
    claimed: Dict[str, str] = {}

    for header in header_list:
        outcome = resolver.resolve(header)
        if isinstance(outcome, ColumnMatch):
            if outcome.column_id in claimed:
                result.duplicates[header] = outcome.column_id
                continue
            claimed[outcome.column_id] = header
            result.mapping[header] = outcome.column_id
            result.matches[header] = outcome
        elif isinstance(outcome, AmbiguousMatchError):
            result.ambiguous[header] = list(outcome.column_ids)
        else:
            result.unmatched.append(header)

    result.missing_required = [
        column.id for column in table.required_columns if column.id not in claimed
    ]

    logger.info(
        "header_mapping.built",
        table_id=table.id,
        headers=len(header_list),
        mapped=len(result.mapping),
        unmatched=len(result.unmatched),
        ambiguous=len(result.ambiguous),
        duplicates=len(result.duplicates),
        missing_required=result.missing_required,
    )
    return result


__all__ = [
    "ColumnResolver",
    "get_resolver",
    "resolve_column",
    "HeaderMapping",
    "build_header_mapping",
]
