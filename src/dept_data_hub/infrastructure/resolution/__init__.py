"""Header-to-column resolution for import files."""

from .resolver import (
    ColumnResolver,
    HeaderMapping,
    build_header_mapping,
    get_resolver,
    resolve_column,
)
from .similarity import levenshtein_distance, levenshtein_ratio, similarity, token_overlap
from .types import AmbiguousMatchError, ColumnMatch, MatchTier, ResolutionResult, Unmatched

__all__ = [
    "MatchTier",
    "ColumnMatch",
    "AmbiguousMatchError",
    "Unmatched",
    "ResolutionResult",
    "ColumnResolver",
    "get_resolver",
    "resolve_column",
    "HeaderMapping",
    "build_header_mapping",
    "levenshtein_distance",
    "levenshtein_ratio",
    "token_overlap",
    "similarity",
]
