"""Resolution result types.

Every call to the resolver returns exactly one of ``ColumnMatch``,
``AmbiguousMatchError`` or ``Unmatched``. None of them is raised: import
flows collect them per header and present the problems to a human at once.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union

from dept_data_hub.infrastructure.schema import ColumnDefinition


class MatchTier(Enum):
    """Confidence level of a header-to-column match, strongest first."""

    EXACT = "exact"
    ALTERNATIVE = "alternative"
    FUZZY = "fuzzy"


@dataclass(frozen=True)
class ColumnMatch:
    """A header resolved to one column.

    Attributes:
        header: Header as received
        column: The resolved column definition
        confidence: Tier that produced the match
        score: Similarity in [0, 1] (1.0 for exact and alternative matches)
        matched_on: Candidate string (id, label or alternative) that matched
    """

    header: str
    column: ColumnDefinition
    confidence: MatchTier
    score: float = 1.0
    matched_on: str = ""

    @property
    def column_id(self) -> str:
        return self.column.id


@dataclass(frozen=True)
class AmbiguousMatchError:
    """A header that matches several different columns equally well.

    Returned, not raised. Produced when two columns share the same
    alternative (or label), which is an authoring defect in the definitions
    that must be surfaced instead of masked by a silent pick.
    """

    header: str
    confidence: MatchTier
    candidates: Tuple[ColumnDefinition, ...]
    matched_on: str = ""

    @property
    def column_ids(self) -> Tuple[str, ...]:
        return tuple(c.id for c in self.candidates)

    @property
    def message(self) -> str:
        return (
            f"Header '{self.header}' matches {len(self.candidates)} columns at "
            f"{self.confidence.value} tier: {', '.join(self.column_ids)}"
        )


@dataclass(frozen=True)
class Unmatched:
    """No confident resolution for a header.

    ``best_score``/``closest_column_id`` describe the nearest fuzzy candidate
    that fell below the threshold, for display in the manual mapping UI.
    """

    header: str
    normalized: str
    best_score: float = 0.0
    closest_column_id: Optional[str] = None


ResolutionResult = Union[ColumnMatch, AmbiguousMatchError, Unmatched]


__all__ = [
    "MatchTier",
    "ColumnMatch",
    "AmbiguousMatchError",
    "Unmatched",
    "ResolutionResult",
]
