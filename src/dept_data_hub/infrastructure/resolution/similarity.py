"""
String similarity used by the fuzzy resolution tier.

Both inputs are expected to be normalized already (see
``utils.column_normalizer.normalize_header``), so tokens are separated by
single spaces.
"""

from typing import Set


def levenshtein_distance(a: str, b: str) -> int:
    """Minimum number of single-character edits turning ``a`` into ``b``."""
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)
    if len(a) < len(b):
        a, b = b, a

    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        current = [i]
        for j, cb in enumerate(b, start=1):
            current.append(
                min(
                    previous[j] + 1,
                    current[j - 1] + 1,
                    previous[j - 1] + (ca != cb),
                )
            )
        previous = current
    return previous[-1]


def levenshtein_ratio(a: str, b: str) -> float:
    """Edit-distance similarity in [0, 1]; 1.0 means identical."""
    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    return 1.0 - levenshtein_distance(a, b) / longest


def _tokens(value: str) -> Set[str]:
    return {token for token in value.split(" ") if token}


def token_overlap(a: str, b: str) -> float:
    """Jaccard overlap of the space-separated token sets, in [0, 1]."""
    left, right = _tokens(a), _tokens(b)
    if not left or not right:
        return 0.0
    return len(left & right) / len(left | right)


def similarity(a: str, b: str) -> float:
    """
    Combined similarity: the better of edit-distance and token overlap.

    Edit distance catches typos ("quantty" vs "quantity"); token overlap
    catches reordered words ("name customer" vs "customer name").

    Examples:
        >>> similarity("item id", "item id")
        1.0
        >>> round(similarity("quantty", "quantity"), 3)
        0.875
    """
    if not a or not b:
        return 0.0
    return max(levenshtein_ratio(a, b), token_overlap(a, b))


__all__ = ["levenshtein_distance", "levenshtein_ratio", "token_overlap", "similarity"]
