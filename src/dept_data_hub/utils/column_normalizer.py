"""
Header normalization used for column resolution.

Normalization steps (applied in order):
1) Convert non-string types to string (None -> "")
2) Unicode NFKC (full-width letters/digits, ideographic space -> ASCII forms)
3) Lower-case (casefold)
4) Strip diacritics (NFKD, drop combining marks)
5) Collapse every run of whitespace, punctuation, symbols or underscores
   into a single space
6) Strip leading/trailing spaces

Both the incoming header and every candidate string (column id, label,
localized label, alternatives) go through the same function, so ``item_id``,
``Item ID`` and ``ITEM-ID`` all compare equal.
"""

import logging
import re
import unicodedata
from typing import Any, Dict, List

logger = logging.getLogger(__name__)

_SEPARATOR_CATEGORIES = ("P", "S", "Z", "C")
_MULTI_SPACE = re.compile(r" {2,}")


def _strip_diacritics(value: str) -> str:
    decomposed = unicodedata.normalize("NFKD", value)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return unicodedata.normalize("NFC", stripped)


def normalize_header(value: Any) -> str:
    """
    Normalize a header or candidate string for comparison.

    Args:
        value: Raw header (any type accepted)

    Returns:
        Normalized comparison key; empty string for blank input

    Examples:
        >>> normalize_header("  Item_ID ")
        'item id'
        >>> normalize_header("Café-Price (USD)")
        'cafe price usd'
    """
    if value is None:
        return ""
    name = unicodedata.normalize("NFKC", str(value)).casefold()
    name = _strip_diacritics(name)

    chars = []
    for ch in name:
        if ch == "_" or unicodedata.category(ch)[0] in _SEPARATOR_CATEGORIES:
            chars.append(" ")
        else:
            chars.append(ch)
    return _MULTI_SPACE.sub(" ", "".join(chars)).strip()


def normalize_headers(headers: List[Any]) -> Dict[Any, str]:
    """
    Normalize a full header row, returning a mapping original -> normalized.

    Blank headers and headers that collide after normalization are reported
    at WARNING level; callers decide how to handle them.
    """
    normalized: Dict[Any, str] = {}
    seen: Dict[str, Any] = {}
    blank = 0
    collisions = 0

    for idx, header in enumerate(headers):
        key = normalize_header(header)
        if not key:
            blank += 1
            logger.warning(
                "column_normalizer.blank_header column_index=%s original_value=%s",
                idx,
                repr(header),
            )
        elif key in seen:
            collisions += 1
            logger.warning(
                "column_normalizer.normalized_collision original=%s "
                "previous=%s normalized=%s",
                repr(header),
                repr(seen[key]),
                key,
            )
        else:
            seen[key] = header
        normalized[header] = key

    logger.debug(
        "column_normalizer.summary headers=%s blank=%s collisions=%s",
        len(headers),
        blank,
        collisions,
    )
    return normalized
