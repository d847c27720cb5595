"""
Date parsing for imported cell values.

Parses a raw cell against an ordered list of strptime formats (configured in
``Settings.date_formats``) and returns a ``date``. Spreadsheet exports often
carry a midnight time component or full-width digits; both are tolerated.
"""

import logging
import re
from datetime import date, datetime
from typing import Optional, Sequence, Union

from dept_data_hub.config import DEFAULT_DATE_FORMATS

logger = logging.getLogger(__name__)

# "2024-03-05 00:00:00" / "2024-03-05T00:00:00" from spreadsheet exports
_MIDNIGHT_SUFFIX = re.compile(r"[ T]00:00(:00(\.0+)?)?$")
_FULLWIDTH_DIGITS = str.maketrans("０１２３４５６７８９", "0123456789")


def _format_supported_error(value: object, formats: Sequence[str]) -> str:
    return f"Cannot parse '{value}' as date. Supported formats: {', '.join(formats)}"


def parse_date(
    value: Union[str, date, datetime, None],
    formats: Optional[Sequence[str]] = None,
) -> date:
    """
    Parse a raw value into a ``date`` using the first matching format.

    Args:
        value: Raw cell value, or a date/datetime (validated passthrough)
        formats: strptime patterns tried in order (defaults to
            ``DEFAULT_DATE_FORMATS``)

    Returns:
        The parsed date

    Raises:
        ValueError: If no format matches
    """
    formats = list(formats or DEFAULT_DATE_FORMATS)

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if value is None:
        raise ValueError(_format_supported_error(value, formats))

    raw = str(value).strip().translate(_FULLWIDTH_DIGITS)
    raw = _MIDNIGHT_SUFFIX.sub("", raw)
    if not raw:
        raise ValueError(_format_supported_error(value, formats))

    for fmt in formats:
        try:
            return datetime.strptime(raw, fmt).date()
        except ValueError:
            continue

    raise ValueError(_format_supported_error(value, formats))


def try_parse_date(
    value: Union[str, date, datetime, None],
    formats: Optional[Sequence[str]] = None,
) -> Optional[date]:
    """Like ``parse_date`` but returns ``None`` for unparseable input."""
    try:
        return parse_date(value, formats)
    except ValueError:
        logger.debug("Unable to parse date value %r", value)
        return None
