"""
Numeric parsing rules for imported cell values.

Integers and decimals arrive as free text: thousands separators, currency
symbols and percent signs are common in spreadsheet exports. Decimals are
always built from the cleaned string so no binary floating point is involved.
"""

import re
import unicodedata
from decimal import Decimal, InvalidOperation
from typing import Any

# Currency symbols stripped before numeric parsing
CURRENCY_SYMBOLS = {"$", "€", "£", "¥", "￥", "₹", "₽", "﷼"}

# Currency codes accepted as a prefix or suffix ("USD 1,200.50", "1200 SAR")
_CURRENCY_CODE = re.compile(r"^(?:[A-Z]{3}\s*)?(.*?)(?:\s*[A-Z]{3})?$")

# Optional sign, digits with optional comma grouping, optional fraction
_NUMBER_PATTERN = re.compile(
    r"^[+-]?(?:\d{1,3}(?:,\d{3})+|\d+)?(?:\.\d+)?$"
)


def _clean_numeric_text(value: Any) -> str:
    text = unicodedata.normalize("NFKC", str(value)).strip()
    for symbol in CURRENCY_SYMBOLS:
        text = text.replace(symbol, "")
    text = _CURRENCY_CODE.sub(r"\1", text.strip()).strip()
    # Accounting negatives: (1,234.00)
    if text.startswith("(") and text.endswith(")"):
        text = "-" + text[1:-1].strip()
    return text.replace(" ", "")


def _check_pattern(original: Any, text: str) -> None:
    if not text or not _NUMBER_PATTERN.match(text) or not any(c.isdigit() for c in text):
        raise ValueError(f"Invalid numeric value: {original!r}")


def parse_decimal(value: Any, allow_percent: bool = True) -> Decimal:
    """
    Parse a numeric string into a ``Decimal``.

    Accepts an optional sign, thousands separators, currency symbols or codes,
    and (when ``allow_percent``) a trailing percent sign which is dropped, so
    ``"12.5%"`` parses as ``Decimal("12.5")``.

    Raises:
        ValueError: If the value is not numeric
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValueError(f"Invalid numeric value: {value!r}")
    if isinstance(value, int):
        return Decimal(value)

    text = _clean_numeric_text(value)
    if allow_percent and text.endswith("%"):
        text = text[:-1].strip()
    _check_pattern(value, text)

    try:
        return Decimal(text.replace(",", ""))
    except InvalidOperation as e:
        raise ValueError(f"Invalid numeric value: {value!r}") from e


def parse_integer(value: Any) -> int:
    """
    Parse an integer-looking string into an ``int``.

    ``"1,200"`` and ``"12.00"`` are accepted; ``"12.5"`` is not.

    Raises:
        ValueError: If the value is not an integer
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid integer value: {value!r}")
    if isinstance(value, int):
        return value

    number = parse_decimal(value, allow_percent=False)
    if number != number.to_integral_value():
        raise ValueError(f"Invalid integer value: {value!r}")
    return int(number)
