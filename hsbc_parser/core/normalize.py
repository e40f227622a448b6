"""
Data normalization and cleaning functions.
"""
import calendar
import re
from datetime import date
from decimal import Decimal
from typing import Optional, Sequence, Union
import logging

from .errors import AmountFormatError

logger = logging.getLogger(__name__)

MONTHS = ("JAN", "FEB", "MAR", "APR", "MAY", "JUN",
          "JUL", "AUG", "SEP", "OCT", "NOV", "DEC")

_AMOUNT_SHAPE = re.compile(r"\d+(?:,\d+)*\.\d{2}")
_DAY_MONTH = re.compile(r"(\d{2})([A-Z]{3})")
_ESCAPE = re.compile(rb"\\([nrtbf()\\]|[0-7]{1,3}|\r\n|\n|\r)")
_ESCAPES = {
    b"n": b"\n",
    b"r": b"\r",
    b"t": b"\t",
    b"b": b"\b",
    b"f": b"\f",
    b"(": b"(",
    b")": b")",
    b"\\": b"\\",
}


def normalize_amount(value: Union[bytes, str]) -> Decimal:
    """
    Convert an amount such as ``1,234.56`` into an exact Decimal.

    Args:
        value: Raw amount text or bytes; surrounding whitespace is ignored

    Returns:
        Decimal value with the source's two fractional digits preserved

    Raises:
        AmountFormatError: if the value is not ``digits[,digits]*.digits{2}``
    """
    if isinstance(value, bytes):
        text = value.decode("latin-1")
    else:
        text = value
    cleaned = text.strip()

    if not _AMOUNT_SHAPE.fullmatch(cleaned):
        raise AmountFormatError(value)

    return Decimal(cleaned.replace(",", ""))


def is_day_month(value: str, months: Sequence[str] = MONTHS) -> bool:
    """Check whether a literal looks like a ``24AUG`` date token."""
    match = _DAY_MONTH.fullmatch(value.strip())
    return bool(match) and match.group(2) in months


def normalize_date(value: str, reference_year: int,
                   months: Sequence[str] = MONTHS) -> Optional[date]:
    """
    Normalize a ``DDMON`` token into a date.

    The statement text carries no year, so the caller supplies it. A day
    past the end of its month in ``reference_year`` (``29FEB`` in a
    non-leap year) is clamped to the last day of that month and logged as a
    warning.

    Args:
        value: Day/month token, e.g. ``22AUG``
        reference_year: Year to attach to the day and month
        months: Month abbreviations in calendar order

    Returns:
        Date object or None if the day is outside 01-31
    """
    match = _DAY_MONTH.fullmatch(value.strip())
    if not match or match.group(2) not in months:
        return None

    day = int(match.group(1))
    if not 1 <= day <= 31:
        return None

    month = list(months).index(match.group(2)) + 1
    last_day = calendar.monthrange(reference_year, month)[1]
    if day > last_day:
        logger.warning(
            f"{value} does not exist in {reference_year}; using day {last_day} instead"
        )
        day = last_day
    return date(reference_year, month, day)


def clean_description(value: str) -> str:
    """
    Strip vendor padding from a merchant description.

    The vendor pads the merchant name with a run of spaces before the
    location, so everything from the first double space onwards is dropped.
    """
    return value.strip().split("  ", 1)[0].strip()


def decode_literal(raw: bytes) -> str:
    """
    Decode the body of a PDF literal string.

    Args:
        raw: Bytes between the literal's opening and closing parentheses

    Returns:
        Unescaped text, decoded as Latin-1
    """
    def replace(match):
        escape = match.group(1)
        if escape in _ESCAPES:
            return _ESCAPES[escape]
        if escape[:1].isdigit():
            return bytes([int(escape, 8) % 256])
        # Escaped end-of-line is a line continuation
        return b""

    return _ESCAPE.sub(replace, raw).decode("latin-1")
