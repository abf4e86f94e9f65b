"""Shared parsing utilities for source spreadsheet cells.

Source registers are hand-maintained, so amounts arrive as numbers or as
Indian-locale strings (``"₹2,00,000.00"``) and dates as native date cells or
loosely formatted text. Every parser here degrades to a default instead of
raising.
"""

from __future__ import annotations

import logging
import math
import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

import pandas as pd

logger = logging.getLogger(__name__)

ZERO = Decimal(0)

# Explicit formats tried before the generic pandas parser (ISO first, then day-first)
DATE_FORMATS = (
    "%Y-%m-%d",
    "%d-%m-%Y",
    "%d/%m/%Y",
    "%d.%m.%Y",
    "%d-%b-%Y",
    "%d %b %Y",
    "%d-%m-%y",
    "%d/%m/%y",
)

_CURRENCY_PREFIX = re.compile(r"^(?:RS\.?|INR)", re.IGNORECASE)
_AMOUNT_NOISE = re.compile(r"[₹$€£¥,\s]")


def parse_amount(raw: Any) -> Decimal:
    """Parse a cell value into a decimal amount.

    Grouping commas are removed wherever they appear, so both Indian
    (``"2,00,000.00"``) and Western (``"200,000.00"``) grouping parse to the
    same value.

    Examples
    --------
    - "₹2,00,000.00" -> Decimal("200000.00")
    - "Rs. 1,250" -> Decimal("1250")
    - 500 -> Decimal("500")
    - "" -> Decimal("0")
    - "n/a" -> Decimal("0")

    Parameters
    ----------
    raw
        Cell value (number, string, ``None``).

    Returns
    -------
    Decimal
        Parsed amount, ``Decimal(0)`` when empty or unparseable.
    """
    if raw is None or isinstance(raw, bool):
        return ZERO

    if isinstance(raw, Decimal):
        return raw if raw.is_finite() else ZERO

    if isinstance(raw, int):
        return Decimal(raw)

    if isinstance(raw, float):
        if math.isnan(raw) or math.isinf(raw):
            return ZERO
        return Decimal(str(raw))

    text = str(raw).strip()
    if not text:
        return ZERO

    # Remove currency symbols, grouping separators and whitespace
    cleaned = _AMOUNT_NOISE.sub("", text)
    cleaned = _CURRENCY_PREFIX.sub("", cleaned)

    if not cleaned:
        return ZERO

    try:
        value = Decimal(cleaned)
    except InvalidOperation:
        logger.debug("Could not parse amount: %r", raw)
        return ZERO

    return value if value.is_finite() else ZERO


def parse_calendar_date(raw: Any) -> date | None:
    """Parse a cell value into a calendar date.

    Parameters
    ----------
    raw
        Native ``date``/``datetime``/``Timestamp`` or text.

    Returns
    -------
    date | None
        Parsed date (time of day dropped), ``None`` when the value is empty or
        cannot be read as a date.
    """
    if raw is None or raw == "":
        return None

    # datetime (and pandas Timestamp) subclass date; keep only the calendar part
    if isinstance(raw, datetime):
        if pd.isna(raw):
            return None
        return raw.date()

    if isinstance(raw, date):
        return raw

    if not isinstance(raw, str):
        return None

    text = raw.strip()
    if not text:
        return None

    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue

    parsed = pd.to_datetime(text, errors="coerce")
    if pd.isna(parsed):
        logger.debug("Could not parse date: %r", raw)
        return None
    return parsed.date()


def cell_text(value: Any) -> str:
    """Return the text form of a cell.

    ``None`` becomes ``""`` and integral floats lose their ``.0`` so numeric
    IDs and invoice numbers read back the way they were typed.
    """
    if value is None:
        return ""
    if isinstance(value, float):
        if math.isnan(value):
            return ""
        if value.is_integer():
            return str(int(value))
    return str(value).strip()


def normalize_header_cell(value: Any) -> str:
    """Return a header cell as trimmed uppercase text."""
    return cell_text(value).upper()


def is_blank_row(row: list[Any]) -> bool:
    """True when every cell of the row is empty."""
    return all(cell_text(cell) == "" for cell in row)
