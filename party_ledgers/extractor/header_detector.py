"""Header row detection for hand-maintained source registers.

Source spreadsheets carry title rows and merged banners above the real header,
and its position drifts between files. Detection is content-driven: each of the
first rows is compared against the column names expected for the source kind.
"""

from __future__ import annotations

import logging
import re
from typing import Any

from party_ledgers.types import DocType
from party_ledgers.utils.parsing import normalize_header_cell

logger = logging.getLogger(__name__)

MAX_HEADER_SCAN_ROWS = 10
ANCHOR_COLUMN = "L/F"

EXPECTED_COLUMNS: dict[DocType, tuple[str, ...]] = {
    DocType.PURCHASE: ("L/F", "SUPPLIER NAME", "INVOICE NO", "GRAND TOTAL"),
    DocType.SALES: ("L/F", "CUSTOMER NAME", "INVOICE NO", "GRAND TOTAL"),
    DocType.BANK: ("DATE", "PARTICULARS", "DEBIT", "CREDIT", "BALANCE", "L/F"),
}

# Bank statement tabs must start with exactly these six columns
BANK_SCHEMA = EXPECTED_COLUMNS[DocType.BANK]

_LOOSE_CHARS = re.compile(r"[\s._\-]")


def _loose(text: str) -> str:
    """Drop spaces and punctuation so ``"INVOICE NO."`` equals ``"INVOICE_NO"``."""
    return _LOOSE_CHARS.sub("", text)


def header_matches(cell: str, expected: str) -> bool:
    """Compare a normalized header cell with an expected column name."""
    return cell == expected or _loose(cell) == _loose(expected)


def count_expected_columns(row: list[Any], kind: DocType) -> tuple[int, bool]:
    """Count expected columns present in a row.

    Parameters
    ----------
    row
        Raw row values.
    kind
        Source kind whose expected columns are used.

    Returns
    -------
    tuple[int, bool]
        ``(match_count, has_anchor)`` where ``has_anchor`` reports the ``L/F``
        column.
    """
    cells = [normalize_header_cell(cell) for cell in row]
    match_count = 0
    has_anchor = False

    for expected in EXPECTED_COLUMNS[kind]:
        if any(header_matches(cell, expected) for cell in cells if cell):
            match_count += 1
            if expected == ANCHOR_COLUMN:
                has_anchor = True

    return match_count, has_anchor


def detect_header_row(rows: list[list[Any]], kind: DocType) -> int | None:
    """Locate the header row of a raw source table.

    A row qualifies when it holds the ``L/F`` anchor plus one more expected
    column, or three expected columns without the anchor. The first qualifying
    row wins. When none qualifies, the first row containing a literal ``L/F``
    cell is used.

    Parameters
    ----------
    rows
        Raw table, first row first.
    kind
        Source kind (PURCHASE, SALES or BANK).

    Returns
    -------
    int | None
        0-based index of the header row, ``None`` when not found.
    """
    scan_limit = min(len(rows), MAX_HEADER_SCAN_ROWS)

    for row_idx in range(scan_limit):
        match_count, has_anchor = count_expected_columns(rows[row_idx], kind)
        if (has_anchor and match_count >= 2) or match_count >= 3:
            logger.debug("Detected header row at row %d for %s", row_idx + 1, kind)
            return row_idx

    for row_idx in range(scan_limit):
        if any(normalize_header_cell(cell) == ANCHOR_COLUMN for cell in rows[row_idx]):
            logger.debug("Detected header row at row %d (fallback L/F match) for %s", row_idx + 1, kind)
            return row_idx

    return None


def matches_bank_schema(row: list[Any]) -> bool:
    """True when the first six cells are exactly the bank statement schema."""
    cells = [normalize_header_cell(cell) for cell in row[: len(BANK_SCHEMA)]]
    return len(cells) == len(BANK_SCHEMA) and all(
        cell == expected for cell, expected in zip(cells, BANK_SCHEMA, strict=True)
    )
