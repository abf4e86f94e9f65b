"""``Ledger Master`` index sheet: one navigable row per party ledger."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from party_ledgers.errors import RenderError
from party_ledgers.writer.party_ledger import AMOUNT_FORMAT, DATE_FORMAT, sanitize_sheet_name
from party_ledgers.writer.sink import CellRange

if TYPE_CHECKING:
    from collections.abc import Iterable

    from party_ledgers.types import LedgerCategory, PartyLedger
    from party_ledgers.writer.sink import TabularSink

logger = logging.getLogger(__name__)

MASTER_SHEET_NAME = "Ledger Master"
MASTER_HEADERS = [
    "PARTY CODE",
    "PARTY NAME",
    "TYPE",
    "TOTAL DEBIT",
    "TOTAL CREDIT",
    "BALANCE",
    "LAST TRANSACTION",
    "LINK",
]
EMPTY_PLACEHOLDER = "No ledgers found. Run Refresh to generate."
LINK_LABEL = "Open"
LINK_COL = 8

MASTER_COLUMN_WIDTHS = {1: 18, 2: 40, 3: 8, 4: 16, 5: 16, 6: 16, 7: 16, 8: 10}


def write_master_header(sink: TabularSink) -> None:
    """(Re)create the index sheet with only its header row."""
    sink.replace_sheet(MASTER_SHEET_NAME)
    sink.write_values(MASTER_SHEET_NAME, 1, 1, [MASTER_HEADERS])
    sink.style_range(MASTER_SHEET_NAME, CellRange(1, 1, cols=len(MASTER_HEADERS)), bold=True)
    sink.set_border(MASTER_SHEET_NAME, CellRange(1, 1, cols=len(MASTER_HEADERS)), bottom=True)
    sink.set_column_widths(MASTER_SHEET_NAME, MASTER_COLUMN_WIDTHS)


def write_master_placeholder(sink: TabularSink) -> None:
    """Write the informational row shown when there are no ledgers."""
    sink.write_values(MASTER_SHEET_NAME, 2, 1, [[EMPTY_PLACEHOLDER]])
    sink.merge(MASTER_SHEET_NAME, CellRange(2, 1, cols=len(MASTER_HEADERS)))
    sink.style_range(MASTER_SHEET_NAME, CellRange(2, 1), italic=True, color="666666", horizontal="center")


def render_ledger_master(
    sink: TabularSink,
    ledgers: Iterable[PartyLedger],
    sheet_names: dict[tuple[str, LedgerCategory], str] | None = None,
) -> int:
    """Rewrite the index sheet.

    Rows are sorted by category, then by name (case-sensitive).

    Parameters
    ----------
    sink
        Write target.
    ledgers
        Every ledger rendered in this run.
    sheet_names
        Sheet name per ledger key, as returned by
        :func:`~party_ledgers.writer.party_ledger.ledger_sheet_names`.

    Returns
    -------
    int
        Number of ledger rows written.

    Raises
    ------
    RenderError
        If writing the sheet fails.
    """
    sheet_names = sheet_names or {}
    ordered = sorted(ledgers, key=lambda party: (party.category.value, party.name))

    try:
        write_master_header(sink)
        if not ordered:
            write_master_placeholder(sink)
            return 0

        rows = [
            [
                party.id,
                party.name,
                f"[{party.category}]",
                party.total_debit,
                party.total_credit,
                party.balance,
                party.last_transaction,
                None,
            ]
            for party in ordered
        ]
        sink.write_values(MASTER_SHEET_NAME, 2, 1, rows)

        for offset, party in enumerate(ordered):
            target = sheet_names.get(party.key) or sanitize_sheet_name(party.id)
            sink.set_link(MASTER_SHEET_NAME, 2 + offset, LINK_COL, LINK_LABEL, target)

        sink.set_number_format(MASTER_SHEET_NAME, CellRange(2, 4, rows=len(rows), cols=3), AMOUNT_FORMAT)
        sink.set_number_format(MASTER_SHEET_NAME, CellRange(2, 7, rows=len(rows)), DATE_FORMAT)
        sink.style_range(MASTER_SHEET_NAME, CellRange(2, 3, rows=len(rows)), horizontal="center")
    except Exception as e:
        raise RenderError(MASTER_SHEET_NAME, str(e) or type(e).__name__) from e

    logger.info("Ledger Master updated with %d ledgers", len(rows))
    return len(rows)
