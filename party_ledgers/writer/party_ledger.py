"""Party ledger statement renderer.

Every statement uses the same fixed seven-column layout (A-G)::

    1       SUPPLIER/CUSTOMER LEDGER (A-E)  | party ID (F) | company ID (G)
    2-5     company name, address lines, GST | phone | email
    7-10    party name, address lines, GST | phone | email
    12      divider
    13      DATE | PARTICULARS | VOUCHER TYPE | REF | DEBIT | CREDIT
    14..    transactions, at least ten rows
    +2      TOTAL, CLOSING BALANCE (DR/CR in G), GRAND TOTAL

Column G carries identifiers only and is hidden once the sheet is written.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from party_ledgers.errors import RenderError
from party_ledgers.types import ZERO, LedgerCategory, LedgerEntry
from party_ledgers.writer.sink import CellRange

if TYPE_CHECKING:
    from collections.abc import Iterable

    from party_ledgers.types import Company, PartyLedger, StandardizedTransaction
    from party_ledgers.writer.sink import TabularSink

logger = logging.getLogger(__name__)

NUM_COLS = 7
FILE_COL = 7
DEBIT_COL = 5
CREDIT_COL = 6

LEGEND_ROW = 13
FIRST_TXN_ROW = 14
MIN_TXN_ROWS = 10
GAP_ROWS = 2

LEDGER_COLUMNS = ["DATE", "PARTICULARS", "VOUCHER TYPE", "REF", "DEBIT", "CREDIT", ""]
LEGEND_ALIGNMENT = ("left", "left", "center", "center", "right", "right")

DATE_FORMAT = "dd-mm-yyyy"
AMOUNT_FORMAT = "₹ #,##0.00"

# Widths in characters: date, particulars, voucher type, ref, debit, credit, file
COLUMN_WIDTHS = {1: 14, 2: 50, 3: 17, 4: 12, 5: 17, 6: 17, 7: 28}

MAX_SHEET_NAME_LENGTH = 31
RESERVED_SHEET_NAMES = {"LEDGER MASTER", "CONFIG", "RUN_LOG"}

_INVALID_SHEET_CHARS = re.compile(r"[\[\]:*?/\\]")
_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class RenderedLedger:
    """Row positions of a rendered statement."""

    sheet_name: str
    entries: list[LedgerEntry] = field(default_factory=list)
    transaction_rows: int = MIN_TXN_ROWS
    total_row: int = 0
    closing_row: int = 0
    grand_total_row: int = 0


# =============================================================================
# Sheet naming
# =============================================================================


def sanitize_sheet_name(name: str, max_length: int = MAX_SHEET_NAME_LENGTH) -> str:
    """Make ``name`` a valid worksheet title.

    Examples
    --------
    - "CG/SUP:0001" -> "CG-SUP-0001"
    - "  A   B " -> "A B"
    - "" -> "Unnamed"
    """
    sanitized = _WHITESPACE.sub(" ", _INVALID_SHEET_CHARS.sub("-", str(name))).strip().strip("'")
    return sanitized[:max_length].rstrip() or "Unnamed"


def ledger_sheet_names(ledgers: Iterable[PartyLedger]) -> dict[tuple[str, LedgerCategory], str]:
    """Assign a unique sheet name to every ledger.

    The party ID is used as-is when it owns a single category. When one ID has
    both a supplier and a customer ledger, each gets a ``-SU`` / ``-CU`` suffix.

    Returns
    -------
    dict[tuple[str, LedgerCategory], str]
        Sheet name per ledger key.
    """
    ledgers = list(ledgers)
    categories_per_id: dict[str, set[LedgerCategory]] = {}
    for party in ledgers:
        categories_per_id.setdefault(party.id, set()).add(party.category)

    names: dict[tuple[str, LedgerCategory], str] = {}
    used: set[str] = set()
    for party in ledgers:
        base = sanitize_sheet_name(party.id)
        suffix = ""
        if len(categories_per_id[party.id]) > 1 or base.upper() in RESERVED_SHEET_NAMES:
            suffix = f"-{party.category}"

        name = sanitize_sheet_name(party.id, MAX_SHEET_NAME_LENGTH - len(suffix)) + suffix
        counter = 2
        while name.upper() in used:
            tail = f"{suffix}~{counter}"
            name = sanitize_sheet_name(party.id, MAX_SHEET_NAME_LENGTH - len(tail)) + tail
            counter += 1

        used.add(name.upper())
        names[party.key] = name

    return names


# =============================================================================
# Rendering
# =============================================================================


def build_ledger_entries(transactions: Iterable[StandardizedTransaction]) -> list[LedgerEntry]:
    """Pair each transaction with the cumulative debit minus credit after it."""
    entries: list[LedgerEntry] = []
    balance = ZERO
    for txn in transactions:
        balance += txn.debit - txn.credit
        entries.append(LedgerEntry(transaction=txn, running_balance=balance))
    return entries


def contact_line(*parts: str) -> str:
    """Join non-empty parts with ``" | "``."""
    return " | ".join(part for part in parts if part)


def _amount_or_blank(value: Decimal) -> Decimal | None:
    return value if value else None


def _transaction_row(entry: LedgerEntry) -> list[Any]:
    txn = entry.transaction
    return [
        txn.date,
        txn.particulars,
        txn.voucher_type or txn.doc_type.value,
        txn.reference or txn.doc_no,
        _amount_or_blank(txn.debit),
        _amount_or_blank(txn.credit),
        None,
    ]


def _write_centered_block(sink: TabularSink, sheet: str, row: int, lines: list[str]) -> None:
    """Write one line per row across A-F, merged and centered; the first line is emphasized."""
    for offset, text in enumerate(lines):
        current = row + offset
        sink.write_values(sheet, current, 1, [[text]])
        sink.merge(sheet, CellRange(current, 1, cols=6))
        emphasized = offset == 0
        sink.style_range(
            sheet,
            CellRange(current, 1),
            bold=emphasized,
            size=14 if emphasized else None,
            horizontal="center",
        )


def _write_header(sink: TabularSink, sheet: str, party: PartyLedger, company: Company) -> None:
    # Row 1: ledger type, party ID, company ID
    sink.write_values(sheet, 1, 1, [[party.category.ledger_title, None, None, None, None, party.id, company.id]])
    sink.merge(sheet, CellRange(1, 1, cols=5))
    sink.style_range(sheet, CellRange(1, 1), bold=True, horizontal="left")
    sink.style_range(sheet, CellRange(1, 6, cols=2), horizontal="right")

    _write_centered_block(
        sink,
        sheet,
        2,
        [
            company.name.upper(),
            company.address1,
            company.address2,
            contact_line(company.gst, company.phone, company.email),
        ],
    )
    _write_centered_block(
        sink,
        sheet,
        7,
        [
            (party.name or party.id).upper(),
            party.address1,
            party.address2,
            contact_line(party.gst, party.phone, party.email),
        ],
    )

    # Row 12: divider
    sink.merge(sheet, CellRange(12, 1, cols=NUM_COLS))
    sink.set_border(sheet, CellRange(12, 1, cols=NUM_COLS), top=True, bottom=True)

    # Row 13: column legend
    sink.write_values(sheet, LEGEND_ROW, 1, [LEDGER_COLUMNS])
    sink.style_range(sheet, CellRange(LEGEND_ROW, 1, cols=NUM_COLS), bold=True)
    for col, alignment in enumerate(LEGEND_ALIGNMENT, start=1):
        sink.style_range(sheet, CellRange(LEGEND_ROW, col), horizontal=alignment)
    sink.set_border(sheet, CellRange(LEGEND_ROW, 1, cols=NUM_COLS), top=True, bottom=True)


def _write_totals(sink: TabularSink, sheet: str, party: PartyLedger, total_row: int) -> None:
    closing_row = total_row + 1
    grand_total_row = total_row + 2
    balance = party.balance
    grand_total = max(party.total_debit, party.total_credit)

    closing = [None] * NUM_COLS
    closing[0] = "CLOSING BALANCE"
    if balance >= 0:
        closing[DEBIT_COL - 1] = abs(balance)
        closing[FILE_COL - 1] = "DR"
    else:
        closing[CREDIT_COL - 1] = abs(balance)
        closing[FILE_COL - 1] = "CR"

    sink.write_values(
        sheet,
        total_row,
        1,
        [
            ["TOTAL", None, None, None, party.total_debit, party.total_credit, None],
            closing,
            ["GRAND TOTAL", None, None, None, grand_total, grand_total, None],
        ],
    )

    for row in (total_row, closing_row, grand_total_row):
        sink.merge(sheet, CellRange(row, 1, cols=4))
        sink.style_range(sheet, CellRange(row, 1), horizontal="right")

    sink.set_number_format(sheet, CellRange(total_row, DEBIT_COL, rows=3, cols=2), AMOUNT_FORMAT)
    sink.style_range(sheet, CellRange(total_row, 1, cols=NUM_COLS), bold=True)
    sink.style_range(sheet, CellRange(closing_row, FILE_COL), bold=True)
    sink.style_range(sheet, CellRange(grand_total_row, 1, cols=NUM_COLS), bold=True)
    sink.set_border(sheet, CellRange(total_row, 1, cols=NUM_COLS - 1), top=True)
    sink.set_border(sheet, CellRange(grand_total_row, 1, cols=NUM_COLS - 1), top=True, bottom=True)


def render_party_ledger(
    sink: TabularSink,
    party: PartyLedger,
    company: Company,
    sheet_name: str | None = None,
) -> RenderedLedger:
    """Write one party's statement to its own sheet.

    Parameters
    ----------
    sink
        Write target.
    party
        Aggregated ledger; its transactions are expected in date order.
    company
        Issuing organization.
    sheet_name
        Target sheet, defaults to the sanitized party ID.

    Returns
    -------
    RenderedLedger
        Sheet name, running-balance entries and the totals row positions.

    Raises
    ------
    RenderError
        If any write fails.
    """
    sheet = sheet_name or sanitize_sheet_name(party.id)

    try:
        entries = build_ledger_entries(party.transactions)
        txn_rows = max(len(entries), MIN_TXN_ROWS)
        total_row = FIRST_TXN_ROW + txn_rows + GAP_ROWS

        sink.replace_sheet(sheet)
        _write_header(sink, sheet, party, company)

        if entries:
            sink.write_values(sheet, FIRST_TXN_ROW, 1, [_transaction_row(entry) for entry in entries])
        sink.set_number_format(sheet, CellRange(FIRST_TXN_ROW, 1, rows=txn_rows), DATE_FORMAT)
        sink.set_number_format(sheet, CellRange(FIRST_TXN_ROW, DEBIT_COL, rows=txn_rows, cols=2), AMOUNT_FORMAT)
        sink.style_range(sheet, CellRange(FIRST_TXN_ROW, DEBIT_COL, rows=txn_rows, cols=2), horizontal="right")
        sink.style_range(sheet, CellRange(FIRST_TXN_ROW, 3, rows=txn_rows, cols=2), horizontal="center")

        _write_totals(sink, sheet, party, total_row)

        sink.truncate(sheet, total_row + 2, NUM_COLS)
        sink.set_column_widths(sheet, COLUMN_WIDTHS)
        sink.hide_column(sheet, FILE_COL)
    except Exception as e:
        raise RenderError(sheet, str(e) or type(e).__name__) from e

    logger.debug("Rendered ledger '%s' with %d transactions", sheet, len(entries))
    return RenderedLedger(
        sheet_name=sheet,
        entries=entries,
        transaction_rows=txn_rows,
        total_row=total_row,
        closing_row=total_row + 1,
        grand_total_row=total_row + 2,
    )
