"""Writer module for the ledger workbook.

Sheets produced per organization workbook:
- one statement per party ledger (sheet named after the party ID)
- ``Ledger Master`` index with links to every statement
- ``RUN_LOG`` append-only run history
- ``CONFIG`` key-value settings (created on initialization)
"""

from party_ledgers.writer.ledger_master import MASTER_SHEET_NAME, render_ledger_master
from party_ledgers.writer.party_ledger import (
    RenderedLedger,
    build_ledger_entries,
    ledger_sheet_names,
    render_party_ledger,
    sanitize_sheet_name,
)
from party_ledgers.writer.run_log import RUN_LOG_SHEET_NAME, RunLog
from party_ledgers.writer.sink import CellRange, TabularSink
from party_ledgers.writer.summary import ledger_summary_frame, write_summary_csv
from party_ledgers.writer.workbook_setup import initialize_workbook
from party_ledgers.writer.workbook_sink import WorkbookSink

__all__ = [
    "MASTER_SHEET_NAME",
    "RUN_LOG_SHEET_NAME",
    "CellRange",
    # Party statements
    "RenderedLedger",
    "RunLog",
    "TabularSink",
    "WorkbookSink",
    "build_ledger_entries",
    "initialize_workbook",
    "ledger_sheet_names",
    # Summary export
    "ledger_summary_frame",
    "render_ledger_master",
    "render_party_ledger",
    "sanitize_sheet_name",
    "write_summary_csv",
]
