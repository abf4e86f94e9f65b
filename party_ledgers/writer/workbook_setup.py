"""First-time setup of a ledger workbook.

Creates the ``CONFIG`` tab pre-filled with every recognised setting, the empty
``Ledger Master`` index and the ``RUN_LOG`` tab. Existing tabs are kept so
re-running setup never discards a filled-in configuration.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from party_ledgers.config import CONFIG_SHEET_NAME, DEFAULT_SOURCE_TABS
from party_ledgers.writer.ledger_master import MASTER_SHEET_NAME, write_master_header, write_master_placeholder
from party_ledgers.writer.run_log import RUN_LOG_SHEET_NAME, ensure_run_log_sheet
from party_ledgers.writer.sink import CellRange

if TYPE_CHECKING:
    from party_ledgers.writer.sink import TabularSink

logger = logging.getLogger(__name__)

CONFIG_HEADERS = ["SETTING", "VALUE", "DESCRIPTION"]

# (section, [(key, default, description), ...])
CONFIG_SECTIONS: list[tuple[str, list[tuple[str, str, str]]]] = [
    (
        "ORGANIZATION SETTINGS",
        [
            ("ORG_CODE", "", "Organization code, also the contact ID of the organization"),
            ("ORG_NAME", "", "Full organization name"),
            ("ORG_ADDRESS1", "", "Address line 1"),
            ("ORG_ADDRESS2", "", "Address line 2"),
            ("ORG_GST", "", "GST number"),
            ("ORG_PHONE", "", "Contact number"),
            ("ORG_EMAIL", "", "E-mail address"),
        ],
    ),
    (
        "SOURCE SHEETS",
        [
            ("PURCHASE_SHEET_ID", "", "Purchase register workbook (.xlsx or .csv)"),
            ("PURCHASE_SHEET_NAME", DEFAULT_SOURCE_TABS["PURCHASE"], "Tab name in the workbook"),
            ("SALES_SHEET_ID", "", "Sales register workbook (.xlsx or .csv)"),
            ("SALES_SHEET_NAME", DEFAULT_SOURCE_TABS["SALES"], "Tab name in the workbook"),
            ("BANK_SHEET_ID", "", "Bank statement workbook (.xlsx or .csv)"),
            ("BANK_SHEET_NAME", DEFAULT_SOURCE_TABS["BANK"], "Tab name in the workbook, * reads every statement tab"),
            ("CONTACTS_SHEET_ID", "", "Contact directory workbook"),
            ("CONTACTS_SHEET_NAME", DEFAULT_SOURCE_TABS["CONTACTS"], "Tab name in the workbook"),
        ],
    ),
    (
        "PURCHASE COLUMN MAPPING",
        [
            ("PUR_DATE_COL", "INVOICE DATE", "Date column"),
            ("PUR_PARTY_ID_COL", "L/F", "Party ID column"),
            ("PUR_PARTY_NAME_COL", "SUPPLIER NAME", "Party name column"),
            ("PUR_INVOICE_COL", "INVOICE NO", "Invoice number column"),
            ("PUR_AMOUNT_COL", "GRAND TOTAL", "Total amount column"),
            ("PUR_REMARKS_COL", "REMARKS", "Remarks column"),
        ],
    ),
    (
        "SALES COLUMN MAPPING",
        [
            ("SAL_DATE_COL", "INVOICE DATE", "Date column"),
            ("SAL_PARTY_ID_COL", "L/F", "Party ID column"),
            ("SAL_PARTY_NAME_COL", "CUSTOMER NAME", "Party name column"),
            ("SAL_INVOICE_COL", "INVOICE NO", "Invoice number column"),
            ("SAL_AMOUNT_COL", "GRAND TOTAL", "Total amount column"),
            ("SAL_REMARKS_COL", "REMARKS", "Remarks column"),
        ],
    ),
    (
        "BANK COLUMN MAPPING",
        [
            ("BANK_DATE_COL", "DATE", "Date column"),
            ("BANK_PARTY_ID_COL", "L/F", "Party ID column"),
            ("BANK_PARTY_NAME_COL", "PARTY NAME", "Party name column"),
            ("BANK_DEBIT_COL", "DEBIT", "Debit column"),
            ("BANK_CREDIT_COL", "CREDIT", "Credit column"),
            ("BANK_PARTICULARS_COL", "PARTICULARS", "Particulars column"),
            ("BANK_REF_COL", "REFERENCE", "Reference column"),
            ("BANK_VOUCHER_COL", "VOUCHER TYPE", "Voucher type column"),
        ],
    ),
    (
        "NOTIFICATIONS",
        [
            ("ERROR_EMAIL", "", "Email for error notifications"),
        ],
    ),
]


def config_rows() -> list[list[str]]:
    """Return the ``CONFIG`` tab contents, header first, sections separated by a blank row."""
    rows: list[list[str]] = [CONFIG_HEADERS]
    for section, settings in CONFIG_SECTIONS:
        rows.append([f"=== {section} ===", "", ""])
        rows.extend([key, default, description] for key, default, description in settings)
        rows.append(["", "", ""])
    return rows


def write_config_sheet(sink: TabularSink) -> None:
    """(Re)create the ``CONFIG`` tab with default settings."""
    rows = config_rows()
    sink.replace_sheet(CONFIG_SHEET_NAME)
    sink.write_values(CONFIG_SHEET_NAME, 1, 1, rows)
    sink.style_range(CONFIG_SHEET_NAME, CellRange(1, 1, cols=len(CONFIG_HEADERS)), bold=True)
    for row_idx, row in enumerate(rows, start=1):
        if row[0].startswith("==="):
            sink.style_range(CONFIG_SHEET_NAME, CellRange(row_idx, 1), bold=True, color="1F4E79")
    sink.set_column_widths(CONFIG_SHEET_NAME, {1: 26, 2: 30, 3: 60})


def initialize_workbook(sink: TabularSink) -> list[str]:
    """Create whichever of ``CONFIG``, ``Ledger Master`` and ``RUN_LOG`` are missing.

    Returns
    -------
    list[str]
        Names of the tabs created.
    """
    created: list[str] = []

    if not sink.has_sheet(CONFIG_SHEET_NAME):
        write_config_sheet(sink)
        created.append(CONFIG_SHEET_NAME)

    if not sink.has_sheet(MASTER_SHEET_NAME):
        write_master_header(sink)
        write_master_placeholder(sink)
        created.append(MASTER_SHEET_NAME)

    if not sink.has_sheet(RUN_LOG_SHEET_NAME):
        ensure_run_log_sheet(sink)
        created.append(RUN_LOG_SHEET_NAME)

    logger.info("Workbook initialized; created tabs: %s", ", ".join(created) or "none")
    return created
