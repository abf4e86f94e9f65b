"""Pytest configuration for party_ledgers tests.

This module provides:
- An in-memory source connector serving raw tables by (source ID, tab name)
- Sample purchase, sales, bank and contact registers
- An organization configuration wired to those registers
- A fresh in-memory workbook sink per test
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Any

import openpyxl
import pytest
from dotenv import load_dotenv

from party_ledgers.errors import SourceAccessError
from party_ledgers.types import DocType, RawTable, StandardizedTransaction
from party_ledgers.writer.workbook_sink import WorkbookSink

PROJECT_ROOT = Path(__file__).parent.parent
load_dotenv(PROJECT_ROOT / ".env")


class FakeConnector:
    """Source connector backed by a dict of raw tables."""

    def __init__(self, tables: dict[str, dict[str, RawTable]] | None = None) -> None:
        self.tables = tables or {}

    def open(self, source_id: str, tab_name: str) -> RawTable | None:
        tabs = self.tables.get(source_id)
        if tabs is None:
            msg = f"Source not found: {source_id}"
            raise SourceAccessError(msg)
        table = tabs.get(tab_name)
        return None if table is None else [list(row) for row in table]

    def list_tabs(self, source_id: str) -> list[str]:
        return list(self.tables.get(source_id, {}))


def make_txn(
    doc_type: DocType = DocType.BANK,
    party_id: str = "CG-SUP-0001",
    *,
    debit: int | str = 0,
    credit: int | str = 0,
    txn_date: date | None = None,
    doc_no: str = "",
    party_name: str = "",
) -> StandardizedTransaction:
    """Build a transaction with the same defaulting as the field mapper."""
    return StandardizedTransaction.create(
        doc_type,
        date=txn_date,
        party_id=party_id,
        party_name=party_name,
        doc_no=doc_no,
        debit=Decimal(debit),
        credit=Decimal(credit),
    )


def save_workbook(path: Path, tabs: dict[str, RawTable]) -> Path:
    """Write raw tables to an xlsx file, one tab each."""
    wb = openpyxl.Workbook()
    wb.remove(wb.active)
    for name, rows in tabs.items():
        ws = wb.create_sheet(name)
        for row in rows:
            ws.append(row)
    wb.save(path)
    return path


@pytest.fixture
def purchase_table() -> RawTable:
    """Purchase register with a title banner above the header."""
    return [
        ["PURCHASE REGISTER 2025-26", "", "", "", ""],
        ["", "", "", "", ""],
        ["INVOICE DATE", "L/F", "SUPPLIER NAME", "INVOICE NO", "GRAND TOTAL"],
        [date(2025, 4, 10), "cg-sup-0001", "Steel Traders", "INV-101", "₹54,000.00"],
        ["", "", "", "", ""],
    ]


@pytest.fixture
def sales_table() -> RawTable:
    """Sales register with the header in the first row."""
    return [
        ["INVOICE DATE", "L/F", "CUSTOMER NAME", "INVOICE NO", "GRAND TOTAL"],
        ["05-05-2025", "CG-CUS-0002", "Metro Builders", "S-9", "12,500"],
    ]


@pytest.fixture
def bank_table() -> RawTable:
    """Bank statement in the six-column schema plus a party name column."""
    return [
        ["DATE", "PARTICULARS", "DEBIT", "CREDIT", "BALANCE", "L/F", "PARTY NAME"],
        ["15-04-2025", "NEFT Steel Traders", "50000", "", "", "CG-SUP-0001", "Steel Traders"],
    ]


@pytest.fixture
def contacts_table() -> RawTable:
    """Contact directory rows for the sample parties and the organization."""
    header = [
        "SL",
        "CONTACT TYPE",
        "COMPANY NAME",
        "ADDRESS LINE 1",
        "ADDRESS LINE 2",
        "DISTRICT",
        "STATE",
        "PIN CODE",
        "GST",
        "RELATED COMPANY",
        "CONTACT PERSON",
        "MOBILE NO",
        "EMAIL ID",
    ]
    return [
        header,
        [
            "CG-SUP-0001",
            "SUPPLIER",
            "Steel Traders Pvt Ltd",
            "12 Industrial Estate",
            "Phase II",
            "Raipur",
            "Chhattisgarh",
            492001,
            "22AAAAA0000A1Z5",
            "",
            "R. Sharma",
            9876543210,
            "accounts@steel.example",
        ],
        ["", "", "Orphan row", "", "", "", "", "", "", "", "", "", ""],
    ]


@pytest.fixture
def org_config() -> dict[str, Any]:
    """Configuration pointing at the sample registers."""
    return {
        "ORG_CODE": "CG",
        "ORG_NAME": "Central Granites",
        "ORG_ADDRESS1": "1 Quarry Road",
        "ORG_GST": "22BBBBB1111B1Z5",
        "PURCHASE_SHEET_ID": "purchase.xlsx",
        "SALES_SHEET_ID": "sales.xlsx",
        "BANK_SHEET_ID": "bank.xlsx",
        "PUR_INVOICE_DATE_COL": "INVOICE DATE",
        "PUR_LF_COL": "L/F",
        "PUR_SUPPLIER_NAME_COL": "SUPPLIER NAME",
        "PUR_INVOICE_NO_COL": "INVOICE NO",
        "PUR_GRAND_TOTAL_COL": "GRAND TOTAL",
        "SAL_INVOICE_DATE_COL": "INVOICE DATE",
        "SAL_LF_COL": "L/F",
        "SAL_CUSTOMER_NAME_COL": "CUSTOMER NAME",
        "SAL_INVOICE_NO_COL": "INVOICE NO",
        "SAL_GRAND_TOTAL_COL": "GRAND TOTAL",
        "BANK_DATE_COL": "DATE",
        "BANK_LF_COL": "L/F",
        "BANK_PARTY_NAME_COL": "PARTY NAME",
        "BANK_DEBIT_COL": "DEBIT",
        "BANK_CREDIT_COL": "CREDIT",
        "BANK_PARTICULARS_COL": "PARTICULARS",
    }


@pytest.fixture
def connector(
    purchase_table: RawTable,
    sales_table: RawTable,
    bank_table: RawTable,
    contacts_table: RawTable,
) -> FakeConnector:
    """Connector serving every sample register under its default tab name."""
    return FakeConnector(
        {
            "purchase.xlsx": {"Purchase Register": purchase_table},
            "sales.xlsx": {"Sales Register": sales_table},
            "bank.xlsx": {"Bank Statement": bank_table},
            "contacts.xlsx": {"ALL CONTACTS": contacts_table},
        },
    )


@pytest.fixture
def sink() -> WorkbookSink:
    """Fresh in-memory ledger workbook."""
    return WorkbookSink()
