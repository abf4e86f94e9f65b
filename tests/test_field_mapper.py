"""Tests for configuration-driven field extraction."""

from datetime import date
from decimal import Decimal
from typing import Any

from party_ledgers.extractor.field_mapper import (
    SemanticField,
    build_header_index,
    resolve_column_mapping,
    transform_row,
    transform_rows,
)
from party_ledgers.types import DocType

PURCHASE_HEADER = ["INVOICE DATE", "L/F", "SUPPLIER NAME", "INVOICE NO", "GRAND TOTAL"]
BANK_HEADER = ["DATE", "PARTICULARS", "DEBIT", "CREDIT", "BALANCE", "L/F", "REFERENCE"]


class TestResolveColumnMapping:
    """Tests for resolve_column_mapping."""

    def test_first_non_empty_key_wins(self) -> None:
        """Fallback keys are consulted in order, blanks skipped."""
        config = {"PUR_INVOICE_DATE_COL": "", "PUR_INWARD_DATE_COL": "  ", "PUR_DATE_COL": "INW DATE"}
        mapping = resolve_column_mapping(config, DocType.PURCHASE)

        assert mapping[SemanticField.DATE] == "INW DATE"

    def test_primary_key_preferred(self) -> None:
        """The primary key shadows its fallbacks."""
        config = {"PUR_INVOICE_DATE_COL": "INVOICE DATE", "PUR_DATE_COL": "INW DATE"}
        mapping = resolve_column_mapping(config, DocType.PURCHASE)

        assert mapping[SemanticField.DATE] == "INVOICE DATE"

    def test_unmapped_fields_are_none(self) -> None:
        """Fields without any config key resolve to None."""
        mapping = resolve_column_mapping({}, DocType.BANK)

        assert mapping[SemanticField.DEBIT] is None
        assert SemanticField.AMOUNT not in mapping


class TestTransformRow:
    """Tests for transform_row amount routing and defaults."""

    def test_purchase_amount_is_credit(self, org_config: dict[str, Any]) -> None:
        """Purchases increase the payable to the supplier."""
        mapping = resolve_column_mapping(org_config, DocType.PURCHASE)
        row = [date(2025, 4, 10), "cg-sup-0001", "Steel Traders", "INV-1", 500]
        txn = transform_row(row, build_header_index(PURCHASE_HEADER), mapping, DocType.PURCHASE)

        assert txn.debit == Decimal(0)
        assert txn.credit == Decimal(500)
        assert txn.party_id == "CG-SUP-0001"
        assert txn.date == date(2025, 4, 10)
        assert txn.doc_no == "INV-1"

    def test_sales_amount_is_debit(self, org_config: dict[str, Any]) -> None:
        """Sales increase the receivable from the customer."""
        header = ["INVOICE DATE", "L/F", "CUSTOMER NAME", "INVOICE NO", "GRAND TOTAL"]
        mapping = resolve_column_mapping(org_config, DocType.SALES)
        txn = transform_row(["", "CG-CUS-1", "Metro", "S-1", "500"], build_header_index(header), mapping, DocType.SALES)

        assert txn.debit == Decimal(500)
        assert txn.credit == Decimal(0)
        assert txn.date is None

    def test_bank_columns_copied(self, org_config: dict[str, Any]) -> None:
        """Bank debit and credit columns are taken as-is."""
        mapping = resolve_column_mapping(org_config, DocType.BANK)
        row = ["15-04-2025", "NEFT", "100", 0, "", "CG-SUP-0001", ""]
        txn = transform_row(row, build_header_index(BANK_HEADER), mapping, DocType.BANK)

        assert txn.debit == Decimal(100)
        assert txn.credit == Decimal(0)
        assert txn.voucher_type == "BANK"
        assert txn.particulars == "NEFT"

    def test_invoice_particulars_fallback(self, org_config: dict[str, Any]) -> None:
        """Invoices without narration describe themselves."""
        mapping = resolve_column_mapping(org_config, DocType.PURCHASE)
        row = ["", "X", "", "INV-9", 1]
        txn = transform_row(row, build_header_index(PURCHASE_HEADER), mapping, DocType.PURCHASE)

        assert txn.particulars == "Purchase Invoice: INV-9"

    def test_header_lookup_is_case_insensitive(self) -> None:
        """Configured column names match headers regardless of case."""
        mapping = resolve_column_mapping({"SAL_GRAND_TOTAL_COL": "grand total"}, DocType.SALES)
        txn = transform_row(["75"], build_header_index(["Grand Total"]), mapping, DocType.SALES)

        assert txn.debit == Decimal(75)

    def test_unmatched_column_defaults(self, org_config: dict[str, Any]) -> None:
        """Columns missing from the header degrade to defaults."""
        mapping = resolve_column_mapping(org_config, DocType.PURCHASE)
        txn = transform_row(["CG-SUP-1"], build_header_index(["L/F"]), mapping, DocType.PURCHASE)

        assert txn.party_id == "CG-SUP-1"
        assert txn.credit == Decimal(0)
        assert txn.party_name == ""

    def test_short_row_does_not_raise(self, org_config: dict[str, Any]) -> None:
        """Rows shorter than the header are read as far as they go."""
        mapping = resolve_column_mapping(org_config, DocType.BANK)
        txn = transform_row(["15-04-2025"], build_header_index(BANK_HEADER), mapping, DocType.BANK)

        assert txn.date == date(2025, 4, 15)
        assert txn.party_id == ""

    def test_bank_doc_no_falls_back_to_reference(self) -> None:
        """Bank rows use the reference as their document number."""
        config = {"BANK_REF_COL": "REFERENCE", "BANK_LF_COL": "L/F"}
        mapping = resolve_column_mapping(config, DocType.BANK)
        row = ["", "", "", "", "", "CG-CUS-1", "UTR123"]
        txn = transform_row(row, build_header_index(BANK_HEADER), mapping, DocType.BANK)

        assert txn.doc_no == "UTR123"
        assert txn.reference == "UTR123"


class TestTransformRows:
    """Tests for transform_rows."""

    def test_blank_rows_skipped(self, purchase_table: list[list[Any]], org_config: dict[str, Any]) -> None:
        """Only rows with at least one value become transactions."""
        mapping = resolve_column_mapping(org_config, DocType.PURCHASE)
        transactions = transform_rows(purchase_table, 2, mapping, DocType.PURCHASE)

        assert len(transactions) == 1
        assert transactions[0].credit == Decimal("54000.00")
        assert transactions[0].party_name == "Steel Traders"

    def test_unmatched_columns_logged(self, org_config: dict[str, Any], caplog: Any) -> None:
        """Configured columns absent from the header produce a warning."""
        mapping = resolve_column_mapping(org_config, DocType.PURCHASE)
        table = [["L/F", "GRAND TOTAL"], ["CG-SUP-1", "10"]]

        with caplog.at_level("WARNING"):
            transactions = transform_rows(table, 0, mapping, DocType.PURCHASE)

        assert len(transactions) == 1
        assert "not found in header" in caplog.text
