"""Tests for per-party aggregation and company resolution."""

from datetime import date
from decimal import Decimal
from typing import Any

from party_ledgers.transformer.aggregator import aggregate_parties, build_company
from party_ledgers.types import ContactRecord, DocType, LedgerCategory
from tests.conftest import make_txn


class TestAggregateParties:
    """Tests for aggregate_parties."""

    def test_purchase_and_bank_merge_into_supplier_ledger(self) -> None:
        """A purchase and a payment to the same supplier share one ledger."""
        transactions = [
            make_txn(DocType.PURCHASE, "CG-SUP-0001", credit=54000, txn_date=date(2025, 4, 10)),
            make_txn(DocType.BANK, "CG-SUP-0001", debit=50000, txn_date=date(2025, 4, 15)),
        ]
        ledgers = aggregate_parties(transactions)

        assert len(ledgers) == 1
        party = ledgers[0]
        assert party.key == ("CG-SUP-0001", LedgerCategory.SUPPLIER)
        assert party.total_credit == Decimal(54000)
        assert party.total_debit == Decimal(50000)
        assert party.balance == Decimal(-4000)
        assert party.type == "SUPPLIER"

    def test_same_id_in_both_categories(self) -> None:
        """One party ID can own a supplier and a customer ledger."""
        transactions = [
            make_txn(DocType.PURCHASE, "CG-MAS-0001", credit=10),
            make_txn(DocType.SALES, "CG-MAS-0001", debit=20),
        ]
        ledgers = aggregate_parties(transactions)

        assert [party.category for party in ledgers] == [LedgerCategory.SUPPLIER, LedgerCategory.CUSTOMER]

    def test_excluded_and_empty_ids_skipped(self) -> None:
        """Contractor bank rows and rows without a party ID are dropped."""
        transactions = [
            make_txn(DocType.BANK, "CG-CON-0001", debit=10),
            make_txn(DocType.BANK, "", debit=10),
            make_txn(DocType.BANK, "CG-CUS-0001", debit=10),
        ]
        ledgers = aggregate_parties(transactions)

        assert [party.id for party in ledgers] == ["CG-CUS-0001"]

    def test_first_seen_order(self) -> None:
        """Ledgers come out in the order their keys first appear."""
        transactions = [
            make_txn(DocType.SALES, "B"),
            make_txn(DocType.PURCHASE, "A"),
            make_txn(DocType.SALES, "B"),
            make_txn(DocType.SALES, "C"),
        ]
        assert [party.id for party in aggregate_parties(transactions)] == ["B", "A", "C"]

    def test_stable_date_sort_with_missing_dates_first(self) -> None:
        """Missing dates sort first; equal dates keep insertion order."""
        transactions = [
            make_txn(DocType.SALES, "P", doc_no="late", txn_date=date(2025, 6, 1)),
            make_txn(DocType.SALES, "P", doc_no="tie-1", txn_date=date(2025, 5, 1)),
            make_txn(DocType.SALES, "P", doc_no="undated"),
            make_txn(DocType.SALES, "P", doc_no="tie-2", txn_date=date(2025, 5, 1)),
        ]
        party = aggregate_parties(transactions)[0]

        assert [txn.doc_no for txn in party.transactions] == ["undated", "tie-1", "tie-2", "late"]

    def test_last_transaction_is_running_max(self) -> None:
        """The latest date wins and a missing date never clears it."""
        transactions = [
            make_txn(DocType.SALES, "P", txn_date=date(2025, 6, 1)),
            make_txn(DocType.SALES, "P", txn_date=date(2025, 5, 1)),
            make_txn(DocType.SALES, "P"),
        ]
        assert aggregate_parties(transactions)[0].last_transaction == date(2025, 6, 1)

    def test_name_from_first_transaction_with_a_name(self) -> None:
        """Without a directory entry, the first non-empty source name is used."""
        transactions = [
            make_txn(DocType.SALES, "P"),
            make_txn(DocType.SALES, "P", party_name="Metro Builders"),
            make_txn(DocType.SALES, "P", party_name="Metro Bldrs"),
        ]
        assert aggregate_parties(transactions)[0].name == "Metro Builders"

    def test_directory_overrides_non_empty_values(self) -> None:
        """Directory values win; empty directory values keep the source value."""
        contacts = {
            "CG-SUP-0001": ContactRecord(party_id="CG-SUP-0001", name="Steel Traders Pvt Ltd", gst="22AAA", phone=""),
        }
        transactions = [make_txn(DocType.PURCHASE, "cg-sup-0001", party_name="Steel Traders", credit=1)]
        party = aggregate_parties(transactions, contacts)[0]

        assert party.name == "Steel Traders Pvt Ltd"
        assert party.gst == "22AAA"
        assert party.phone == ""

    def test_aggregation_is_idempotent(self) -> None:
        """Two runs over the same input produce identical ledgers."""
        transactions = [
            make_txn(DocType.PURCHASE, "CG-SUP-0001", credit=54000, txn_date=date(2025, 4, 10)),
            make_txn(DocType.BANK, "CG-MAS-0002", credit=5),
            make_txn(DocType.BANK, "CG-SUP-0001", debit=50000),
        ]
        assert aggregate_parties(transactions) == aggregate_parties(transactions)


class TestBuildCompany:
    """Tests for build_company."""

    def test_from_config(self, org_config: dict[str, Any]) -> None:
        """Identity comes from ORG_* keys."""
        company = build_company(org_config)

        assert company.id == "CG"
        assert company.name == "Central Granites"
        assert company.address1 == "1 Quarry Road"
        assert company.gst == "22BBBBB1111B1Z5"
        assert company.email == ""

    def test_name_defaults_to_code(self) -> None:
        """Without ORG_NAME the code is shown."""
        assert build_company({"ORG_CODE": "cg"}).name == "CG"

    def test_directory_record_overrides(self, org_config: dict[str, Any]) -> None:
        """A directory record keyed by ORG_CODE overrides non-empty fields."""
        contacts = {"CG": ContactRecord(party_id="CG", name="Central Granites Ltd", phone="0771-400000")}
        company = build_company(org_config, contacts)

        assert company.name == "Central Granites Ltd"
        assert company.phone == "0771-400000"
        assert company.address1 == "1 Quarry Road"
