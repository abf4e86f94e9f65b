"""Tests for supplier/customer ledger classification."""

import pytest

from party_ledgers.transformer.classifier import classify
from party_ledgers.types import EXCLUDED, DocType, LedgerCategory
from tests.conftest import make_txn


class TestClassifyByRegister:
    """Purchase and sales rows are classified by their register alone."""

    @pytest.mark.parametrize("party_id", ["CG-CUS-0001", "CG-CON-0001", "ANYTHING", ""])
    def test_purchase_always_supplier(self, party_id: str) -> None:
        """PURCHASE is SU unconditionally."""
        txn = make_txn(DocType.PURCHASE, party_id, credit=10)
        assert classify(party_id, DocType.PURCHASE, txn) is LedgerCategory.SUPPLIER

    @pytest.mark.parametrize("party_id", ["CG-SUP-0001", "CG-CON-0001"])
    def test_sales_always_customer(self, party_id: str) -> None:
        """SALES is CU unconditionally."""
        txn = make_txn(DocType.SALES, party_id, debit=10)
        assert classify(party_id, DocType.SALES, txn) is LedgerCategory.CUSTOMER


class TestClassifyBank:
    """Bank rows are classified by party ID token and money direction."""

    def test_supplier_token(self) -> None:
        """-SUP- routes to the supplier ledger."""
        txn = make_txn(credit=100)
        assert classify("CG-SUP-0001", DocType.BANK, txn) is LedgerCategory.SUPPLIER

    @pytest.mark.parametrize("party_id", ["CG-CUS-0001", "CG-REN-0001", "CG-DEA-0001"])
    def test_customer_tokens(self, party_id: str) -> None:
        """Customer, rental and dealer parties route to the customer ledger."""
        txn = make_txn(party_id=party_id, credit=100)
        assert classify(party_id, DocType.BANK, txn) is LedgerCategory.CUSTOMER

    def test_contractor_excluded(self) -> None:
        """Contractor bank rows are dropped from ledger generation."""
        txn = make_txn(party_id="CG-CON-0001", debit=100)
        assert classify("CG-CON-0001", DocType.BANK, txn) is EXCLUDED

    def test_master_outgoing_is_supplier(self) -> None:
        """A credit on a master party implies a supplier."""
        txn = make_txn(party_id="CG-MAS-0001", credit=50)
        assert classify("CG-MAS-0001", DocType.BANK, txn) is LedgerCategory.SUPPLIER

    def test_master_incoming_is_customer(self) -> None:
        """A debit on a master party implies a customer."""
        txn = make_txn(party_id="CG-MAS-0001", debit=50)
        assert classify("CG-MAS-0001", DocType.BANK, txn) is LedgerCategory.CUSTOMER

    def test_master_without_amounts_defaults_to_customer(self) -> None:
        """An unresolved master party falls through to the default."""
        txn = make_txn(party_id="CG-MAS-0001")
        assert classify("CG-MAS-0001", DocType.BANK, txn) is LedgerCategory.CUSTOMER

    def test_unknown_prefix_defaults_to_customer(self) -> None:
        """Bank rows without a category token are customers."""
        txn = make_txn(party_id="CG-0001", credit=10)
        assert classify("CG-0001", DocType.BANK, txn) is LedgerCategory.CUSTOMER

    def test_tokens_are_case_sensitive(self) -> None:
        """Lowercase tokens are not recognised."""
        txn = make_txn(party_id="cg-con-0001", debit=10)
        assert classify("cg-con-0001", DocType.BANK, txn) is LedgerCategory.CUSTOMER
