"""Tests for the contact directory loader."""

from typing import Any

import pytest

from party_ledgers.errors import SourceAccessError
from party_ledgers.extractor.contacts import infer_contact_type, load_configured_contacts, load_contact_directory
from tests.conftest import FakeConnector


class TestInferContactType:
    """Tests for infer_contact_type."""

    @pytest.mark.parametrize(
        ("party_id", "expected"),
        [
            ("CG-SUP-0001", "SUPPLIER"),
            ("cg-cus-0002", "CUSTOMER"),
            ("CG-CON-0003", "CONTRACTOR"),
            ("CG-DEA-0004", "DEALER"),
            ("CG-REN-0005", "RENTAL"),
            ("CG-MAS-0006", "MASTER"),
            ("CG-0007", "OTHER"),
        ],
    )
    def test_tokens(self, party_id: str, expected: str) -> None:
        """The first matching token names the type."""
        assert infer_contact_type(party_id) == expected


class TestLoadContactDirectory:
    """Tests for load_contact_directory."""

    def test_loads_records_by_id(self, connector: FakeConnector) -> None:
        """Rows are keyed by uppercased SL; rows without an SL are skipped."""
        contacts = load_contact_directory(connector, "contacts.xlsx", "ALL CONTACTS")

        assert list(contacts) == ["CG-SUP-0001"]
        record = contacts["CG-SUP-0001"]
        assert record.name == "Steel Traders Pvt Ltd"
        assert record.address1 == "12 Industrial Estate"
        assert record.address2 == "Phase II, Raipur, Chhattisgarh, 492001"
        assert record.phone == "9876543210"
        assert record.email == "accounts@steel.example"
        assert record.contact_person == "R. Sharma"
        assert record.inferred_type == "SUPPLIER"

    def test_blank_directory_id(self, connector: FakeConnector) -> None:
        """No directory configured means no contacts."""
        assert load_contact_directory(connector, "", "ALL CONTACTS") == {}

    def test_missing_tab(self, connector: FakeConnector) -> None:
        """A configured directory without its tab is an access error."""
        with pytest.raises(SourceAccessError, match='Contacts tab "Parties" not found'):
            load_contact_directory(connector, "contacts.xlsx", "Parties")

    def test_header_only(self) -> None:
        """A tab with only a header yields no contacts."""
        connector = FakeConnector({"c.xlsx": {"ALL CONTACTS": [["SL", "COMPANY NAME"]]}})
        assert load_contact_directory(connector, "c.xlsx", "ALL CONTACTS") == {}

    def test_later_duplicates_win(self) -> None:
        """The last row for an ID replaces earlier ones."""
        table = [["SL", "COMPANY NAME"], ["x-1", "First"], ["X-1", "Second"]]
        connector = FakeConnector({"c.xlsx": {"ALL CONTACTS": table}})

        assert load_contact_directory(connector, "c.xlsx", "ALL CONTACTS")["X-1"].name == "Second"

    def test_configured_directory(self, connector: FakeConnector, org_config: dict[str, Any]) -> None:
        """CONTACTS_SHEET_ID and the default tab name drive the load."""
        assert load_configured_contacts(org_config, connector) == {}

        org_config["CONTACTS_SHEET_ID"] = "contacts.xlsx"
        assert "CG-SUP-0001" in load_configured_contacts(org_config, connector)
