"""Contact directory loader.

The directory is a single tab (``ALL CONTACTS`` by default) with one row per
party. Its values are authoritative for party names and addresses on the
rendered ledgers.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from party_ledgers.config import get_setting, source_tab_name
from party_ledgers.errors import SourceAccessError
from party_ledgers.extractor.field_mapper import build_header_index
from party_ledgers.types import ContactRecord
from party_ledgers.utils.parsing import cell_text

if TYPE_CHECKING:
    from party_ledgers.extractor.source_connector import SourceConnector

logger = logging.getLogger(__name__)

# First matching token wins
CONTACT_TYPE_TOKENS = (
    ("SUP", "SUPPLIER"),
    ("CUS", "CUSTOMER"),
    ("CON", "CONTRACTOR"),
    ("DEA", "DEALER"),
    ("REN", "RENTAL"),
    ("MAS", "MASTER"),
)

ADDRESS2_PARTS = ("ADDRESS LINE 2", "DISTRICT", "STATE", "PIN CODE")


def infer_contact_type(party_id: str) -> str:
    """Return the informational contact type for a party ID.

    Examples
    --------
    - "CG-SUP-0001" -> "SUPPLIER"
    - "CG-MAS-0003" -> "MASTER"
    - "CG-0004" -> "OTHER"
    """
    upper = party_id.upper()
    for token, contact_type in CONTACT_TYPE_TOKENS:
        if token in upper:
            return contact_type
    return "OTHER"


def _contact_from_row(row: list[Any], header_index: dict[str, int]) -> ContactRecord | None:
    def col(name: str) -> str:
        idx = header_index.get(name)
        if idx is None or idx >= len(row):
            return ""
        return cell_text(row[idx])

    party_id = col("SL").upper()
    if not party_id:
        return None

    address2 = ", ".join(part for part in (col(name) for name in ADDRESS2_PARTS) if part)

    return ContactRecord(
        party_id=party_id,
        name=col("COMPANY NAME"),
        address1=col("ADDRESS LINE 1"),
        address2=address2,
        gst=col("GST"),
        phone=col("MOBILE NO"),
        email=col("EMAIL ID"),
        related_company=col("RELATED COMPANY"),
        contact_person=col("CONTACT PERSON"),
        inferred_type=infer_contact_type(party_id),
    )


def load_contact_directory(connector: SourceConnector, directory_id: str, tab_name: str) -> dict[str, ContactRecord]:
    """Load every contact keyed by uppercased party ID.

    Parameters
    ----------
    connector
        Source connector.
    directory_id
        Contacts source ID; blank means no directory.
    tab_name
        Tab holding the contacts, header in the first row.

    Returns
    -------
    dict[str, ContactRecord]
        Contacts by party ID. Later duplicates replace earlier rows.

    Raises
    ------
    SourceAccessError
        If the directory is configured but its tab does not exist.
    """
    if not directory_id:
        return {}

    table = connector.open(directory_id, tab_name)
    if table is None:
        msg = f'Contacts tab "{tab_name}" not found'
        raise SourceAccessError(msg)

    if len(table) < 2:
        return {}

    header_index = build_header_index(table[0])
    contacts: dict[str, ContactRecord] = {}
    for row in table[1:]:
        record = _contact_from_row(row, header_index)
        if record is not None:
            contacts[record.party_id] = record

    logger.info("Loaded %d contacts from '%s'", len(contacts), tab_name)
    return contacts


def load_configured_contacts(config: dict[str, Any], connector: SourceConnector) -> dict[str, ContactRecord]:
    """Load the directory named by ``CONTACTS_SHEET_ID`` / ``CONTACTS_SHEET_NAME``."""
    return load_contact_directory(
        connector,
        get_setting(config, "CONTACTS_SHEET_ID"),
        source_tab_name(config, "CONTACTS"),
    )
