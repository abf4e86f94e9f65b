"""Grouping of transactions into per-party ledgers.

Functions
---------
aggregate_parties
    Classify, group and enrich transactions into :class:`PartyLedger` records.
build_company
    Resolve the issuing organization's identity block.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import TYPE_CHECKING, Any

from party_ledgers.config import COMPANY_CONFIG_KEYS, get_setting
from party_ledgers.transformer.classifier import classify
from party_ledgers.types import EXCLUDED, Company, ContactRecord, LedgerCategory, PartyLedger

if TYPE_CHECKING:
    from collections.abc import Iterable

    from party_ledgers.types import StandardizedTransaction

logger = logging.getLogger(__name__)

# Missing dates sort before every real date
EPOCH = date(1970, 1, 1)

ENRICHED_FIELDS = ("name", "address1", "address2", "gst", "phone", "email")


def _date_sort_key(txn: StandardizedTransaction) -> date:
    return txn.date if txn.date is not None else EPOCH


def enrich_from_contact(party: PartyLedger, contact: ContactRecord) -> None:
    """Overwrite party identity fields with the non-empty directory values."""
    for attr in ENRICHED_FIELDS:
        value = getattr(contact, attr)
        if value:
            setattr(party, attr, value)


def aggregate_parties(
    transactions: Iterable[StandardizedTransaction],
    contacts: dict[str, ContactRecord] | None = None,
) -> list[PartyLedger]:
    """Group transactions by ``(party ID, ledger category)``.

    Parameters
    ----------
    transactions
        Standardized transactions from every source, in source order.
    contacts
        Directory snapshot keyed by party ID.

    Returns
    -------
    list[PartyLedger]
        Ledgers in first-seen key order, each with its transactions stably
        sorted by date and its identity enriched from the directory.
    """
    contacts = contacts or {}
    ledgers: dict[tuple[str, LedgerCategory], PartyLedger] = {}
    excluded = 0

    for txn in transactions:
        party_id = txn.party_id.strip().upper()
        if not party_id:
            continue

        category = classify(party_id, txn.doc_type, txn)
        if category is EXCLUDED:
            excluded += 1
            continue

        key = (party_id, category)
        party = ledgers.get(key)
        if party is None:
            party = PartyLedger(id=party_id, category=category)
            ledgers[key] = party
        party.add(txn)

    for party in ledgers.values():
        contact = contacts.get(party.id)
        if contact is not None:
            enrich_from_contact(party, contact)
        party.transactions.sort(key=_date_sort_key)

    if excluded:
        logger.info("Excluded %d contractor bank transactions", excluded)
    logger.info("Aggregated %d party ledgers", len(ledgers))
    return list(ledgers.values())


def build_company(config: dict[str, Any], contacts: dict[str, ContactRecord] | None = None) -> Company:
    """Resolve the organization identity shown at the top of every ledger.

    ``ORG_CODE``/``ORG_NAME`` and the optional ``ORG_*`` keys come first; a
    directory record keyed by ``ORG_CODE`` overrides them where non-empty.
    """
    org_code = get_setting(config, "ORG_CODE").upper()
    fields = {attr: get_setting(config, key) for attr, key in COMPANY_CONFIG_KEYS.items()}
    fields["name"] = get_setting(config, "ORG_NAME", org_code)

    contact = (contacts or {}).get(org_code)
    if contact is not None:
        for attr in ENRICHED_FIELDS:
            value = getattr(contact, attr)
            if value:
                fields[attr] = value

    return Company(id=org_code, **fields)
