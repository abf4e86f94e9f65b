"""Supplier/customer ledger classification.

Purchase and sales rows are classified by their register alone. Bank rows carry
no such signal, so the party ID's category token decides, and for master
parties the direction of the money does.
"""

from __future__ import annotations

from party_ledgers.types import EXCLUDED, DocType, Excluded, LedgerCategory, StandardizedTransaction

SUPPLIER_TOKENS = ("-SUP-",)
CUSTOMER_TOKENS = ("-CUS-", "-REN-", "-DEA-")
EXCLUDED_TOKENS = ("-CON-",)
MASTER_TOKEN = "-MAS-"


def classify(party_id: str, doc_type: DocType, txn: StandardizedTransaction) -> LedgerCategory | Excluded:
    """Assign a transaction to a ledger category.

    Parameters
    ----------
    party_id
        Normalized (uppercased) party ID. Token tests are case-sensitive.
    doc_type
        Register the transaction came from.
    txn
        The transaction, whose debit/credit resolve master parties.

    Returns
    -------
    LedgerCategory | Excluded
        ``SUPPLIER``, ``CUSTOMER`` or ``EXCLUDED`` for contractor bank rows.
    """
    if doc_type is DocType.PURCHASE:
        return LedgerCategory.SUPPLIER
    if doc_type is DocType.SALES:
        return LedgerCategory.CUSTOMER

    if any(token in party_id for token in SUPPLIER_TOKENS):
        return LedgerCategory.SUPPLIER
    if any(token in party_id for token in CUSTOMER_TOKENS):
        return LedgerCategory.CUSTOMER
    if any(token in party_id for token in EXCLUDED_TOKENS):
        return EXCLUDED

    if MASTER_TOKEN in party_id:
        # Outgoing payment: supplier, incoming payment: customer
        if txn.credit > 0:
            return LedgerCategory.SUPPLIER
        if txn.debit > 0:
            return LedgerCategory.CUSTOMER

    return LedgerCategory.CUSTOMER
