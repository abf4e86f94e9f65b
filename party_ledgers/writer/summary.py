"""Tabular summary of a refresh for export and review.

Mirrors the ``Ledger Master`` rows as a :class:`pandas.DataFrame` so a run can
be exported to CSV (``--summary-csv``) or inspected programmatically.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import pandas as pd

from party_ledgers.config import OUTPUT_DIR

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

    from party_ledgers.types import LedgerCategory, PartyLedger

logger = logging.getLogger(__name__)

SUMMARY_COLUMNS = [
    "party_id",
    "party_name",
    "category",
    "sheet_name",
    "transactions",
    "total_debit",
    "total_credit",
    "balance",
    "last_transaction",
]


def ledger_summary_frame(
    ledgers: Iterable[PartyLedger],
    sheet_names: dict[tuple[str, LedgerCategory], str] | None = None,
) -> pd.DataFrame:
    """Build one summary row per ledger, in index order (category, then name).

    Parameters
    ----------
    ledgers
        Aggregated ledgers.
    sheet_names
        Sheet name per ledger key; missing keys yield an empty sheet name.

    Returns
    -------
    pd.DataFrame
        Frame with :data:`SUMMARY_COLUMNS`; amounts as floats.
    """
    sheet_names = sheet_names or {}
    ordered = sorted(ledgers, key=lambda party: (party.category.value, party.name))
    records = [
        {
            "party_id": party.id,
            "party_name": party.name,
            "category": party.category.value,
            "sheet_name": sheet_names.get(party.key, ""),
            "transactions": len(party.transactions),
            "total_debit": float(party.total_debit),
            "total_credit": float(party.total_credit),
            "balance": float(party.balance),
            "last_transaction": party.last_transaction,
        }
        for party in ordered
    ]
    return pd.DataFrame(records, columns=SUMMARY_COLUMNS)


def write_summary_csv(data: pd.DataFrame, filepath: Path | None = None, org_code: str = "") -> Path:
    """Write a summary frame to CSV.

    Parameters
    ----------
    data
        Frame from :func:`ledger_summary_frame`.
    filepath
        Destination; defaults to ``OUTPUT_DIR/<org>_ledger_summary.csv``.
    org_code
        Organization code used in the default file name.

    Returns
    -------
    Path
        Location of the written CSV file.
    """
    if filepath is None:
        prefix = f"{org_code.lower()}_" if org_code else ""
        filepath = OUTPUT_DIR / f"{prefix}ledger_summary.csv"
    filepath.parent.mkdir(parents=True, exist_ok=True)

    data.to_csv(filepath, index=False, encoding="utf-8")

    logger.info("Saved ledger summary CSV: %s", filepath)
    return filepath
