"""Configuration-driven extraction of standardized transactions.

Each source kind has a mapping table from semantic field to the configuration
keys naming its column. The table is resolved once per fetch against the org
configuration, then every data row is looked up by header name.

Amount routing
--------------
* PURCHASE: the amount column is a credit (payable to the supplier).
* SALES: the amount column is a debit (receivable from the customer).
* BANK: separate debit and credit columns are copied as-is.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from enum import StrEnum
from typing import Any

from party_ledgers.config import get_setting
from party_ledgers.types import DocType, StandardizedTransaction
from party_ledgers.utils.parsing import (
    cell_text,
    is_blank_row,
    normalize_header_cell,
    parse_amount,
    parse_calendar_date,
)

logger = logging.getLogger(__name__)


class SemanticField(StrEnum):
    """Transaction fields a source column can be mapped to."""

    DATE = "date"
    PARTY_ID = "party_id"
    PARTY_NAME = "party_name"
    DOC_NO = "doc_no"
    AMOUNT = "amount"
    DEBIT = "debit"
    CREDIT = "credit"
    PARTICULARS = "particulars"
    REMARKS = "remarks"
    VOUCHER_TYPE = "voucher_type"
    REFERENCE = "reference"


# Config keys naming each field's column, in fallback order
COLUMN_CONFIG_KEYS: dict[DocType, dict[SemanticField, tuple[str, ...]]] = {
    DocType.PURCHASE: {
        SemanticField.DATE: ("PUR_INVOICE_DATE_COL", "PUR_INWARD_DATE_COL", "PUR_DATE_COL"),
        SemanticField.PARTY_ID: ("PUR_LF_COL", "PUR_PARTY_ID_COL"),
        SemanticField.PARTY_NAME: ("PUR_SUPPLIER_NAME_COL", "PUR_PARTY_NAME_COL"),
        SemanticField.DOC_NO: ("PUR_INVOICE_NO_COL", "PUR_INVOICE_COL"),
        SemanticField.AMOUNT: ("PUR_GRAND_TOTAL_COL", "PUR_AMOUNT_COL"),
        SemanticField.PARTICULARS: ("PUR_ACCOUNT_COL",),
        SemanticField.REMARKS: ("PUR_REMARKS_COL",),
    },
    DocType.SALES: {
        SemanticField.DATE: ("SAL_INVOICE_DATE_COL", "SAL_DATE_COL"),
        SemanticField.PARTY_ID: ("SAL_LF_COL", "SAL_PARTY_ID_COL"),
        SemanticField.PARTY_NAME: ("SAL_CUSTOMER_NAME_COL", "SAL_PARTY_NAME_COL"),
        SemanticField.DOC_NO: ("SAL_INVOICE_NO_COL", "SAL_INVOICE_COL"),
        SemanticField.AMOUNT: ("SAL_GRAND_TOTAL_COL", "SAL_AMOUNT_COL"),
        SemanticField.PARTICULARS: ("SAL_TYPE_COL",),
        SemanticField.REMARKS: ("SAL_REMARKS_COL",),
    },
    DocType.BANK: {
        SemanticField.DATE: ("BANK_DATE_COL",),
        SemanticField.PARTY_ID: ("BANK_LF_COL", "BANK_PARTY_ID_COL"),
        SemanticField.PARTY_NAME: ("BANK_PARTY_NAME_COL",),
        SemanticField.DEBIT: ("BANK_DEBIT_COL",),
        SemanticField.CREDIT: ("BANK_CREDIT_COL",),
        SemanticField.PARTICULARS: ("BANK_PARTICULARS_COL",),
        SemanticField.VOUCHER_TYPE: ("BANK_VOUCHER_TYPE_COL", "BANK_VOUCHER_COL"),
        SemanticField.REFERENCE: ("BANK_REFERENCE_COL", "BANK_REF_COL"),
        SemanticField.REMARKS: ("BANK_REMARKS_COL",),
    },
}

ColumnMapping = dict[SemanticField, str | None]


def resolve_column_mapping(config: dict[str, Any], kind: DocType) -> ColumnMapping:
    """Resolve the semantic-field to column-name mapping for a source kind.

    Parameters
    ----------
    config
        Organization key-value configuration.
    kind
        Source kind.

    Returns
    -------
    ColumnMapping
        Column name per field, ``None`` where no config key is set.
    """
    mapping: ColumnMapping = {}
    for semantic_field, keys in COLUMN_CONFIG_KEYS[kind].items():
        mapping[semantic_field] = next((get_setting(config, key) for key in keys if get_setting(config, key)), None)
    return mapping


def build_header_index(headers: list[Any]) -> dict[str, int]:
    """Map uppercased header names to their first column index."""
    index: dict[str, int] = {}
    for col_idx, header in enumerate(headers):
        name = normalize_header_cell(header)
        if name and name not in index:
            index[name] = col_idx
    return index


def _lookup(row: list[Any], header_index: dict[str, int], column_name: str | None) -> Any:
    """Return the cell under ``column_name`` or ``None`` when unmapped or absent."""
    if not column_name:
        return None
    col_idx = header_index.get(column_name.strip().upper())
    if col_idx is None or col_idx >= len(row):
        return None
    return row[col_idx]


def transform_row(
    row: list[Any],
    header_index: dict[str, int],
    mapping: ColumnMapping,
    kind: DocType,
) -> StandardizedTransaction:
    """Extract a standardized transaction from one data row.

    Fields that are unmapped, missing from the header or unparseable fall back
    to their defaults; a malformed row never raises.

    Parameters
    ----------
    row
        Raw data row.
    header_index
        Result of :func:`build_header_index` for the detected header row.
    mapping
        Result of :func:`resolve_column_mapping`.
    kind
        Source kind, which drives amount routing.

    Returns
    -------
    StandardizedTransaction
        The standardized record.
    """

    def text(semantic_field: SemanticField) -> str:
        return cell_text(_lookup(row, header_index, mapping.get(semantic_field)))

    def amount(semantic_field: SemanticField) -> Decimal:
        return parse_amount(_lookup(row, header_index, mapping.get(semantic_field)))

    debit = credit = None
    if kind is DocType.PURCHASE:
        credit = amount(SemanticField.AMOUNT)
    elif kind is DocType.SALES:
        debit = amount(SemanticField.AMOUNT)
    else:
        debit = amount(SemanticField.DEBIT)
        credit = amount(SemanticField.CREDIT)

    return StandardizedTransaction.create(
        kind,
        date=parse_calendar_date(_lookup(row, header_index, mapping.get(SemanticField.DATE))),
        party_id=text(SemanticField.PARTY_ID),
        party_name=text(SemanticField.PARTY_NAME),
        doc_no=text(SemanticField.DOC_NO) or text(SemanticField.REFERENCE),
        voucher_type=text(SemanticField.VOUCHER_TYPE),
        particulars=text(SemanticField.PARTICULARS) or text(SemanticField.REMARKS),
        debit=debit,
        credit=credit,
        reference=text(SemanticField.REFERENCE),
    )


def transform_rows(
    table: list[list[Any]],
    header_row: int,
    mapping: ColumnMapping,
    kind: DocType,
) -> list[StandardizedTransaction]:
    """Transform every non-empty row below the header.

    Parameters
    ----------
    table
        Raw source table.
    header_row
        0-based index of the detected header row.
    mapping
        Resolved column mapping.
    kind
        Source kind.

    Returns
    -------
    list[StandardizedTransaction]
        One record per data row that has at least one non-empty cell.
    """
    header_index = build_header_index(table[header_row])

    unmatched = [
        f"{semantic_field}={column}"
        for semantic_field, column in mapping.items()
        if column and column.strip().upper() not in header_index
    ]
    if unmatched:
        logger.warning("%s columns not found in header: %s", kind, ", ".join(unmatched))

    transactions = [
        transform_row(row, header_index, mapping, kind) for row in table[header_row + 1 :] if not is_blank_row(row)
    ]
    logger.debug("Transformed %d %s rows", len(transactions), kind)
    return transactions
