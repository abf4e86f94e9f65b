"""Ledger dataclasses and type definitions.

This module contains pure data structures with no business logic dependencies,
ensuring they can be imported without circular dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum, StrEnum
from typing import Any

__all__ = [
    "EXCLUDED",
    "Company",
    "ContactRecord",
    "DocType",
    "Excluded",
    "LedgerCategory",
    "LedgerEntry",
    "LedgerResult",
    "PartyLedger",
    "RawTable",
    "RefreshResult",
    "RunStatus",
    "SourceResult",
    "StandardizedTransaction",
]

# 2D block of heterogeneous cell values (str | number | date | "")
RawTable = list[list[Any]]

ZERO = Decimal(0)


class DocType(StrEnum):
    """Kind of source register a transaction came from."""

    PURCHASE = "PURCHASE"
    SALES = "SALES"
    BANK = "BANK"


class LedgerCategory(StrEnum):
    """Binary ledger category a party's transactions are grouped under."""

    SUPPLIER = "SU"
    CUSTOMER = "CU"

    @property
    def label(self) -> str:
        """Return ``"SUPPLIER"`` or ``"CUSTOMER"``."""
        return "SUPPLIER" if self is LedgerCategory.SUPPLIER else "CUSTOMER"

    @property
    def ledger_title(self) -> str:
        """Return the statement heading, e.g. ``"SUPPLIER LEDGER"``."""
        return f"{self.label} LEDGER"


class Excluded(Enum):
    """Marker for transactions intentionally left out of ledger generation."""

    EXCLUDED = "EXCLUDED"


EXCLUDED = Excluded.EXCLUDED


class RunStatus(StrEnum):
    """Outcome of a fetch, a generation step or a whole refresh."""

    PENDING = "PENDING"
    SUCCESS = "SUCCESS"
    ERROR = "ERROR"
    SKIPPED = "SKIPPED"


@dataclass(frozen=True)
class StandardizedTransaction:
    """Canonical transaction record flowing through the pipeline.

    Debit and credit are independent: bank rows may carry both.

    Attributes
    ----------
        date: Calendar date, ``None`` when the source value could not be parsed
        party_id: Uppercased party ID, ``""`` when absent
        party_name: Party name as written in the source
        doc_type: Register the row came from
        doc_no: Invoice or reference number
        voucher_type: Voucher type, defaults to the doc type
        particulars: Narration, synthesized for invoices when blank
        debit: Debit amount
        credit: Credit amount
        reference: Reference column value
    """

    doc_type: DocType
    date: date | None = None
    party_id: str = ""
    party_name: str = ""
    doc_no: str = ""
    voucher_type: str = ""
    particulars: str = ""
    debit: Decimal = ZERO
    credit: Decimal = ZERO
    reference: str = ""

    @classmethod
    def create(
        cls,
        doc_type: DocType,
        *,
        date: date | None = None,
        party_id: str | None = None,
        party_name: str | None = None,
        doc_no: str | None = None,
        voucher_type: str | None = None,
        particulars: str | None = None,
        debit: Decimal | None = None,
        credit: Decimal | None = None,
        reference: str | None = None,
    ) -> StandardizedTransaction:
        """Build a transaction, applying every field default in one place."""
        doc_no_text = (doc_no or "").strip()
        narration = (particulars or "").strip()
        if not narration and doc_type is DocType.PURCHASE:
            narration = f"Purchase Invoice: {doc_no_text}"
        elif not narration and doc_type is DocType.SALES:
            narration = f"Sales Invoice: {doc_no_text}"

        return cls(
            doc_type=doc_type,
            date=date,
            party_id=(party_id or "").strip().upper(),
            party_name=(party_name or "").strip(),
            doc_no=doc_no_text,
            voucher_type=(voucher_type or "").strip() or doc_type.value,
            particulars=narration,
            debit=debit if debit is not None else ZERO,
            credit=credit if credit is not None else ZERO,
            reference=(reference or "").strip(),
        )


@dataclass(frozen=True)
class LedgerEntry:
    """A transaction paired with the running balance after it."""

    transaction: StandardizedTransaction
    running_balance: Decimal


@dataclass(frozen=True)
class ContactRecord:
    """Party master data from the contact directory."""

    party_id: str
    name: str = ""
    address1: str = ""
    address2: str = ""
    gst: str = ""
    phone: str = ""
    email: str = ""
    related_company: str = ""
    contact_person: str = ""
    inferred_type: str = "OTHER"


@dataclass(frozen=True)
class Company:
    """Identity of the organization issuing the ledgers."""

    id: str
    name: str
    address1: str = ""
    address2: str = ""
    gst: str = ""
    phone: str = ""
    email: str = ""


@dataclass
class PartyLedger:
    """Aggregate over one ``(party ID, ledger category)`` pair.

    Built fresh on every refresh; the rendered sheet is the only persisted form.
    """

    id: str
    category: LedgerCategory
    name: str = ""
    transactions: list[StandardizedTransaction] = field(default_factory=list)
    total_debit: Decimal = ZERO
    total_credit: Decimal = ZERO
    last_transaction: date | None = None
    address1: str = ""
    address2: str = ""
    gst: str = ""
    phone: str = ""
    email: str = ""

    @property
    def key(self) -> tuple[str, LedgerCategory]:
        """Ledger identity."""
        return (self.id, self.category)

    @property
    def type(self) -> str:
        """Informational ``SUPPLIER`` / ``CUSTOMER`` label."""
        return self.category.label

    @property
    def balance(self) -> Decimal:
        """Total debit minus total credit."""
        return self.total_debit - self.total_credit

    def add(self, txn: StandardizedTransaction) -> None:
        """Append a transaction and fold it into the totals."""
        self.transactions.append(txn)
        self.total_debit += txn.debit
        self.total_credit += txn.credit
        if not self.name and txn.party_name:
            self.name = txn.party_name
        if txn.date is not None and (self.last_transaction is None or txn.date > self.last_transaction):
            self.last_transaction = txn.date


@dataclass
class SourceResult:
    """Result of fetching one source register."""

    source: str
    status: RunStatus = RunStatus.PENDING
    rows: int = 0
    error: str | None = None
    transactions: list[StandardizedTransaction] = field(default_factory=list)


@dataclass
class LedgerResult:
    """Result of the ledger generation step."""

    status: RunStatus = RunStatus.PENDING
    count: int = 0
    error: str | None = None
    parties: list[PartyLedger] = field(default_factory=list)
    sheet_names: dict[tuple[str, LedgerCategory], str] = field(default_factory=dict)


@dataclass
class RefreshResult:
    """Status object returned to callers of a refresh run."""

    org_code: str
    sources: dict[str, SourceResult] = field(default_factory=dict)
    ledgers: LedgerResult = field(default_factory=LedgerResult)
    status: RunStatus = RunStatus.PENDING
    message: str = ""
    duration_ms: int = 0

    @property
    def succeeded(self) -> bool:
        """True when the refresh completed without a generation failure."""
        return self.status is RunStatus.SUCCESS

    def summary_lines(self) -> list[str]:
        """Human-readable per-step summary."""
        lines = [f"Org: {self.org_code or '-'}"]
        for name, result in self.sources.items():
            detail = f" ({result.error})" if result.error else ""
            lines.append(f"{name.title()}: {result.rows} rows [{result.status}]{detail}")
        ledger_detail = f" ({self.ledgers.error})" if self.ledgers.error else ""
        lines.append(f"Ledgers generated: {self.ledgers.count} [{self.ledgers.status}]{ledger_detail}")
        lines.append(f"Duration: {self.duration_ms / 1000:.1f}s")
        return lines
