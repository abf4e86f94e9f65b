"""Exception taxonomy for the refresh pipeline.

Fetch-level errors (:class:`SourceAccessError`, :class:`HeaderDetectionError`)
are caught per source and turned into a status; generation-level errors
(:class:`RenderError` and anything raised while aggregating) propagate to the
top-level refresh, which records a failure status instead of crashing.
"""

from __future__ import annotations

__all__ = [
    "ConfigurationError",
    "HeaderDetectionError",
    "LedgerError",
    "RenderError",
    "SourceAccessError",
]


class LedgerError(Exception):
    """Base class for all party-ledgers errors."""


class ConfigurationError(LedgerError):
    """A required configuration value is missing or malformed."""


class SourceAccessError(LedgerError):
    """A source workbook or tab could not be opened."""


class HeaderDetectionError(LedgerError):
    """No qualifying header row was found in the scanned window."""

    def __init__(self, source_kind: str, rows_scanned: int) -> None:
        self.source_kind = source_kind
        self.rows_scanned = rows_scanned
        msg = f'Could not detect header row for {source_kind} in first {rows_scanned} rows. Looking for "L/F" column.'
        super().__init__(msg)


class RenderError(LedgerError):
    """Writing a party ledger or the index sheet failed."""

    def __init__(self, sheet_name: str, reason: str) -> None:
        self.sheet_name = sheet_name
        self.reason = reason
        super().__init__(f"Failed to render ledger '{sheet_name}': {reason}")
