"""Shared utility functions for party_ledgers package."""

from party_ledgers.utils.parsing import (
    cell_text,
    is_blank_row,
    normalize_header_cell,
    parse_amount,
    parse_calendar_date,
)

__all__ = [
    "cell_text",
    "is_blank_row",
    "normalize_header_cell",
    "parse_amount",
    "parse_calendar_date",
]
