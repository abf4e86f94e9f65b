"""Append-only ``RUN_LOG`` tab recording every fetch and generation step."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING

from party_ledgers.writer.sink import CellRange

if TYPE_CHECKING:
    from party_ledgers.writer.sink import TabularSink

logger = logging.getLogger(__name__)

RUN_LOG_SHEET_NAME = "RUN_LOG"
RUN_LOG_HEADERS = [
    "TIMESTAMP",
    "SOURCE",
    "ACTION",
    "ROWS_FETCHED",
    "ROWS_WRITTEN",
    "STATUS",
    "DURATION_MS",
    "ERROR_MESSAGE",
]
RUN_LOG_COLUMN_WIDTHS = {1: 20, 2: 12, 3: 14, 4: 14, 5: 14, 6: 10, 7: 13, 8: 60}


def ensure_run_log_sheet(sink: TabularSink) -> None:
    """Create the ``RUN_LOG`` tab with its header unless it already exists."""
    if sink.has_sheet(RUN_LOG_SHEET_NAME):
        return
    sink.replace_sheet(RUN_LOG_SHEET_NAME)
    sink.write_values(RUN_LOG_SHEET_NAME, 1, 1, [RUN_LOG_HEADERS])
    sink.style_range(RUN_LOG_SHEET_NAME, CellRange(1, 1, cols=len(RUN_LOG_HEADERS)), bold=True)
    sink.set_column_widths(RUN_LOG_SHEET_NAME, RUN_LOG_COLUMN_WIDTHS)


class RunLog:
    """Writes one row per pipeline step to the ledger workbook.

    Logging is best-effort: a failed write is reported through :mod:`logging`
    and never fails the refresh.
    """

    def __init__(self, sink: TabularSink) -> None:
        self.sink = sink

    def record(
        self,
        source: str,
        action: str,
        status: str,
        *,
        rows_fetched: int = 0,
        rows_written: int = 0,
        duration_ms: int = 0,
        error: str | None = None,
    ) -> None:
        """Append one entry to the ``RUN_LOG`` tab."""
        row = [
            datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
            source,
            action,
            rows_fetched,
            rows_written,
            str(status),
            duration_ms,
            error or "",
        ]
        try:
            ensure_run_log_sheet(self.sink)
            self.sink.append_row(RUN_LOG_SHEET_NAME, row)
        except Exception:
            logger.exception("Failed to write RUN_LOG entry for %s %s", source, action)
