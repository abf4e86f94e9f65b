"""Source registers: connector port, workbook adapter and per-source fetchers.

Classes
-------
SourceConnector
    Protocol for anything that can open a named tab of a source as raw rows.
WorkbookSourceConnector
    Reads ``.xlsx`` workbooks with openpyxl and ``.csv`` files with pandas.

Functions
---------
fetch_source
    Fetch, detect the header and transform one source kind into transactions,
    converting every fetch-level failure into a :class:`SourceResult` status.
check_sources
    Connection test for every configured source.

Notes
-----
A failure in one source never blocks the others: :func:`fetch_source` is the
per-source error boundary.
"""

from __future__ import annotations

import csv
import logging
import zipfile
from pathlib import Path
from typing import Any, Protocol

import openpyxl
import pandas as pd

from party_ledgers.config import DATA_DIR, get_setting, source_tab_name
from party_ledgers.errors import HeaderDetectionError, LedgerError, SourceAccessError
from party_ledgers.extractor.field_mapper import resolve_column_mapping, transform_rows
from party_ledgers.extractor.header_detector import (
    MAX_HEADER_SCAN_ROWS,
    detect_header_row,
    matches_bank_schema,
)
from party_ledgers.types import DocType, RawTable, RunStatus, SourceResult, StandardizedTransaction

logger = logging.getLogger(__name__)

# BANK_SHEET_NAME value that selects every tab matching the bank schema
ALL_TABS = "*"

CSV_SUFFIXES = {".csv", ".txt"}


class SourceConnector(Protocol):
    """Opens named external tabular resources."""

    def open(self, source_id: str, tab_name: str) -> RawTable | None:
        """Return the tab's rows, or ``None`` when the tab does not exist."""
        ...

    def list_tabs(self, source_id: str) -> list[str]:
        """Return the tab names of a source."""
        ...


class WorkbookSourceConnector:
    """Source connector over local workbook and CSV files.

    Source IDs are file paths; relative IDs resolve against ``base_dir``.
    Empty cells read back as ``""``.
    """

    def __init__(self, base_dir: Path | None = None) -> None:
        self.base_dir = base_dir if base_dir is not None else DATA_DIR / "raw"

    def resolve(self, source_id: str) -> Path:
        """Return the file path for a source ID.

        Raises
        ------
        SourceAccessError
            If the file does not exist.
        """
        path = Path(source_id).expanduser()
        if not path.is_absolute():
            path = self.base_dir / path
        if not path.exists():
            msg = f"Source not found: {path}"
            raise SourceAccessError(msg)
        return path

    def open(self, source_id: str, tab_name: str) -> RawTable | None:
        """Read every row of a tab (or of a CSV file, ignoring ``tab_name``)."""
        path = self.resolve(source_id)

        if path.suffix.lower() in CSV_SUFFIXES:
            return _read_csv_rows(path)

        wb = _load_workbook(path, data_only=True)
        try:
            if tab_name not in wb.sheetnames:
                return None
            ws = wb[tab_name]
            return [["" if cell is None else cell for cell in row] for row in ws.iter_rows(values_only=True)]
        finally:
            wb.close()

    def list_tabs(self, source_id: str) -> list[str]:
        """Return the sheet names of a workbook (a CSV file has one unnamed tab)."""
        path = self.resolve(source_id)
        if path.suffix.lower() in CSV_SUFFIXES:
            return [path.stem]

        wb = _load_workbook(path)
        try:
            return list(wb.sheetnames)
        finally:
            wb.close()


def _load_workbook(path: Path, *, data_only: bool = False) -> openpyxl.Workbook:
    """Open a source workbook read-only, reporting unreadable files as access errors."""
    try:
        return openpyxl.load_workbook(path, read_only=True, data_only=data_only)
    except (OSError, ValueError, KeyError, zipfile.BadZipFile) as e:
        msg = f"Could not open source workbook {path}: {e}"
        raise SourceAccessError(msg) from e


def _read_csv_rows(path: Path) -> RawTable:
    """Read a CSV file as text rows padded to its widest line.

    Title lines above the header usually have fewer fields than the data rows,
    so the column count comes from a first pass over the whole file.
    """
    try:
        with path.open(encoding="utf-8-sig", newline="") as f:
            width = max((len(row) for row in csv.reader(f)), default=0)
        if width == 0:
            return []
        df = pd.read_csv(
            path,
            header=None,
            names=range(width),
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=False,
            encoding="utf-8-sig",
        )
    except (OSError, UnicodeDecodeError, csv.Error, pd.errors.ParserError) as e:
        msg = f"Could not read source CSV {path}: {e}"
        raise SourceAccessError(msg) from e

    return df.fillna("").values.tolist()


# =============================================================================
# Fetching
# =============================================================================


def _transform_table(config: dict[str, Any], table: RawTable, kind: DocType) -> list[StandardizedTransaction]:
    """Detect the header of a raw table and transform the rows below it."""
    header_row = detect_header_row(table, kind)
    if header_row is None:
        raise HeaderDetectionError(kind.value, min(len(table), MAX_HEADER_SCAN_ROWS))

    mapping = resolve_column_mapping(config, kind)
    return transform_rows(table, header_row, mapping, kind)


def _fetch_single_tab(
    config: dict[str, Any],
    connector: SourceConnector,
    kind: DocType,
    sheet_id: str,
) -> list[StandardizedTransaction]:
    tab_name = source_tab_name(config, kind.value)
    table = connector.open(sheet_id, tab_name)
    if table is None:
        msg = f'Tab "{tab_name}" not found in source sheet'
        raise SourceAccessError(msg)

    if len(table) < 2:
        logger.info("%s tab '%s' has no data rows", kind, tab_name)
        return []

    return _transform_table(config, table, kind)


def fetch_bank_all_tabs(
    config: dict[str, Any],
    connector: SourceConnector,
    sheet_id: str,
) -> list[StandardizedTransaction]:
    """Read every tab of a bank workbook whose header matches the bank schema.

    Tabs are visited in workbook order; tabs without a schema-matching header
    row are skipped.

    Parameters
    ----------
    config
        Organization configuration (for the BANK column mapping).
    connector
        Source connector.
    sheet_id
        Bank workbook ID.

    Returns
    -------
    list[StandardizedTransaction]
        Transactions from all matching tabs, in tab order.
    """
    transactions: list[StandardizedTransaction] = []
    mapping = resolve_column_mapping(config, DocType.BANK)

    for tab_name in connector.list_tabs(sheet_id):
        table = connector.open(sheet_id, tab_name) or []
        header_row = detect_header_row(table, DocType.BANK)
        if header_row is None or not matches_bank_schema(table[header_row]):
            logger.debug("Skipping bank tab '%s': no bank schema header", tab_name)
            continue

        tab_transactions = transform_rows(table, header_row, mapping, DocType.BANK)
        logger.info("Bank tab '%s': %d rows", tab_name, len(tab_transactions))
        transactions.extend(tab_transactions)

    return transactions


def fetch_source(config: dict[str, Any], connector: SourceConnector, kind: DocType) -> SourceResult:
    """Fetch one source register and transform it into transactions.

    Parameters
    ----------
    config
        Organization key-value configuration.
    connector
        Source connector.
    kind
        Source kind to fetch.

    Returns
    -------
    SourceResult
        ``SKIPPED`` when the source is not configured, ``ERROR`` with the
        message when opening, header detection or reading failed, otherwise
        ``SUCCESS`` with the transactions.
    """
    result = SourceResult(source=kind.value)

    sheet_id = get_setting(config, f"{kind}_SHEET_ID")
    if not sheet_id:
        result.status = RunStatus.SKIPPED
        result.error = "Not configured"
        return result

    try:
        if kind is DocType.BANK and get_setting(config, "BANK_SHEET_NAME") == ALL_TABS:
            transactions = fetch_bank_all_tabs(config, connector, sheet_id)
        else:
            transactions = _fetch_single_tab(config, connector, kind, sheet_id)
    except LedgerError as e:
        result.status = RunStatus.ERROR
        result.error = str(e)
        logger.error("Fetch error for %s: %s", kind, e)
        return result
    except Exception as e:
        result.status = RunStatus.ERROR
        result.error = str(e) or type(e).__name__
        logger.exception("Unexpected fetch error for %s", kind)
        return result

    result.transactions = transactions
    result.rows = len(transactions)
    result.status = RunStatus.SUCCESS
    logger.info("Fetched %d %s rows", result.rows, kind)
    return result


def check_sources(config: dict[str, Any], connector: SourceConnector) -> list[dict[str, str]]:
    """Test access to every configured source.

    Returns
    -------
    list[dict[str, str]]
        One entry per source with ``name``, ``status`` (``OK``, ``ERROR`` or
        ``SKIPPED``) and ``message``.
    """
    results: list[dict[str, str]] = []

    for name in (*(kind.value for kind in DocType), "CONTACTS"):
        sheet_id = get_setting(config, f"{name}_SHEET_ID")
        if not sheet_id:
            results.append({"name": name, "status": "SKIPPED", "message": "Not configured"})
            continue

        tab_name = source_tab_name(config, name)
        try:
            if name == "BANK" and get_setting(config, "BANK_SHEET_NAME") == ALL_TABS:
                tabs = connector.list_tabs(sheet_id)
                results.append({"name": name, "status": "OK", "message": f"{len(tabs)} tabs"})
                continue

            table = connector.open(sheet_id, tab_name)
        except LedgerError as e:
            results.append({"name": name, "status": "ERROR", "message": str(e)})
            continue
        except Exception as e:
            logger.exception("Unexpected error checking %s", name)
            results.append({"name": name, "status": "ERROR", "message": str(e) or type(e).__name__})
            continue

        if table is None:
            results.append({"name": name, "status": "ERROR", "message": f'Tab "{tab_name}" not found'})
        else:
            results.append({"name": name, "status": "OK", "message": f"{len(table)} rows"})

    return results
