#!/usr/bin/env python3
"""Ledger refresh orchestrator - fetch sources, aggregate, render.

This module orchestrates the complete refresh of one organization's ledger
workbook:
1. Validate the organization configuration
2. Fetch the PURCHASE, SALES and BANK registers independently
3. Load the contact directory and aggregate transactions per party
4. Render one statement per party ledger and the Ledger Master index
5. Record every step in the RUN_LOG tab and save the workbook

Usage (from project root):
    python -m party_ledgers.main_refresh --workbook data/output/CG_ledgers.xlsx --init
    python -m party_ledgers.main_refresh --workbook data/output/CG_ledgers.xlsx
    python -m party_ledgers.main_refresh --workbook ledgers.xlsx --config config/cg.json --party CG-SUP-0001

CLI Flags:
    --workbook, -w      Ledger workbook to refresh (created when missing)
    --config, -c        JSON configuration (default: the workbook's CONFIG tab)
    --data-dir, -d      Directory relative source IDs resolve against
    --party, -p         Refresh a single party's ledger(s) only
    --init              Create the CONFIG / Ledger Master / RUN_LOG tabs and exit
    --check             Test access to every configured source and exit
    --summary-csv       Also export the ledger summary to this CSV file
    --quiet             Don't print the run summary
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import TYPE_CHECKING, Any

from party_ledgers.config import (
    CONFIG_SHEET_NAME,
    get_setting,
    load_org_config,
    read_config_rows,
    require_valid_config,
    setup_logging,
)
from party_ledgers.errors import ConfigurationError, LedgerError
from party_ledgers.extractor import WorkbookSourceConnector, check_sources, fetch_source, load_configured_contacts
from party_ledgers.transformer import aggregate_parties, build_company
from party_ledgers.types import DocType, LedgerResult, RefreshResult, RunStatus
from party_ledgers.writer import (
    RunLog,
    WorkbookSink,
    initialize_workbook,
    ledger_sheet_names,
    ledger_summary_frame,
    render_ledger_master,
    render_party_ledger,
    write_summary_csv,
)

if TYPE_CHECKING:
    from party_ledgers.extractor import SourceConnector
    from party_ledgers.types import StandardizedTransaction
    from party_ledgers.writer import TabularSink

logger = logging.getLogger("party_ledgers.main_refresh")


def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)


# =============================================================================
# Ledger generation
# =============================================================================


def generate_ledgers(
    config: dict[str, Any],
    connector: SourceConnector,
    sink: TabularSink,
    transactions: list[StandardizedTransaction],
    party_id: str | None = None,
) -> LedgerResult:
    """Aggregate transactions and render every party ledger plus the index.

    Parameters
    ----------
    config
        Organization configuration.
    connector
        Source connector (for the contact directory).
    sink
        Ledger workbook.
    transactions
        Transactions from every successfully fetched source.
    party_id
        When given, only this party's ledgers are rendered and the index is
        left untouched.

    Returns
    -------
    LedgerResult
        ``SUCCESS`` with the rendered ledgers.

    Raises
    ------
    LedgerError
        If the party is unknown, the contact directory is unavailable or a
        ledger fails to render. The first render failure aborts the batch.
    """
    if party_id:
        wanted = party_id.strip().upper()
        transactions = [txn for txn in transactions if txn.party_id == wanted]
        if not transactions:
            msg = f"No transactions found for party {wanted}"
            raise LedgerError(msg)

    contacts = load_configured_contacts(config, connector)
    ledgers = aggregate_parties(transactions, contacts)
    if party_id and not ledgers:
        msg = f"No ledger can be generated for party {party_id.strip().upper()}"
        raise LedgerError(msg)

    company = build_company(config, contacts)
    sheet_names = ledger_sheet_names(ledgers)

    for party in ledgers:
        render_party_ledger(sink, party, company, sheet_names[party.key])

    if not party_id:
        render_ledger_master(sink, ledgers, sheet_names)

    logger.info("Generated %d ledgers", len(ledgers))
    return LedgerResult(
        status=RunStatus.SUCCESS,
        count=len(ledgers),
        parties=ledgers,
        sheet_names=sheet_names,
    )


def refresh_ledgers(
    config: dict[str, Any],
    connector: SourceConnector,
    sink: TabularSink,
    party_id: str | None = None,
) -> RefreshResult:
    """Run one full refresh of an organization's ledger workbook.

    Fetch failures are contained per source; generation failures are caught
    here and reported through the returned status. Nothing is raised to the
    caller.

    When no transactions were fetched, generation is skipped and the existing
    ledger sheets and Ledger Master are left untouched. The overall status is
    ``ERROR`` when every configured source failed.

    Parameters
    ----------
    config
        Organization key-value configuration.
    connector
        Source connector for the registers and the contact directory.
    sink
        Ledger workbook to write into.
    party_id
        Restrict the refresh to one party (single-ledger mode).

    Returns
    -------
    RefreshResult
        Per-source results, the generation result and the overall status.
    """
    start = time.monotonic()
    result = RefreshResult(org_code=get_setting(config, "ORG_CODE"))

    try:
        require_valid_config(config)
    except ConfigurationError as e:
        logger.error("Configuration invalid: %s", e)
        result.status = RunStatus.ERROR
        result.message = str(e)
        result.duration_ms = _elapsed_ms(start)
        return result

    run_log = RunLog(sink)
    logger.info("Starting refresh for %s", result.org_code)

    # Fetch each source independently
    for kind in DocType:
        fetch_start = time.monotonic()
        source_result = fetch_source(config, connector, kind)
        result.sources[kind.value] = source_result
        run_log.record(
            kind.value,
            "FETCH",
            source_result.status,
            rows_fetched=source_result.rows,
            duration_ms=_elapsed_ms(fetch_start),
            error=source_result.error,
        )

    transactions = [txn for source_result in result.sources.values() for txn in source_result.transactions]

    generate_start = time.monotonic()
    if not transactions:
        # Nothing fetched: keep the existing ledger sheets and index
        logger.warning("No transactions fetched; ledger generation skipped")
        result.ledgers = LedgerResult(status=RunStatus.SKIPPED, error="No transactions fetched")
    else:
        try:
            result.ledgers = generate_ledgers(config, connector, sink, transactions, party_id)
        except LedgerError as e:
            logger.error("Ledger generation failed: %s", e)
            result.ledgers = LedgerResult(status=RunStatus.ERROR, error=str(e))
        except Exception as e:
            logger.exception("Unexpected error during ledger generation")
            result.ledgers = LedgerResult(status=RunStatus.ERROR, error=str(e) or type(e).__name__)

    run_log.record(
        "LEDGERS",
        "GENERATE",
        result.ledgers.status,
        rows_fetched=len(transactions),
        rows_written=result.ledgers.count,
        duration_ms=_elapsed_ms(generate_start),
        error=result.ledgers.error,
    )

    statuses = {name: source_result.status for name, source_result in result.sources.items()}
    failed = [name for name, status in statuses.items() if status is RunStatus.ERROR]
    attempted = [name for name, status in statuses.items() if status is not RunStatus.SKIPPED]
    if failed and len(failed) == len(attempted):
        result.status = RunStatus.ERROR
        result.message = f"All sources failed: {', '.join(failed)}"
    elif result.ledgers.status is RunStatus.SUCCESS:
        result.status = RunStatus.SUCCESS
        result.message = f"Generated {result.ledgers.count} ledgers"
        if failed:
            result.message += f"; failed sources: {', '.join(failed)}"
    elif result.ledgers.status is RunStatus.SKIPPED:
        result.status = RunStatus.SUCCESS
        result.message = "No transactions to process"
    else:
        result.status = RunStatus.ERROR
        result.message = result.ledgers.error or "Ledger generation failed"

    result.duration_ms = _elapsed_ms(start)
    logger.info("Refresh finished: %s (%s)", result.status, result.message)
    return result


# =============================================================================
# CLI
# =============================================================================


def load_refresh_config(sink: WorkbookSink, config_path: Path | None) -> dict[str, Any]:
    """Read the configuration from ``config_path`` or the workbook's CONFIG tab.

    Raises
    ------
    ConfigurationError
        If no JSON file is given and the workbook has no CONFIG tab.
    """
    if config_path is not None:
        return load_org_config(config_path)

    if not sink.has_sheet(CONFIG_SHEET_NAME):
        msg = f"Workbook has no {CONFIG_SHEET_NAME} tab; pass --config or run with --init first"
        raise ConfigurationError(msg)
    return read_config_rows(sink.read_rows(CONFIG_SHEET_NAME))


def print_check_report(checks: list[dict[str, str]]) -> None:
    """Print the source connection test results."""
    print("=" * 60)
    print("SOURCE CHECK")
    print("=" * 60)
    for check in checks:
        print(f"  {check['name']:<10} {check['status']:<8} {check['message']}")


def main() -> int:
    """Parse CLI flags and run the requested action.

    Returns
    -------
    int
        ``0`` when the action succeeded; ``1`` otherwise.
    """
    parser = argparse.ArgumentParser(
        description="Refresh party ledgers from purchase, sales and bank registers.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m party_ledgers.main_refresh -w ledgers.xlsx --init           # Create CONFIG tab
  python -m party_ledgers.main_refresh -w ledgers.xlsx --check          # Test sources
  python -m party_ledgers.main_refresh -w ledgers.xlsx                  # Full refresh
  python -m party_ledgers.main_refresh -w ledgers.xlsx -p CG-SUP-0001   # Single party
        """,
    )
    parser.add_argument("--workbook", "-w", type=Path, required=True, help="Ledger workbook (.xlsx)")
    parser.add_argument("--config", "-c", type=Path, help="JSON configuration (default: workbook CONFIG tab)")
    parser.add_argument("--data-dir", "-d", type=Path, help="Directory for relative source IDs")
    parser.add_argument("--party", "-p", help="Refresh a single party ID only")
    parser.add_argument("--init", action="store_true", help="Initialize the workbook tabs and exit")
    parser.add_argument("--check", action="store_true", help="Test access to configured sources and exit")
    parser.add_argument("--summary-csv", type=Path, help="Export the ledger summary to this CSV file")
    parser.add_argument("--quiet", action="store_true", help="Don't print the run summary")

    args = parser.parse_args()
    setup_logging("party_ledgers")

    try:
        sink = WorkbookSink.open(args.workbook)
    except LedgerError as e:
        logger.error("%s", e)
        return 1

    if args.init:
        created = initialize_workbook(sink)
        sink.save()
        if not args.quiet:
            print(f"Initialized {args.workbook}: {', '.join(created) or 'nothing to create'}")
        return 0

    try:
        config = load_refresh_config(sink, args.config)
    except (FileNotFoundError, ValueError, LedgerError) as e:
        logger.error("Could not load configuration: %s", e)
        return 1

    connector = WorkbookSourceConnector(args.data_dir)

    if args.check:
        checks = check_sources(config, connector)
        if not args.quiet:
            print_check_report(checks)
        return 1 if any(check["status"] == "ERROR" for check in checks) else 0

    result = refresh_ledgers(config, connector, sink, party_id=args.party)

    if result.sources:
        sink.save()

    if args.summary_csv is not None and result.succeeded:
        frame = ledger_summary_frame(result.ledgers.parties, result.ledgers.sheet_names)
        write_summary_csv(frame, args.summary_csv, result.org_code)

    if not args.quiet:
        print("\n".join(result.summary_lines()))

    return 0 if result.succeeded else 1


if __name__ == "__main__":
    sys.exit(main())
