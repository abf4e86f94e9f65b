"""Configuration management for party-ledgers.

This module centralizes file-system paths, environment variables, logging and
the per-organization key-value configuration consumed by the refresh pipeline.

Organization configuration
--------------------------
Each ledger workbook is driven by a flat key-value map. It can be read from a
JSON file (``config/<org>.json``) or from the ``CONFIG`` tab of the ledger
workbook itself, where column A holds the key and column B the value. Lines
whose key starts with ``===`` are section banners and are ignored.

Environment variables
---------------------
``DATA_DIR``, ``OUTPUT_DIR``, ``LOGS_DIR`` and ``CONFIG_DIR`` override the
default directories. Directories are created eagerly on import so downstream
callers can rely on their existence.
"""

from __future__ import annotations

import json
import logging
import os
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from party_ledgers.errors import ConfigurationError

# Load environment variables from .env file
load_dotenv()

# Project paths
PROJECT_ROOT = Path(__file__).parent.parent
CONFIG_DIR = Path(os.getenv("CONFIG_DIR", PROJECT_ROOT / "config"))
DATA_DIR = Path(os.getenv("DATA_DIR", PROJECT_ROOT / "data"))
OUTPUT_DIR = Path(os.getenv("OUTPUT_DIR", DATA_DIR / "output"))
LOGS_DIR = Path(os.getenv("LOGS_DIR", PROJECT_ROOT / "logs"))

# Ensure directories exist
DATA_DIR.mkdir(parents=True, exist_ok=True)
OUTPUT_DIR.mkdir(parents=True, exist_ok=True)
LOGS_DIR.mkdir(parents=True, exist_ok=True)

CONFIG_SHEET_NAME = "CONFIG"
SECTION_BANNER_PREFIX = "==="

SOURCE_KINDS = ("PURCHASE", "SALES", "BANK")

# Tab names used when <KIND>_SHEET_NAME is blank
DEFAULT_SOURCE_TABS = {
    "PURCHASE": "Purchase Register",
    "SALES": "Sales Register",
    "BANK": "Bank Statement",
    "CONTACTS": "ALL CONTACTS",
}

# Company identity keys beyond ORG_CODE / ORG_NAME
COMPANY_CONFIG_KEYS = {
    "address1": "ORG_ADDRESS1",
    "address2": "ORG_ADDRESS2",
    "gst": "ORG_GST",
    "phone": "ORG_PHONE",
    "email": "ORG_EMAIL",
}


def setup_logging(name: str = "party_ledgers") -> logging.Logger:
    """Configure a console+file logger if not already present.

    Parameters
    ----------
    name : str, optional
        Logger namespace; reused to avoid duplicate handlers.

    Returns
    -------
    logging.Logger
        Logger with INFO-level console handler and DEBUG-level daily file
        handler under ``LOGS_DIR``.
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        logger.setLevel(logging.DEBUG)

        # Console handler
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.INFO)
        console_format = logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")
        console_handler.setFormatter(console_format)
        logger.addHandler(console_handler)

        # File handler
        log_filename = f"{datetime.now(UTC).strftime('%Y-%m-%d')}_run.log"
        file_handler = logging.FileHandler(LOGS_DIR / log_filename)
        file_handler.setLevel(logging.DEBUG)
        file_format = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        file_handler.setFormatter(file_format)
        logger.addHandler(file_handler)

    return logger


def load_org_config(config_path: Path) -> dict[str, Any]:
    """Load an organization configuration from a JSON file.

    Parameters
    ----------
    config_path : Path
        JSON file holding a flat ``{"KEY": value}`` object.

    Returns
    -------
    dict[str, Any]
        Parsed key-value configuration.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    ConfigurationError
        If the JSON document is not an object.
    """
    if not config_path.exists():
        msg = f"Configuration file not found: {config_path}"
        raise FileNotFoundError(msg)

    with config_path.open(encoding="utf-8") as f:
        data = json.load(f)

    if not isinstance(data, dict):
        msg = f"Configuration file must contain a JSON object: {config_path}"
        raise ConfigurationError(msg)

    return {str(key).strip(): value for key, value in data.items()}


def read_config_rows(rows: list[list[Any]]) -> dict[str, Any]:
    """Build a configuration map from ``CONFIG`` tab rows.

    The first row is the ``SETTING | VALUE | DESCRIPTION`` header and is
    skipped, as are blank keys and ``=== SECTION ===`` banners.

    Parameters
    ----------
    rows : list[list[Any]]
        Raw rows of the tab.

    Returns
    -------
    dict[str, Any]
        Key-value configuration (values are kept as read).
    """
    config: dict[str, Any] = {}
    for row in rows[1:]:
        if not row:
            continue
        key = str(row[0] if row[0] is not None else "").strip()
        if not key or key.startswith(SECTION_BANNER_PREFIX):
            continue
        value = row[1] if len(row) > 1 else None
        config[key] = "" if value is None else value
    return config


def get_setting(config: dict[str, Any], key: str, default: str = "") -> str:
    """Return a configuration value as stripped text, or ``default`` when blank."""
    value = config.get(key)
    if value is None:
        return default
    text = str(value).strip()
    return text or default


def source_tab_name(config: dict[str, Any], kind: str) -> str:
    """Return the configured tab name for a source, falling back to the default."""
    key = "CONTACTS_SHEET_NAME" if kind == "CONTACTS" else f"{kind}_SHEET_NAME"
    return get_setting(config, key, DEFAULT_SOURCE_TABS[kind])


def validate_org_config(config: dict[str, Any]) -> tuple[list[str], list[str]]:
    """Check configuration completeness.

    Parameters
    ----------
    config : dict[str, Any]
        Organization key-value configuration.

    Returns
    -------
    tuple[list[str], list[str]]
        ``(errors, warnings)``. Errors make a refresh impossible; warnings
        name sources that will be skipped.
    """
    errors: list[str] = []
    warnings: list[str] = []

    if not get_setting(config, "ORG_CODE"):
        errors.append("ORG_CODE not set")

    configured = [kind for kind in SOURCE_KINDS if get_setting(config, f"{kind}_SHEET_ID")]
    if not configured:
        errors.append("At least one source sheet ID required (PURCHASE_SHEET_ID, SALES_SHEET_ID or BANK_SHEET_ID)")

    for kind in SOURCE_KINDS:
        if kind not in configured:
            warnings.append(f"No {kind} source configured; it will be skipped")

    if not get_setting(config, "CONTACTS_SHEET_ID"):
        warnings.append("No CONTACTS_SHEET_ID configured; ledgers will not be enriched")

    return errors, warnings


def require_valid_config(config: dict[str, Any]) -> None:
    """Raise :class:`ConfigurationError` when the configuration cannot drive a run."""
    errors, _warnings = validate_org_config(config)
    if errors:
        msg = "; ".join(errors)
        raise ConfigurationError(msg)
