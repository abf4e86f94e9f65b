"""Extraction of standardized transactions and contacts from source registers."""

from party_ledgers.extractor.contacts import infer_contact_type, load_configured_contacts, load_contact_directory
from party_ledgers.extractor.field_mapper import (
    COLUMN_CONFIG_KEYS,
    SemanticField,
    build_header_index,
    resolve_column_mapping,
    transform_row,
    transform_rows,
)
from party_ledgers.extractor.header_detector import detect_header_row, matches_bank_schema
from party_ledgers.extractor.source_connector import (
    SourceConnector,
    WorkbookSourceConnector,
    check_sources,
    fetch_bank_all_tabs,
    fetch_source,
)

__all__ = [
    "COLUMN_CONFIG_KEYS",
    "SemanticField",
    "SourceConnector",
    "WorkbookSourceConnector",
    "build_header_index",
    "check_sources",
    "detect_header_row",
    "fetch_bank_all_tabs",
    "fetch_source",
    "infer_contact_type",
    "load_configured_contacts",
    "load_contact_directory",
    "matches_bank_schema",
    "resolve_column_mapping",
    "transform_row",
    "transform_rows",
]
