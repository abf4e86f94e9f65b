"""Classification and aggregation of standardized transactions."""

from party_ledgers.transformer.aggregator import aggregate_parties, build_company, enrich_from_contact
from party_ledgers.transformer.classifier import classify

__all__ = [
    "aggregate_parties",
    "build_company",
    "classify",
    "enrich_from_contact",
]
