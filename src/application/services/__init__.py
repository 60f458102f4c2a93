"""Application services - catalog search orchestration."""

from .query_aggregator import FACET_ORDER, QueryAggregator
from .translation import TranslationLookup

__all__ = [
    "FACET_ORDER",
    "QueryAggregator",
    "TranslationLookup",
]
