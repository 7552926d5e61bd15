"""
DexKeep services.

Business logic for card identification, collection browsing and deck suggestions.
"""

from dexkeep.services.catalog import (
    get_catalog_card,
    get_identification_catalog,
    get_sample_collection,
)
from dexkeep.services.collection_query import (
    CollectionQueryParams,
    CollectionQueryResult,
    CollectionStats,
    SortKey,
    completion_percentage,
    check_filters,
    query_collection,
    summarize_collection,
)
from dexkeep.services.deck_suggestions import get_meta_analysis, suggest_decks
from dexkeep.services.identification import (
    CardIdentifier,
    RemoteCardIdentifier,
    StubCardIdentifier,
    get_card_identifier,
)
from dexkeep.services.in_flight import InFlightGuard, get_in_flight_guard

__all__ = [
    "CardIdentifier",
    "CollectionQueryParams",
    "CollectionQueryResult",
    "CollectionStats",
    "InFlightGuard",
    "RemoteCardIdentifier",
    "SortKey",
    "StubCardIdentifier",
    "completion_percentage",
    "get_card_identifier",
    "get_catalog_card",
    "get_identification_catalog",
    "get_in_flight_guard",
    "get_meta_analysis",
    "get_sample_collection",
    "check_filters",
    "query_collection",
    "suggest_decks",
    "summarize_collection",
]
