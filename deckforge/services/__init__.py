"""
DeckForge services.

Stateful and I/O-facing parts of the recommendation pipeline.
"""

from deckforge.services.cache import (
    CacheEntry,
    CacheKey,
    CacheStats,
    CacheStrategy,
    RecommendationCache,
    make_key,
)
from deckforge.services.collection_service import CollectionService, select_candidates
from deckforge.services.progressive_updates import (
    NotificationSink,
    ProgressiveUpdates,
    log_notification,
    newly_viable,
)
from deckforge.services.recommendation_service import RecommendationEngine, rank_candidates
from deckforge.services.stores import CardCatalog, CollectionStore, DeckStore

__all__ = [
    "CacheEntry",
    "CacheKey",
    "CacheStats",
    "CacheStrategy",
    "CardCatalog",
    "CollectionService",
    "CollectionStore",
    "DeckStore",
    "NotificationSink",
    "ProgressiveUpdates",
    "RecommendationCache",
    "RecommendationEngine",
    "log_notification",
    "make_key",
    "newly_viable",
    "rank_candidates",
    "select_candidates",
]
