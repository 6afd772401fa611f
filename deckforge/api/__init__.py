from deckforge.api.collections import router as collections_router
from deckforge.api.decks import router as decks_router
from deckforge.api.health import router as health_router
from deckforge.api.recommendations import router as recommendations_router

__all__ = [
    "collections_router",
    "decks_router",
    "health_router",
    "recommendations_router",
]
