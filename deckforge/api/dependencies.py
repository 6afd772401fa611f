"""
Request-scoped access to the process-wide recommendation engine.

The engine is built once in the application lifespan and stored on
app.state; tests install their own engine the same way.
"""

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from deckforge.db.operations import SqlCardCatalog, SqlCollectionStore, SqlDeckStore
from deckforge.services.recommendation_service import RecommendationEngine


def build_engine(session_factory: async_sessionmaker[AsyncSession]) -> RecommendationEngine:
    """An engine backed by the SQL stores."""
    return RecommendationEngine(
        catalog=SqlCardCatalog(session_factory),
        collection_store=SqlCollectionStore(session_factory),
        deck_store=SqlDeckStore(session_factory),
    )


def get_engine(request: Request) -> RecommendationEngine:
    engine: RecommendationEngine = request.app.state.engine
    return engine


EngineDep = Annotated[RecommendationEngine, Depends(get_engine)]
