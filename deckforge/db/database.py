"""
Async engine and sessions.

One engine per process. Request handlers receive a session through
get_session; the SQL-backed stores open their own short-lived sessions
from a session factory, so the engine can be shared by both.
"""

from collections.abc import AsyncGenerator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from deckforge.config import settings
from deckforge.models.db import Base


def make_session_factory(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # Domain models are built after commit, so loaded rows must stay readable
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


engine = create_async_engine(settings.database_url, echo=settings.debug, pool_pre_ping=True)
async_session_factory = make_session_factory(engine)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Request-scoped session.

    Commits after the handler returns and rolls back on a database error.
    Handlers that must publish a change before returning commit themselves.
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except SQLAlchemyError:
            await session.rollback()
            raise


async def init_db(db_engine: AsyncEngine = engine) -> None:
    """Create the cards, collections and decks tables if they are missing."""
    async with db_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
