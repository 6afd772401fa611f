"""
Liveness and readiness probes.

Readiness also reports how many catalog cards are loaded and the state of
the recommendation cache, so an empty catalog is visible before any
suggestion request comes back empty.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel, Field
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from deckforge.api.dependencies import EngineDep
from deckforge.db.database import get_session
from deckforge.formats.factory import supported_formats
from deckforge.models.db import CardDB

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


class CacheStatsResponse(BaseModel):
    size: int
    in_flight: int
    hits: int
    misses: int
    failures: int


class HealthResponse(BaseModel):
    status: str
    formats: list[str] = Field(default_factory=supported_formats)


class ReadinessResponse(BaseModel):
    """Readiness of the database, the catalog and the cache."""

    status: str
    database: str
    catalog_cards: int | None = None
    cache: CacheStatsResponse | None = None


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Liveness probe. Never touches the database."""
    return HealthResponse(status="healthy")


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    responses={503: {"model": ReadinessResponse}},
)
async def ready(
    response: Response,
    session: Annotated[AsyncSession, Depends(get_session)],
    engine: EngineDep,
) -> ReadinessResponse:
    """Returns 503 while the database is unreachable."""
    try:
        catalog_cards = await session.scalar(select(func.count()).select_from(CardDB))
    except SQLAlchemyError as exc:
        logger.warning("READINESS_DB_UNAVAILABLE", extra={"error": type(exc).__name__})
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return ReadinessResponse(status="not ready", database="disconnected")

    stats = engine.cache.stats()
    return ReadinessResponse(
        status="ready",
        database="connected",
        catalog_cards=catalog_cards or 0,
        cache=CacheStatsResponse(
            size=stats.size,
            in_flight=stats.in_flight,
            hits=stats.hits,
            misses=stats.misses,
            failures=stats.failures,
        ),
    )
