import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from importlib.metadata import version as pkg_version

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from deckforge.api import (
    collections_router,
    decks_router,
    health_router,
    recommendations_router,
)
from deckforge.api.dependencies import build_engine
from deckforge.config import settings
from deckforge.db.database import async_session_factory, init_db
from deckforge.models.failure import KnownError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    await init_db()
    if getattr(app.state, "engine", None) is None:
        app.state.engine = build_engine(async_session_factory)
    yield


app = FastAPI(
    title=settings.app_name,
    version=pkg_version("deckforge"),
    lifespan=lifespan,
)

app.include_router(recommendations_router)
app.include_router(decks_router)
app.include_router(collections_router)
app.include_router(health_router)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Tighten in production
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(KnownError)
async def known_error_handler(_request: Request, exc: KnownError) -> JSONResponse:
    """Known failures become an ApiResponse envelope with the error's status code."""
    logger.info(
        "KNOWN_ERROR",
        extra={"kind": exc.kind.value, "status_code": exc.status_code},
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_response().model_dump(mode="json"),
    )
