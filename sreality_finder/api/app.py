"""
FastAPI application for the search and scoring endpoints.
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..ai.scoring import LocalScoringProvider, ScoringProvider
from ..errors import StorageError
from ..logging_utils import setup_logging
from ..pipeline.orchestrator import SearchService
from .routes import router


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the database tables on startup."""
    try:
        app.state.search_service.store.init_db()
    except StorageError as e:
        logger.warning(f"Could not initialize database: {e}")
    yield
    logger.info("API shutdown")


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request bodies are a 400 with a readable message."""
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        messages.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return JSONResponse(status_code=400, content={"error": "; ".join(messages) or "Invalid request"})


def create_app(
    search_service: Optional[SearchService] = None,
    local_scorer: Optional[ScoringProvider] = None,
) -> FastAPI:
    """Creates and configures the FastAPI application."""
    setup_logging()

    local_scorer = local_scorer or LocalScoringProvider()

    app = FastAPI(
        title="Sreality Finder API",
        description="Search Sreality listings with optional AI scoring",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.local_scorer = local_scorer
    app.state.search_service = search_service or SearchService(local_scorer=local_scorer)

    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.include_router(router)

    return app
