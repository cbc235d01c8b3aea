"""
API routes: search and scoring.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from ..ai.scoring import ScoringProvider
from ..config import get_config
from ..models.scoring import ScoreRequest, ScoreResponse
from ..models.search import SearchPayload
from ..pipeline.orchestrator import SearchService


logger = logging.getLogger(__name__)

router = APIRouter()


def get_search_service(request: Request) -> SearchService:
    return request.app.state.search_service


def get_local_scorer(request: Request) -> ScoringProvider:
    return request.app.state.local_scorer


def resolve_base_url(request: Request) -> Optional[str]:
    """Where this API can reach itself: configured URL, else the request's host."""
    configured = get_config().server.internal_api_base_url
    if configured:
        return configured

    host = request.headers.get("host")
    if not host:
        return None

    proto = request.headers.get("x-forwarded-proto") or "http"
    return f"{proto}://{host}"


def error_response(message: str, status_code: int = 500) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@router.post("/api/search")
def search(
    payload: SearchPayload,
    request: Request,
    service: SearchService = Depends(get_search_service),
):
    """Run a search and return {searchId, results}."""
    user_id = request.headers.get("x-user-id")
    try:
        response = service.search(payload, user_id=user_id, base_url=resolve_base_url(request))
    except Exception as e:
        logger.exception(f"Search endpoint failed: {e}")
        return error_response(str(e) or "Unknown error")

    return response.to_public_dict()


@router.post("/api/score")
def score(
    body: ScoreRequest,
    scorer: ScoringProvider = Depends(get_local_scorer),
):
    """Score the given listings and return {results}."""
    logger.info(f"Scoring request received: {len(body.items)} items")
    try:
        results = scorer.score(body.items)
    except Exception as e:
        logger.exception(f"Score endpoint failed: {e}")
        return error_response(str(e) or "Unknown error")

    return ScoreResponse(results=results).to_public_dict()
