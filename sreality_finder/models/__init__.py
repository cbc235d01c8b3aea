"""
Pydantic models for Sreality Finder.
All data contracts are defined here for strict validation.
"""

from .listing import RawListing, DerivedAttributes, CanonicalListing
from .search import NormalizedSearchParams, SearchPayload, SearchResponse
from .scoring import AIScoreReply, ScoreResult, ScoreRequest, ScoreResponse

__all__ = [
    # Listing
    "RawListing",
    "DerivedAttributes",
    "CanonicalListing",
    # Search
    "NormalizedSearchParams",
    "SearchPayload",
    "SearchResponse",
    # Scoring
    "AIScoreReply",
    "ScoreResult",
    "ScoreRequest",
    "ScoreResponse",
]
