"""
Scoring models - oracle output, per-listing score results, and endpoint bodies.
"""
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .listing import CanonicalListing


class AIScoreReply(BaseModel):
    """JSON object the scoring model is asked to return for one listing."""
    score: float
    reasoning: str = ""
    highlights: list[str] = Field(default_factory=list)

    @field_validator("score")
    @classmethod
    def clamp_score(cls, v: float) -> float:
        return min(100.0, max(0.0, v))

    @field_validator("reasoning", mode="before")
    @classmethod
    def reasoning_default(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("highlights", mode="before")
    @classmethod
    def highlights_default(cls, v: Any) -> Any:
        return [] if v is None else v


class ScoreResult(BaseModel):
    """Score for one listing, joined back onto listings by id."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    ai_score: float = Field(ge=0, le=100, alias="aiScore")
    ai_reason: str = Field(default="", alias="aiReason")
    ai_highlights: list[str] = Field(default_factory=list, alias="aiHighlights")


class ScoreRequest(BaseModel):
    """Body of a scoring request."""
    items: list[CanonicalListing]


class ScoreResponse(BaseModel):
    """Body of a scoring response."""
    results: list[ScoreResult] = Field(default_factory=list)

    def to_public_dict(self) -> dict:
        return {"results": [r.model_dump(by_alias=True) for r in self.results]}
