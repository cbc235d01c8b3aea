"""AI modules for listing scoring."""

from .llm_client import LLMClient
from .scoring import (
    ScoringProvider,
    LocalScoringProvider,
    RemoteScoringProvider,
    FallbackScoringProvider,
    select_scoring_provider,
)

__all__ = [
    "LLMClient",
    "ScoringProvider",
    "LocalScoringProvider",
    "RemoteScoringProvider",
    "FallbackScoringProvider",
    "select_scoring_provider",
]
