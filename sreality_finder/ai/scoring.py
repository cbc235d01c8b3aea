"""
Scoring providers - produce AI desirability scores for canonical listings.

Two interchangeable implementations share one contract: the local provider
asks OpenAI directly, the remote provider calls the /api/score endpoint of a
running Sreality Finder API. FallbackScoringProvider chains them so callers
never branch on which one ran.
"""
import json
import logging
from abc import ABC, abstractmethod
from typing import Optional

import requests
from openai import OpenAIError
from pydantic import ValidationError

from ..config import get_config
from ..errors import ScoreParseError, UpstreamError
from ..models.listing import CanonicalListing
from ..models.scoring import AIScoreReply, ScoreResponse, ScoreResult
from .llm_client import LLMClient


logger = logging.getLogger(__name__)


SYSTEM_PROMPT = (
    "Jsi analytik investičních nemovitostí. Hodnoť návratnost, "
    "rizika a zajímavé parametry. Odpovídej pouze platným JSONem."
)

USER_PROMPT_TEMPLATE = """Ohodnoť následující nemovitost a vrať JSON {{ "score": 0-100, "reasoning": "...", "highlights": ["..."] }}:
{listing}
"""

PARSE_FAILURE_REASON = "OpenAI response could not be parsed."


def build_user_prompt(item: CanonicalListing) -> str:
    return USER_PROMPT_TEMPLATE.format(
        listing=json.dumps(item.scoring_view(), indent=2, ensure_ascii=False),
    )


def parse_score_reply(text: str) -> AIScoreReply:
    """
    Parse the model's JSON reply. Score is clamped to 0-100.

    Raises:
        ScoreParseError: Reply is not JSON or lacks a numeric score
    """
    text = text.strip()
    # tolerate fenced JSON
    if text.startswith("```"):
        text = text.strip("`")
        if text[:4].lower() == "json":
            text = text[4:]
        text = text.strip()

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ScoreParseError(f"Invalid JSON from LLM: {e}") from e

    try:
        return AIScoreReply.model_validate(data)
    except ValidationError as e:
        raise ScoreParseError(f"LLM reply does not match schema: {e}") from e


class ScoringProvider(ABC):
    """Scores listings. Listings that cannot be scored are left out of the result."""

    @abstractmethod
    def score(self, items: list[CanonicalListing]) -> list[ScoreResult]:
        """Return one ScoreResult per listing that could be scored."""


class LocalScoringProvider(ScoringProvider):
    """Scores listings one at a time with the OpenAI API."""

    def __init__(self, llm_client: Optional[LLMClient] = None):
        self._llm_client = llm_client

    @property
    def llm_client(self) -> LLMClient:
        if self._llm_client is None:
            self._llm_client = LLMClient()
        return self._llm_client

    def score(self, items: list[CanonicalListing]) -> list[ScoreResult]:
        if not items:
            return []

        logger.info(f"Scoring {len(items)} listings with {self.llm_client.model}")

        results = []
        for item in items:
            result = self.score_one(item)
            if result is not None:
                results.append(result)

        logger.info(f"Scored {len(results)}/{len(items)} listings")
        return results

    def score_one(self, item: CanonicalListing) -> Optional[ScoreResult]:
        """
        Score a single listing.

        An unparseable reply yields a zero score with a note; an API failure
        leaves the listing unscored (None).
        """
        try:
            reply_text = self.llm_client.call_json(SYSTEM_PROMPT, build_user_prompt(item))
        except OpenAIError as e:
            logger.error(f"OpenAI call failed for listing {item.id}: {e}")
            return None

        try:
            reply = parse_score_reply(reply_text)
        except ScoreParseError as e:
            logger.error(f"Failed to parse OpenAI response for listing {item.id}: {e}")
            return ScoreResult(id=item.id, ai_score=0, ai_reason=PARSE_FAILURE_REASON, ai_highlights=[])

        return ScoreResult(
            id=item.id,
            ai_score=reply.score,
            ai_reason=reply.reasoning,
            ai_highlights=reply.highlights,
        )


class RemoteScoringProvider(ScoringProvider):
    """Delegates scoring to the /api/score endpoint at base_url."""

    def __init__(
        self,
        base_url: str,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout if timeout is not None else get_config().server.score_timeout_s

    def score(self, items: list[CanonicalListing]) -> list[ScoreResult]:
        url = f"{self.base_url}/api/score"
        body = {"items": [item.to_public_dict() for item in items]}

        try:
            response = self.session.post(url, json=body, timeout=self.timeout)
        except requests.RequestException as e:
            raise UpstreamError(f"Score endpoint unreachable: {e}") from e

        if not response.ok:
            raise UpstreamError(f"Score endpoint error: {response.status_code}")

        try:
            return ScoreResponse.model_validate(response.json()).results
        except (ValueError, ValidationError) as e:
            raise UpstreamError(f"Score endpoint returned an invalid body: {e}") from e


class FallbackScoringProvider(ScoringProvider):
    """Uses the primary provider and switches to the fallback on UpstreamError."""

    def __init__(self, primary: ScoringProvider, fallback: ScoringProvider):
        self.primary = primary
        self.fallback = fallback

    def score(self, items: list[CanonicalListing]) -> list[ScoreResult]:
        try:
            return self.primary.score(items)
        except UpstreamError as e:
            logger.error(f"Primary scoring failed, falling back to local scoring: {e}")
            return self.fallback.score(items)


def select_scoring_provider(
    base_url: Optional[str],
    local: Optional[ScoringProvider] = None,
) -> ScoringProvider:
    """
    Pick the provider for a request: remote with local fallback when our own
    API can be addressed, local only otherwise.
    """
    local = local or LocalScoringProvider()
    if not base_url:
        logger.warning("Base URL not resolved, falling back to local scoring")
        return local
    return FallbackScoringProvider(RemoteScoringProvider(base_url), local)
