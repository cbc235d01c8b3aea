"""
Tests for scoring providers.
"""
import json
from unittest.mock import MagicMock

import pytest
import requests
from openai import OpenAIError

from sreality_finder.ai.llm_client import LLMClient
from sreality_finder.ai.scoring import (
    PARSE_FAILURE_REASON,
    FallbackScoringProvider,
    LocalScoringProvider,
    RemoteScoringProvider,
    build_user_prompt,
    parse_score_reply,
    select_scoring_provider,
)
from sreality_finder.config import OpenAIConfig
from sreality_finder.errors import ConfigurationError, ScoreParseError, UpstreamError
from sreality_finder.models.listing import CanonicalListing
from sreality_finder.models.scoring import ScoreResult


def make_listing(listing_id: str) -> CanonicalListing:
    return CanonicalListing(
        id=listing_id,
        title=f"Byt 2+kk {listing_id}",
        url=f"https://x/{listing_id}",
        price=4500000,
        size_m2=55,
        rooms=2,
    )


def reply(score, reasoning="Dobrá cena", highlights=None) -> str:
    return json.dumps({"score": score, "reasoning": reasoning, "highlights": highlights or []})


class TestParseScoreReply:
    """Tests for parse_score_reply."""

    def test_valid_reply(self):
        parsed = parse_score_reply(reply(82, highlights=["balkon"]))

        assert parsed.score == 82
        assert parsed.reasoning == "Dobrá cena"
        assert parsed.highlights == ["balkon"]

    def test_score_clamped(self):
        assert parse_score_reply(reply(250)).score == 100

    def test_fenced_json(self):
        assert parse_score_reply("```json\n" + reply(40) + "\n```").score == 40

    @pytest.mark.parametrize("text", ["not json", "{}", '{"score": "vysoké"}', "[1, 2]"])
    def test_malformed_reply(self, text):
        with pytest.raises(ScoreParseError):
            parse_score_reply(text)


class TestLocalScoringProvider:
    """Tests for LocalScoringProvider."""

    @pytest.fixture
    def llm_client(self) -> MagicMock:
        client = MagicMock(spec=LLMClient)
        client.model = "test-model"
        return client

    def test_scores_each_item_in_order(self, llm_client):
        llm_client.call_json.side_effect = [reply(70), reply(30)]
        provider = LocalScoringProvider(llm_client)

        results = provider.score([make_listing("a"), make_listing("b")])

        assert [(r.id, r.ai_score) for r in results] == [("a", 70), ("b", 30)]
        assert llm_client.call_json.call_count == 2

    def test_malformed_reply_degrades_one_item(self, llm_client):
        """Non-JSON content for one item gives it a zero score; others are unaffected."""
        llm_client.call_json.side_effect = [reply(70), "tohle není JSON", reply(55)]
        provider = LocalScoringProvider(llm_client)

        results = provider.score([make_listing("a"), make_listing("b"), make_listing("c")])

        assert len(results) == 3
        assert results[0].ai_score == 70
        assert results[1] == ScoreResult(
            id="b", ai_score=0, ai_reason=PARSE_FAILURE_REASON, ai_highlights=[]
        )
        assert results[2].ai_score == 55

    def test_api_failure_leaves_item_unscored(self, llm_client):
        llm_client.call_json.side_effect = [OpenAIError("rate limited"), reply(60)]
        provider = LocalScoringProvider(llm_client)

        results = provider.score([make_listing("a"), make_listing("b")])

        assert [r.id for r in results] == ["b"]

    def test_empty_input_makes_no_calls(self, llm_client):
        provider = LocalScoringProvider(llm_client)

        assert provider.score([]) == []
        llm_client.call_json.assert_not_called()

    def test_prompt_contains_listing_fields(self):
        prompt = build_user_prompt(make_listing("a"))

        assert '"sizeM2": 55' in prompt
        assert '"price": 4500000' in prompt
        assert "https://x/a" not in prompt


class TestLLMClient:
    """Tests for LLMClient configuration."""

    def test_missing_api_key(self):
        client = LLMClient(config=OpenAIConfig(api_key="", model="m"))

        assert not client.is_available()
        with pytest.raises(ConfigurationError):
            client.call_json("system", "user")

    def test_returns_message_content(self):
        openai_client = MagicMock()
        openai_client.chat.completions.create.return_value.choices = [
            MagicMock(message=MagicMock(content='{"score": 1}'))
        ]
        client = LLMClient(config=OpenAIConfig(api_key="k", model="m"), client=openai_client)

        assert client.call_json("system", "user") == '{"score": 1}'
        kwargs = openai_client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "m"
        assert kwargs["response_format"] == {"type": "json_object"}


class TestRemoteScoringProvider:
    """Tests for RemoteScoringProvider."""

    def test_posts_items_and_parses_results(self):
        session = MagicMock()
        session.post.return_value.ok = True
        session.post.return_value.json.return_value = {
            "results": [{"id": "a", "aiScore": 64, "aiReason": "ok", "aiHighlights": ["park"]}]
        }
        provider = RemoteScoringProvider("http://localhost:8000/", session=session, timeout=5)

        results = provider.score([make_listing("a")])

        assert results == [ScoreResult(id="a", ai_score=64, ai_reason="ok", ai_highlights=["park"])]
        url = session.post.call_args.args[0]
        body = session.post.call_args.kwargs["json"]
        assert url == "http://localhost:8000/api/score"
        assert body["items"][0]["id"] == "a"

    def test_http_error_raises(self):
        session = MagicMock()
        session.post.return_value.ok = False
        session.post.return_value.status_code = 502
        provider = RemoteScoringProvider("http://localhost:8000", session=session, timeout=5)

        with pytest.raises(UpstreamError):
            provider.score([make_listing("a")])

    def test_connection_error_raises(self):
        session = MagicMock()
        session.post.side_effect = requests.ConnectionError("refused")
        provider = RemoteScoringProvider("http://localhost:8000", session=session, timeout=5)

        with pytest.raises(UpstreamError):
            provider.score([make_listing("a")])


class TestFallbackScoringProvider:
    """Tests for provider fallback and selection."""

    def test_uses_primary_when_it_works(self):
        primary, fallback = MagicMock(), MagicMock()
        primary.score.return_value = [ScoreResult(id="a", ai_score=10)]

        results = FallbackScoringProvider(primary, fallback).score([make_listing("a")])

        assert results[0].ai_score == 10
        fallback.score.assert_not_called()

    def test_falls_back_on_upstream_error(self):
        primary, fallback = MagicMock(), MagicMock()
        primary.score.side_effect = UpstreamError("Score endpoint error: 500")
        fallback.score.return_value = [ScoreResult(id="a", ai_score=20)]
        items = [make_listing("a")]

        results = FallbackScoringProvider(primary, fallback).score(items)

        assert results[0].ai_score == 20
        fallback.score.assert_called_once_with(items)

    def test_other_errors_propagate(self):
        primary, fallback = MagicMock(), MagicMock()
        primary.score.side_effect = ConfigurationError("OPENAI_API_KEY is not configured")

        with pytest.raises(ConfigurationError):
            FallbackScoringProvider(primary, fallback).score([make_listing("a")])

    def test_select_local_without_base_url(self):
        local = MagicMock()

        assert select_scoring_provider(None, local=local) is local

    def test_select_remote_with_fallback(self):
        local = MagicMock()

        provider = select_scoring_provider("http://localhost:8000", local=local)

        assert isinstance(provider, FallbackScoringProvider)
        assert isinstance(provider.primary, RemoteScoringProvider)
        assert provider.fallback is local
