"""
Tests for the HTTP endpoints.
"""
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from sreality_finder.api.app import create_app
from sreality_finder.config import reset_config
from sreality_finder.errors import StorageError, UpstreamError
from sreality_finder.models.listing import CanonicalListing
from sreality_finder.models.scoring import ScoreResult
from sreality_finder.models.search import SearchResponse


@pytest.fixture(autouse=True)
def no_internal_base_url(monkeypatch):
    monkeypatch.delenv("INTERNAL_API_BASE_URL", raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def service() -> MagicMock:
    service = MagicMock()
    service.search.return_value = SearchResponse(
        search_id="search-1",
        results=[CanonicalListing(id="1", title="Byt 2+kk", url="https://x/1", price=4500000)],
    )
    return service


@pytest.fixture
def scorer() -> MagicMock:
    return MagicMock()


@pytest.fixture
def client(service, scorer) -> TestClient:
    return TestClient(create_app(search_service=service, local_scorer=scorer))


class TestSearchEndpoint:
    """Tests for POST /api/search."""

    def test_success(self, client, service):
        response = client.post("/api/search", json={"city": "Praha", "roomsFrom": 2})

        assert response.status_code == 200
        assert response.json() == {
            "searchId": "search-1",
            "results": [{"id": "1", "title": "Byt 2+kk", "url": "https://x/1", "price": 4500000,
                         "raw": {}, "derived": {}}],
        }
        payload = service.search.call_args.args[0]
        assert payload.city == "Praha"
        assert payload.rooms_from == 2

    def test_user_id_header_passed_through(self, client, service):
        client.post("/api/search", json={"city": "Praha"}, headers={"x-user-id": "user-7"})

        assert service.search.call_args.kwargs["user_id"] == "user-7"

    def test_base_url_from_request_host(self, client, service):
        client.post("/api/search", json={"city": "Praha"})

        assert service.search.call_args.kwargs["base_url"] == "http://testserver"

    def test_base_url_from_config(self, client, service, monkeypatch):
        monkeypatch.setenv("INTERNAL_API_BASE_URL", "http://api.internal:8000")
        reset_config()

        client.post("/api/search", json={"city": "Praha"})

        assert service.search.call_args.kwargs["base_url"] == "http://api.internal:8000"

    @pytest.mark.parametrize("body", [
        {},
        {"city": "P"},
        {"city": "Praha", "roomsFrom": -1},
        {"city": "Praha", "keywords": [""]},
    ])
    def test_invalid_body_is_400(self, client, service, body):
        response = client.post("/api/search", json=body)

        assert response.status_code == 400
        assert response.json()["error"]
        service.search.assert_not_called()

    @pytest.mark.parametrize("error", [
        UpstreamError("Apify run ended with status FAILED"),
        StorageError("Failed to persist search"),
    ])
    def test_pipeline_failure_is_500(self, client, service, error):
        service.search.side_effect = error

        response = client.post("/api/search", json={"city": "Praha"})

        assert response.status_code == 500
        assert response.json() == {"error": str(error)}

    def test_get_not_allowed(self, client):
        assert client.get("/api/search").status_code == 405


class TestScoreEndpoint:
    """Tests for POST /api/score."""

    def test_scores_items(self, client, scorer):
        scorer.score.return_value = [
            ScoreResult(id="1", ai_score=88, ai_reason="Skvělá lokalita", ai_highlights=["metro"])
        ]

        response = client.post(
            "/api/score",
            json={"items": [{"id": "1", "title": "Byt", "url": "https://x/1", "sizeM2": 55}]},
        )

        assert response.status_code == 200
        assert response.json() == {
            "results": [
                {"id": "1", "aiScore": 88, "aiReason": "Skvělá lokalita", "aiHighlights": ["metro"]}
            ]
        }
        items = scorer.score.call_args.args[0]
        assert items[0].size_m2 == 55

    def test_empty_items(self, client, scorer):
        scorer.score.return_value = []

        response = client.post("/api/score", json={"items": []})

        assert response.json() == {"results": []}

    def test_missing_items_is_400(self, client):
        assert client.post("/api/score", json={}).status_code == 400

    def test_scorer_failure_is_500(self, client, scorer):
        scorer.score.side_effect = RuntimeError("OpenAI down")

        response = client.post("/api/score", json={"items": []})

        assert response.status_code == 500
        assert response.json() == {"error": "OpenAI down"}
