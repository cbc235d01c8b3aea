"""
Tests for the UI helpers that do not need a running Streamlit session.
"""
from unittest.mock import MagicMock, patch

import pytest

from sreality_finder.ui.app import run_search
from sreality_finder.ui.components.result_card import MISSING, format_czk, format_number
from sreality_finder.ui.components.search_form import build_search_payload, parse_keywords


class TestSearchForm:
    """Tests for turning form values into a request body."""

    def test_parse_keywords(self):
        assert parse_keywords(" balkon, sklep ,, ") == ["balkon", "sklep"]
        assert parse_keywords("") == []

    def test_full_payload(self):
        payload = build_search_payload(
            city=" Praha ",
            rooms_from=2,
            price_max=6000000,
            price_m2_max=120000,
            keywords="balkon, sklep",
            ai_scoring=False,
        )

        assert payload == {
            "city": "Praha",
            "aiScoring": False,
            "roomsFrom": 2,
            "priceMax": 6000000,
            "priceM2Max": 120000,
            "keywords": ["balkon", "sklep"],
        }

    def test_zero_means_unset(self):
        assert build_search_payload(city="Brno") == {"city": "Brno", "aiScoring": True}

    def test_city_required(self):
        assert build_search_payload(city="   ", rooms_from=2) is None


class TestResultCardFormatting:
    """Tests for number formatting."""

    def test_format_czk(self):
        assert format_czk(4500000) == "4 500 000 Kč"
        assert format_czk(None) == MISSING

    def test_format_number(self):
        assert format_number(55.4, "m²") == "55 m²"
        assert format_number(3) == "3"
        assert format_number(None) == MISSING


class TestRunSearch:
    """Tests for the API call behind the search button."""

    def test_returns_body(self):
        response = MagicMock(ok=True)
        response.json.return_value = {"searchId": "s1", "results": []}

        with patch("sreality_finder.ui.app.requests.post", return_value=response) as post:
            assert run_search({"city": "Praha"}) == {"searchId": "s1", "results": []}

        assert post.call_args.args[0].endswith("/api/search")
        assert post.call_args.kwargs["json"] == {"city": "Praha"}

    def test_error_message_from_body(self):
        response = MagicMock(ok=False)
        response.json.return_value = {"error": "Apify run ended with status FAILED"}

        with patch("sreality_finder.ui.app.requests.post", return_value=response):
            with pytest.raises(RuntimeError, match="FAILED"):
                run_search({"city": "Praha"})
