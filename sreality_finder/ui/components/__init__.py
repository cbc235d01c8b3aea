"""UI components package."""

from .search_form import render_search_form, build_search_payload
from .result_card import render_results_section

__all__ = [
    "render_search_form",
    "build_search_payload",
    "render_results_section",
]
