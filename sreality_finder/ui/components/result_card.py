"""
Result card component - displays search results.
"""
from typing import Any, Optional

import streamlit as st


MISSING = "Neuvedeno"


def format_czk(value: Optional[float]) -> str:
    """Format an amount as Czech crowns, e.g. '4 500 000 Kč'."""
    if value is None:
        return MISSING
    return f"{value:,.0f} Kč".replace(",", " ")


def format_number(value: Optional[float], suffix: str = "") -> str:
    if value is None:
        return MISSING
    return f"{value:,.0f} {suffix}".replace(",", " ").strip()


def render_results_section(results: list[dict[str, Any]]):
    """
    Render the results section with listing cards.

    Args:
        results: Listings as returned by /api/search
    """
    if not results:
        st.info("Žádné výsledky. Zkuste upravit parametry hledání.")
        return

    st.caption(f"Nalezeno {len(results)} nemovitostí")
    for result in results:
        render_result_card(result)


def render_result_card(result: dict[str, Any]):
    """Render a single result card."""
    derived = result.get("derived") or {}

    with st.container(border=True):
        header, score = st.columns([4, 1])
        with header:
            st.markdown(f"#### [{result.get('title', '')}]({result.get('url', '#')})")
            if result.get("location"):
                st.caption(f"📍 {result['location']}")
        with score:
            if result.get("aiScore") is not None:
                st.metric("AI skóre", f"{result['aiScore']:.0f}")

        col1, col2, col3, col4 = st.columns(4)
        col1.metric("Cena", format_czk(result.get("price")))
        col2.metric("Plocha", format_number(result.get("sizeM2"), "m²"))
        col3.metric("Cena za m²", format_czk(derived.get("pricePerM2")))
        col4.metric("Dispozice", derived.get("layoutLabel") or format_number(result.get("rooms")))

        if result.get("aiReason"):
            st.markdown(result["aiReason"])

        highlights = result.get("aiHighlights") or []
        if highlights:
            st.markdown("\n".join(f"- {highlight}" for highlight in highlights))
