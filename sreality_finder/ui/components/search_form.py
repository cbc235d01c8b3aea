"""
Search form component.
"""
from typing import Any, Optional

import streamlit as st


def parse_keywords(text: str) -> list[str]:
    """Split comma separated keywords, dropping blanks."""
    return [keyword.strip() for keyword in text.split(",") if keyword.strip()]


def build_search_payload(
    city: str,
    rooms_from: int = 0,
    price_max: int = 0,
    price_m2_max: int = 0,
    keywords: str = "",
    ai_scoring: bool = True,
) -> Optional[dict[str, Any]]:
    """
    Build the /api/search request body from form values.

    Zero means "not set" for the numeric inputs. Returns None when no city
    was entered.
    """
    city = city.strip()
    if not city:
        return None

    payload: dict[str, Any] = {"city": city, "aiScoring": ai_scoring}
    if rooms_from > 0:
        payload["roomsFrom"] = int(rooms_from)
    if price_max > 0:
        payload["priceMax"] = int(price_max)
    if price_m2_max > 0:
        payload["priceM2Max"] = int(price_m2_max)

    parsed_keywords = parse_keywords(keywords)
    if parsed_keywords:
        payload["keywords"] = parsed_keywords

    return payload


def render_search_form() -> Optional[dict[str, Any]]:
    """
    Render the search form.

    Returns:
        The request payload when the form was submitted with a city,
        otherwise None
    """
    with st.form("search_form"):
        col1, col2 = st.columns(2)
        with col1:
            city = st.text_input("Město *", placeholder="Např. Praha")
        with col2:
            rooms_from = st.number_input("Dispozice od", min_value=0, value=0, step=1)

        col3, col4 = st.columns(2)
        with col3:
            price_max = st.number_input("Maximální cena (Kč)", min_value=0, value=0, step=100000)
        with col4:
            price_m2_max = st.number_input("Cena za m² (Kč)", min_value=0, value=0, step=1000)

        keywords = st.text_area(
            "Klíčová slova (odděleno čárkou)",
            placeholder="Např. balkon, sklep, parkování",
        )
        ai_scoring = st.toggle("AI hodnocení", value=True)

        submitted = st.form_submit_button("🔍 Hledat", type="primary")

    if not submitted:
        return None

    payload = build_search_payload(
        city=city,
        rooms_from=int(rooms_from),
        price_max=int(price_max),
        price_m2_max=int(price_m2_max),
        keywords=keywords,
        ai_scoring=ai_scoring,
    )
    if payload is None:
        st.error("Chybí město. Prosím zadejte alespoň město, které vás zajímá.")
    return payload
