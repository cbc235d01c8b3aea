"""
Sreality Finder - Streamlit UI

Search form and result cards. Searches go through the HTTP API so the UI
sees exactly what any other client would.
"""
import logging
import sys
from pathlib import Path
from typing import Any

# Add project root to path for imports when running via streamlit
project_root = Path(__file__).parent.parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

import requests
import streamlit as st

from sreality_finder.config import get_config
from sreality_finder.logging_utils import setup_logging
from sreality_finder.ui.components import render_results_section, render_search_form


logger = logging.getLogger("sreality_finder.ui")


def run_search(payload: dict[str, Any]) -> dict[str, Any]:
    """POST the payload to /api/search and return the decoded body."""
    config = get_config().ui
    url = f"{config.api_base_url.rstrip('/')}/api/search"
    response = requests.post(url, json=payload, timeout=config.request_timeout_s)
    if not response.ok:
        try:
            message = response.json().get("error")
        except ValueError:
            message = None
        raise RuntimeError(message or response.text or "Chyba při vyhledávání")
    return response.json()


def init_session_state():
    """Initialize session state variables."""
    defaults = {
        "results": None,
        "search_id": None,
    }
    for key, value in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = value


def main():
    """Main application entry point."""
    setup_logging()
    config = get_config()

    st.set_page_config(
        page_title=config.ui.page_title,
        page_icon=config.ui.page_icon,
        layout="wide",
    )
    init_session_state()

    st.title(config.ui.page_title)
    st.markdown("Vyplňte parametry hledání a získáte vyfiltrované nabídky včetně AI hodnocení.")

    payload = render_search_form()
    if payload is not None:
        with st.spinner("Hledám nemovitosti..."):
            try:
                data = run_search(payload)
            except (requests.RequestException, RuntimeError) as e:
                logger.error(f"Search error: {e}")
                st.error("Nepodařilo se vyhledat nemovitosti. Zkuste to prosím znovu.")
                st.caption(str(e))
            else:
                st.session_state.results = data.get("results") or []
                st.session_state.search_id = data.get("searchId")

    if st.session_state.results is not None:
        render_results_section(st.session_state.results)


if __name__ == "__main__":
    main()
