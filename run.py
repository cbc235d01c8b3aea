#!/usr/bin/env python
"""
Run script for Sreality Finder.
Use: python run.py api   (HTTP API on the configured host/port)
Or:  python run.py ui    (Streamlit search UI)
"""
import sys
import subprocess

from sreality_finder.config import get_config


def run_api():
    """Run the FastAPI app under uvicorn."""
    config = get_config().server
    subprocess.run([
        sys.executable, "-m", "uvicorn",
        "sreality_finder.api.app:create_app",
        "--factory",
        f"--host={config.host}",
        f"--port={config.port}",
    ])


def run_ui():
    """Run the Streamlit app."""
    subprocess.run([
        sys.executable, "-m", "streamlit", "run",
        "sreality_finder/ui/app.py",
        "--server.port=8502",
        "--browser.gatherUsageStats=false",
    ])


def main():
    target = sys.argv[1] if len(sys.argv) > 1 else "api"
    if target == "ui":
        run_ui()
    elif target == "api":
        run_api()
    else:
        sys.exit(f"Unknown target {target!r}, expected 'api' or 'ui'")


if __name__ == "__main__":
    main()
