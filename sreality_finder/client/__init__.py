"""Scraping source clients."""

from .apify import ApifyClient, build_actor_input

__all__ = ["ApifyClient", "build_actor_input"]
