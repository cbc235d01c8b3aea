"""Pipeline modules for listing processing."""

from .dedup import deduplicate
from .normalize import normalize_listing, normalize_listings
from .filter import ListingFilter, filter_listings
from .merge import merge_scores
from .orchestrator import SearchService, post_process_listings

__all__ = [
    "deduplicate",
    "normalize_listing",
    "normalize_listings",
    "ListingFilter",
    "filter_listings",
    "merge_scores",
    "SearchService",
    "post_process_listings",
]
