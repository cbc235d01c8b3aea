"""
Pipeline orchestrator - runs a search request from scrape to stored results.
"""
import logging
import uuid
from datetime import datetime
from typing import Optional

from ..ai.scoring import ScoringProvider, select_scoring_provider
from ..client.apify import ApifyClient
from ..models.listing import CanonicalListing, RawListing
from ..models.search import NormalizedSearchParams, SearchPayload, SearchResponse
from ..storage import SearchStore

from .dedup import deduplicate
from .filter import ListingFilter
from .merge import merge_scores
from .normalize import normalize_listings


logger = logging.getLogger(__name__)


def post_process_listings(
    listings: list[RawListing],
    params: NormalizedSearchParams,
) -> list[CanonicalListing]:
    """
    Deduplicate, normalize and filter raw scraped listings.

    Args:
        listings: Raw records from the scraper
        params: Normalized search parameters

    Returns:
        Canonical listings that pass the filter, in scrape order
    """
    deduped = deduplicate(listings)
    normalized = normalize_listings(deduped)
    return ListingFilter(params).filter(normalized)


def score_listings(
    listings: list[CanonicalListing],
    provider: ScoringProvider,
) -> list[CanonicalListing]:
    """Score listings with the given provider and merge the scores back."""
    scores = provider.score(listings)
    return merge_scores(listings, scores)


class SearchService:
    """
    Runs the full search pipeline for one request.

    Stages run in a fixed order: record search, scrape, deduplicate,
    normalize, filter, score (when requested), record results. Any exception
    ends the request; nothing is returned for a partially processed search.
    """

    def __init__(
        self,
        source: Optional[ApifyClient] = None,
        store: Optional[SearchStore] = None,
        local_scorer: Optional[ScoringProvider] = None,
    ):
        self._source = source
        self.store = store or SearchStore()
        self.local_scorer = local_scorer

    @property
    def source(self) -> ApifyClient:
        if self._source is None:
            self._source = ApifyClient()
        return self._source

    def search(
        self,
        payload: SearchPayload,
        user_id: Optional[str] = None,
        base_url: Optional[str] = None,
    ) -> SearchResponse:
        """
        Execute a search.

        Args:
            payload: Validated request body
            user_id: Optional caller id stored with the search
            base_url: Where our own API is reachable, for remote scoring

        Returns:
            SearchResponse with the search id and the final listings
        """
        run_id = str(uuid.uuid4())[:8]
        started_at = datetime.now()
        params = payload.normalize()

        logger.info(f"Starting search run {run_id} for {params.model_dump(by_alias=True)}")

        search_id = self.store.record_search(payload.to_record(), user_id)

        raw_listings = self.source.fetch_listings(params)
        logger.info(f"Fetched {len(raw_listings)} raw listings")

        results = post_process_listings(raw_listings, params)

        if payload.ai_scoring:
            provider = select_scoring_provider(base_url, local=self.local_scorer)
            results = score_listings(results, provider)

        self.store.record_results(search_id, results)

        elapsed = (datetime.now() - started_at).total_seconds()
        logger.info(f"Search run {run_id} completed: {len(results)} results in {elapsed:.1f}s")

        return SearchResponse(search_id=search_id, results=results)
