"""
Listing filter - apply the user's hard constraints to normalized listings.
"""
import logging

from ..models.listing import CanonicalListing
from ..models.search import NormalizedSearchParams


logger = logging.getLogger(__name__)


class ListingFilter:
    """
    Rejects listings that provably violate a constraint.

    A listing whose relevant field is unknown is kept. Only priceM2Max and
    roomsFrom are applied here; priceMax and keywords go to the scraper.
    """

    def __init__(self, params: NormalizedSearchParams):
        self.params = params

    def filter(self, listings: list[CanonicalListing]) -> list[CanonicalListing]:
        """
        Filter listings against the search parameters.

        Args:
            listings: Normalized listings

        Returns:
            The listings that pass, in their original order
        """
        if not listings:
            return []

        filtered = [listing for listing in listings if self.accepts(listing)]
        logger.info(f"Filtered {len(listings)} listings to {len(filtered)}")
        return filtered

    def accepts(self, listing: CanonicalListing) -> bool:
        """Check a single listing against every supplied constraint."""
        price_m2_max = self.params.price_m2_max
        price_per_m2 = listing.derived.price_per_m2
        if price_m2_max is not None and price_per_m2 is not None:
            if price_per_m2 > price_m2_max:
                return False

        rooms_from = self.params.rooms_from
        if rooms_from is not None and listing.rooms is not None:
            if listing.rooms < rooms_from:
                return False

        return True


def filter_listings(
    params: NormalizedSearchParams,
    listings: list[CanonicalListing],
) -> list[CanonicalListing]:
    """Convenience wrapper around ListingFilter."""
    return ListingFilter(params).filter(listings)
