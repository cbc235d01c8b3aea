"""
Deduplication of raw scraped listings.
"""
import logging
import uuid

from ..models.listing import RawListing


logger = logging.getLogger(__name__)


def identity_key(raw: RawListing) -> str:
    """
    Key used to recognise the same listing twice in one scrape.

    URL first, then the stringified id. A listing with neither gets a random
    key, so it is never dropped but also never matched against anything.
    """
    url = raw.get("url")
    if url:
        return str(url)

    listing_id = raw.get("id")
    if listing_id is not None:
        return str(listing_id)

    return uuid.uuid4().hex


def deduplicate(listings: list[RawListing]) -> list[RawListing]:
    """Keep the first listing for each identity key, in first-seen order."""
    seen: dict[str, RawListing] = {}
    for raw in listings:
        key = identity_key(raw)
        if key not in seen:
            seen[key] = raw

    if len(seen) < len(listings):
        logger.info(f"Dropped {len(listings) - len(seen)} duplicate listings")

    return list(seen.values())
