"""
Merge AI score results back onto listings.
"""
import logging

from ..models.listing import CanonicalListing
from ..models.scoring import ScoreResult


logger = logging.getLogger(__name__)


def merge_scores(
    listings: list[CanonicalListing],
    scores: list[ScoreResult],
) -> list[CanonicalListing]:
    """
    Attach aiScore/aiReason/aiHighlights to listings with a matching id.

    Output has the same length and order as `listings`. Unmatched listings are
    returned unchanged. If several results share an id, the last one wins.
    """
    by_id = {score.id: score for score in scores}

    merged = []
    for listing in listings:
        score = by_id.get(listing.id)
        if score is None:
            merged.append(listing)
            continue
        merged.append(listing.model_copy(update={
            "ai_score": score.ai_score,
            "ai_reason": score.ai_reason,
            "ai_highlights": list(score.ai_highlights),
        }))

    matched = sum(1 for listing in listings if listing.id in by_id)
    logger.info(f"Merged scores for {matched}/{len(listings)} listings")
    return merged
