"""Worst-rated filtering and ordering."""

import logging
from typing import Iterable, List

from flopmap.core.models import EnrichedPlace

logger = logging.getLogger(__name__)

DEFAULT_MIN_REVIEW_COUNT = 1


def _rating_bucket(rating: float) -> int:
    # Ratings are published in tenths; anything closer than 0.1 shares a bucket.
    return int(round(rating * 10))


def rank_worst_rated(
    places: Iterable[EnrichedPlace],
    max_results: int,
    min_review_count: int = DEFAULT_MIN_REVIEW_COUNT,
) -> List[EnrichedPlace]:
    """Lowest rating first; equal ratings put the most-reviewed place first."""
    eligible = [
        place
        for place in places
        if place.rating is not None and place.review_count >= min_review_count
    ]
    ranked = sorted(eligible, key=lambda place: (_rating_bucket(place.rating), -place.review_count))
    top = ranked[:max_results]

    logger.info("%d places eligible, keeping %d", len(eligible), len(top))
    for index, place in enumerate(top, start=1):
        logger.debug("  %d. %s: %.1f (%d reviews)", index, place.name, place.rating, place.review_count)
    return top
