"""Collect nearby-search candidates across place categories."""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

import requests

from flopmap.core.categories import DEFAULT_CATEGORIES
from flopmap.core.errors import (
    AccessDeniedError,
    ProviderError,
    ProviderQuotaExceededError,
    ProviderUnavailableError,
    QuotaExceededError,
)
from flopmap.core.models import Candidate, Coordinate
from flopmap.core.providers import PlaceSearch
from flopmap.core.throttle import NoopLimiter

logger = logging.getLogger(__name__)

MAX_CATEGORIES = 6


@dataclass
class Aggregation:
    candidates: List[Candidate]
    categories: List[str]
    failed_categories: List[str] = field(default_factory=list)
    quota_exhausted: bool = False


def normalize_categories(categories: Optional[Iterable[str]], max_categories: int = MAX_CATEGORIES) -> List[str]:
    """Strip, de-duplicate and truncate requested categories; fall back to the defaults."""
    cleaned: List[str] = []
    for category in categories or []:
        name = str(category).strip()
        if name and name not in cleaned:
            cleaned.append(name)

    selected = cleaned or list(DEFAULT_CATEGORIES)
    if len(selected) > max_categories:
        logger.info(
            "Querying only the first %d of %d categories: %s",
            max_categories,
            len(selected),
            ", ".join(selected[:max_categories]),
        )
    return selected[:max_categories]


class CandidateAggregator:
    def __init__(self, places: PlaceSearch, *, limiter=None, max_categories: int = MAX_CATEGORIES) -> None:
        self._places = places
        self._limiter = limiter or NoopLimiter()
        self._max_categories = max_categories

    def collect(
        self,
        coordinate: Coordinate,
        radius: int,
        categories: Optional[Iterable[str]] = None,
    ) -> Aggregation:
        selected = normalize_categories(categories, self._max_categories)
        logger.info(
            "Searching %d categories within %dm of %s,%s",
            len(selected),
            radius,
            coordinate.lat,
            coordinate.lng,
        )

        merged: Dict[str, Candidate] = {}
        failed: List[str] = []
        quota_exhausted = False

        for category in selected:
            self._limiter.acquire()
            try:
                results = self._places.nearby(coordinate, radius, category)
            except QuotaExceededError:
                logger.error("Places quota exceeded while searching %s; stopping category loop", category)
                quota_exhausted = True
                break
            except AccessDeniedError as exc:
                raise ProviderUnavailableError("Places provider rejected the request") from exc
            except (ProviderError, requests.RequestException) as exc:
                logger.warning("Nearby search failed for %s: %s", category, exc)
                failed.append(category)
                continue

            added = 0
            for result in results:
                place_id = result.get("place_id")
                if not place_id:
                    logger.debug("Skipping result without place_id: %s", result)
                    continue
                if place_id in merged:
                    continue
                merged[place_id] = Candidate(
                    place_id=place_id,
                    name=result.get("name") or "",
                    category=category,
                    raw=result,
                )
                added += 1
            logger.info("%s: %d results, %d new", category, len(results), added)

        candidates = list(merged.values())
        logger.info("Total unique candidates: %d", len(candidates))

        if not candidates:
            if quota_exhausted:
                raise ProviderQuotaExceededError("Places quota exceeded, retry later")
            if failed and len(failed) == len(selected):
                raise ProviderUnavailableError("Places provider is unavailable")

        return Aggregation(
            candidates=candidates,
            categories=selected,
            failed_categories=failed,
            quota_exhausted=quota_exhausted,
        )
