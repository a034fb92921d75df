"""Worst-rated search: location → candidates → details → ranking → reviews."""

import logging
import time
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple, Union

from flopmap.core.aggregator import CandidateAggregator
from flopmap.core.config import Settings, get_settings
from flopmap.core.enricher import DetailEnricher
from flopmap.core.errors import InternalError, InvalidInputError, SearchError
from flopmap.core.location import LocationResolver
from flopmap.core.models import RankedPlace, SearchFailure, SearchResult
from flopmap.core.ranking import rank_worst_rated
from flopmap.core.reviews import select_crunchy_reviews
from flopmap.core.throttle import RateLimiter
from flopmap.vendors.google_geocoding import GoogleGeocodingClient
from flopmap.vendors.google_places import GooglePlacesClient

logger = logging.getLogger(__name__)

MAX_RADIUS = 50000
MAX_RESULTS = 50


def _parse_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return None


def validate_search_params(
    query: Any,
    radius: Any,
    max_results: Any,
    categories: Any,
    settings: Settings,
) -> Tuple[str, int, int, List[str]]:
    """Return normalized parameters or raise InvalidInputError listing every problem."""
    errors: List[str] = []

    if not isinstance(query, str) or not query.strip():
        errors.append("La requête géographique est requise")

    radius_value = settings.default_radius
    if radius is not None:
        radius_value = _parse_int(radius)
        if radius_value is None or not 1 <= radius_value <= MAX_RADIUS:
            errors.append(f"Le rayon doit être entre 1 et {MAX_RADIUS} mètres")

    max_value = settings.default_max_results
    if max_results is not None:
        max_value = _parse_int(max_results)
        if max_value is None or not 1 <= max_value <= MAX_RESULTS:
            errors.append(f"Le nombre maximum de résultats doit être entre 1 et {MAX_RESULTS}")

    category_list: List[str] = []
    if categories is not None:
        if not isinstance(categories, (list, tuple)) or not all(isinstance(c, str) for c in categories):
            errors.append("Les types de lieux doivent être une liste de chaînes")
        else:
            category_list = list(categories)

    if errors:
        raise InvalidInputError("Paramètres invalides", details=errors)
    return query.strip(), radius_value, max_value, category_list


class WorstRatedSearch:
    """Runs one search per call; never raises, returns SearchResult or SearchFailure."""

    def __init__(
        self,
        resolver: LocationResolver,
        aggregator: CandidateAggregator,
        enricher: DetailEnricher,
        settings: Optional[Settings] = None,
    ) -> None:
        self._resolver = resolver
        self._aggregator = aggregator
        self._enricher = enricher
        self._settings = settings or get_settings()

    def search(
        self,
        query: Any,
        radius: Any = None,
        max_results: Any = None,
        categories: Any = None,
    ) -> Union[SearchResult, SearchFailure]:
        started = time.monotonic()
        try:
            result = self._run(query, radius, max_results, categories, started)
        except SearchError as exc:
            logger.warning("Search failed kind=%s: %s", exc.kind, exc.message)
            return SearchFailure(
                kind=exc.kind,
                message=exc.message,
                details=exc.details,
                suggestions=exc.suggestions,
            )
        except Exception as exc:  # noqa: BLE001
            logger.exception("Unexpected error during search for query=%r: %s", query, exc)
            error = InternalError("Erreur interne du serveur")
            return SearchFailure(kind=error.kind, message=error.message)

        logger.info(
            "Search complete: %d places in %dms",
            len(result.places),
            result.execution_time_ms,
        )
        return result

    def _run(self, query, radius, max_results, categories, started: float) -> SearchResult:
        settings = self._settings
        query, radius, max_results, categories = validate_search_params(
            query, radius, max_results, categories, settings
        )
        logger.info("Search: query=%r radius=%dm max=%d", query, radius, max_results)

        location = self._resolver.resolve(query)
        logger.info("Location resolved: %s", location.formatted_address)

        aggregation = self._aggregator.collect(location.coordinate, radius, categories)
        places: List[RankedPlace] = []

        if aggregation.candidates:
            enriched = self._enricher.enrich(aggregation.candidates)
            worst = rank_worst_rated(enriched, max_results, settings.min_review_count)
            places = [
                RankedPlace(
                    place=place,
                    reviews=select_crunchy_reviews(
                        place.details.reviews,
                        star_cutoff=settings.review_star_cutoff,
                        limit=settings.reviews_per_place,
                        phone_region=settings.default_phone_region,
                    ),
                )
                for place in worst
            ]
        else:
            logger.info("No establishments found around %s", location.formatted_address)

        return SearchResult(
            location=location,
            places=places,
            total_found=len(aggregation.candidates),
            radius=radius,
            max_results=max_results,
            categories=aggregation.categories,
            execution_time_ms=int((time.monotonic() - started) * 1000),
        )


@dataclass
class SearchStack:
    """The search service plus the provider clients it was built with."""

    service: WorstRatedSearch
    places: GooglePlacesClient
    geocoder: GoogleGeocodingClient


def build_search_service(settings: Optional[Settings] = None, limiter: Optional[RateLimiter] = None) -> SearchStack:
    """Wire the Google clients into a WorstRatedSearch."""
    settings = settings or get_settings()
    if not settings.google_api_key:
        raise RuntimeError("GOOGLE_MAPS_API_KEY is required")

    places = GooglePlacesClient(
        settings.google_api_key,
        timeout=settings.provider_timeout,
        language=settings.provider_language,
    )
    geocoder = GoogleGeocodingClient(settings.google_api_key, timeout=settings.provider_timeout)
    if limiter is None and settings.category_delay > 0:
        limiter = RateLimiter.from_interval(settings.category_delay)

    service = WorstRatedSearch(
        resolver=LocationResolver(geocoder),
        aggregator=CandidateAggregator(places, limiter=limiter, max_categories=settings.max_categories),
        enricher=DetailEnricher(places, batch_size=settings.detail_batch_size, batch_delay=settings.batch_delay),
        settings=settings,
    )
    return SearchStack(service=service, places=places, geocoder=geocoder)
