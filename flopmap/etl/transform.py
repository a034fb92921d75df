"""Utilities for shaping ranked places into the JSON returned to clients."""

from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from flopmap.core.categories import describe_types
from flopmap.core.geo import haversine_m
from flopmap.core.models import (
    Coordinate,
    Photo,
    RankedPlace,
    ScoredReview,
    SearchFailure,
    SearchResult,
)

PhotoUrlBuilder = Callable[[str, int], str]


def _location(place: RankedPlace) -> Optional[Coordinate]:
    details_coordinate = place.place.details.coordinate
    if details_coordinate is not None:
        return details_coordinate
    raw_location = (place.place.candidate.raw.get("geometry") or {}).get("location") or {}
    if raw_location.get("lat") is None or raw_location.get("lng") is None:
        return None
    return Coordinate(float(raw_location["lat"]), float(raw_location["lng"]))


def to_photo_payload(photo: Photo, photo_url: Optional[PhotoUrlBuilder]) -> Dict[str, Any]:
    return {
        "url": photo_url(photo.reference, 400) if photo_url else None,
        "thumbnailUrl": photo_url(photo.reference, 150) if photo_url else None,
        "width": photo.width,
        "height": photo.height,
        "attributions": list(photo.attributions),
    }


def to_review_payload(review: ScoredReview) -> Dict[str, Any]:
    return {
        "rating": review.stars,
        "text": review.text,
        "timeAgo": review.time_ago,
        "useful": review.useful,
        "crunchinessScore": review.score,
    }


def to_place_payload(
    ranked: RankedPlace,
    *,
    origin: Optional[Coordinate] = None,
    photo_url: Optional[PhotoUrlBuilder] = None,
) -> Dict[str, Any]:
    details = ranked.place.details
    candidate = ranked.place.candidate
    location = _location(ranked)
    types = details.types or list(candidate.raw.get("types") or [])

    distance = None
    if origin is not None and location is not None:
        distance = round(haversine_m(origin, location))

    return {
        "id": candidate.place_id,
        "name": ranked.place.name,
        "rating": details.rating,
        "reviewCount": details.review_count,
        "address": details.address,
        "location": location.as_dict() if location else {"lat": None, "lng": None},
        "distanceMeters": distance,
        "types": types,
        "typeLabels": describe_types(types),
        "priceLevel": details.price_level,
        "isOpen": details.open_now,
        "photos": [to_photo_payload(photo, photo_url) for photo in details.photos],
        "website": details.website,
        "phoneNumber": details.phone,
        "crunchyReviews": [to_review_payload(review) for review in ranked.reviews],
        "searchType": candidate.category,
    }


def to_search_payload(result: SearchResult, photo_url: Optional[PhotoUrlBuilder] = None) -> Dict[str, Any]:
    location = result.location
    places: List[Dict[str, Any]] = [
        to_place_payload(place, origin=location.coordinate, photo_url=photo_url) for place in result.places
    ]
    return {
        "success": True,
        "searchQuery": {
            "original": location.original,
            "type": location.kind,
            "formatted": location.formatted_address,
            "coordinates": location.coordinate.as_dict(),
            "countryCode": location.country_code,
        },
        "results": {
            "places": places,
            "totalFound": result.total_found,
            "displayCount": len(places),
        },
        "searchParams": {
            "radius": result.radius,
            "maxResults": result.max_results,
            "placeTypes": list(result.categories),
        },
        "executionTime": result.execution_time_ms,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


def to_failure_payload(failure: SearchFailure) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"success": False, "kind": failure.kind, "error": failure.message}
    if failure.details:
        payload["details"] = list(failure.details)
    if failure.suggestions:
        payload["suggestions"] = list(failure.suggestions)
    return payload
