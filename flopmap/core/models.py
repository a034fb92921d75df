"""Core data models shared by the worst-rated search pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

MAX_PHOTOS = 3


@dataclass(frozen=True, slots=True)
class Coordinate:
    lat: float
    lng: float

    def in_bounds(self) -> bool:
        return -90.0 <= self.lat <= 90.0 and -180.0 <= self.lng <= 180.0

    def as_dict(self) -> Dict[str, float]:
        return {"lat": self.lat, "lng": self.lng}


@dataclass(frozen=True, slots=True)
class AddressComponents:
    city: Optional[str] = None
    country: Optional[str] = None
    country_code: Optional[str] = None
    postal_code: Optional[str] = None
    state: Optional[str] = None
    region: Optional[str] = None


@dataclass(frozen=True, slots=True)
class GeocodeResult:
    """First match returned by the geocoding provider."""

    coordinate: Coordinate
    formatted_address: str
    components: AddressComponents = field(default_factory=AddressComponents)
    place_id: Optional[str] = None


@dataclass(frozen=True, slots=True)
class LocationQuery:
    """A free-text location resolved to a coordinate."""

    original: str
    kind: str
    coordinate: Coordinate
    formatted_address: str
    country_code: Optional[str] = None
    components: Optional[AddressComponents] = None
    place_id: Optional[str] = None


@dataclass(frozen=True, slots=True)
class Candidate:
    """A place surfaced by a nearby search, before enrichment."""

    place_id: str
    name: str
    category: str
    raw: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)


@dataclass(frozen=True, slots=True)
class Review:
    stars: int
    text: str = ""
    time: Optional[int] = None
    useful: bool = False


@dataclass(frozen=True, slots=True)
class Photo:
    reference: str
    width: Optional[int] = None
    height: Optional[int] = None
    attributions: List[str] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class PlaceDetails:
    """Place detail record; every provider field may be missing."""

    place_id: str
    name: Optional[str] = None
    rating: Optional[float] = None
    review_count: int = 0
    reviews: List[Review] = field(default_factory=list)
    address: Optional[str] = None
    coordinate: Optional[Coordinate] = None
    types: List[str] = field(default_factory=list)
    price_level: Optional[int] = None
    open_now: Optional[bool] = None
    photos: List[Photo] = field(default_factory=list)
    website: Optional[str] = None
    phone: Optional[str] = None

    @classmethod
    def from_api(cls, place_id: str, result: Dict[str, Any]) -> "PlaceDetails":
        """Build a record from a Place Details ``result`` object."""
        location = (result.get("geometry") or {}).get("location") or {}
        lat = _safe_float(location.get("lat"))
        lng = _safe_float(location.get("lng"))
        coordinate = Coordinate(lat, lng) if lat is not None and lng is not None else None

        reviews: List[Review] = []
        for raw in result.get("reviews") or []:
            stars = _safe_int(raw.get("rating"))
            if stars is None:
                continue
            reviews.append(
                Review(
                    stars=stars,
                    text=raw.get("text") or "",
                    time=_safe_int(raw.get("time")),
                    useful=bool(raw.get("useful", False)),
                )
            )

        photos = [
            Photo(
                reference=raw["photo_reference"],
                width=_safe_int(raw.get("width")),
                height=_safe_int(raw.get("height")),
                attributions=list(raw.get("html_attributions") or []),
            )
            for raw in (result.get("photos") or [])
            if raw.get("photo_reference")
        ][:MAX_PHOTOS]

        return cls(
            place_id=result.get("place_id") or place_id,
            name=result.get("name"),
            rating=_safe_float(result.get("rating")),
            review_count=_safe_int(result.get("user_ratings_total")) or 0,
            reviews=reviews,
            address=result.get("formatted_address"),
            coordinate=coordinate,
            types=list(result.get("types") or []),
            price_level=_safe_int(result.get("price_level")),
            open_now=(result.get("opening_hours") or {}).get("open_now"),
            photos=photos,
            website=result.get("website"),
            phone=result.get("formatted_phone_number"),
        )


@dataclass(frozen=True, slots=True)
class EnrichedPlace:
    candidate: Candidate
    details: PlaceDetails

    @property
    def place_id(self) -> str:
        return self.candidate.place_id

    @property
    def name(self) -> str:
        return self.details.name or self.candidate.name

    @property
    def rating(self) -> Optional[float]:
        return self.details.rating

    @property
    def review_count(self) -> int:
        return self.details.review_count


@dataclass(frozen=True, slots=True)
class ScoredReview:
    stars: int
    text: str
    time_ago: str
    score: float
    useful: bool = False


@dataclass(frozen=True, slots=True)
class RankedPlace:
    place: EnrichedPlace
    reviews: List[ScoredReview] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class SearchResult:
    location: LocationQuery
    places: List[RankedPlace]
    total_found: int
    radius: int
    max_results: int
    categories: List[str]
    execution_time_ms: int = 0


@dataclass(frozen=True, slots=True)
class SearchFailure:
    kind: str
    message: str
    details: List[str] = field(default_factory=list)
    suggestions: List[str] = field(default_factory=list)


def _safe_float(value: Any) -> Optional[float]:
    try:
        if value is None:
            return None
        return float(value)
    except (TypeError, ValueError):
        return None


def _safe_int(value: Any) -> Optional[int]:
    try:
        if value is None:
            return None
        return int(value)
    except (TypeError, ValueError):
        return None
