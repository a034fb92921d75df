"""Classify free-text location queries and resolve them to coordinates."""

import logging
import re
from dataclasses import dataclass
from typing import List, Optional

import requests

from flopmap.core.errors import (
    AccessDeniedError,
    InvalidCoordinatesError,
    InvalidInputError,
    LocationNotResolvedError,
    ProviderError,
    ProviderQuotaExceededError,
    ProviderUnavailableError,
    QuotaExceededError,
)
from flopmap.core.models import Coordinate, LocationQuery
from flopmap.core.providers import Geocoder

logger = logging.getLogger(__name__)

COORDINATES = "coordinates"
POSTAL_CODE = "postal_code"
CITY_COUNTRY = "city_country"
CITY = "city"

_COORDINATES_RE = re.compile(r"^([+-]?\d+(?:\.\d*)?)\s*[,\s]\s*([+-]?\d+(?:\.\d*)?)$")
_POSTAL_FR_RE = re.compile(r"^\d{5}$")
_POSTAL_CA_RE = re.compile(r"^[A-Z]\d[A-Z]\s?\d[A-Z]\d$", re.IGNORECASE)
_POSTAL_US_RE = re.compile(r"^\d{5}(-\d{4})?$")
_POSTAL_UK_RE = re.compile(r"^[A-Z]{1,2}\d{1,2}[A-Z]?\s?\d[A-Z]{2}$", re.IGNORECASE)

POPULAR_CITIES = (
    "Paris, France",
    "Lyon, France",
    "Marseille, France",
    "Toulouse, France",
    "Nice, France",
    "Nantes, France",
    "Strasbourg, France",
    "Montpellier, France",
    "Bordeaux, France",
    "Lille, France",
)

_SUGGESTIONS = {
    CITY: [
        'Essayez d\'ajouter le pays (ex: "Paris, France")',
        "Vérifiez l'orthographe de la ville",
        "Utilisez un code postal à la place",
    ],
    POSTAL_CODE: [
        "Vérifiez le format du code postal",
        "Essayez avec le nom de la ville",
    ],
    CITY_COUNTRY: [
        "Vérifiez l'orthographe de la ville et du pays",
        'Essayez un format différent (ex: "Paris, FR")',
    ],
}
_DEFAULT_SUGGESTIONS = [
    "Vérifiez l'orthographe",
    "Utilisez un format standard (ville, pays)",
    "Essayez avec des coordonnées GPS",
]


@dataclass(frozen=True)
class ClassifiedQuery:
    kind: str
    value: str
    formatted: str
    country: Optional[str] = None
    coordinate: Optional[Coordinate] = None


def classify_query(query: str) -> ClassifiedQuery:
    """Detect the location kind of ``query``; the first matching pattern wins."""
    trimmed = query.strip()

    match = _COORDINATES_RE.match(trimmed)
    if match:
        lat, lng = float(match.group(1)), float(match.group(2))
        return ClassifiedQuery(
            kind=COORDINATES,
            value=trimmed,
            formatted=f"{lat}, {lng}",
            coordinate=Coordinate(lat, lng),
        )

    if _POSTAL_FR_RE.match(trimmed):
        return ClassifiedQuery(POSTAL_CODE, trimmed, f"{trimmed}, France", country="FR")

    if _POSTAL_CA_RE.match(trimmed):
        upper = trimmed.upper()
        return ClassifiedQuery(POSTAL_CODE, re.sub(r"\s", "", upper), f"{upper}, Canada", country="CA")

    if _POSTAL_US_RE.match(trimmed):
        return ClassifiedQuery(POSTAL_CODE, trimmed, f"{trimmed}, USA", country="US")

    if _POSTAL_UK_RE.match(trimmed):
        upper = trimmed.upper()
        return ClassifiedQuery(POSTAL_CODE, upper, f"{upper}, UK", country="UK")

    segments = trimmed.split(",")
    if len(segments) == 2 and all(segment.strip() for segment in segments):
        return ClassifiedQuery(CITY_COUNTRY, trimmed, trimmed)

    return ClassifiedQuery(CITY, trimmed, trimmed)


def suggestions_for(kind: str) -> List[str]:
    return list(_SUGGESTIONS.get(kind, _DEFAULT_SUGGESTIONS))


def suggest_queries(partial: str, limit: int = 8) -> List[str]:
    """Autocomplete hints for a partially typed location."""
    text = (partial or "").strip().lower()
    if len(text) < 2:
        return []

    suggestions = [city for city in POPULAR_CITIES if text in city.lower()][:5]

    if re.fullmatch(r"\d{1,4}", text):
        suggestions.append(f"{text.ljust(5, '0')} (Code postal)")
    if "," in text or "." in text:
        suggestions.append("Exemple: 48.8566, 2.3522 (Coordonnées GPS)")

    if not suggestions:
        suggestions = [
            'Exemples: "Paris, France"',
            'Exemples: "75001"',
            'Exemples: "48.8566, 2.3522"',
        ]
    return suggestions[:limit]


class LocationResolver:
    """Turns a query into a LocationQuery, calling the geocoder only when needed."""

    def __init__(self, geocoder: Geocoder) -> None:
        self._geocoder = geocoder

    def resolve(self, query: str) -> LocationQuery:
        if not isinstance(query, str) or not query.strip():
            raise InvalidInputError("Invalid search parameters", details=["La requête géographique est requise"])

        classified = classify_query(query)
        logger.info("Detected location kind=%s for query=%r", classified.kind, query)

        if classified.kind == COORDINATES:
            coordinate = classified.coordinate
            if not coordinate.in_bounds():
                raise InvalidCoordinatesError(
                    "Invalid coordinates",
                    details=["Coordonnées invalides (latitude: -90 à 90, longitude: -180 à 180)"],
                )
            return LocationQuery(
                original=query,
                kind=COORDINATES,
                coordinate=coordinate,
                formatted_address=classified.formatted,
            )

        try:
            result = self._geocoder.geocode(classified.formatted)
        except QuotaExceededError as exc:
            raise ProviderQuotaExceededError("Geocoding quota exceeded, retry later") from exc
        except AccessDeniedError as exc:
            raise ProviderUnavailableError("Geocoding provider rejected the request") from exc
        except (ProviderError, requests.RequestException) as exc:
            logger.warning("Geocoding failed for %r: %s", classified.formatted, exc)
            raise LocationNotResolvedError(
                "Impossible de localiser cette adresse",
                suggestions=suggestions_for(classified.kind),
            ) from exc

        return LocationQuery(
            original=query,
            kind=classified.kind,
            coordinate=result.coordinate,
            formatted_address=result.formatted_address,
            country_code=classified.country or result.components.country_code,
            components=result.components,
            place_id=result.place_id,
        )
