"""Application configuration helpers."""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settings:
    google_api_key: str
    worker_port: int = 8080
    default_radius: int = 5000
    default_max_results: int = 10
    # Places with fewer reviews are ignored by the worst-rated filter.
    # 1 keeps sparse areas populated; raise it to discard single-review outliers.
    min_review_count: int = 1
    review_star_cutoff: int = 3
    reviews_per_place: int = 5
    max_categories: int = 6
    detail_batch_size: int = 5
    category_delay: float = 0.2
    batch_delay: float = 0.5
    provider_timeout: float = 10.0
    provider_language: str = "fr"
    default_phone_region: str = "FR"


def _int_env(name: str, default: int) -> int:
    return int(os.getenv(name, str(default)))


def _float_env(name: str, default: float) -> float:
    return float(os.getenv(name, str(default)))


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings from environment variables with sensible defaults."""
    load_dotenv()

    google_api_key = os.getenv("GOOGLE_MAPS_API_KEY") or os.getenv("GOOGLE_API_KEY", "")
    worker_port = int(os.getenv("PORT") or os.getenv("WORKER_PORT") or "8080")
    phone_region_raw = os.getenv("DEFAULT_PHONE_REGION", "FR")
    language = os.getenv("PROVIDER_LANGUAGE", "fr").strip() or "fr"

    if not google_api_key:
        logger.warning("GOOGLE_MAPS_API_KEY is not configured; geocoding and Places requests will fail.")

    return Settings(
        google_api_key=google_api_key,
        worker_port=worker_port,
        default_radius=_int_env("SEARCH_DEFAULT_RADIUS", 5000),
        default_max_results=_int_env("SEARCH_DEFAULT_MAX_RESULTS", 10),
        min_review_count=_int_env("SEARCH_MIN_REVIEW_COUNT", 1),
        review_star_cutoff=_int_env("SEARCH_REVIEW_STAR_CUTOFF", 3),
        reviews_per_place=_int_env("SEARCH_REVIEWS_PER_PLACE", 5),
        max_categories=_int_env("SEARCH_MAX_CATEGORIES", 6),
        detail_batch_size=_int_env("SEARCH_DETAIL_BATCH_SIZE", 5),
        category_delay=_float_env("SEARCH_CATEGORY_DELAY", 0.2),
        batch_delay=_float_env("SEARCH_BATCH_DELAY", 0.5),
        provider_timeout=_float_env("PROVIDER_TIMEOUT", 10.0),
        provider_language=language,
        default_phone_region=phone_region_raw.strip().upper() or "FR",
    )
