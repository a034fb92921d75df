"""Fetch place details for candidates in small concurrent batches."""

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import List, Sequence

import requests

from flopmap.core.errors import ProviderError, ProviderQuotaExceededError, QuotaExceededError
from flopmap.core.models import Candidate, EnrichedPlace
from flopmap.core.providers import PlaceSearch

logger = logging.getLogger(__name__)

BATCH_SIZE = 5
BATCH_DELAY_SECONDS = 0.5


class DetailEnricher:
    def __init__(
        self,
        places: PlaceSearch,
        *,
        batch_size: int = BATCH_SIZE,
        batch_delay: float = BATCH_DELAY_SECONDS,
    ) -> None:
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        self._places = places
        self._batch_size = batch_size
        self._batch_delay = batch_delay

    def enrich(self, candidates: Sequence[Candidate]) -> List[EnrichedPlace]:
        """Return enriched places in input order; candidates whose details fail are dropped."""
        enriched: List[EnrichedPlace] = []
        quota_failures = 0
        logger.info("Fetching details for %d candidates", len(candidates))

        with ThreadPoolExecutor(max_workers=self._batch_size) as executor:
            for start in range(0, len(candidates), self._batch_size):
                batch = candidates[start : start + self._batch_size]
                futures = [executor.submit(self._places.details, c.place_id) for c in batch]

                succeeded = 0
                for candidate, future in zip(batch, futures):
                    try:
                        details = future.result()
                    except QuotaExceededError as exc:
                        quota_failures += 1
                        logger.warning("Details quota exceeded for %s: %s", candidate.place_id, exc)
                        continue
                    except (ProviderError, requests.RequestException) as exc:
                        logger.warning("Failed to fetch details for %s (%s): %s", candidate.place_id, candidate.name, exc)
                        continue
                    except (KeyError, TypeError, ValueError, AttributeError) as exc:
                        logger.warning("Malformed details for %s (%s): %r", candidate.place_id, candidate.name, exc)
                        continue
                    enriched.append(EnrichedPlace(candidate=candidate, details=details))
                    succeeded += 1

                logger.info(
                    "Batch %d: %d/%d details fetched",
                    start // self._batch_size + 1,
                    succeeded,
                    len(batch),
                )
                if start + self._batch_size < len(candidates):
                    time.sleep(self._batch_delay)

        if candidates and quota_failures == len(candidates):
            raise ProviderQuotaExceededError("Places quota exceeded while fetching details")
        return enriched
