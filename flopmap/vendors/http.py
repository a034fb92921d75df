"""Shared HTTP session setup for the Google web service clients."""

import logging
from typing import Any, Dict

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from flopmap.core.errors import AccessDeniedError, NotFoundError, ProviderError, QuotaExceededError

logger = logging.getLogger(__name__)

USER_AGENT = "FlopMap/1.0"


def build_session(retries: int = 2, backoff_factor: float = 0.5) -> requests.Session:
    """Session that retries GET requests on transient 5xx responses."""
    session = requests.Session()
    retry = Retry(
        total=retries,
        backoff_factor=backoff_factor,
        status_forcelist=(500, 502, 503, 504),
        allowed_methods=("GET",),
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retry)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    session.headers.update({"User-Agent": USER_AGENT})
    return session


def check_status(payload: Dict[str, Any], operation: str) -> str:
    """Raise the matching ProviderError subclass unless the status is OK or ZERO_RESULTS."""
    status = payload.get("status") or "UNKNOWN_ERROR"
    if status in {"OK", "ZERO_RESULTS"}:
        return status

    message = payload.get("error_message") or status
    logger.error("%s failed: status=%s, error_message=%s", operation, status, payload.get("error_message"))
    if status == "OVER_QUERY_LIMIT":
        raise QuotaExceededError(message, status=status)
    if status == "REQUEST_DENIED":
        raise AccessDeniedError(message, status=status)
    if status == "NOT_FOUND":
        raise NotFoundError(message, status=status)
    raise ProviderError(message, status=status)
