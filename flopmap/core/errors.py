"""Exception hierarchy for provider calls and search failures."""

from typing import List, Optional


class ProviderError(RuntimeError):
    """Raised when a Google web service returns a non-successful response."""

    def __init__(self, message: str, status: Optional[str] = None) -> None:
        super().__init__(message)
        self.status = status


class QuotaExceededError(ProviderError):
    """The provider reported OVER_QUERY_LIMIT."""


class AccessDeniedError(ProviderError):
    """The provider rejected the key (REQUEST_DENIED)."""


class NotFoundError(ProviderError):
    """The provider had no result for the request."""


class SearchError(Exception):
    """Base class for failures surfaced by the search service."""

    kind = "InternalError"

    def __init__(
        self,
        message: str,
        *,
        details: Optional[List[str]] = None,
        suggestions: Optional[List[str]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = list(details or [])
        self.suggestions = list(suggestions or [])


class InvalidInputError(SearchError):
    kind = "InvalidInput"


class InvalidCoordinatesError(InvalidInputError):
    """Coordinates parsed from the query are outside [-90,90] x [-180,180]."""


class LocationNotResolvedError(SearchError):
    kind = "LocationNotResolved"


class ProviderQuotaExceededError(SearchError):
    kind = "ProviderQuotaExceeded"


class ProviderUnavailableError(SearchError):
    kind = "ProviderUnavailable"


class InternalError(SearchError):
    kind = "InternalError"
