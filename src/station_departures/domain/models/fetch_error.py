"""Fetch error taxonomy.

Every failure of a single fetch surfaces as one of these exceptions. Callers
can distinguish connectivity problems from unexpected response shapes and
from unknown station ids.
"""

from station_departures.domain.models.error_details import ErrorDetails


class FetchError(Exception):
    """Base class for all fetch failures."""

    kind = "fetch_error"

    def __init__(self, reason: str, status_code: int | None = None) -> None:
        super().__init__(reason)
        self.reason = reason
        self.status_code = status_code

    @property
    def details(self) -> ErrorDetails:
        return ErrorDetails(kind=self.kind, status_code=self.status_code, reason=self.reason)

    def __str__(self) -> str:
        if self.status_code is not None:
            return f"{self.reason} (status: {self.status_code})"
        return self.reason


class NetworkUnavailable(FetchError):
    """The remote provider could not be reached or answered with an error status."""

    kind = "network_unavailable"


class MalformedResponse(FetchError):
    """The response body could not be decoded into the expected shape."""

    kind = "malformed_response"


class NotFound(FetchError):
    """The requested station id is unknown to the provider."""

    kind = "not_found"
