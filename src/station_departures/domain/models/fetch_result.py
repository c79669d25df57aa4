"""Uniform outcome of a single fetch."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from station_departures.domain.models.fetch_error import FetchError

T = TypeVar("T")


@dataclass(frozen=True)
class FetchResult(Generic[T]):
    """Either a fetched value or the error that prevented fetching it."""

    value: T | None = None
    error: FetchError | None = None

    @classmethod
    def success(cls, value: T) -> FetchResult[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, error: FetchError) -> FetchResult[T]:
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value, raising the stored error if the fetch failed."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]
