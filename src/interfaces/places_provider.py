"""Abstract base class for third-party places search providers.

The places provider supplies candidate bars near a coordinate.  It owns no
verification data; the bar search service overlays our own vote tallies
on top of whatever the provider returns.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class PlaceResult:
    """A single place returned by the provider.

    Attributes
    ----------
    place_id:
        Provider-issued identifier; used as the venue id for votes and reviews.
    name:
        Display name.
    address:
        Short address or vicinity string.
    latitude, longitude:
        WGS-84 coordinates of the place.
    rating:
        Provider's own star rating, when it has one.
    price_level:
        0 (free) to 4 (very expensive), when known.
    photo_reference:
        Opaque reference for fetching the first photo, when available.
    open_now:
        ``None`` when the provider has no opening-hours data.
    """

    place_id: str
    name: str
    address: str
    latitude: float
    longitude: float
    rating: float | None = None
    price_level: int | None = None
    photo_reference: str | None = None
    open_now: bool | None = None


class IPlacesProvider(ABC):
    """Contract for nearby-place text search."""

    @abstractmethod
    async def search_bars(
        self,
        latitude: float,
        longitude: float,
        radius_m: int,
        query: str,
    ) -> list[PlaceResult]:
        """Search for bars matching ``query`` around the coordinate.

        Raises
        ------
        ProviderUnavailableError
            If the provider is unreachable or rejects the request.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this provider."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` when the provider is configured (e.g. has an API key)."""
