"""Google Places Text Search provider implementing IPlacesProvider.

Issues GET requests to the Places Text Search web service with a location
bias and radius, then maps each hit to a :class:`PlaceResult`.  The
``httpx.AsyncClient`` is injected so the app shares one connection pool and
tests can swap in a mock.

Status handling:
    OK            -> parsed results
    ZERO_RESULTS  -> empty list
    anything else -> ProviderUnavailableError (REQUEST_DENIED, OVER_QUERY_LIMIT, ...)
"""

from __future__ import annotations

from typing import Any

import httpx

from src.interfaces.places_provider import IPlacesProvider, PlaceResult
from src.utils.errors import ProviderUnavailableError
from src.utils.logging import get_logger

_PROVIDER_NAME = "google_places"
_TEXT_SEARCH_URL = "https://maps.googleapis.com/maps/api/place/textsearch/json"
_TIMEOUT = 10.0

_logger = get_logger(__name__)


class GooglePlacesProvider(IPlacesProvider):
    """Places Text Search over HTTPS.

    Parameters
    ----------
    http_client:
        Shared ``httpx.AsyncClient``.
    api_key:
        Google Maps Platform key.  An empty key marks the provider unavailable.
    """

    def __init__(self, http_client: httpx.AsyncClient, api_key: str) -> None:
        self._http = http_client
        self._api_key = api_key

    async def search_bars(
        self,
        latitude: float,
        longitude: float,
        radius_m: int,
        query: str,
    ) -> list[PlaceResult]:
        """Run a text search biased to the coordinate and radius."""
        if not self.is_available():
            raise ProviderUnavailableError(
                message="Google Places API key is not configured",
                provider_name=_PROVIDER_NAME,
            )

        params = {
            "query": query,
            "location": f"{latitude},{longitude}",
            "radius": str(radius_m),
            "type": "bar",
            "key": self._api_key,
        }

        try:
            response = await self._http.get(_TEXT_SEARCH_URL, params=params, timeout=_TIMEOUT)
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            _logger.warning("places_request_failed", error=str(exc))
            raise ProviderUnavailableError(
                message=f"Places search request failed: {exc}",
                provider_name=_PROVIDER_NAME,
            ) from exc

        status = payload.get("status", "UNKNOWN_ERROR")
        if status == "ZERO_RESULTS":
            return []
        if status != "OK":
            _logger.warning(
                "places_search_rejected",
                status=status,
                error_message=payload.get("error_message"),
            )
            raise ProviderUnavailableError(
                message=f"Places search returned status {status}",
                provider_name=_PROVIDER_NAME,
            )

        results = [
            place
            for place in (self._parse_place(item) for item in payload.get("results", []))
            if place is not None
        ]
        _logger.debug("places_search_complete", query=query, result_count=len(results))
        return results

    @staticmethod
    def _parse_place(item: dict[str, Any]) -> PlaceResult | None:
        """Map one raw result to a PlaceResult; skip entries missing id or location."""
        place_id = item.get("place_id")
        location = (item.get("geometry") or {}).get("location") or {}
        if not place_id or "lat" not in location or "lng" not in location:
            return None

        photos = item.get("photos") or []
        opening_hours = item.get("opening_hours") or {}

        return PlaceResult(
            place_id=place_id,
            name=item.get("name") or "Unknown Bar",
            address=item.get("formatted_address") or item.get("vicinity") or "",
            latitude=float(location["lat"]),
            longitude=float(location["lng"]),
            rating=item.get("rating"),
            price_level=item.get("price_level"),
            photo_reference=photos[0].get("photo_reference") if photos else None,
            open_now=opening_hours.get("open_now"),
        )

    def get_provider_name(self) -> str:
        """Return the provider identifier."""
        return _PROVIDER_NAME

    def is_available(self) -> bool:
        """Available only when an API key is configured."""
        return bool(self._api_key)
