"""Bar search — places lookup with the community verification overlay.

# ─── ARCHITECTURE ROLE ───────────────────────────────────────────────
#
# Layer: Services.
# Depends on: IPlacesProvider, VerificationService.
#
#   1. places provider text search around the user's coordinate
#   2. great-circle distance from the user to every hit
#   3. one stats request per bar, fanned out with bounded concurrency
#   4. verified badge on every bar
#   5. search-panel filters (distance, rating, price, verified, open now)
#
# A per-bar stats failure leaves that bar with ``verification_stats=None``;
# it still shows up unless "verified only" is on.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

import structlog

from src.interfaces.places_provider import IPlacesProvider, PlaceResult
from src.models.venue import BarFilters, BarResult, BarSearchResult
from src.models.verification import VerificationPolicy
from src.services.verification_filter import annotate, apply_filters
from src.services.verification_service import VerificationService
from src.utils.concurrency import fan_out
from src.utils.errors import ValidationError
from src.utils.geo import haversine_m

logger = structlog.get_logger(logger_name=__name__)

DEFAULT_QUERY = "bar piña colada cocktail tropical drinks"


def _validate_coordinate(latitude: float, longitude: float) -> None:
    if not -90.0 <= latitude <= 90.0:
        raise ValidationError(f"latitude out of range: {latitude}")
    if not -180.0 <= longitude <= 180.0:
        raise ValidationError(f"longitude out of range: {longitude}")


class BarSearchService:
    """Finds bars near a coordinate and overlays verification data."""

    def __init__(
        self,
        places: IPlacesProvider,
        verification: VerificationService,
        policy: VerificationPolicy,
        query: str = DEFAULT_QUERY,
        stats_concurrency: int = 8,
    ) -> None:
        self._places = places
        self._verification = verification
        self._policy = policy
        self._query = query
        self._stats_concurrency = stats_concurrency

    @property
    def policy(self) -> VerificationPolicy:
        return self._policy

    async def search(
        self,
        latitude: float,
        longitude: float,
        filters: BarFilters | None = None,
    ) -> BarSearchResult:
        """Search, enrich, classify and filter.

        Raises :class:`ProviderUnavailableError` when the places provider
        fails; there is nothing to overlay without its results.
        """
        _validate_coordinate(latitude, longitude)
        filters = filters or BarFilters()

        places = await self._places.search_bars(
            latitude=latitude,
            longitude=longitude,
            radius_m=filters.max_distance_m,
            query=self._query,
        )
        bars = [self._to_bar(place, latitude, longitude) for place in places]
        bars = await self._attach_stats(bars)
        bars = annotate(bars, self._policy)
        filtered = apply_filters(bars, filters, self._policy)

        logger.info(
            "bar_search_complete",
            found=len(bars),
            shown=len(filtered),
            verified_only=filters.verified_only,
        )
        return BarSearchResult(bars=filtered, total_found=len(bars))

    async def _attach_stats(self, bars: list[BarResult]) -> list[BarResult]:
        stats = await fan_out(
            lambda bar: self._verification.get_stats(bar.place_id),
            bars,
            concurrency=self._stats_concurrency,
            logger=logger,
            error_msg="bar_stats_failed",
        )
        return [
            bar.model_copy(update={"verification_stats": s}) if s is not None else bar
            for bar, s in zip(bars, stats)
        ]

    @staticmethod
    def _to_bar(place: PlaceResult, latitude: float, longitude: float) -> BarResult:
        return BarResult(
            place_id=place.place_id,
            name=place.name,
            address=place.address,
            latitude=place.latitude,
            longitude=place.longitude,
            rating=place.rating,
            price_level=place.price_level,
            photo_reference=place.photo_reference,
            open_now=place.open_now,
            distance_m=round(haversine_m(latitude, longitude, place.latitude, place.longitude), 1),
        )
