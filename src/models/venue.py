"""Venue models for the bar search overlay.

A ``BarResult`` is a places-provider hit enriched with our own data:
distance from the searcher, community verification stats, and the
``verified`` badge.  ``BarFilters`` holds the user-controlled filter
settings from the search panel.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from src.models.verification import VerificationStats


class BarResult(BaseModel):
    """A bar returned by a search, with verification overlay fields."""

    model_config = ConfigDict(frozen=True)

    place_id: str
    name: str
    address: str = ""
    latitude: float
    longitude: float
    rating: float | None = Field(default=None, ge=0.0, le=5.0)
    price_level: int | None = Field(default=None, ge=0, le=4)
    photo_reference: str | None = None
    open_now: bool | None = None
    distance_m: float | None = None
    # None = stats could not be fetched for this bar.
    verification_stats: VerificationStats | None = None
    verified: bool = False


class BarFilters(BaseModel):
    """Search-panel filters.  Defaults match the reset state of the panel."""

    model_config = ConfigDict(frozen=True)

    max_distance_m: int = Field(default=5000, ge=100, le=50000)
    min_rating: float = Field(default=0.0, ge=0.0, le=5.0)
    max_price_level: int = Field(default=4, ge=0, le=4)
    verified_only: bool = False
    open_now: bool = False


class BarSearchResult(BaseModel):
    """Bars that survived filtering plus the unfiltered hit count."""

    model_config = ConfigDict(frozen=True)

    bars: list[BarResult] = Field(default_factory=list)
    total_found: int = 0
