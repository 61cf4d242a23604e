"""Review models — star ratings and comments posted against a venue."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class Review(BaseModel):
    """A user's 1–5 star review of a bar."""

    model_config = ConfigDict(frozen=True)

    id: int
    user_id: int
    venue_id: str
    rating: int = Field(..., ge=1, le=5)
    comment: str = Field(..., min_length=1, max_length=1000)
    photo_url: str | None = None
    created_at: datetime
    updated_at: datetime


class RatingSummary(BaseModel):
    """Average star rating across all reviews of a venue."""

    model_config = ConfigDict(frozen=True)

    average: float = Field(..., ge=1.0, le=5.0)
    count: int = Field(..., ge=1)
