"""Crowd-verification domain models — votes, tallies, and the verified policy.

# ─── ARCHITECTURE ROLE ───────────────────────────────────────────────
#
# Layer: Models (bottom of the dependency graph — no imports from upper layers).
#
#   VoteRecord          one stored row per (venue, user); re-votes overwrite it
#   VerificationStats   per-venue tally computed on demand, never persisted
#   VerificationPolicy  thresholds for the "verified" badge / filter
#
# All models are frozen.  VerificationStats carries ``available`` so a
# caller can tell a real zero tally from the neutral default produced
# when the store could not be read.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class VoteRecord(BaseModel):
    """A single user's latest answer to "does this bar serve piña coladas?"."""

    model_config = ConfigDict(frozen=True)

    id: int
    venue_id: str = Field(..., min_length=1, max_length=255)
    user_id: int = Field(..., ge=1)
    value: bool = Field(..., description="True = serves piña coladas.")
    recorded_at: datetime


class VerificationStats(BaseModel):
    """Aggregate positive/negative vote counts for one venue."""

    model_config = ConfigDict(frozen=True)

    positive_count: int = Field(default=0, ge=0)
    negative_count: int = Field(default=0, ge=0)
    available: bool = Field(
        default=True,
        description="False when the counts are a fallback because the store was unreachable.",
    )

    @property
    def total_count(self) -> int:
        return self.positive_count + self.negative_count

    @property
    def positive_ratio(self) -> float | None:
        """Share of positive votes, or ``None`` when nobody has voted."""
        if self.total_count == 0:
            return None
        return self.positive_count / self.total_count

    @classmethod
    def unavailable(cls) -> VerificationStats:
        return cls(positive_count=0, negative_count=0, available=False)


class VerificationPolicy(BaseModel):
    """Thresholds a venue must meet to be shown as community-verified.

    ``min_samples`` must be at least 1 so that the ratio is only ever
    computed over a non-empty tally.
    """

    model_config = ConfigDict(frozen=True)

    min_samples: int = Field(default=3, ge=1)
    min_ratio: float = Field(default=0.6, gt=0.0, le=1.0, allow_inf_nan=False)
