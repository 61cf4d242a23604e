"""Community-verified classification and the bar result filters built on it.

``classify`` is the single source of truth for the "verified" verdict.
Both the badge (``annotate``) and the "verified only" toggle
(``filter_verified`` / ``apply_filters``) go through it, so the two can
never disagree about a bar.
"""

from __future__ import annotations

from typing import Iterable

from src.models.venue import BarFilters, BarResult
from src.models.verification import VerificationPolicy, VerificationStats

DEFAULT_POLICY = VerificationPolicy()


def classify(stats: VerificationStats | None, policy: VerificationPolicy = DEFAULT_POLICY) -> bool:
    """Return ``True`` when the tally meets the policy's sample and ratio thresholds.

    The sample-size clause is checked first; because ``min_samples >= 1``
    the ratio is only computed over a non-zero total.
    """
    if stats is None:
        return False
    total = stats.total_count
    return total >= policy.min_samples and stats.positive_count / total >= policy.min_ratio


def verification_percentage(stats: VerificationStats | None) -> int | None:
    """Whole-number share of "yes" votes, or ``None`` when nobody has voted."""
    if stats is None or stats.total_count == 0:
        return None
    return round(stats.positive_count / stats.total_count * 100)


def annotate(bars: Iterable[BarResult], policy: VerificationPolicy = DEFAULT_POLICY) -> list[BarResult]:
    """Set the ``verified`` badge on every bar."""
    return [
        bar.model_copy(update={"verified": classify(bar.verification_stats, policy)})
        for bar in bars
    ]


def filter_verified(
    bars: Iterable[BarResult],
    policy: VerificationPolicy = DEFAULT_POLICY,
) -> list[BarResult]:
    """Drop bars that do not pass :func:`classify`."""
    return [bar for bar in bars if classify(bar.verification_stats, policy)]


def _passes(bar: BarResult, filters: BarFilters, policy: VerificationPolicy) -> bool:
    # Missing provider data never excludes a bar; only known values are compared.
    if bar.distance_m is not None and bar.distance_m > filters.max_distance_m:
        return False
    if bar.rating is not None and bar.rating < filters.min_rating:
        return False
    if bar.price_level is not None and bar.price_level > filters.max_price_level:
        return False
    if filters.verified_only and not classify(bar.verification_stats, policy):
        return False
    if filters.open_now and bar.open_now is False:
        return False
    return True


def apply_filters(
    bars: Iterable[BarResult],
    filters: BarFilters,
    policy: VerificationPolicy = DEFAULT_POLICY,
) -> list[BarResult]:
    """Apply the search-panel filters, preserving input order."""
    return [bar for bar in bars if _passes(bar, filters, policy)]
