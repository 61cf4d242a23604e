"""Unit tests for classify() and the bar result filters built on it."""

from __future__ import annotations

import pytest

from src.models.venue import BarFilters, BarResult
from src.models.verification import VerificationPolicy
from src.services.verification_filter import (
    DEFAULT_POLICY,
    annotate,
    apply_filters,
    classify,
    filter_verified,
    verification_percentage,
)
from tests.conftest import make_stats


def _bar(place_id: str, positive: int | None = None, negative: int = 0, **kwargs) -> BarResult:
    stats = make_stats(positive, negative) if positive is not None else None
    return BarResult(
        place_id=place_id,
        name=place_id.title(),
        latitude=37.0,
        longitude=-122.0,
        verification_stats=stats,
        **kwargs,
    )


# ======================================================================
# classify
# ======================================================================


class TestClassify:
    def test_two_of_three_positive_is_verified(self) -> None:
        assert classify(make_stats(2, 1)) is True

    def test_below_min_samples_never_verified(self) -> None:
        # 100% positive but only two votes.
        assert classify(make_stats(2, 0)) is False

    def test_zero_votes_is_not_verified(self) -> None:
        assert classify(make_stats(0, 0)) is False

    def test_none_is_not_verified(self) -> None:
        assert classify(None) is False

    def test_ratio_boundary_is_inclusive(self) -> None:
        assert classify(make_stats(3, 2)) is True  # exactly 0.6
        assert classify(make_stats(5, 4)) is False  # 0.556

    def test_samples_boundary_is_inclusive(self) -> None:
        policy = VerificationPolicy(min_samples=5, min_ratio=0.5)
        assert classify(make_stats(4, 0), policy) is False
        assert classify(make_stats(5, 0), policy) is True

    def test_unavailable_stats_are_not_verified(self) -> None:
        from src.models.verification import VerificationStats

        assert classify(VerificationStats.unavailable()) is False

    @pytest.mark.parametrize("total", [3, 4, 7, 10])
    def test_monotonic_in_positive_count(self, total: int) -> None:
        results = [classify(make_stats(p, total - p)) for p in range(total + 1)]
        # Once verified, adding yes votes (at a fixed total) keeps it verified.
        first_true = results.index(True) if True in results else len(results)
        assert all(results[first_true:])
        assert not any(results[:first_true])

    def test_custom_policy(self) -> None:
        strict = VerificationPolicy(min_samples=10, min_ratio=0.9)
        assert classify(make_stats(9, 1), strict) is True
        assert classify(make_stats(8, 2), strict) is False


class TestVerificationPercentage:
    def test_rounds_to_whole_percent(self) -> None:
        assert verification_percentage(make_stats(2, 1)) == 67

    def test_none_without_votes(self) -> None:
        assert verification_percentage(make_stats(0, 0)) is None
        assert verification_percentage(None) is None


# ======================================================================
# annotate / filter_verified
# ======================================================================


class TestAnnotateAndFilter:
    def test_annotate_sets_badge_per_bar(self) -> None:
        bars = annotate([_bar("a", 3, 0), _bar("b", 1, 2), _bar("c")])
        assert [b.verified for b in bars] == [True, False, False]

    def test_annotate_does_not_mutate_input(self) -> None:
        original = _bar("a", 3, 0)
        annotate([original])
        assert original.verified is False

    def test_filter_verified_keeps_order(self) -> None:
        bars = [_bar("x", 5, 0), _bar("y", 0, 5), _bar("z", 4, 1)]
        assert [b.place_id for b in filter_verified(bars)] == ["x", "z"]

    def test_badge_and_filter_agree(self) -> None:
        bars = [_bar(str(i), p, n) for i, (p, n) in enumerate([(3, 2), (2, 0), (5, 4), (6, 1)])]
        badged = {b.place_id for b in annotate(bars) if b.verified}
        kept = {b.place_id for b in filter_verified(bars)}
        assert badged == kept


# ======================================================================
# apply_filters
# ======================================================================


class TestApplyFilters:
    def test_default_filters_keep_everything(self) -> None:
        bars = [_bar("a", 0, 0, distance_m=100.0), _bar("b", distance_m=4999.0)]
        assert len(apply_filters(bars, BarFilters())) == 2

    def test_distance(self) -> None:
        bars = [_bar("near", distance_m=400.0), _bar("far", distance_m=2500.0)]
        kept = apply_filters(bars, BarFilters(max_distance_m=1000))
        assert [b.place_id for b in kept] == ["near"]

    def test_min_rating_keeps_unrated(self) -> None:
        bars = [_bar("good", rating=4.6), _bar("meh", rating=3.1), _bar("unrated")]
        kept = apply_filters(bars, BarFilters(min_rating=4.0))
        assert [b.place_id for b in kept] == ["good", "unrated"]

    def test_max_price_level(self) -> None:
        bars = [_bar("cheap", price_level=1), _bar("pricey", price_level=4)]
        kept = apply_filters(bars, BarFilters(max_price_level=2))
        assert [b.place_id for b in kept] == ["cheap"]

    def test_verified_only(self) -> None:
        bars = [_bar("v", 3, 0), _bar("u", 1, 0), _bar("unknown")]
        kept = apply_filters(bars, BarFilters(verified_only=True))
        assert [b.place_id for b in kept] == ["v"]

    def test_verified_only_uses_given_policy(self) -> None:
        lenient = VerificationPolicy(min_samples=1, min_ratio=0.5)
        bars = [_bar("one-yes", 1, 0)]
        assert apply_filters(bars, BarFilters(verified_only=True), DEFAULT_POLICY) == []
        assert len(apply_filters(bars, BarFilters(verified_only=True), lenient)) == 1

    def test_open_now_excludes_only_known_closed(self) -> None:
        bars = [_bar("open", open_now=True), _bar("closed", open_now=False), _bar("unknown")]
        kept = apply_filters(bars, BarFilters(open_now=True))
        assert [b.place_id for b in kept] == ["open", "unknown"]
