"""
Tests for the interval merge algorithm and derived metrics.

Uses property-based testing to validate merge output across many inputs.
"""

import math

import pytest
from hypothesis import given, strategies as st

from watch_progress.progress.intervals import (
    calculate_watched_time,
    compute_percent,
    interval_markers,
    merge_intervals,
)
from watch_progress.schemas.progress import WatchedInterval
from tests.helpers import to_tuples


def iv(start, end):
    return WatchedInterval(start=start, end=end)


@st.composite
def interval_lists(draw):
    pairs = draw(st.lists(
        st.tuples(st.integers(min_value=0, max_value=500), st.integers(min_value=1, max_value=60)),
        max_size=30,
    ))
    return [iv(float(start), float(start + length)) for start, length in pairs]


def covered_seconds(intervals):
    """Brute-force coverage on the integer grid used by the strategy."""
    points = set()
    for interval in intervals:
        points.update(range(int(interval.start), int(interval.end)))
    return len(points)


class TestWatchedInterval:
    def test_rejects_inverted_and_empty(self):
        with pytest.raises(ValueError):
            iv(5, 5)
        with pytest.raises(ValueError):
            iv(7, 3)

    def test_rejects_non_finite(self):
        with pytest.raises(ValueError):
            iv(0, math.inf)
        with pytest.raises(ValueError):
            iv(math.nan, 3)

    def test_is_immutable(self):
        interval = iv(1, 2)
        with pytest.raises(Exception):
            interval.end = 10


class TestMergeIntervals:
    def test_empty(self):
        assert merge_intervals([]) == []

    def test_single(self):
        assert to_tuples(merge_intervals([iv(2, 4)])) == [(2, 4)]

    def test_overlapping(self):
        assert to_tuples(merge_intervals([iv(0, 5), iv(3, 8)])) == [(0, 8)]

    def test_touching_intervals_merge(self):
        assert to_tuples(merge_intervals([iv(5, 10), iv(0, 5)])) == [(0, 10)]

    def test_disjoint_sorted(self):
        assert to_tuples(merge_intervals([iv(20, 30), iv(0, 5), iv(10, 12)])) == [(0, 5), (10, 12), (20, 30)]

    def test_contained_interval(self):
        assert to_tuples(merge_intervals([iv(0, 100), iv(10, 20), iv(50, 60)])) == [(0, 100)]

    def test_duplicates(self):
        assert to_tuples(merge_intervals([iv(1, 2), iv(1, 2), iv(1, 2)])) == [(1, 2)]

    def test_does_not_mutate_input(self):
        original = [iv(0, 5), iv(3, 8)]
        merge_intervals(original)
        assert to_tuples(original) == [(0, 5), (3, 8)]

    @given(interval_lists())
    def test_output_sorted_and_strictly_separated(self, intervals):
        merged = merge_intervals(intervals)
        for prev, nxt in zip(merged, merged[1:]):
            assert prev.end < nxt.start

    @given(interval_lists())
    def test_idempotent(self, intervals):
        merged = merge_intervals(intervals)
        assert merge_intervals(merged) == merged

    @given(interval_lists())
    def test_watched_time_equals_union_coverage(self, intervals):
        merged = merge_intervals(intervals)
        assert calculate_watched_time(merged) == covered_seconds(intervals)

    @given(interval_lists())
    def test_order_independent(self, intervals):
        assert merge_intervals(list(reversed(intervals))) == merge_intervals(intervals)


class TestDerivedMetrics:
    def test_watched_time_sum(self):
        assert calculate_watched_time([iv(0, 5), iv(10, 12.5)]) == pytest.approx(7.5)

    def test_watched_time_empty(self):
        assert calculate_watched_time([]) == 0

    def test_percent(self):
        assert compute_percent(8, 10) == pytest.approx(80.0)

    def test_percent_clamped(self):
        assert compute_percent(20, 10) == 100.0

    @pytest.mark.parametrize("duration", [0, -5, math.nan, math.inf])
    def test_percent_keeps_previous_for_unknown_duration(self, duration):
        assert compute_percent(5, duration, previous=42.0) == 42.0
        assert compute_percent(5, duration) == 0.0

    def test_markers(self):
        markers = interval_markers([iv(0, 5), iv(15, 20)], 20)
        assert markers == [
            {'left': 0.0, 'width': 25.0},
            {'left': 75.0, 'width': 25.0},
        ]

    def test_markers_without_duration(self):
        assert interval_markers([iv(0, 5)], 0) == []
