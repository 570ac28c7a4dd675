from __future__ import annotations

import math
from typing import Iterable, List, Sequence

from watch_progress.schemas.progress import WatchedInterval


def merge_intervals(intervals: Iterable[WatchedInterval]) -> List[WatchedInterval]:
    """Merge overlapping or touching intervals into a sorted, fully reduced list.

    The input may be unsorted and contain duplicates. It is not modified.
    """
    ordered = sorted(intervals, key=lambda iv: (iv.start, iv.end))
    if not ordered:
        return []
    merged: List[WatchedInterval] = []
    cur_start, cur_end = ordered[0].start, ordered[0].end
    for interval in ordered[1:]:
        if interval.start <= cur_end:
            cur_end = max(cur_end, interval.end)
            continue
        merged.append(WatchedInterval(start=cur_start, end=cur_end))
        cur_start, cur_end = interval.start, interval.end
    merged.append(WatchedInterval(start=cur_start, end=cur_end))
    return merged


def calculate_watched_time(intervals: Iterable[WatchedInterval]) -> float:
    """Sum of interval lengths. Only meaningful on merged input."""
    return sum(interval.end - interval.start for interval in intervals)


def compute_percent(watched: float, duration: float, previous: float = 0.0) -> float:
    """Percent of ``duration`` covered by ``watched``, clamped to [0, 100].

    When the duration is unknown (``<= 0``) or the ratio is not finite, the
    previous value is returned unchanged.
    """
    if not duration or duration <= 0 or not math.isfinite(duration):
        return previous
    percent = watched * 100.0 / duration
    if not math.isfinite(percent):
        return previous
    return max(0.0, min(100.0, percent))


def interval_markers(intervals: Sequence[WatchedInterval], total_duration: float) -> List[dict]:
    """Position of each watched interval on a progress bar, as percentages."""
    if not total_duration or total_duration <= 0 or not math.isfinite(total_duration):
        return []
    markers = []
    for interval in intervals:
        left = interval.start / total_duration * 100.0
        width = (interval.end - interval.start) / total_duration * 100.0
        markers.append({'left': left, 'width': width})
    return markers
