"""Tests for playback time formatting."""

import pytest

from watch_progress.utils.time_format import format_time


class TestFormatTime:
    @pytest.mark.parametrize("seconds, expected", [
        (0, '0:00'),
        (5, '0:05'),
        (65.9, '1:05'),
        (365, '6:05'),
        (3599, '59:59'),
        (3600, '1:00:00'),
        (3725, '1:02:05'),
    ])
    def test_values(self, seconds, expected):
        assert format_time(seconds) == expected

    @pytest.mark.parametrize("value", [None, 'abc', -1, float('nan'), float('inf')])
    def test_unknown_values(self, value):
        assert format_time(value) == '0:00'
