"""
Unit tests for the answer quality classifier.
"""

import math

import pytest

from skillroute.study.quality import classify_answer

AVG = 15000.0


class TestCorrectAnswers:
    @pytest.mark.parametrize(
        "time_ms, expected",
        [
            (0, 5),
            (4499, 5),
            (4500, 4),  # ratio 0.3 is no longer "perfect"
            (8999, 4),
            (9000, 3),
            (60000, 3),
        ],
    )
    def test_speed_bands(self, time_ms, expected):
        assert classify_answer(True, time_ms, AVG) == expected

    def test_default_average_is_fifteen_seconds(self):
        assert classify_answer(True, 4000) == 5
        assert classify_answer(True, 20000) == 3

    def test_correct_is_always_recalled(self):
        for time_ms in (0, 1, 1000, 10**9):
            assert classify_answer(True, time_ms, AVG) >= 3


class TestIncorrectAnswers:
    def test_fast_miss_scores_one(self):
        assert classify_answer(False, 7499, AVG) == 1

    def test_slow_miss_scores_zero(self):
        assert classify_answer(False, 7500, AVG) == 0
        assert classify_answer(False, 60000, AVG) == 0

    def test_incorrect_is_never_recalled(self):
        for time_ms in (0, 1, 1000, 10**9):
            assert classify_answer(False, time_ms, AVG) <= 1


class TestClamping:
    def test_negative_time_counts_as_instant(self):
        assert classify_answer(True, -500, AVG) == 5

    def test_nan_time_counts_as_instant(self):
        assert classify_answer(True, math.nan, AVG) == 5

    def test_non_positive_average_is_clamped(self):
        # average becomes 1ms: 0ms is perfect, 1ms is ratio 1
        assert classify_answer(True, 0, 0) == 5
        assert classify_answer(True, 1, -10) == 3

    @pytest.mark.parametrize("avg", [math.inf, math.nan, "fast"])
    def test_non_finite_average_uses_default(self, avg):
        # 10s against the 15s default is ratio 0.67
        assert classify_answer(True, 10000, avg) == 3
        assert classify_answer(False, 10000, avg) == 0
