"""
Answer Quality Classifier.

Maps a raw answer outcome (correctness + response latency) onto the SM-2
0-5 recall-quality scale:

5 - Correct, very fast (< 30% of the reference time)
4 - Correct, fast (< 60% of the reference time)
3 - Correct, otherwise (never below the "recalled" threshold)
1 - Incorrect, fast (< 50% of the reference time)
0 - Incorrect, slow

The incorrect branch rates a fast wrong answer above a slow one. That
asymmetry is kept on purpose; see DESIGN.md before changing it.
"""

from __future__ import annotations

import math

DEFAULT_AVG_TIME_MS = 15000.0

# Correct answers: ratio thresholds
PERFECT_RATIO = 0.3
GOOD_RATIO = 0.6

# Incorrect answers: ratio below which the miss counts as partial recall
FAST_MISS_RATIO = 0.5

QUALITY_PERFECT = 5
QUALITY_GOOD = 4
QUALITY_RECALLED = 3
QUALITY_FAST_MISS = 1
QUALITY_BLACKOUT = 0


def _clamp_time(value: float, minimum: float) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return minimum
    if math.isnan(number):
        return minimum
    if math.isinf(number):
        return minimum if number < 0 else number
    return max(minimum, number)


def _reference_time(value: float) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return DEFAULT_AVG_TIME_MS
    if not math.isfinite(number):
        return DEFAULT_AVG_TIME_MS
    return max(1.0, number)


def classify_answer(
    correct: bool,
    response_time_ms: float,
    avg_time_ms: float = DEFAULT_AVG_TIME_MS,
) -> int:
    """
    Convert an answer to an SM-2 quality rating.

    Invalid numbers are clamped rather than rejected: negative or NaN
    response times count as 0 ms, a non-positive reference time is
    treated as 1 ms, and a non-finite one falls back to the default.

    Args:
        correct: Whether the answer was correct
        response_time_ms: Time taken to answer
        avg_time_ms: Reference time for this kind of question

    Returns:
        Quality 0-5
    """
    response_time_ms = _clamp_time(response_time_ms, 0.0)
    avg_time_ms = _reference_time(avg_time_ms)

    if not correct:
        return QUALITY_FAST_MISS if response_time_ms < avg_time_ms * FAST_MISS_RATIO else QUALITY_BLACKOUT

    ratio = response_time_ms / avg_time_ms
    if ratio < PERFECT_RATIO:
        return QUALITY_PERFECT
    elif ratio < GOOD_RATIO:
        return QUALITY_GOOD
    return QUALITY_RECALLED
