"""
SM-2 Spaced Repetition Scheduler.

SuperMemo 2 keeps three numbers per item:
- Easiness Factor (EF): How easy the item is (2.5 default, min 1.3)
- Interval: Days until next review
- Repetitions: Consecutive correct recalls since the last lapse

SM-2 Grade Scale:
0 - Complete blackout, wrong response
1 - Incorrect, but upon seeing answer remembered
2 - Incorrect, but answer seemed easy to recall
3 - Correct, but with significant difficulty
4 - Correct, with some hesitation
5 - Correct, with perfect recall

Each item is a two-state machine: "building a streak" (repetitions > 0)
and "reset" (repetitions == 0). Intervals step 1 -> 6 and then grow
geometrically by the previous EF.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from skillroute.core.models import ReviewItem, SM2Result, ensure_utc

RECALL_THRESHOLD = 3


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (2.5 -> 3, not 2)."""
    return int(math.floor(value + 0.5))


def clamp_quality(quality: float) -> int:
    """Clamp a quality rating to the integer range 0-5."""
    try:
        number = float(quality)
    except (TypeError, ValueError):
        return 0
    if math.isnan(number):
        return 0
    if math.isinf(number):
        return 5 if number > 0 else 0
    return max(0, min(5, round_half_up(number)))


def _finite(value: float, default: float) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    return number if math.isfinite(number) else default


@dataclass
class SM2Config:
    """Configuration for SM-2 algorithm."""

    initial_easiness: float = 2.5
    minimum_easiness: float = 1.3
    first_interval: int = 1  # Days for first review
    second_interval: int = 6  # Days for second review


class SM2Scheduler:
    """
    Implements the SM-2 spaced repetition algorithm.

    ``advance`` is pure: same inputs (including ``now``) give the same
    result, and nothing is read from or written to a store.
    """

    def __init__(self, config: SM2Config | None = None):
        """
        Initialize SM-2 scheduler.

        Args:
            config: Custom configuration (uses defaults if None)
        """
        self.config = config or SM2Config()

    def advance(
        self,
        quality: float,
        prev_easiness: float,
        prev_interval: int,
        prev_repetitions: int,
        now: datetime | None = None,
    ) -> SM2Result:
        """
        Advance one item's scheduling state.

        Args:
            quality: Recall quality (clamped to 0-5)
            prev_easiness: Current easiness factor
            prev_interval: Current interval in days
            prev_repetitions: Current consecutive correct recalls

        Returns:
            SM2Result with new EF, interval, repetitions and next_review_at
        """
        quality = clamp_quality(quality)
        prev_easiness = _finite(prev_easiness, self.config.initial_easiness)
        prev_interval = max(1, int(_finite(prev_interval, 1)))
        prev_repetitions = max(0, int(_finite(prev_repetitions, 0)))
        now = ensure_utc(now) or datetime.now(UTC)

        ef = prev_easiness
        if quality >= RECALL_THRESHOLD:
            repetitions = prev_repetitions + 1

            if repetitions == 1:
                interval = self.config.first_interval
            elif repetitions == 2:
                interval = self.config.second_interval
            else:
                interval = round_half_up(prev_interval * prev_easiness)

            # EF' = EF + (0.1 - (5 - q) * (0.08 + (5 - q) * 0.02))
            ef = ef + (0.1 - (5 - quality) * (0.08 + (5 - quality) * 0.02))
        else:
            # Lapse - reset the streak, EF untouched apart from the floor
            repetitions = 0
            interval = self.config.first_interval

        # Floor applies on every transition, lapses included
        ef = max(self.config.minimum_easiness, ef)
        interval = max(1, interval)

        return SM2Result(
            easiness_factor=ef,
            interval=interval,
            repetitions=repetitions,
            next_review_at=now + timedelta(days=interval),
        )

    def review(self, item: ReviewItem, quality: float, now: datetime | None = None) -> ReviewItem:
        """
        Apply a review to an item and return its successor state.

        The returned item keeps the same identity and version; the store
        bumps the version when it persists the transition.
        """
        now = ensure_utc(now) or datetime.now(UTC)
        result = self.advance(
            quality,
            item.easiness_factor,
            item.interval,
            item.repetitions,
            now=now,
        )
        return item.model_copy(
            update={
                "easiness_factor": result.easiness_factor,
                "interval": result.interval,
                "repetitions": result.repetitions,
                "next_review_at": result.next_review_at,
                "last_review_at": now,
                "last_quality": clamp_quality(quality),
            }
        )


def advance(
    quality: float,
    prev_easiness: float,
    prev_interval: int,
    prev_repetitions: int,
    now: datetime | None = None,
) -> SM2Result:
    """Advance scheduling state with the default SM-2 configuration."""
    return SM2Scheduler().advance(quality, prev_easiness, prev_interval, prev_repetitions, now=now)
