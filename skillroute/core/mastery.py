"""
Core Mastery Module.

Turns review history into a continuous, decaying mastery estimate and a
coarse status label.

Design:
- SkillStatus: Enum for the (proficiency, confidence) buckets
- ProficiencyEstimator: Recency-decayed per-topic mastery (0-1)
- calculate_days_since: Shared elapsed-time helper

An item that has not been reviewed for a long time contributes almost
nothing, even if it was once mastered. This models forgetting.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from datetime import UTC, datetime
from enum import Enum
from typing import Protocol

# Days assumed for an item that has never been answered (weight ~ 0)
NEVER_REVIEWED_DAYS = 999.0

MIN_EASINESS = 1.3
MAX_EASINESS_BONUS_AT = 2.5


class SkillStatus(str, Enum):
    """
    Skill status categorization.

    ``untested`` wins whenever there is not enough evidence, regardless of
    how high the proficiency estimate is.
    """

    STRONG = "strong"
    MODERATE = "moderate"
    WEAK = "weak"
    UNTESTED = "untested"

    @classmethod
    def from_scores(
        cls,
        proficiency: float,
        confidence: float,
        *,
        untested_confidence: float = 0.2,
        strong_threshold: float = 0.8,
        moderate_threshold: float = 0.5,
    ) -> SkillStatus:
        """
        Classify a (proficiency, confidence) pair.

        Args:
            proficiency: Mastery estimate between 0 and 1
            confidence: Evidence-based certainty between 0 and 1

        Returns:
            Corresponding SkillStatus
        """
        confidence = _finite_or_zero(confidence)
        proficiency = _finite_or_zero(proficiency)

        if confidence < untested_confidence:
            return cls.UNTESTED
        elif proficiency >= strong_threshold:
            return cls.STRONG
        elif proficiency >= moderate_threshold:
            return cls.MODERATE
        else:
            return cls.WEAK

    @property
    def display_name(self) -> str:
        """Human-readable name."""
        return self.value.title()

    @property
    def emoji(self) -> str:
        """Status glyph for CLI display."""
        return {
            SkillStatus.UNTESTED: "○",
            SkillStatus.WEAK: "◔",
            SkillStatus.MODERATE: "◑",
            SkillStatus.STRONG: "●",
        }[self]

    @property
    def color(self) -> str:
        """Rich color for CLI display."""
        return {
            SkillStatus.UNTESTED: "dim",
            SkillStatus.WEAK: "red",
            SkillStatus.MODERATE: "yellow",
            SkillStatus.STRONG: "green",
        }[self]


def classify_skill(proficiency: float, confidence: float, **thresholds: float) -> SkillStatus:
    """Total lookup from (proficiency, confidence) to a status label."""
    return SkillStatus.from_scores(proficiency, confidence, **thresholds)


def _finite_or_zero(value: float) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


# ============================================================================
# Time helpers
# ============================================================================


def calculate_days_since(last_review: datetime | None, now: datetime | None = None) -> float:
    """
    Calculate days elapsed since a review.

    Args:
        last_review: Timestamp of last review (can be naive or aware)
        now: Current time (defaults to UTC now)

    Returns:
        Days elapsed as float, never negative
    """
    if last_review is None:
        return NEVER_REVIEWED_DAYS

    if now is None:
        now = datetime.now(UTC)

    # Handle timezone awareness
    if last_review.tzinfo is None:
        last_review = last_review.replace(tzinfo=UTC)
    if now.tzinfo is None:
        now = now.replace(tzinfo=UTC)

    delta = now - last_review
    return max(0.0, delta.total_seconds() / 86400.0)


# ============================================================================
# Proficiency Estimator
# ============================================================================


class ScheduledItem(Protocol):
    """The slice of a review item the estimator reads."""

    easiness_factor: float
    repetitions: int
    last_review_at: datetime | None
    last_quality: int | None


class ProficiencyEstimator:
    """
    Decay-weighted mastery estimator.

    Per item:
        recency    = e^(-days_since_review / decay_days)
        quality    = last_quality / 5
        repetition = min(repetitions / 5, 1) × 0.3
        easiness   = ((EF - 1.3) / (2.5 - 1.3)) × 0.2
        score      = (quality × 0.5 + repetition + easiness) × recency

    Topic proficiency is the mean item score, capped at 1.
    """

    WEIGHT_QUALITY = 0.5
    WEIGHT_REPETITION = 0.3
    WEIGHT_EASINESS = 0.2
    REPETITIONS_FOR_FULL_BONUS = 5

    def __init__(self, decay_days: float = 30.0, confidence_saturation: int = 5):
        """
        Initialize estimator.

        Args:
            decay_days: Time constant of the forgetting curve
            confidence_saturation: Reviewed items needed for full confidence
        """
        self.decay_days = decay_days if decay_days > 0 else 30.0
        self.confidence_saturation = max(1, confidence_saturation)

    def recency_weight(self, last_review_at: datetime | None, now: datetime | None = None) -> float:
        days_since = calculate_days_since(last_review_at, now)
        return math.exp(-days_since / self.decay_days)

    def item_score(self, item: ScheduledItem, now: datetime | None = None) -> float:
        """Score a single item (0 when never answered)."""
        recency = self.recency_weight(item.last_review_at, now)
        quality = (item.last_quality or 0) / 5
        repetition = min(item.repetitions / self.REPETITIONS_FOR_FULL_BONUS, 1) * self.WEIGHT_REPETITION
        easiness = (
            (item.easiness_factor - MIN_EASINESS) / (MAX_EASINESS_BONUS_AT - MIN_EASINESS)
        ) * self.WEIGHT_EASINESS

        return (quality * self.WEIGHT_QUALITY + repetition + easiness) * recency

    def estimate(self, items: Sequence[ScheduledItem], now: datetime | None = None) -> float:
        """
        Estimate proficiency for one topic's items.

        Returns:
            Proficiency between 0 and 1 (0 when there are no items)
        """
        if not items:
            return 0.0

        if now is None:
            now = datetime.now(UTC)

        scores = [self.item_score(item, now) for item in items]
        return min(1.0, max(0.0, sum(scores) / len(scores)))

    def confidence(self, items: Sequence[ScheduledItem]) -> float:
        """Sample-size certainty: reviewed items over the saturation point."""
        reviewed = sum(1 for item in items if item.last_quality is not None)
        return min(1.0, reviewed / self.confidence_saturation)


def estimate_proficiency(items: Sequence[ScheduledItem], now: datetime | None = None) -> float:
    """Estimate topic proficiency with default decay settings."""
    return ProficiencyEstimator().estimate(items, now)
