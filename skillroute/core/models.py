"""
Typed records exchanged between the engine and its collaborators.

Every record here is plain data: the store, dashboards and the CLI all
serialize them with ``model_dump()``. ``ReviewItem`` is the validated
boundary type for persisted rows, so malformed data is rejected on load
instead of flowing into the scheduling math.
"""

from __future__ import annotations

import math
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from skillroute.core.mastery import SkillStatus


def ensure_utc(value: datetime | None) -> datetime | None:
    """Interpret naive datetimes as UTC; convert aware ones to UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def utc_now() -> datetime:
    return datetime.now(UTC)


class ReviewItem(BaseModel):
    """
    One learner/topic pairing tracked for spaced repetition.

    Items are created on enrolment and only ever advanced by the scheduler.
    ``version`` is the optimistic concurrency token the store checks on write.
    """

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: str
    user_id: str
    roadmap_id: str
    node_id: str
    question_id: str | None = None

    easiness_factor: float = Field(default=2.5, ge=1.3)
    interval: int = Field(default=1, ge=1)
    repetitions: int = Field(default=0, ge=0)

    next_review_at: datetime
    last_review_at: datetime | None = None
    last_quality: int | None = Field(default=None, ge=0, le=5)

    version: int = Field(default=0, ge=0)

    @field_validator("next_review_at", "last_review_at")
    @classmethod
    def _assume_utc(cls, value: datetime | None) -> datetime | None:
        return ensure_utc(value)

    @property
    def reviewed(self) -> bool:
        """True once the item has been answered at least once."""
        return self.last_quality is not None

    def is_due(self, now: datetime | None = None) -> bool:
        """Check if this item is due for review."""
        now = ensure_utc(now) or utc_now()
        return self.next_review_at <= now

    def days_overdue(self, now: datetime | None = None) -> float:
        """Days past the scheduled review time (0 when not yet due)."""
        now = ensure_utc(now) or utc_now()
        delta = now - self.next_review_at
        return max(0.0, delta.total_seconds() / 86400.0)


class AnswerEvent(BaseModel):
    """A single answer submitted by the quiz/review UI."""

    item_id: str
    correct: bool
    response_time_ms: float = 0.0

    @field_validator("response_time_ms", mode="before")
    @classmethod
    def _clamp_time(cls, value: Any) -> float:
        # UI timers can report garbage; degrade to "instant" instead of failing
        try:
            number = float(value)
        except (TypeError, ValueError):
            return 0.0
        if not math.isfinite(number) or number < 0:
            return 0.0
        return number


class QuizAnswer(BaseModel):
    """One answered question from a quiz attempt."""

    question_id: str
    node_id: str
    correct: bool
    time_ms: float = 0.0
    user_answer: str = ""


class SM2Result(BaseModel):
    """Scheduling state produced by one SM-2 transition."""

    model_config = ConfigDict(frozen=True)

    easiness_factor: float
    interval: int
    repetitions: int
    next_review_at: datetime


class ReviewOutcome(BaseModel):
    """What happened when an answer event was applied to an item."""

    model_config = ConfigDict(frozen=True)

    quality: int
    result: SM2Result
    item: ReviewItem


class ReviewStats(BaseModel):
    """Aggregate review statistics for a learner's items."""

    total: int = 0
    due: int = 0
    upcoming: int = 0
    mastered: int = 0
    learning: int = 0
    struggling: int = 0
    avg_difficulty: int = 0
    retention: int = 100


class SkillSummary(BaseModel):
    """Derived per-topic mastery summary consumed by dashboards."""

    node_id: str
    node_label: str = ""
    proficiency: float = Field(ge=0.0, le=1.0)
    confidence: float = Field(ge=0.0, le=1.0)
    status: SkillStatus
    reviews_due: int = 0
