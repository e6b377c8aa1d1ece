"""
Review Queue - What is due, and how is the learner doing overall?

Pure in-memory selection over a learner's review items:
- due_items: Items whose next_review_at has passed, most overdue first
- review_stats: Counts for dashboards (due, upcoming, mastered, ...)
"""
from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import UTC, datetime, timedelta

from skillroute.core.models import ReviewItem, ReviewStats, ensure_utc
from skillroute.study.sm2 import round_half_up

MIN_EASINESS = 1.3
DEFAULT_EASINESS = 2.5


def due_items(
    items: Iterable[ReviewItem],
    now: datetime | None = None,
    max_items: int = 20,
) -> list[ReviewItem]:
    """
    Select items due for review.

    Args:
        items: All candidate review items
        now: Reference time (defaults to UTC now)
        max_items: Maximum items to return

    Returns:
        Items with next_review_at <= now, ascending by next_review_at
    """
    now = ensure_utc(now) or datetime.now(UTC)
    due = [item for item in items if item.next_review_at <= now]
    due.sort(key=lambda item: item.next_review_at)
    return due[: max(0, max_items)]


def review_stats(
    items: Sequence[ReviewItem],
    now: datetime | None = None,
    *,
    upcoming_hours: float = 24,
    mastered_repetitions: int = 5,
    mastered_easiness: float = 2.5,
    struggling_easiness: float = 1.8,
) -> ReviewStats:
    """
    Calculate review statistics.

    ``retention`` is the share of reviewed items whose last answer was
    recalled (quality >= 3), as a percentage. With nothing reviewed yet it
    is reported as 100.
    """
    now = ensure_utc(now) or datetime.now(UTC)
    horizon = now + timedelta(hours=upcoming_hours)

    due = sum(1 for i in items if i.next_review_at <= now)
    upcoming = sum(1 for i in items if now < i.next_review_at <= horizon)
    mastered = sum(
        1 for i in items
        if i.repetitions >= mastered_repetitions and i.easiness_factor >= mastered_easiness
    )
    learning = sum(1 for i in items if 0 < i.repetitions < mastered_repetitions)
    struggling = sum(1 for i in items if i.easiness_factor < struggling_easiness)

    reviewed = [i for i in items if i.last_quality is not None]
    if reviewed:
        recalled = sum(1 for i in reviewed if i.last_quality >= 3)
        retention = round_half_up(recalled / len(reviewed) * 100)
    else:
        retention = 100

    avg_ef = sum(i.easiness_factor for i in items) / len(items) if items else DEFAULT_EASINESS
    avg_difficulty = round_half_up(
        (1 - (avg_ef - MIN_EASINESS) / (DEFAULT_EASINESS - MIN_EASINESS)) * 100
    )

    return ReviewStats(
        total=len(items),
        due=due,
        upcoming=upcoming,
        mastered=mastered,
        learning=learning,
        struggling=struggling,
        avg_difficulty=avg_difficulty,
        retention=retention,
    )
