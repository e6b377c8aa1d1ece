"""
Review Service - Answer events in, schedules and dashboards out.

Wires the pure pieces to the item store:
- process_answer: classify -> SM-2 advance -> atomic store transition
- enqueue_missed: enrol incorrectly answered quiz questions
- due_queue / review_stats: review dashboard reads
- skill_summaries: per-topic proficiency, confidence and status
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import datetime

from loguru import logger

from skillroute.config import Settings, get_settings
from skillroute.core.feature_flags import FlagCache
from skillroute.core.mastery import ProficiencyEstimator, SkillStatus
from skillroute.core.models import (
    AnswerEvent,
    QuizAnswer,
    ReviewItem,
    ReviewOutcome,
    ReviewStats,
    SkillSummary,
    SM2Result,
    ensure_utc,
    utc_now,
)
from skillroute.db.repository import ItemStore
from skillroute.study.quality import classify_answer
from skillroute.study.review_queue import review_stats
from skillroute.study.sm2 import SM2Config, SM2Scheduler


class ReviewService:
    """
    High-level review operations for one item store.

    Collaborators default to ones built from settings; tests pass their own.
    """

    def __init__(
        self,
        store: ItemStore,
        settings: Settings | None = None,
        flags: FlagCache | None = None,
        scheduler: SM2Scheduler | None = None,
        estimator: ProficiencyEstimator | None = None,
    ):
        self.store = store
        self.settings = settings or get_settings()
        self.flags = flags or FlagCache(ttl_seconds=self.settings.feature_flag_ttl_seconds)
        self.scheduler = scheduler or SM2Scheduler(SM2Config(**self.settings.get_sm2_config()))
        self.estimator = estimator or ProficiencyEstimator(
            decay_days=self.settings.proficiency_decay_days,
            confidence_saturation=self.settings.confidence_saturation,
        )

    # =========================================================================
    # Answer events
    # =========================================================================

    def process_answer(
        self,
        event: AnswerEvent,
        avg_time_ms: float | None = None,
        now: datetime | None = None,
    ) -> ReviewOutcome:
        """
        Apply one answer to its review item.

        Raises:
            ReviewItemNotFoundError: The item does not exist
            StaleReviewItemError: Another writer advanced the item first
        """
        now = ensure_utc(now) or utc_now()
        if avg_time_ms is None:
            avg_time_ms = self.settings.quality_avg_time_ms

        quality = classify_answer(event.correct, event.response_time_ms, avg_time_ms)

        def transition(item: ReviewItem) -> ReviewItem:
            return self.scheduler.review(item, quality, now)

        updated = self.store.apply_transition(event.item_id, transition)
        result = SM2Result(
            easiness_factor=updated.easiness_factor,
            interval=updated.interval,
            repetitions=updated.repetitions,
            next_review_at=updated.next_review_at,
        )

        logger.info(
            f"Reviewed {updated.id}: q={quality} interval={result.interval}d "
            f"EF={result.easiness_factor:.2f} reps={result.repetitions}"
        )
        return ReviewOutcome(quality=quality, result=result, item=updated)

    def enqueue_missed(
        self,
        user_id: str,
        roadmap_id: str,
        answers: Sequence[QuizAnswer],
        now: datetime | None = None,
    ) -> int:
        """
        Enrol every incorrectly answered question for review.

        Returns:
            Number of missed answers enrolled (0 when the flag is off)
        """
        if not self.flags.is_enabled("ENQUEUE_MISSED_ANSWERS"):
            logger.debug("ENQUEUE_MISSED_ANSWERS disabled, skipping enrolment")
            return 0

        now = ensure_utc(now) or utc_now()
        missed = [a for a in answers if not a.correct]
        for answer in missed:
            self.store.enroll(
                user_id,
                roadmap_id,
                answer.node_id,
                answer.question_id,
                now=now,
                initial_easiness=self.settings.sm2_initial_easiness,
            )

        if missed:
            logger.info(f"Enrolled {len(missed)} missed question(s) for {user_id} on {roadmap_id}")
        return len(missed)

    # =========================================================================
    # Dashboards
    # =========================================================================

    def due_queue(
        self,
        user_id: str,
        roadmap_id: str | None = None,
        now: datetime | None = None,
        max_items: int | None = None,
    ) -> list[ReviewItem]:
        """Items due now, most overdue first."""
        limit = self.settings.review_max_items if max_items is None else max_items
        return self.store.list_due(user_id, roadmap_id, now=now, limit=limit)

    def review_stats(
        self,
        user_id: str,
        roadmap_id: str | None = None,
        now: datetime | None = None,
    ) -> ReviewStats:
        items = self.store.list_for_user(user_id, roadmap_id)
        return review_stats(
            items,
            now,
            upcoming_hours=self.settings.review_upcoming_hours,
            mastered_repetitions=self.settings.mastered_repetitions,
            mastered_easiness=self.settings.mastered_easiness,
            struggling_easiness=self.settings.struggling_easiness,
        )

    def skill_summaries(
        self,
        user_id: str,
        roadmap_id: str | None = None,
        now: datetime | None = None,
        node_labels: Mapping[str, str] | None = None,
    ) -> list[SkillSummary]:
        """
        Summarize mastery per topic, sorted by topic id.

        Args:
            user_id: Learner
            roadmap_id: Restrict to one roadmap
            now: Reference time for decay and due counts
            node_labels: Display labels keyed by topic id
        """
        now = ensure_utc(now) or utc_now()
        node_labels = node_labels or {}
        count_due = self.flags.is_enabled("SKILL_REVIEWS_DUE")

        by_node: dict[str, list[ReviewItem]] = {}
        for item in self.store.list_for_user(user_id, roadmap_id):
            by_node.setdefault(item.node_id, []).append(item)

        summaries = []
        for node_id in sorted(by_node):
            items = by_node[node_id]
            proficiency = self.estimator.estimate(items, now)
            confidence = self.estimator.confidence(items)
            summaries.append(
                SkillSummary(
                    node_id=node_id,
                    node_label=node_labels.get(node_id, node_id),
                    proficiency=proficiency,
                    confidence=confidence,
                    status=SkillStatus.from_scores(
                        proficiency, confidence, **self.settings.get_status_thresholds()
                    ),
                    reviews_due=sum(1 for i in items if i.is_due(now)) if count_due else 0,
                )
            )
        return summaries
