"""
Review Item Store.

SQLAlchemy-backed implementation of the item store contract:
- get / upsert: Single-item reads and version-checked writes
- list_due / list_for_user: Queue and dashboard reads
- enroll: Create-or-return on (user, question), or (user, roadmap, topic) without one
- apply_transition: Atomic read-apply-write of one scheduling step

Rows are converted to validated ``ReviewItem`` values on the way out, so a
malformed row surfaces as ``InvalidReviewItemError`` instead of reaching
the scheduling math. Database errors propagate unchanged.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime
from typing import Protocol
from uuid import uuid4

from loguru import logger
from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.orm.exc import StaleDataError

from skillroute.core.errors import InvalidReviewItemError, ReviewItemNotFoundError, StaleReviewItemError
from skillroute.core.models import ReviewItem, ensure_utc
from skillroute.db.database import make_session_factory, session_scope
from skillroute.db.models import ReviewItemRecord

Transition = Callable[[ReviewItem], ReviewItem]

# Columns written from a ReviewItem; id and version are owned by the store
_STATE_FIELDS = (
    "user_id",
    "roadmap_id",
    "node_id",
    "question_id",
    "easiness_factor",
    "interval",
    "repetitions",
    "next_review_at",
    "last_review_at",
    "last_quality",
)


class ItemStore(Protocol):
    """Persistence contract the engine relies on."""

    def get(self, item_id: str) -> ReviewItem: ...

    def upsert(self, item: ReviewItem) -> ReviewItem: ...

    def list_due(
        self,
        user_id: str,
        roadmap_id: str | None = None,
        now: datetime | None = None,
        limit: int | None = None,
    ) -> list[ReviewItem]: ...

    def list_for_user(self, user_id: str, roadmap_id: str | None = None) -> list[ReviewItem]: ...

    def enroll(
        self,
        user_id: str,
        roadmap_id: str,
        node_id: str,
        question_id: str | None = None,
        now: datetime | None = None,
        initial_easiness: float = 2.5,
    ) -> ReviewItem: ...

    def apply_transition(self, item_id: str, transition: Transition) -> ReviewItem: ...


class ReviewItemRepository:
    """SQLAlchemy implementation of ``ItemStore``."""

    def __init__(self, session_factory: sessionmaker[Session] | None = None):
        """
        Initialize the repository.

        Args:
            session_factory: Session factory (defaults to the settings engine)
        """
        self._factory = session_factory or make_session_factory()

    # =========================================================================
    # Conversion
    # =========================================================================

    @staticmethod
    def _to_item(record: ReviewItemRecord) -> ReviewItem:
        try:
            return ReviewItem.model_validate(record)
        except ValidationError as e:
            logger.error(f"Rejected malformed review item {record.id}: {e.error_count()} error(s)")
            raise InvalidReviewItemError(record.id, e.errors()) from e

    @staticmethod
    def _write_state(item: ReviewItem, record: ReviewItemRecord) -> None:
        for name in _STATE_FIELDS:
            setattr(record, name, getattr(item, name))

    # =========================================================================
    # Single-item operations
    # =========================================================================

    def get(self, item_id: str) -> ReviewItem:
        """
        Get a review item.

        Raises:
            ReviewItemNotFoundError: No item with this id exists
        """
        with session_scope(self._factory) as session:
            record = session.get(ReviewItemRecord, item_id)
            if record is None:
                raise ReviewItemNotFoundError(item_id)
            return self._to_item(record)

    def upsert(self, item: ReviewItem) -> ReviewItem:
        """
        Insert a new item or overwrite an existing one.

        Overwrites are accepted only when ``item.version`` matches the stored
        version, so a write based on an outdated read is refused.

        Raises:
            StaleReviewItemError: The stored item moved on since ``item`` was read
        """
        with session_scope(self._factory) as session:
            record = session.get(ReviewItemRecord, item.id)
            if record is None:
                record = ReviewItemRecord(id=item.id)
                self._write_state(item, record)
                session.add(record)
            else:
                if record.version != item.version:
                    raise StaleReviewItemError(item.id, item.version)
                self._write_state(item, record)

            try:
                session.flush()
            except StaleDataError as e:
                logger.warning(f"Concurrent update lost on review item {item.id}")
                raise StaleReviewItemError(item.id, item.version) from e

            return self._to_item(record)

    def apply_transition(self, item_id: str, transition: Transition) -> ReviewItem:
        """
        Atomically apply a scheduling transition to one item.

        Reads the item, applies ``transition`` (a pure function), and writes
        the result in the same transaction. The UPDATE is conditional on the
        version that was read; if another writer got there first the
        transaction is rolled back.

        Raises:
            ReviewItemNotFoundError: No item with this id exists
            StaleReviewItemError: Another writer advanced the item concurrently
        """
        with session_scope(self._factory) as session:
            record = session.get(ReviewItemRecord, item_id)
            if record is None:
                raise ReviewItemNotFoundError(item_id)

            current = self._to_item(record)
            updated = transition(current)
            self._write_state(updated, record)

            try:
                session.flush()
            except StaleDataError as e:
                logger.warning(
                    f"Concurrent update lost on review item {item_id} (read v{current.version})"
                )
                raise StaleReviewItemError(item_id, current.version) from e

            return self._to_item(record)

    def enroll(
        self,
        user_id: str,
        roadmap_id: str,
        node_id: str,
        question_id: str | None = None,
        now: datetime | None = None,
        initial_easiness: float = 2.5,
    ) -> ReviewItem:
        """
        Enroll a learner for review on a topic/question.

        New items start at EF=initial_easiness, interval 1, no repetitions,
        and are due immediately. An existing item for the same (user,
        question), or the same (user, roadmap, topic) when no question is
        given, is returned unchanged: enrolment never resets progress.
        """
        now = ensure_utc(now) or datetime.now(UTC)

        with session_scope(self._factory) as session:
            existing = self._find_enrolled(session, user_id, roadmap_id, node_id, question_id)
            if existing is not None:
                return self._to_item(existing)

            record = ReviewItemRecord(
                id=str(uuid4()),
                user_id=user_id,
                roadmap_id=roadmap_id,
                node_id=node_id,
                question_id=question_id,
                easiness_factor=initial_easiness,
                interval=1,
                repetitions=0,
                next_review_at=now,
            )
            session.add(record)

            try:
                session.flush()
            except IntegrityError:
                # Lost an enrolment race on the unique key; use the winner's row
                session.rollback()
                existing = self._find_enrolled(session, user_id, roadmap_id, node_id, question_id)
                if existing is None:
                    raise
                return self._to_item(existing)

            logger.debug(f"Enrolled {user_id} on {roadmap_id}/{node_id} (question={question_id})")
            return self._to_item(record)

    @staticmethod
    def _find_enrolled(
        session: Session,
        user_id: str,
        roadmap_id: str,
        node_id: str,
        question_id: str | None,
    ) -> ReviewItemRecord | None:
        query = select(ReviewItemRecord).where(ReviewItemRecord.user_id == user_id)
        if question_id is not None:
            query = query.where(ReviewItemRecord.question_id == question_id)
        else:
            query = query.where(
                ReviewItemRecord.question_id.is_(None),
                ReviewItemRecord.roadmap_id == roadmap_id,
                ReviewItemRecord.node_id == node_id,
            )
        return session.scalars(query.limit(1)).first()

    # =========================================================================
    # Queries
    # =========================================================================

    def list_due(
        self,
        user_id: str,
        roadmap_id: str | None = None,
        now: datetime | None = None,
        limit: int | None = None,
    ) -> list[ReviewItem]:
        """
        Get items due for review, most overdue first.

        Args:
            user_id: Owning learner
            roadmap_id: Restrict to one roadmap
            now: Reference time (defaults to UTC now)
            limit: Maximum items to return
        """
        now = ensure_utc(now) or datetime.now(UTC)

        query = (
            select(ReviewItemRecord)
            .where(ReviewItemRecord.user_id == user_id)
            .where(ReviewItemRecord.next_review_at <= now)
        )
        if roadmap_id:
            query = query.where(ReviewItemRecord.roadmap_id == roadmap_id)
        query = query.order_by(ReviewItemRecord.next_review_at.asc())
        if limit is not None:
            query = query.limit(max(0, limit))

        with session_scope(self._factory) as session:
            return [self._to_item(record) for record in session.scalars(query)]

    def list_for_user(self, user_id: str, roadmap_id: str | None = None) -> list[ReviewItem]:
        """Get all of a learner's items, ordered by next review time."""
        query = select(ReviewItemRecord).where(ReviewItemRecord.user_id == user_id)
        if roadmap_id:
            query = query.where(ReviewItemRecord.roadmap_id == roadmap_id)
        query = query.order_by(ReviewItemRecord.next_review_at.asc())

        with session_scope(self._factory) as session:
            return [self._to_item(record) for record in session.scalars(query)]
