"""
Review item storage model.

One row per learner/topic pairing (keyed additionally by question when the
item was enrolled from a missed question). The ``version`` column is the
optimistic concurrency token: SQLAlchemy adds ``WHERE version = :old`` to
every UPDATE and raises ``StaleDataError`` when no row matches.
"""

from __future__ import annotations

from datetime import datetime
from uuid import uuid4

from sqlalchemy import DateTime, Float, Index, Integer, String, UniqueConstraint, func, text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class ReviewItemRecord(Base):
    """Persisted SM-2 state for one review item."""

    __tablename__ = "review_items"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    roadmap_id: Mapped[str] = mapped_column(String(64), nullable=False)
    node_id: Mapped[str] = mapped_column(String(128), nullable=False)
    question_id: Mapped[str | None] = mapped_column(String(128))

    # SM-2 state
    easiness_factor: Mapped[float] = mapped_column(Float, nullable=False, default=2.5)
    interval: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    repetitions: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    next_review_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    last_review_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    last_quality: Mapped[int | None] = mapped_column(Integer)

    version: Mapped[int] = mapped_column(Integer, nullable=False)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=func.now(), onupdate=func.now()
    )

    __table_args__ = (
        UniqueConstraint("user_id", "question_id", name="uq_review_item_user_question"),
        # Topic-level enrolments (no question) are unique per (user, roadmap, topic)
        Index(
            "uq_review_item_user_topic",
            "user_id",
            "roadmap_id",
            "node_id",
            unique=True,
            sqlite_where=text("question_id IS NULL"),
            postgresql_where=text("question_id IS NULL"),
        ),
        Index("idx_review_items_due", "user_id", "next_review_at"),
    )

    __mapper_args__ = {"version_id_col": version}

    def __repr__(self) -> str:
        return (
            f"<ReviewItemRecord id={self.id} user={self.user_id} node={self.node_id} "
            f"reps={self.repetitions} v{self.version}>"
        )
