"""
Engine error taxonomy.

Clamped inputs never raise. Store/network failures are not wrapped here:
SQLAlchemy errors reach the caller unchanged so the I/O layer can own retries.
"""
from __future__ import annotations

from typing import Any


class SkillRouteError(Exception):
    """Base class for all engine errors."""
    pass


class ReviewItemNotFoundError(SkillRouteError):
    """Raised when an item id does not exist in the store."""

    def __init__(self, item_id: str):
        self.item_id = item_id
        super().__init__(f"Review item not found: {item_id}")


class StaleReviewItemError(SkillRouteError):
    """Raised when another writer advanced the item since it was read."""

    def __init__(self, item_id: str, expected_version: int | None = None):
        self.item_id = item_id
        self.expected_version = expected_version
        detail = f" (expected version {expected_version})" if expected_version is not None else ""
        super().__init__(f"Review item {item_id} was modified concurrently{detail}")


class InvalidReviewItemError(SkillRouteError):
    """Raised when a persisted row fails ReviewItem validation."""

    def __init__(self, item_id: str | None, errors: list[dict[str, Any]] | None = None):
        self.item_id = item_id
        self.errors = errors or []
        fields = ", ".join(
            ".".join(str(part) for part in err.get("loc", ())) for err in self.errors
        )
        super().__init__(f"Malformed review item {item_id}: {fields or 'invalid data'}")
