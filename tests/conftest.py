"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import sys
from datetime import UTC, datetime
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from skillroute.config import Settings
from skillroute.core.feature_flags import FeatureFlags, FlagCache
from skillroute.core.models import ReviewItem
from skillroute.db.database import create_db_engine, init_db, make_session_factory
from skillroute.db.repository import ReviewItemRepository
from skillroute.quiz.question_bank import QuestionBankEntry


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests (require database)")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        path = str(item.fspath)
        if "unit" in path:
            item.add_marker(pytest.mark.unit)
        elif "integration" in path:
            item.add_marker(pytest.mark.integration)
        elif "smoke" in path:
            item.add_marker(pytest.mark.smoke)


@pytest.fixture
def now():
    """A fixed reference time."""
    return datetime(2025, 3, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def settings():
    """Default settings, isolated from any local .env file."""
    return Settings(_env_file=None)


@pytest.fixture
def flags():
    """Flag cache with every flag enabled and no environment lookups."""
    return FlagCache(loader=FeatureFlags, ttl_seconds=60.0)


@pytest.fixture
def session_factory():
    """Session factory over a fresh in-memory SQLite database."""
    engine = create_db_engine("sqlite:///:memory:")
    init_db(engine)
    yield make_session_factory(engine)
    engine.dispose()


@pytest.fixture
def repository(session_factory):
    return ReviewItemRepository(session_factory)


@pytest.fixture
def make_item(now):
    """Factory for review items with sensible defaults."""

    def _make(**overrides) -> ReviewItem:
        fields = {
            "id": "item-1",
            "user_id": "user-1",
            "roadmap_id": "python",
            "node_id": "loops",
            "question_id": "q-1",
            "next_review_at": now,
        }
        fields.update(overrides)
        return ReviewItem(**fields)

    return _make


@pytest.fixture
def sample_questions():
    """Small question bank: three topics of uneven size on one roadmap."""
    raw = [
        ("q1", "variables"),
        ("q2", "variables"),
        ("q3", "variables"),
        ("q4", "loops"),
        ("q5", "loops"),
        ("q6", "functions"),
    ]
    return [
        QuestionBankEntry(
            id=qid,
            roadmap_id="python",
            topic_id=topic,
            question=f"Question {qid}?",
            options=("a", "b"),
            correct_answer="a",
        )
        for qid, topic in raw
    ]
