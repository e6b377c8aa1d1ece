"""
Unit tests for due-item selection and review statistics.
"""

from datetime import timedelta

from skillroute.study.review_queue import due_items, review_stats


class TestDueItems:
    def test_filters_and_sorts(self, make_item, now):
        items = [
            make_item(id="later", next_review_at=now + timedelta(hours=1)),
            make_item(id="yesterday", next_review_at=now - timedelta(days=1)),
            make_item(id="exact", next_review_at=now),
            make_item(id="last-week", next_review_at=now - timedelta(days=7)),
        ]
        result = due_items(items, now)
        assert [i.id for i in result] == ["last-week", "yesterday", "exact"]

    def test_max_items(self, make_item, now):
        items = [make_item(id=f"i{n}", next_review_at=now - timedelta(days=n)) for n in range(5)]
        assert [i.id for i in due_items(items, now, max_items=2)] == ["i4", "i3"]
        assert due_items(items, now, max_items=0) == []

    def test_nothing_due(self, make_item, now):
        assert due_items([make_item(next_review_at=now + timedelta(days=1))], now) == []


class TestReviewStats:
    def test_empty(self, now):
        stats = review_stats([], now)
        assert stats.total == 0
        assert stats.due == 0
        assert stats.retention == 100
        assert stats.avg_difficulty == 0

    def test_counts(self, make_item, now):
        items = [
            make_item(id="due", next_review_at=now - timedelta(hours=1)),
            make_item(id="soon", next_review_at=now + timedelta(hours=3)),
            make_item(id="far", next_review_at=now + timedelta(days=3), repetitions=5),
            make_item(id="hard", next_review_at=now + timedelta(days=2), easiness_factor=1.5, repetitions=2),
        ]
        stats = review_stats(items, now)

        assert stats.total == 4
        assert stats.due == 1
        assert stats.upcoming == 1
        assert stats.mastered == 1
        assert stats.learning == 1
        assert stats.struggling == 1

    def test_retention(self, make_item, now):
        items = [
            make_item(id="a", last_quality=5),
            make_item(id="b", last_quality=2),
            make_item(id="c", last_quality=3),
            make_item(id="d"),  # never reviewed, ignored
        ]
        assert review_stats(items, now).retention == 67

    def test_retention_without_reviews(self, make_item, now):
        assert review_stats([make_item()], now).retention == 100

    def test_avg_difficulty(self, make_item, now):
        assert review_stats([make_item(easiness_factor=1.3)], now).avg_difficulty == 100
        assert review_stats([make_item(easiness_factor=1.9)], now).avg_difficulty == 50
        assert review_stats([make_item(easiness_factor=2.5)], now).avg_difficulty == 0
