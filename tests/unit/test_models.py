"""
Unit tests for typed records and the error taxonomy.
"""

import math
from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from skillroute.core.errors import InvalidReviewItemError, ReviewItemNotFoundError, StaleReviewItemError
from skillroute.core.models import AnswerEvent, ReviewItem


class TestReviewItemValidation:
    @pytest.mark.parametrize(
        "field, value",
        [
            ("easiness_factor", 1.2),
            ("interval", 0),
            ("repetitions", -1),
            ("last_quality", 6),
            ("version", -1),
        ],
    )
    def test_rejects_out_of_range(self, make_item, field, value):
        with pytest.raises(ValidationError):
            make_item(**{field: value})

    def test_naive_datetimes_are_utc(self, make_item):
        item = make_item(next_review_at=datetime(2025, 1, 1, 8, 0))
        assert item.next_review_at.utcoffset() == timedelta(0)
        assert item.next_review_at.hour == 8

    def test_aware_datetimes_are_converted(self, make_item):
        plus_two = timezone(timedelta(hours=2))
        item = make_item(next_review_at=datetime(2025, 1, 1, 10, 0, tzinfo=plus_two))
        assert item.next_review_at.hour == 8
        assert item.next_review_at.utcoffset() == timedelta(0)

    def test_frozen(self, make_item):
        item = make_item()
        with pytest.raises(ValidationError):
            item.interval = 5


class TestReviewItemHelpers:
    def test_is_due(self, make_item, now):
        assert make_item(next_review_at=now).is_due(now)
        assert not make_item(next_review_at=now + timedelta(seconds=1)).is_due(now)

    def test_days_overdue(self, make_item, now):
        assert make_item(next_review_at=now - timedelta(days=2)).days_overdue(now) == pytest.approx(2.0)
        assert make_item(next_review_at=now + timedelta(days=2)).days_overdue(now) == 0.0

    def test_reviewed(self, make_item):
        assert not make_item().reviewed
        assert make_item(last_quality=0).reviewed


class TestAnswerEvent:
    @pytest.mark.parametrize("raw", [-5, math.nan, math.inf, "abc", None])
    def test_bad_times_clamp_to_zero(self, raw):
        assert AnswerEvent(item_id="x", correct=True, response_time_ms=raw).response_time_ms == 0.0

    def test_valid_time_kept(self):
        assert AnswerEvent(item_id="x", correct=False, response_time_ms="1200").response_time_ms == 1200.0


class TestErrors:
    def test_not_found_message(self):
        err = ReviewItemNotFoundError("abc")
        assert err.item_id == "abc"
        assert "abc" in str(err)

    def test_stale_message(self):
        assert "version 3" in str(StaleReviewItemError("abc", 3))

    def test_invalid_lists_fields(self):
        err = InvalidReviewItemError("abc", [{"loc": ("easiness_factor",), "msg": "too small"}])
        assert "easiness_factor" in str(err)
