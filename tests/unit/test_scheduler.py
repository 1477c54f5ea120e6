"""
Unit tests for the doubling-interval scheduler.

Intervals: 1, 2, 4, 8... days after the latest success since the last
failure; due immediately with no such successes.
"""
from datetime import datetime, timedelta, timezone
from unittest.mock import Mock

import pytest

from orgdrill.core.clock import EPOCH
from orgdrill.core.errors import StoreUnavailable
from orgdrill.core.models import Outcome, Rating
from orgdrill.study.scheduler import (
    Scheduler,
    interval_for,
    is_due_from,
    next_review_at,
    success_streak,
)

ITEM = "3f2b8c1d-6e4a-4b9f-8d2c-1a0e9f8b7c6d"
DAY0 = datetime(2024, 3, 1, 9, 30, tzinfo=timezone.utc)


def _day(n: float) -> datetime:
    return DAY0 + timedelta(days=n)


def _ratings(*entries: tuple[float, str]) -> list[Rating]:
    return [Rating(date=_day(day), item_id=ITEM, outcome=Outcome(outcome)) for day, outcome in entries]


class TestIntervals:
    def test_doubling(self):
        assert [interval_for(n).days for n in range(1, 6)] == [1, 2, 4, 8, 16]

    def test_zero_successes_has_no_interval(self):
        assert interval_for(0) == timedelta(0)


class TestDueDecision:
    """Testable scheduling properties."""

    def test_never_rated_is_due_since_epoch(self):
        assert next_review_at([]) == EPOCH
        assert is_due_from([], EPOCH)
        assert is_due_from([], _day(0))

    def test_two_successes_wait_two_days_from_the_last(self):
        ratings = _ratings((0, "success"), (1, "success"))
        assert not is_due_from(ratings, _day(2))
        assert not is_due_from(ratings, _day(3) - timedelta(microseconds=1))
        assert is_due_from(ratings, _day(3))
        assert is_due_from(ratings, _day(3) + timedelta(seconds=1))

    def test_cutoff_is_inclusive(self):
        ratings = _ratings((0, "success"))
        assert next_review_at(ratings) == _day(1)
        assert is_due_from(ratings, _day(1))

    def test_failure_resets_streak(self):
        ratings = _ratings((0, "success"), (1, "success"), (2, "failure"), (3, "success"))
        streak = success_streak(ratings)
        assert streak.count == 1
        assert streak.last_success == _day(3)
        assert next_review_at(ratings) == _day(4)

    def test_trailing_failure_makes_item_due_immediately(self):
        ratings = _ratings((0, "success"), (1, "success"), (2, "failure"))
        assert next_review_at(ratings) == EPOCH
        assert is_due_from(ratings, _day(2))

    def test_skip_is_neutral(self):
        ratings = _ratings((0, "success"), (1, "success"), (1.5, "skip"))
        streak = success_streak(ratings)
        assert streak.count == 2
        assert streak.last_success == _day(1)
        assert next_review_at(ratings) == _day(3)

    def test_only_skips_is_due(self):
        ratings = _ratings((0, "skip"), (1, "skip"))
        assert next_review_at(ratings) == EPOCH

    def test_skip_after_failure_does_not_count(self):
        ratings = _ratings((0, "success"), (1, "failure"), (2, "skip"))
        assert success_streak(ratings).count == 0

    def test_long_streak(self):
        ratings = _ratings(*[(day, "success") for day in range(5)])
        assert next_review_at(ratings) == _day(4) + timedelta(days=16)

    def test_interval_is_exact_seconds_across_offsets(self):
        """A non-UTC timestamp yields the same instant arithmetic as its UTC form."""
        local = timezone(timedelta(hours=-5))
        rating = Rating(date=datetime(2024, 3, 9, 22, 0, tzinfo=local), item_id=ITEM, outcome=Outcome.SUCCESS)
        assert next_review_at([rating]) == datetime(2024, 3, 11, 3, 0, tzinfo=timezone.utc)


class TestScheduler:
    """Scheduler reads from the store and the clock."""

    def test_is_due_uses_store_and_clock(self, memory_store, clock):
        memory_store.save(Rating(date=clock(), item_id=ITEM, outcome=Outcome.SUCCESS))
        scheduler = Scheduler(memory_store, clock)

        assert scheduler.is_due(ITEM) is False
        clock.advance(hours=23, minutes=59)
        assert scheduler.is_due(ITEM) is False
        clock.advance(minutes=1)
        assert scheduler.is_due(ITEM) is True

    def test_explicit_now_overrides_clock(self, memory_store, clock):
        memory_store.save(Rating(date=clock(), item_id=ITEM, outcome=Outcome.SUCCESS))
        scheduler = Scheduler(memory_store, clock)
        assert scheduler.is_due(ITEM, now=clock() + timedelta(days=1))

    def test_unknown_item_is_due(self, memory_store, clock):
        assert Scheduler(memory_store, clock).is_due(ITEM)

    def test_store_failure_propagates(self, clock):
        store = Mock()
        store.ratings_for.side_effect = StoreUnavailable("disk gone")
        with pytest.raises(StoreUnavailable):
            Scheduler(store, clock).is_due(ITEM)

    def test_naive_clock_is_taken_as_utc(self, memory_store):
        memory_store.save(Rating(date=datetime(2024, 1, 1), item_id=ITEM, outcome=Outcome.SUCCESS))
        scheduler = Scheduler(memory_store, clock=lambda: datetime(2024, 1, 5))

        assert scheduler.is_due(ITEM) is True
        assert scheduler.is_due(ITEM, now=datetime(2024, 1, 1, 23, 59)) is False
        assert is_due_from(memory_store.ratings_for(ITEM), datetime(2024, 1, 2))
