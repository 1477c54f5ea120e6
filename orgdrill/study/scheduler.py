"""
Review scheduling.

The whole policy: every consecutive success since the last failure doubles
the wait (1, 2, 4, 8... days after the latest success), and a failure
resets it so the item is due again immediately. Skips neither count nor
reset. An item with no successes since its last failure (or no ratings at
all) has been due since the epoch.

Intervals are added as exact ``timedelta`` days on UTC datetimes, so the
result never depends on calendar days or DST.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta

from orgdrill.core.clock import EPOCH, Clock, as_utc, utc_now
from orgdrill.core.models import Outcome, Rating
from orgdrill.db.rating_store import RatingLog

BASE_INTERVAL = timedelta(days=1)


@dataclass(frozen=True)
class SuccessStreak:
    """Successes counted since the last failure."""

    count: int
    last_success: datetime | None


def success_streak(ratings: Sequence[Rating]) -> SuccessStreak:
    """Count successes after the last failure; ``ratings`` must be oldest first."""
    start = 0
    for index in range(len(ratings) - 1, -1, -1):
        if ratings[index].outcome is Outcome.FAILURE:
            start = index + 1
            break

    successes = [r for r in ratings[start:] if r.outcome is Outcome.SUCCESS]
    if not successes:
        return SuccessStreak(count=0, last_success=None)
    return SuccessStreak(count=len(successes), last_success=successes[-1].date)


def interval_for(count: int) -> timedelta:
    """Wait after ``count`` consecutive successes: 2^(count-1) days."""
    if count <= 0:
        return timedelta(0)
    return BASE_INTERVAL * (2 ** (count - 1))


def next_review_at(ratings: Sequence[Rating]) -> datetime:
    """When the item becomes due; the epoch if it has no standing successes."""
    streak = success_streak(ratings)
    if streak.count == 0 or streak.last_success is None:
        return EPOCH
    return streak.last_success + interval_for(streak.count)


def is_due_from(ratings: Sequence[Rating], now: datetime) -> bool:
    """Naive ``now`` is taken as UTC, like naive rating dates."""
    return next_review_at(ratings) <= as_utc(now)


class Scheduler:
    """Answers "is this item due?" from the rating log."""

    def __init__(self, store: RatingLog, clock: Clock = utc_now):
        self.store = store
        self.clock = clock

    def is_due(self, item_id: str, now: datetime | None = None) -> bool:
        """True when the item's next review time is at or before ``now``."""
        if now is None:
            now = self.clock()
        return is_due_from(self.store.ratings_for(item_id), now)

    def next_review(self, item_id: str) -> datetime:
        return next_review_at(self.store.ratings_for(item_id))
