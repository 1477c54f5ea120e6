"""
Rating store: the append-only log of review outcomes.

This is the only durable state orgdrill keeps. Two operations matter:
``save`` appends one rating and ``ratings_for`` returns an item's ratings
oldest first. Any database error is raised as StoreUnavailable; callers
never get a default answer in place of a failed read.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Protocol

from loguru import logger
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from orgdrill.core.errors import InvalidRatingValue, StoreUnavailable
from orgdrill.core.models import Outcome, Rating, validate_item_id
from orgdrill.db.database import create_db_engine, init_db, make_session_factory, session_scope
from orgdrill.db.models import RatingRecord

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S.%f+00:00"


class RatingLog(Protocol):
    """What the scheduler and the session need from a store."""

    def save(self, rating: Rating) -> None: ...

    def ratings_for(self, item_id: str) -> list[Rating]: ...


def format_timestamp(value: datetime) -> str:
    """ISO-8601 UTC text with a fixed width."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime(TIMESTAMP_FORMAT)


def parse_timestamp(value: str) -> datetime:
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


class RatingStore:
    """SQLAlchemy-backed rating log; open once per run, close when done."""

    def __init__(self, database_url: str, echo: bool = False):
        self.database_url = database_url
        self._engine = create_db_engine(database_url, echo=echo)
        init_db(self._engine)
        self._session_factory = make_session_factory(self._engine)
        self._closed = False

    def __enter__(self) -> RatingStore:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def save(self, rating: Rating) -> None:
        """Append one rating. Invalid ids or outcomes are rejected, never dropped."""
        self._check_open()
        validate_item_id(rating.item_id)
        if not isinstance(rating.outcome, Outcome):
            raise InvalidRatingValue(f"Unknown outcome {rating.outcome!r} for item {rating.item_id}")

        record = RatingRecord(
            outcome=rating.outcome.value,
            item_id=rating.item_id,
            timestamp=format_timestamp(rating.date),
        )
        try:
            with session_scope(self._session_factory) as session:
                session.add(record)
        except SQLAlchemyError as e:
            raise StoreUnavailable(f"Could not save rating for {rating.item_id}: {e}") from e
        logger.debug(f"Saved {rating.outcome.value} for {rating.item_id} at {record.timestamp}")

    def ratings_for(self, item_id: str) -> list[Rating]:
        """All ratings for an item, oldest first."""
        self._check_open()
        validate_item_id(item_id)
        stmt = (
            select(RatingRecord)
            .where(RatingRecord.item_id == item_id)
            .order_by(RatingRecord.timestamp.asc(), RatingRecord.id.asc())
        )
        try:
            with session_scope(self._session_factory) as session:
                rows = session.scalars(stmt).all()
        except SQLAlchemyError as e:
            raise StoreUnavailable(f"Could not read ratings for {item_id}: {e}") from e
        return [self._to_rating(row) for row in rows]

    def count(self) -> int:
        """Total number of ratings stored."""
        self._check_open()
        try:
            with session_scope(self._session_factory) as session:
                return int(session.scalar(select(func.count(RatingRecord.id))) or 0)
        except SQLAlchemyError as e:
            raise StoreUnavailable(f"Could not count ratings: {e}") from e

    def close(self) -> None:
        if not self._closed:
            self._engine.dispose()
            self._closed = True

    def _check_open(self) -> None:
        if self._closed:
            raise StoreUnavailable("Rating store is closed")

    @staticmethod
    def _to_rating(row: RatingRecord) -> Rating:
        try:
            outcome = Outcome(row.outcome)
            date = parse_timestamp(row.timestamp)
        except ValueError as e:
            raise InvalidRatingValue(f"Corrupt rating row {row.id} for {row.item_id}: {e}") from e
        return Rating(date=date, item_id=row.item_id, outcome=outcome)
