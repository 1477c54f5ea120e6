"""
Rating log model.

One append-only table. Timestamps are stored as ISO-8601 UTC text with a
fixed microsecond width so that text order equals chronological order.
"""

from __future__ import annotations

from sqlalchemy import Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class RatingRecord(Base):
    """One persisted rating row."""

    __tablename__ = "ratings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    outcome: Mapped[str] = mapped_column(Text, nullable=False)
    item_id: Mapped[str] = mapped_column(Text, nullable=False)
    timestamp: Mapped[str] = mapped_column(Text, nullable=False)

    __table_args__ = (Index("ix_ratings_item_id_timestamp", "item_id", "timestamp"),)

    def __repr__(self) -> str:
        return f"<RatingRecord {self.item_id} {self.outcome} @ {self.timestamp}>"
