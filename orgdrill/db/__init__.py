"""
Database layer: the rating log and its SQLAlchemy plumbing.
"""

from orgdrill.db.rating_store import RatingLog, RatingStore

__all__ = [
    "RatingLog",
    "RatingStore",
]
