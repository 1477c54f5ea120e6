# SQLAlchemy models
from .base import Base
from .rating import RatingRecord

__all__ = [
    "Base",
    "RatingRecord",
]
