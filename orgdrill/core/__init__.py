"""
Core Module - Shared domain models, errors, and the clock.

All other packages (content/, db/, study/, review/) import the item and
rating types from here rather than defining their own.
"""

from orgdrill.core.clock import EPOCH, Clock, as_utc, utc_now
from orgdrill.core.errors import (
    DocumentFormatError,
    InvalidId,
    InvalidRatingValue,
    LocatorUnavailable,
    MalformedDefinition,
    MalformedExercise,
    MalformedItem,
    OrgDrillError,
    RunAborted,
    StoreUnavailable,
)
from orgdrill.core.models import (
    DEFINITION_PROMPT,
    Definition,
    Exercise,
    LearningItem,
    Outcome,
    Rating,
    is_valid_item_id,
    validate_item_id,
)

__all__ = [
    # Clock
    "Clock",
    "EPOCH",
    "as_utc",
    "utc_now",
    # Errors
    "OrgDrillError",
    "DocumentFormatError",
    "MalformedItem",
    "MalformedExercise",
    "MalformedDefinition",
    "InvalidId",
    "InvalidRatingValue",
    "StoreUnavailable",
    "LocatorUnavailable",
    "RunAborted",
    # Models
    "DEFINITION_PROMPT",
    "LearningItem",
    "Exercise",
    "Definition",
    "Outcome",
    "Rating",
    "validate_item_id",
    "is_valid_item_id",
]
