"""
Core domain models.

- LearningItem: what gets reviewed (Exercise or Definition)
- Rating: one recorded outcome for an item
- Outcome: success / failure / skip

Items are rebuilt from the outline files on every run and never persisted;
only ratings are stored, keyed by the item id.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from uuid import UUID

from orgdrill.core.clock import as_utc
from orgdrill.core.errors import InvalidId, InvalidRatingValue

# Fixed question shown for a definition before its content is revealed
DEFINITION_PROMPT = "Recall the definition."


class Outcome(str, Enum):
    """Result of one review."""

    SUCCESS = "success"
    FAILURE = "failure"
    SKIP = "skip"


def validate_item_id(item_id: str) -> str:
    """Return ``item_id`` unchanged if it parses as a UUID, else raise InvalidId."""
    if not isinstance(item_id, str):
        raise InvalidId(item_id)
    try:
        UUID(item_id.strip())
    except ValueError:
        raise InvalidId(item_id) from None
    return item_id


def is_valid_item_id(item_id: str) -> bool:
    try:
        validate_item_id(item_id)
    except InvalidId:
        return False
    return True


class LearningItem:
    """Common interface of exercises and definitions."""

    id: str
    subject: str
    source: Path | None

    @property
    def kind(self) -> str:
        raise NotImplementedError

    @property
    def prompt(self) -> str:
        """Text shown before the reveal."""
        raise NotImplementedError

    @property
    def reveal(self) -> str:
        """Text shown after the reveal."""
        raise NotImplementedError


@dataclass(frozen=True)
class Exercise(LearningItem):
    """A question/answer pair taken from the first two subheadings."""

    id: str
    subject: str
    question: str
    answer: str
    source: Path | None = None

    @property
    def kind(self) -> str:
        return "exercise"

    @property
    def prompt(self) -> str:
        return self.question

    @property
    def reveal(self) -> str:
        return self.answer


@dataclass(frozen=True)
class Definition(LearningItem):
    """A single block of content to recall, reviewed like an exercise
    whose question is always DEFINITION_PROMPT."""

    id: str
    subject: str
    content: str
    source: Path | None = None

    @property
    def kind(self) -> str:
        return "definition"

    @property
    def prompt(self) -> str:
        return DEFINITION_PROMPT

    @property
    def reveal(self) -> str:
        return self.content


@dataclass(frozen=True)
class Rating:
    """A timestamped outcome recorded against an item id."""

    date: datetime
    item_id: str
    outcome: Outcome

    def __post_init__(self):
        validate_item_id(self.item_id)
        if not isinstance(self.outcome, Outcome):
            try:
                object.__setattr__(self, "outcome", Outcome(self.outcome))
            except ValueError:
                raise InvalidRatingValue(f"Unknown outcome {self.outcome!r} for item {self.item_id}") from None
        if not isinstance(self.date, datetime):
            raise InvalidRatingValue(f"Rating date must be a datetime, got {self.date!r}")
        # Naive timestamps are taken to be UTC
        object.__setattr__(self, "date", as_utc(self.date))
