"""
Review session: the per-item prompt/reveal/rate loop.

States per item::

    idle -> prompt --skip--> idle (skip rating)
              |  \\--quit--> finished (no rating)
            reveal
              v
           revealed --success/failure--> rated -> idle
              \\--quit--> finished (no rating)

At most one rating is written per presented item, and none for items that
were never shown. A failed write propagates; the session does not retry.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from loguru import logger

from orgdrill.core.clock import Clock, utc_now
from orgdrill.core.models import LearningItem, Outcome, Rating
from orgdrill.db.rating_store import RatingLog


class Choice(str, Enum):
    """User choices at the two decision points."""

    REVEAL = "reveal"
    SKIP = "skip"
    QUIT = "quit"
    SUCCESS = "success"
    FAILURE = "failure"


PROMPT_CHOICES = (Choice.REVEAL, Choice.SKIP, Choice.QUIT)
REVEALED_CHOICES = (Choice.SUCCESS, Choice.FAILURE, Choice.QUIT)

_OUTCOMES = {
    Choice.SKIP: Outcome.SKIP,
    Choice.SUCCESS: Outcome.SUCCESS,
    Choice.FAILURE: Outcome.FAILURE,
}


class SessionState(str, Enum):
    IDLE = "idle"
    PROMPT = "prompt"
    REVEALED = "revealed"
    RATED = "rated"
    FINISHED = "finished"


class Display(Protocol):
    """Render target and input source for a session."""

    def show(self, subject: str, item_id: str, content: str) -> None: ...

    def ask(self, choices: Sequence[Choice]) -> Choice: ...


@dataclass
class SessionStats:
    presented: int = 0
    success: int = 0
    failure: int = 0
    skip: int = 0
    quit: bool = False

    @property
    def rated(self) -> int:
        return self.success + self.failure + self.skip


class ReviewSession:
    """Presents items one at a time and records exactly one outcome each."""

    def __init__(self, store: RatingLog, display: Display, clock: Clock = utc_now):
        self.store = store
        self.display = display
        self.clock = clock
        self.state = SessionState.IDLE
        self.stats = SessionStats()

    @property
    def finished(self) -> bool:
        return self.state is SessionState.FINISHED

    def review(self, items: Iterable[LearningItem]) -> bool:
        """
        Present ``items`` in order.

        Returns False once the user quits; later calls then present nothing.
        """
        for item in items:
            if self.finished:
                break
            self.present(item)
        return not self.finished

    def present(self, item: LearningItem) -> Outcome | None:
        """Run one item through prompt -> (reveal -> rate); None when quit."""
        if self.state is not SessionState.IDLE:
            raise RuntimeError(f"Cannot present {item.id} while session is {self.state.value}")

        self.state = SessionState.PROMPT
        self.stats.presented += 1
        self.display.show(item.subject, item.id, item.prompt)
        choice = self._ask(PROMPT_CHOICES)

        if choice is Choice.QUIT:
            return self._quit(item)
        if choice is Choice.SKIP:
            return self._rate(item, choice)

        self.state = SessionState.REVEALED
        self.display.show(item.subject, item.id, item.reveal)
        choice = self._ask(REVEALED_CHOICES)
        if choice is Choice.QUIT:
            return self._quit(item)
        return self._rate(item, choice)

    def _ask(self, choices: Sequence[Choice]) -> Choice:
        choice = self.display.ask(choices)
        if choice not in choices:
            raise ValueError(f"Choice {choice!r} not offered in state {self.state.value}")
        return Choice(choice)

    def _rate(self, item: LearningItem, choice: Choice) -> Outcome:
        outcome = _OUTCOMES[choice]
        self.store.save(Rating(date=self.clock(), item_id=item.id, outcome=outcome))
        self.state = SessionState.RATED

        setattr(self.stats, outcome.value, getattr(self.stats, outcome.value) + 1)
        logger.info(f"{item.id} rated {outcome.value}")

        self.state = SessionState.IDLE
        return outcome

    def _quit(self, item: LearningItem) -> None:
        self.state = SessionState.FINISHED
        self.stats.quit = True
        logger.info(f"Session quit at {item.id}")
        return None
