"""
Error taxonomy for orgdrill.

Every failure in the review pipeline is one of these. Nothing is retried:
an error either points at an authoring mistake in the outline files or at a
misconfigured environment, and both should surface with the offending file
or item id attached.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from orgdrill.study.study_service import RunReport


class OrgDrillError(Exception):
    """Base class for all orgdrill errors."""


class DocumentFormatError(OrgDrillError):
    """A candidate file could not be read as an outline document."""

    def __init__(self, path: Path | str, reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"{self.path}: {reason}")


class MalformedItem(OrgDrillError):
    """A heading is typed as an item but lacks the required structure."""

    kind = "item"

    def __init__(self, rule: str, source: Path | str | None = None, line_number: int = 0):
        self.rule = rule
        self.source = Path(source) if source is not None else None
        self.line_number = line_number
        super().__init__(self._format())

    def _format(self) -> str:
        location = ""
        if self.source is not None:
            location = f"{self.source}:{self.line_number}: " if self.line_number else f"{self.source}: "
        return f"{location}malformed {self.kind}: {self.rule}"


class MalformedExercise(MalformedItem):
    kind = "exercise"


class MalformedDefinition(MalformedItem):
    kind = "definition"


class InvalidId(OrgDrillError):
    """An item id is not a syntactically valid UUID."""

    def __init__(self, item_id: object):
        self.item_id = item_id
        super().__init__(f"Invalid item id: {item_id!r}")


class InvalidRatingValue(OrgDrillError):
    """A rating carries an outcome or timestamp the store cannot accept."""


class StoreUnavailable(OrgDrillError):
    """The rating store could not be opened, read, or written."""


class LocatorUnavailable(OrgDrillError):
    """The external text-search tool is missing or failed."""


class RunAborted(OrgDrillError):
    """A fatal error stopped the run; carries the report accumulated so far."""

    def __init__(self, report: RunReport, cause: OrgDrillError):
        self.report = report
        self.cause = cause
        super().__init__(str(cause))
