"""
Study service: one end-to-end review run.

locate files -> parse -> extract items -> keep the due ones -> review them
-> report. Files are handled strictly one after another; a file is fully
reviewed before the next is read.

A malformed item aborts the whole run unless ``continue_on_malformed`` is
set. Fatal errors are raised as RunAborted carrying the report built so far.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from loguru import logger

from orgdrill.config import Settings
from orgdrill.content.extractor import ItemExtractor
from orgdrill.content.locator import FileLocator
from orgdrill.content.parser import OutlineParser
from orgdrill.core.clock import Clock, as_utc, utc_now
from orgdrill.core.errors import DocumentFormatError, MalformedItem, OrgDrillError, RunAborted
from orgdrill.core.models import LearningItem, Outcome, Rating, validate_item_id
from orgdrill.db.rating_store import RatingLog
from orgdrill.review.session import Display, ReviewSession, SessionStats
from orgdrill.study.scheduler import Scheduler


@dataclass
class RunReport:
    """Line-oriented log of a run plus its counters.

    Per-outcome counts come from the review session's stats.
    """

    lines: list[str] = field(default_factory=list)
    files_found: int = 0
    files_processed: int = 0
    files_skipped: int = 0
    items_found: int = 0
    items_due: int = 0
    stats: SessionStats = field(default_factory=SessionStats)
    error: str | None = None

    @property
    def items_presented(self) -> int:
        return self.stats.presented

    @property
    def success(self) -> int:
        return self.stats.success

    @property
    def failure(self) -> int:
        return self.stats.failure

    @property
    def skip(self) -> int:
        return self.stats.skip

    @property
    def quit(self) -> bool:
        return self.stats.quit

    def log(self, line: str, level: str = "INFO") -> None:
        self.lines.append(line)
        logger.log(level, line)

    def record(self, item: LearningItem, outcome: Outcome | None) -> None:
        label = outcome.value if outcome is not None else "quit"
        self.log(f"  {item.subject} [{item.id}]: {label}")

    @property
    def status(self) -> str:
        """Short notification line for the end of a run."""
        if self.error:
            return f"Aborted after {self.files_processed} files: {self.error}"
        if self.items_presented == 0:
            return f"Nothing due ({self.items_found} items in {self.files_processed} files)"
        return (
            f"Reviewed {self.items_presented} of {self.items_due} due items: "
            f"{self.success} success, {self.failure} failure, {self.skip} skip"
            + (" (quit early)" if self.quit else "")
        )

    def render(self) -> str:
        summary = [
            "",
            f"Files: {self.files_processed} processed, {self.files_skipped} skipped, {self.files_found} found",
            f"Items: {self.items_found} found, {self.items_due} due, {self.items_presented} presented",
            f"Outcomes: {self.success} success, {self.failure} failure, {self.skip} skip",
        ]
        if self.error:
            summary.append(f"Error: {self.error}")
        return "\n".join(self.lines + summary)


@dataclass(frozen=True)
class DueItem:
    item: LearningItem
    next_review: datetime


@dataclass
class CheckResult:
    """Outcome of validating every candidate file."""

    files: int = 0
    items: int = 0
    problems: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.problems


class StudyService:
    """Wires locator, parser, extractor, scheduler and session together."""

    def __init__(
        self,
        settings: Settings,
        store: RatingLog | None = None,
        display: Display | None = None,
        locator: FileLocator | None = None,
        parser: OutlineParser | None = None,
        clock: Clock = utc_now,
    ):
        """
        Args:
            settings: Type identifiers, root directory and locator options.
            store: Rating log; only ``check`` works without one.
            display: Required by ``run``.
        """
        self.settings = settings
        self.store = store
        self.display = display
        self.locator = locator or FileLocator(settings.locator_command, settings.file_glob)
        self.parser = parser or OutlineParser()
        self.extractor = ItemExtractor(settings.exercise_type_id, settings.definition_type_id)
        self.scheduler = Scheduler(store, clock) if store is not None else None
        self.clock = clock

    # =========================================================================
    # Building blocks
    # =========================================================================

    def locate(self, root: Path | None = None) -> list[Path]:
        root = root or self.settings.root_dir
        return self.locator.locate(root, [self.settings.exercise_type_id, self.settings.definition_type_id])

    def load_items(self, path: Path) -> list[LearningItem]:
        """Parse one file and extract its items (leaves first)."""
        return self.extractor.extract(self.parser.parse_file(path))

    # =========================================================================
    # Operations
    # =========================================================================

    def run(self, root: Path | None = None) -> RunReport:
        """Review every due item under ``root``, file by file."""
        if self.display is None:
            raise ValueError("A display is required to run a review session")
        scheduler = self._require_scheduler("run")

        root = root or self.settings.root_dir
        files = self.locate(root)

        session = ReviewSession(self.store, self.display, self.clock)
        report = RunReport(files_found=len(files), stats=session.stats)
        report.log(f"Found {len(files)} candidate files under {root}")
        seen: dict[str, Path | None] = {}

        try:
            for path in files:
                items = self._load_for_run(path, report)
                if items is None:
                    continue

                report.files_processed += 1
                report.items_found += len(items)
                report.log(f"{path}: {len(items)} items")
                self._warn_duplicates(items, seen, report)

                now = self.clock()
                due = [item for item in items if scheduler.is_due(item.id, now)]
                report.items_due += len(due)
                if due:
                    report.log(f"{path}: {len(due)} due")

                for item in due:
                    report.record(item, session.present(item))
                    if session.finished:
                        break

                if session.finished:
                    report.log("Session ended by user")
                    break
        except OrgDrillError as e:
            report.error = str(e)
            report.log(f"Aborted: {e}")
            raise RunAborted(report, e) from e

        return report

    def due_items(self, root: Path | None = None) -> list[DueItem]:
        """Items due now, in review order, without presenting anything."""
        scheduler = self._require_scheduler("list due items")
        now = as_utc(self.clock())
        due: list[DueItem] = []
        for path in self.locate(root):
            try:
                items = self.load_items(path)
            except DocumentFormatError as e:
                logger.warning(f"Skipping {e.path}: {e.reason}")
                continue
            for item in items:
                next_review = scheduler.next_review(item.id)
                if next_review <= now:
                    due.append(DueItem(item=item, next_review=next_review))
        return due

    def check(self, root: Path | None = None) -> CheckResult:
        """Parse and extract every candidate file, collecting every problem."""
        result = CheckResult()
        for path in self.locate(root):
            result.files += 1
            try:
                result.items += len(self.load_items(path))
            except (DocumentFormatError, MalformedItem) as e:
                result.problems.append(str(e))
        return result

    def history(self, item_id: str) -> list[Rating]:
        scheduler = self._require_scheduler("read history")
        return scheduler.store.ratings_for(validate_item_id(item_id))

    # =========================================================================
    # Helpers
    # =========================================================================

    def _load_for_run(self, path: Path, report: RunReport) -> list[LearningItem] | None:
        """Items of one file, or None when the file is skipped."""
        try:
            return self.load_items(path)
        except DocumentFormatError as e:
            report.files_skipped += 1
            report.log(f"Skipped {e.path}: {e.reason}", level="WARNING")
            return None
        except MalformedItem as e:
            if not self.settings.continue_on_malformed:
                raise
            report.files_skipped += 1
            report.log(f"Skipped {path}: {e}", level="WARNING")
            return None

    @staticmethod
    def _warn_duplicates(items: list[LearningItem], seen: dict[str, Path | None], report: RunReport) -> None:
        for item in items:
            if item.id in seen:
                report.log(
                    f"Warning: duplicate ID {item.id} in {item.source} (first seen in {seen[item.id]})", level="WARNING"
                )
            else:
                seen[item.id] = item.source

    def _require_scheduler(self, action: str) -> Scheduler:
        if self.scheduler is None:
            raise ValueError(f"A rating store is required to {action}")
        return self.scheduler
