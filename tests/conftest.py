"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import sys
from collections.abc import Sequence
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from orgdrill.config import Settings, get_settings  # noqa: E402
from orgdrill.db.rating_store import RatingStore  # noqa: E402
from orgdrill.review.session import Choice  # noqa: E402

EXERCISE_ID = "0b6f2c9e-3a41-4d8e-9c1a-5f0e2d7b8a11"
DEFINITION_ID = "7d3e1a2b-4c5f-4e6a-8b9c-0d1e2f3a4b5c"
NESTED_ID = "c4a1f8e2-9b3d-4f7a-a6e5-2d8c1b0f9e34"


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests (SQLite + real files)")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")
    config.addinivalue_line("markers", "requires_rg: Tests that run ripgrep")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


class FrozenClock:
    """Deterministic clock; call it to read, ``advance`` to move it."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


class ScriptedDisplay:
    """Display double that answers from a script and records what it showed."""

    def __init__(self, answers: Sequence[str] = ()):
        self.answers = [Choice(a) for a in answers]
        self.shown: list[tuple[str, str, str]] = []
        self.asked: list[tuple[Choice, ...]] = []

    def show(self, subject: str, item_id: str, content: str) -> None:
        self.shown.append((subject, item_id, content))

    def ask(self, choices: Sequence[Choice]) -> Choice:
        self.asked.append(tuple(choices))
        if not self.answers:
            raise AssertionError(f"Display asked {choices} but the script is empty")
        return self.answers.pop(0)


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def clock():
    """A clock frozen at 2024-03-10 12:00 UTC (the night DST starts in the US)."""
    return FrozenClock(datetime(2024, 3, 10, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def scripted_display():
    """Factory: ``scripted_display("reveal", "success", ...)``."""
    return ScriptedDisplay


@pytest.fixture
def memory_store():
    """In-memory SQLite rating store."""
    store = RatingStore("sqlite://")
    yield store
    store.close()


@pytest.fixture
def settings(tmp_path):
    """Settings isolated from the environment of the machine running tests."""
    get_settings.cache_clear()
    return Settings(
        root_dir=tmp_path,
        database_url="sqlite://",
        exercise_type_id="exercise",
        definition_type_id="definition",
        empty_delay_seconds=0,
        log_file=None,
    )


@pytest.fixture
def sample_org():
    """A document with one exercise, one definition nested under a section,
    and an exercise nested inside another heading's answer."""
    return f"""#+TITLE: Networking

* Transport
** TCP handshake
:PROPERTIES:
:TYPE: exercise
:ID: {EXERCISE_ID}
:END:
*** Question
Name the three packets of the TCP handshake.
*** Answer
SYN, SYN-ACK, ACK.
**** Nested drill
:PROPERTIES:
:TYPE: exercise
:ID: {NESTED_ID}
:END:
***** Q
Which flag starts it?
***** A
SYN
** Socket
:PROPERTIES:
:TYPE: definition
:ID: {DEFINITION_ID}
:END:
An endpoint identified by address and port.
"""


@pytest.fixture
def item_ids():
    """IDs used by ``sample_org``."""
    return {"exercise": EXERCISE_ID, "definition": DEFINITION_ID, "nested": NESTED_ID}
