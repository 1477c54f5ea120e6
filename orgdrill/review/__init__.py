"""
Review: the interactive prompt/reveal/rate loop over due items.
"""

from orgdrill.review.session import (
    PROMPT_CHOICES,
    REVEALED_CHOICES,
    Choice,
    Display,
    ReviewSession,
    SessionState,
    SessionStats,
)

__all__ = [
    "Choice",
    "Display",
    "PROMPT_CHOICES",
    "REVEALED_CHOICES",
    "ReviewSession",
    "SessionState",
    "SessionStats",
]
