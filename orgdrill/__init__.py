"""
orgdrill - spaced-repetition review of exercises kept in outline documents.

Exercises and definitions live inside org-mode outlines as headings carrying
``TYPE`` and ``ID`` properties. orgdrill finds them, decides which are due
from the rating history, and walks the learner through a review session.
"""

__version__ = "0.3.0"
