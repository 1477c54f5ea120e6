"""
Study Module.

Provides:
- Due-date scheduling from the rating log (doubling intervals)
- The end-to-end review run and its report
"""

from orgdrill.study.scheduler import Scheduler, is_due_from, next_review_at, success_streak
from orgdrill.study.study_service import CheckResult, DueItem, RunReport, StudyService

__all__ = [
    "Scheduler",
    "is_due_from",
    "next_review_at",
    "success_streak",
    "StudyService",
    "RunReport",
    "DueItem",
    "CheckResult",
]
