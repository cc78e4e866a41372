"""Stale issue detection and reminder pipeline."""

from .evaluator import StalenessDecision, evaluate_issue, filter_excluded
from .notifier import Notifier, build_reminder_comment
from .runner import RunSummary, StaleIssueReminder, run_reminder

__all__ = [
    "Notifier",
    "RunSummary",
    "StaleIssueReminder",
    "StalenessDecision",
    "build_reminder_comment",
    "evaluate_issue",
    "filter_excluded",
    "run_reminder",
]
