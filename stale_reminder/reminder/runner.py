"""Orchestration of one reminder run.

The exclusion set and the open issue listing are fetched concurrently, the
excluded issues are dropped, and every remaining issue is evaluated (and
possibly reminded) as an independent task. A failure in one page, one
evaluation or one comment is recorded in the summary and never cancels its
siblings.
"""

import asyncio
import logging
from datetime import datetime, timezone

from pydantic import BaseModel, Field

from ..config import ReminderConfig
from ..exceptions import EvaluationError, FetchError, NotifyError
from ..github_client.client import GitHubClient
from ..github_client.models import OpenIssue
from ..utils.aging import ensure_utc
from .evaluator import StalenessDecision, evaluate_issue, filter_excluded
from .fetch import build_exclusion_set, fetch_open_issues
from .notifier import Notifier

logger = logging.getLogger(__name__)


class RunSummary(BaseModel):
    """What a run did, including the units of work that failed."""

    now: datetime | None = Field(None, description="Reference instant of the run")
    fetched: int = Field(0, description="Open issues fetched")
    excluded: int = Field(0, description="Issues skipped via ignored columns")
    inspected: int = Field(0, description="Issues passed to evaluation")
    stale: int = Field(0, description="Issues that should be reminded")
    notified: int = Field(0, description="Reminder comments posted")
    timed_out: bool = Field(False, description="Whether the deadline expired")
    decisions: list[StalenessDecision] = Field(default_factory=list)
    failed_pages: list[str] = Field(default_factory=list)
    failed_evaluations: list[int] = Field(default_factory=list)
    failed_notifications: list[int] = Field(default_factory=list)

    @property
    def failure_count(self) -> int:
        return (
            len(self.failed_pages)
            + len(self.failed_evaluations)
            + len(self.failed_notifications)
        )


class StaleIssueReminder:
    """Finds stale open issues in one repository and reminds them."""

    def __init__(self, client: GitHubClient, config: ReminderConfig) -> None:
        self.client = client
        self.config = config
        self.notifier = Notifier(client, config.owner, config.repo, config.dry_run)
        self.summary = RunSummary()

    async def run(self, now: datetime | None = None) -> RunSummary:
        """Execute the pipeline once.

        Args:
            now: Reference instant; captured from the clock when omitted

        Returns:
            RunSummary of the run
        """
        now = ensure_utc(now) if now is not None else datetime.now(timezone.utc)
        self.summary = RunSummary(now=now)
        semaphore = asyncio.Semaphore(self.config.concurrency)

        (excluded, column_failures), (issues, issue_failures) = await asyncio.gather(
            build_exclusion_set(
                self.client, self.config.policy.ignored_columns, semaphore
            ),
            fetch_open_issues(
                self.client, self.config.owner, self.config.repo, semaphore
            ),
        )
        self._record_fetch_failures(column_failures + issue_failures)

        candidates = filter_excluded(issues, excluded)
        self.summary.fetched = len(issues)
        self.summary.excluded = len(issues) - len(candidates)
        self.summary.inspected = len(candidates)
        logger.info(
            "Inspecting the following issues: "
            + ", ".join(str(issue.number) for issue in candidates)
        )

        results = await asyncio.gather(
            *(self._process_issue(issue, now, semaphore) for issue in candidates),
            return_exceptions=True,
        )

        for result in results:
            if isinstance(result, EvaluationError):
                logger.warning(str(result))
                self.summary.failed_evaluations.append(result.issue_number)
            elif isinstance(result, NotifyError):
                logger.warning(str(result))
                self.summary.failed_notifications.append(result.issue_number)
            elif isinstance(result, BaseException):
                raise result

        return self.summary

    async def run_with_deadline(self, now: datetime | None = None) -> RunSummary:
        """Run, giving up when the configured timeout expires.

        Comments already posted when the deadline hits are kept and the
        partial summary is returned.
        """
        if self.config.timeout is None:
            return await self.run(now)
        try:
            return await asyncio.wait_for(self.run(now), timeout=self.config.timeout)
        except asyncio.TimeoutError:
            logger.warning(
                f"Run exceeded its {self.config.timeout}s deadline; "
                "returning partial results"
            )
            self.summary.timed_out = True
            return self.summary

    async def _process_issue(
        self, issue: OpenIssue, now: datetime, semaphore: asyncio.Semaphore
    ) -> StalenessDecision:
        async with semaphore:
            decision = await asyncio.to_thread(
                evaluate_issue,
                issue,
                self.config.policy,
                now,
                self._lookup_timeline,
            )
        self.summary.decisions.append(decision)
        if not decision.notify:
            return decision

        self.summary.stale += 1
        async with semaphore:
            posted = await asyncio.to_thread(self.notifier.notify, decision, now)
        if posted:
            self.summary.notified += 1
        return decision

    def _lookup_timeline(self, issue_number: int):
        return self.client.get_last_timeline_event(
            self.config.owner, self.config.repo, issue_number
        )

    def _record_fetch_failures(self, failures: list[FetchError]) -> None:
        self.summary.failed_pages.extend(str(failure) for failure in failures)


def run_reminder(
    config: ReminderConfig,
    client: GitHubClient | None = None,
    now: datetime | None = None,
) -> RunSummary:
    """Synchronous entry point used by the CLI."""
    if client is None:
        client = GitHubClient(token=config.token)
    reminder = StaleIssueReminder(client, config)
    return asyncio.run(reminder.run_with_deadline(now))
