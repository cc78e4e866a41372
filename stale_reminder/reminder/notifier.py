"""Reminder comments for stale issues."""

import logging
from datetime import datetime

from ..exceptions import NotifyError
from ..github_client.client import GitHubClient
from .evaluator import StalenessDecision

logger = logging.getLogger(__name__)


def _format_date(value: datetime | None) -> str:
    return value.strftime("%Y-%m-%d") if value is not None else "never"


def build_reminder_comment(
    issue_number: int,
    updated_at: datetime,
    last_event_at: datetime | None,
    now: datetime,
) -> str:
    """Generate the reminder comment posted on a stale issue.

    Args:
        issue_number: Issue being reminded
        updated_at: Issue last update timestamp
        last_event_at: Latest timeline event, None if there never was one
        now: Reference instant of the run

    Returns:
        Comment text ready for posting to GitHub
    """
    return (
        f"Looks like issue #{issue_number} is stale as of "
        f"{now.strftime('%a %b %d %Y')}. "
        f"It was last updated on {_format_date(updated_at)} and its most "
        f"recent event was on {_format_date(last_event_at)}. "
        "Have a great day!"
    )


class Notifier:
    """Posts reminder comments, or only reports them in dry-run mode."""

    def __init__(
        self, client: GitHubClient, owner: str, repo: str, dry_run: bool = False
    ) -> None:
        self.client = client
        self.owner = owner
        self.repo = repo
        self.dry_run = dry_run

    def notify(self, decision: StalenessDecision, now: datetime) -> bool:
        """Post a reminder for ``decision``.

        Failed posts are not retried beyond the client's own rate limit
        handling.

        Returns:
            True if a comment was posted, False in dry-run mode

        Raises:
            NotifyError: If posting the comment fails
        """
        last_event = (
            decision.last_event_at.isoformat() if decision.last_event_at else "never"
        )
        logger.info(
            f"Bumping #{decision.issue_number} which was last updated "
            f"{decision.updated_at.isoformat()} and had an event on {last_event}."
        )

        body = build_reminder_comment(
            decision.issue_number, decision.updated_at, decision.last_event_at, now
        )
        if self.dry_run:
            logger.info(f"Dry run, not commenting on #{decision.issue_number}")
            return False

        try:
            self.client.add_issue_comment(
                self.owner, self.repo, decision.issue_number, body
            )
        except Exception as e:
            raise NotifyError(decision.issue_number, e) from e
        return True
