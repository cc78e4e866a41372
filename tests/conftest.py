"""Test configuration and fixtures."""

from collections.abc import Callable
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from stale_reminder.config import ReminderConfig, StalenessPolicy
from stale_reminder.github_client.models import OpenIssue, ProjectCard, TimelineSignal


@pytest.fixture
def now() -> datetime:
    """Reference instant shared by a test run (a Wednesday)."""
    return datetime(2024, 1, 10, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_issue() -> Callable[..., OpenIssue]:
    """Factory for open issues updated on a given day of January 2024."""

    def _make_issue(number: int, day: int, month: int = 1) -> OpenIssue:
        return OpenIssue(
            number=number,
            updated_at=datetime(2024, month, day, 12, 0, tzinfo=timezone.utc),
            title=f"Issue {number}",
        )

    return _make_issue


@pytest.fixture
def make_card() -> Callable[..., ProjectCard]:
    """Factory for project cards, or note cards when no issue is given."""

    def _make_card(card_id: int, issue_number: int | None = None) -> ProjectCard:
        content_url = (
            f"https://api.github.com/repos/test-org/test-repo/issues/{issue_number}"
            if issue_number is not None
            else None
        )
        return ProjectCard(id=card_id, content_url=content_url)

    return _make_card


@pytest.fixture
def policy() -> StalenessPolicy:
    """Five calendar days, no ignored columns."""
    return StalenessPolicy(days_stale=5)


@pytest.fixture
def config() -> ReminderConfig:
    """Configuration with one ignored column."""
    return ReminderConfig(
        token="test-token",
        owner="test-org",
        repo="test-repo",
        policy=StalenessPolicy(days_stale=5, ignored_columns=[111]),
        concurrency=4,
    )


@pytest.fixture
def mock_client() -> MagicMock:
    """GitHub client for an empty repository with no timeline events."""
    client = MagicMock()
    client.list_open_issues.return_value = []
    client.list_column_cards.return_value = []
    client.get_last_timeline_event.side_effect = lambda owner, repo, number: (
        TimelineSignal(issue_number=number)
    )
    client.add_issue_comment.return_value = True
    return client
