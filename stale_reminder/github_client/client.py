"""GitHub API client using PyGitHub."""

import logging
import os
import time
from datetime import datetime
from typing import TYPE_CHECKING

from github import Auth, Github
from github.GithubException import RateLimitExceededException, UnknownObjectException
from github.Issue import Issue
from github.Repository import Repository

from .models import OpenIssue, ProjectCard, TimelineSignal

if TYPE_CHECKING:
    from github.ProjectCard import ProjectCard as GithubProjectCard

logger = logging.getLogger(__name__)

PAGE_SIZE = 100
RATE_LIMIT_WAIT = 60

LAST_EVENT_QUERY = """
query LastEvent($owner: String!, $repo: String!, $number: Int!) {
  repository(owner: $owner, name: $repo) {
    issue(number: $number) {
      timelineItems(last: 1) {
        updatedAt
      }
    }
  }
}
"""


class GitHubClient:
    """GitHub API client with rate limiting and authentication."""

    def __init__(self, token: str | None = None):
        """Initialize GitHub client with authentication.

        Args:
            token: GitHub personal access token. If None, reads from
                GITHUB_TOKEN env var.
        """
        self.token = token or os.getenv("GITHUB_TOKEN")
        if not self.token:
            raise ValueError(
                "GitHub token is required. Set GITHUB_TOKEN environment variable."
            )

        self.github = Github(auth=Auth.Token(self.token), per_page=PAGE_SIZE)
        self._repositories: dict[str, Repository] = {}

    def _check_rate_limit(self) -> None:
        """Check rate limit and sleep if necessary."""
        try:
            rate_limit = self.github.get_rate_limit()
            remaining = rate_limit.rate.remaining
            logger.debug(f"GitHub API rate limit: {remaining} requests remaining")

            if remaining < 10:
                reset_time = rate_limit.rate.reset.timestamp()
                sleep_time = reset_time - time.time() + 1
                logger.warning(
                    f"Rate limit low, sleeping for {sleep_time:.1f} seconds..."
                )
                time.sleep(sleep_time)

        except Exception as e:
            # The check is advisory; the call itself still handles rate limits
            logger.debug(f"Could not check rate limit: {e}")

    def _convert_issue(self, github_issue: Issue) -> OpenIssue:
        """Convert PyGitHub issue to our model."""
        return OpenIssue(
            number=github_issue.number,
            updated_at=github_issue.updated_at,
            title=github_issue.title or "",
            is_pull_request=github_issue.pull_request is not None,
        )

    def _convert_card(self, github_card: "GithubProjectCard") -> ProjectCard:
        """Convert PyGitHub project card to our model."""
        return ProjectCard(id=github_card.id, content_url=github_card.content_url)

    def get_repository(self, owner: str, repo: str) -> Repository:
        """Get repository object."""
        full_name = f"{owner}/{repo}"
        if full_name not in self._repositories:
            try:
                self._repositories[full_name] = self.github.get_repo(full_name)
            except UnknownObjectException:
                raise ValueError(f"Repository {full_name} not found")
        return self._repositories[full_name]

    def list_open_issues(self, owner: str, repo: str, page: int) -> list[OpenIssue]:
        """List one page of open issues in a repository.

        Args:
            owner: Repository owner
            repo: Repository name
            page: Zero-based page index, PAGE_SIZE issues per page

        Returns:
            List of OpenIssue objects, empty past the last page
        """
        self._check_rate_limit()

        try:
            repository = self.get_repository(owner, repo)
            issues = repository.get_issues(state="open").get_page(page)
            return [self._convert_issue(issue) for issue in issues]

        except RateLimitExceededException:
            logger.warning("Rate limit exceeded while listing issues, waiting...")
            time.sleep(RATE_LIMIT_WAIT)
            return self.list_open_issues(owner, repo, page)

    def list_column_cards(self, column_id: int, page: int) -> list[ProjectCard]:
        """List one page of non-archived cards in a project column.

        Args:
            column_id: Project column identifier
            page: Zero-based page index, PAGE_SIZE cards per page

        Returns:
            List of ProjectCard objects, empty past the last page

        Raises:
            ValueError: If the column does not exist
        """
        self._check_rate_limit()

        try:
            column = self.github.get_project_column(column_id)
            cards = column.get_cards(archived_state="not_archived").get_page(page)
            return [self._convert_card(card) for card in cards]

        except UnknownObjectException:
            raise ValueError(f"Project column {column_id} not found")
        except RateLimitExceededException:
            logger.warning("Rate limit exceeded while listing cards, waiting...")
            time.sleep(RATE_LIMIT_WAIT)
            return self.list_column_cards(column_id, page)

    def get_last_timeline_event(
        self, owner: str, repo: str, issue_number: int
    ) -> TimelineSignal:
        """Get the timestamp of the most recent timeline event on an issue.

        Timeline events include activity that does not touch the issue's own
        ``updated_at``, such as moving its card between project columns.

        Returns:
            TimelineSignal whose ``last_event_at`` is None when the issue has
            no timeline events
        """
        self._check_rate_limit()

        try:
            _, result = self.github.requester.graphql_query(
                LAST_EVENT_QUERY,
                {"owner": owner, "repo": repo, "number": issue_number},
            )
        except RateLimitExceededException:
            logger.warning("Rate limit exceeded during timeline query, waiting...")
            time.sleep(RATE_LIMIT_WAIT)
            return self.get_last_timeline_event(owner, repo, issue_number)

        logger.debug(f"Timeline response for #{issue_number}: {result}")

        data = result.get("data") or {}
        issue = (data.get("repository") or {}).get("issue") or {}
        updated_at = (issue.get("timelineItems") or {}).get("updatedAt")

        return TimelineSignal(
            issue_number=issue_number,
            last_event_at=_parse_timestamp(updated_at) if updated_at else None,
        )

    def add_issue_comment(
        self, owner: str, repo: str, issue_number: int, comment: str
    ) -> bool:
        """Add a comment to an issue.

        Args:
            owner: Repository owner
            repo: Repository name
            issue_number: Issue number
            comment: Comment text to add

        Returns:
            True if successful

        Raises:
            ValueError: If repository or issue not found
            Exception: For other API errors
        """
        self._check_rate_limit()

        try:
            repository = self.get_repository(owner, repo)
            github_issue = repository.get_issue(issue_number)

            github_issue.create_comment(comment)

            logger.info(f"Added comment to issue #{issue_number}")
            return True

        except UnknownObjectException:
            raise ValueError(f"Issue #{issue_number} not found in {owner}/{repo}")
        except RateLimitExceededException:
            logger.warning("Rate limit exceeded during comment creation, waiting...")
            time.sleep(RATE_LIMIT_WAIT)
            return self.add_issue_comment(owner, repo, issue_number, comment)


def _parse_timestamp(value: str) -> datetime:
    """Parse a GitHub ISO 8601 timestamp such as ``2024-01-09T12:00:00Z``."""
    return datetime.fromisoformat(value.replace("Z", "+00:00"))
