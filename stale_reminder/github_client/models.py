"""Pydantic models for the GitHub data the reminder consumes.

Only the fields needed for the staleness decision are kept.
API Reference: https://docs.github.com/en/rest/issues
"""

import re
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

TRAILING_DIGITS = re.compile(r"\d+$")


def extract_issue_number(content_url: str | None) -> str | None:
    """Return the trailing run of digits of a content URL, or None."""
    if not content_url:
        return None
    match = TRAILING_DIGITS.search(content_url)
    return match.group(0) if match else None


class OpenIssue(BaseModel):
    """Open issue as returned by the repository issue listing.

    Maps to GitHub REST API Issue object.
    API Reference: https://docs.github.com/en/rest/issues/issues
    """

    model_config = ConfigDict(frozen=True)

    number: int = Field(..., description="Issue number within the repository")
    updated_at: datetime = Field(
        ..., description="Timestamp of last issue update (ISO 8601)"
    )
    title: str = Field("", description="Short description/title of the issue")
    is_pull_request: bool = Field(
        False, description="Whether the listing entry is a pull request"
    )


class ProjectCard(BaseModel):
    """Card in a classic project board column.

    Maps to GitHub REST API Project Card object.
    API Reference: https://docs.github.com/en/rest/projects/cards
    """

    model_config = ConfigDict(frozen=True)

    id: int = Field(..., description="Unique card identifier")
    content_url: str | None = Field(
        None, description="API URL of the issue or pull request on the card"
    )

    @property
    def issue_number(self) -> str | None:
        """Number of the issue the card points at, if any."""
        return extract_issue_number(self.content_url)


class TimelineSignal(BaseModel):
    """Most recent timeline activity recorded for an issue.

    Maps to the GraphQL ``IssueTimelineItemsConnection.updatedAt`` field.
    API Reference: https://docs.github.com/en/graphql/reference/objects#issue
    """

    model_config = ConfigDict(frozen=True)

    issue_number: int = Field(..., description="Issue the signal belongs to")
    last_event_at: datetime | None = Field(
        None, description="Timestamp of the latest timeline event, if any"
    )
