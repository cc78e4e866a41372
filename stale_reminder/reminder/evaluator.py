"""Staleness decision for a single issue.

An issue is stale when its ``updated_at`` is older than the threshold. Some
activity, such as moving the issue's card to another project column, does not
touch ``updated_at``, so a stale issue is only reminded when its latest
timeline event is also older than the threshold (or it has none). The timeline
is only queried for issues that are already stale by ``updated_at``.
"""

from collections.abc import Callable, Iterable
from datetime import datetime

from pydantic import BaseModel, Field

from ..config import StalenessPolicy
from ..exceptions import EvaluationError
from ..github_client.models import OpenIssue, TimelineSignal
from ..utils.aging import age

TimelineLookup = Callable[[int], TimelineSignal]


class StalenessDecision(BaseModel):
    """Outcome of evaluating one issue."""

    issue_number: int = Field(..., description="Evaluated issue")
    updated_at: datetime = Field(..., description="Issue last update timestamp")
    primary_age: int = Field(..., description="Age of updated_at in days")
    checked_timeline: bool = Field(
        False, description="Whether the timeline was queried"
    )
    last_event_at: datetime | None = Field(
        None, description="Latest timeline event timestamp, if any"
    )
    event_age: int | None = Field(None, description="Age of the latest event")
    notify: bool = Field(..., description="Whether a reminder should be posted")
    reason: str = Field(..., description="Short explanation of the decision")


def filter_excluded(
    issues: Iterable[OpenIssue], excluded: set[str]
) -> list[OpenIssue]:
    """Drop issues whose number, as a decimal string, is in ``excluded``."""
    return [issue for issue in issues if str(issue.number) not in excluded]


def evaluate_issue(
    issue: OpenIssue,
    policy: StalenessPolicy,
    now: datetime,
    timeline_lookup: TimelineLookup,
) -> StalenessDecision:
    """Decide whether ``issue`` should receive a reminder.

    Args:
        issue: Issue to evaluate
        policy: Threshold and age counting mode
        now: Reference instant shared by the whole run
        timeline_lookup: Returns the latest timeline signal for an issue number

    Returns:
        StalenessDecision describing the outcome

    Raises:
        EvaluationError: If the timeline lookup fails
    """
    primary_age = age(issue.updated_at, now, policy.only_weekdays)
    if primary_age <= policy.days_stale:
        return StalenessDecision(
            issue_number=issue.number,
            updated_at=issue.updated_at,
            primary_age=primary_age,
            notify=False,
            reason=f"updated {primary_age} day(s) ago",
        )

    try:
        signal = timeline_lookup(issue.number)
    except Exception as e:
        raise EvaluationError(issue.number, e) from e

    if signal.last_event_at is None:
        return StalenessDecision(
            issue_number=issue.number,
            updated_at=issue.updated_at,
            primary_age=primary_age,
            checked_timeline=True,
            notify=True,
            reason="no timeline events",
        )

    event_age = age(signal.last_event_at, now, policy.only_weekdays)
    notify = event_age > policy.days_stale
    return StalenessDecision(
        issue_number=issue.number,
        updated_at=issue.updated_at,
        primary_age=primary_age,
        checked_timeline=True,
        last_event_at=signal.last_event_at,
        event_age=event_age,
        notify=notify,
        reason=(
            f"last event {event_age} day(s) ago"
            if notify
            else f"recent event {event_age} day(s) ago"
        ),
    )
