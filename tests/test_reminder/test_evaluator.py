"""Tests for the staleness decision."""

from collections.abc import Callable
from datetime import datetime, timezone
from unittest.mock import Mock

import pytest

from stale_reminder.config import StalenessPolicy
from stale_reminder.exceptions import EvaluationError
from stale_reminder.github_client.models import OpenIssue, TimelineSignal
from stale_reminder.reminder.evaluator import evaluate_issue, filter_excluded


def _lookup(last_event_at: datetime | None) -> Mock:
    return Mock(
        side_effect=lambda number: TimelineSignal(
            issue_number=number, last_event_at=last_event_at
        )
    )


class TestEvaluateIssue:
    """Test the two-signal staleness decision."""

    def test_stale_without_events_notifies(
        self,
        policy: StalenessPolicy,
        now: datetime,
        make_issue: Callable[..., OpenIssue],
    ) -> None:
        """Test a week old issue that never had a timeline event."""
        lookup = _lookup(None)

        decision = evaluate_issue(make_issue(42, 3), policy, now, lookup)

        assert decision.notify is True
        assert decision.primary_age == 7
        assert decision.checked_timeline is True
        assert decision.last_event_at is None
        lookup.assert_called_once_with(42)

    def test_recent_event_prevents_notify(
        self,
        policy: StalenessPolicy,
        now: datetime,
        make_issue: Callable[..., OpenIssue],
    ) -> None:
        """Test that a recent timeline event counts as activity."""
        event = datetime(2024, 1, 9, 12, tzinfo=timezone.utc)

        decision = evaluate_issue(make_issue(42, 3), policy, now, _lookup(event))

        assert decision.notify is False
        assert decision.event_age == 1
        assert decision.last_event_at == event

    def test_old_event_notifies(
        self,
        policy: StalenessPolicy,
        now: datetime,
        make_issue: Callable[..., OpenIssue],
    ) -> None:
        """Test that an old timeline event does not prevent the reminder."""
        event = datetime(2024, 1, 1, 12, tzinfo=timezone.utc)

        decision = evaluate_issue(make_issue(42, 3), policy, now, _lookup(event))

        assert decision.notify is True
        assert decision.event_age == 9

    def test_fresh_issue_skips_timeline(
        self,
        policy: StalenessPolicy,
        now: datetime,
        make_issue: Callable[..., OpenIssue],
    ) -> None:
        """Test that the timeline is only queried for stale issues."""
        lookup = _lookup(None)

        decision = evaluate_issue(make_issue(42, 8), policy, now, lookup)

        assert decision.notify is False
        assert decision.primary_age == 2
        assert decision.checked_timeline is False
        lookup.assert_not_called()

    def test_threshold_is_exclusive(
        self,
        policy: StalenessPolicy,
        now: datetime,
        make_issue: Callable[..., OpenIssue],
    ) -> None:
        """Test that an age equal to the threshold is not stale."""
        lookup = _lookup(None)

        decision = evaluate_issue(make_issue(42, 5), policy, now, lookup)

        assert decision.primary_age == 5
        assert decision.notify is False
        lookup.assert_not_called()

    def test_event_at_threshold_prevents_notify(
        self,
        policy: StalenessPolicy,
        now: datetime,
        make_issue: Callable[..., OpenIssue],
    ) -> None:
        """Test that an event exactly days_stale old is still recent."""
        event = datetime(2024, 1, 5, 12, tzinfo=timezone.utc)

        decision = evaluate_issue(make_issue(42, 3), policy, now, _lookup(event))

        assert decision.event_age == 5
        assert decision.notify is False

    def test_weekday_mode(self, make_issue: Callable[..., OpenIssue]) -> None:
        """Test that weekends do not count toward staleness."""
        policy = StalenessPolicy(days_stale=2, only_weekdays=True)
        monday = datetime(2024, 1, 8, 12, tzinfo=timezone.utc)
        lookup = _lookup(None)

        # Friday to Monday is two weekdays, not over the threshold
        decision = evaluate_issue(make_issue(42, 5), policy, monday, lookup)
        assert decision.primary_age == 2
        assert decision.notify is False

        # Thursday to Monday is three weekdays
        decision = evaluate_issue(make_issue(43, 4), policy, monday, lookup)
        assert decision.primary_age == 3
        assert decision.notify is True

    def test_lookup_failure_raises_evaluation_error(
        self,
        policy: StalenessPolicy,
        now: datetime,
        make_issue: Callable[..., OpenIssue],
    ) -> None:
        """Test that timeline failures are wrapped for the caller."""
        lookup = Mock(side_effect=RuntimeError("graphql down"))

        with pytest.raises(EvaluationError, match="#42") as exc_info:
            evaluate_issue(make_issue(42, 3), policy, now, lookup)

        assert exc_info.value.issue_number == 42
        assert isinstance(exc_info.value.cause, RuntimeError)


class TestFilterExcluded:
    """Test exclusion by issue number."""

    def test_filters_by_decimal_string(
        self, make_issue: Callable[..., OpenIssue]
    ) -> None:
        """Test that excluded numbers are removed and order is kept."""
        issues = [make_issue(n, 1) for n in (3, 7, 12, 70)]

        remaining = filter_excluded(issues, {"7", "120", "x"})

        assert [i.number for i in remaining] == [3, 12, 70]

    def test_empty_exclusion_set(self, make_issue: Callable[..., OpenIssue]) -> None:
        """Test that nothing is removed without exclusions."""
        issues = [make_issue(1, 1)]

        assert filter_excluded(issues, set()) == issues
