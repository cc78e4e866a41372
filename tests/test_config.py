"""Tests for run configuration parsing."""

import pytest
from pydantic import ValidationError

from stale_reminder.config import (
    StalenessPolicy,
    load_config,
    parse_days_stale,
    parse_ignore_columns,
    parse_only_weekdays,
    parse_repository,
)
from stale_reminder.exceptions import ConfigurationError


class TestParseInputs:
    """Test parsing of raw string inputs."""

    def test_days_stale(self) -> None:
        """Test integer parsing with surrounding whitespace."""
        assert parse_days_stale(" 14 ") == 14

    @pytest.mark.parametrize("value", ["abc", "1.5", "", None, "-3"])
    def test_days_stale_invalid(self, value: str | None) -> None:
        """Test that non-numeric or negative values are rejected."""
        with pytest.raises(ConfigurationError):
            parse_days_stale(value)

    @pytest.mark.parametrize(
        "value,expected",
        [("true", True), ("TRUE", True), (" true ", True), ("false", False),
         ("yes", False), ("", False), (None, False)],
    )
    def test_only_weekdays(self, value: str | None, expected: bool) -> None:
        """Test that only "true" enables weekday mode."""
        assert parse_only_weekdays(value) is expected

    def test_ignore_columns(self) -> None:
        """Test comma splitting with empty entries dropped."""
        assert parse_ignore_columns("123, 456,") == [123, 456]
        assert parse_ignore_columns(",,") == []
        assert parse_ignore_columns("") == []
        assert parse_ignore_columns(None) == []

    def test_ignore_columns_invalid(self) -> None:
        """Test that non-numeric column ids are rejected."""
        with pytest.raises(ConfigurationError, match="column ids"):
            parse_ignore_columns("123,todo")

    def test_repository(self) -> None:
        """Test owner/name splitting."""
        assert parse_repository("test-org/test-repo") == ("test-org", "test-repo")

    @pytest.mark.parametrize("value", [None, "", "test-repo", "a/b/c", "/repo"])
    def test_repository_invalid(self, value: str | None) -> None:
        """Test malformed repository slugs."""
        with pytest.raises(ConfigurationError):
            parse_repository(value)


class TestLoadConfig:
    """Test building the full configuration."""

    def test_load_config(self) -> None:
        """Test a complete, valid configuration."""
        config = load_config(
            token="token",
            repository="test-org/test-repo",
            days_stale="7",
            only_weekdays="true",
            ignore_columns="1,2",
            dry_run=True,
        )

        assert config.full_name == "test-org/test-repo"
        assert config.policy.days_stale == 7
        assert config.policy.only_weekdays is True
        assert config.policy.ignored_columns == [1, 2]
        assert config.dry_run is True
        assert config.timeout is None

    def test_missing_token(self) -> None:
        """Test that a token is required."""
        with pytest.raises(ConfigurationError, match="token is required"):
            load_config(token=None, repository="a/b", days_stale="5")

    def test_invalid_concurrency(self) -> None:
        """Test that model validation errors become configuration errors."""
        with pytest.raises(ConfigurationError, match="Invalid configuration"):
            load_config(token="t", repository="a/b", days_stale="5", concurrency=0)

    def test_invalid_timeout(self) -> None:
        """Test that the deadline must be positive."""
        with pytest.raises(ConfigurationError):
            load_config(token="t", repository="a/b", days_stale="5", timeout=-1)

    def test_policy_is_frozen(self) -> None:
        """Test that the policy cannot change after construction."""
        policy = StalenessPolicy(days_stale=5)
        with pytest.raises(ValidationError):
            policy.days_stale = 6
