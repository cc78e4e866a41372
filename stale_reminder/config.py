"""Run configuration for the stale issue reminder.

Raw inputs arrive as strings (CLI options, GitHub Actions ``INPUT_*`` variables
or a ``.env`` file). Everything is parsed and validated here, before the first
API call, so a bad value aborts the run with a ``ConfigurationError``.
"""

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .exceptions import ConfigurationError


class StalenessPolicy(BaseModel):
    """Decision inputs that stay fixed for the whole run."""

    model_config = ConfigDict(frozen=True)

    days_stale: int = Field(
        ..., ge=0, description="Age in days beyond which an issue is stale"
    )
    only_weekdays: bool = Field(
        False, description="Count only Monday-Friday when measuring age"
    )
    ignored_columns: list[int] = Field(
        default_factory=list,
        description="Project column ids whose cards are never reminded",
    )


class ReminderConfig(BaseModel):
    """Complete configuration for one reminder run."""

    model_config = ConfigDict(frozen=True)

    token: str = Field(..., min_length=1, description="GitHub API token")
    owner: str = Field(..., min_length=1, description="Repository owner")
    repo: str = Field(..., min_length=1, description="Repository name")
    policy: StalenessPolicy
    dry_run: bool = Field(False, description="Evaluate without posting comments")
    concurrency: int = Field(
        8, ge=1, description="Maximum number of API calls in flight"
    )
    timeout: float | None = Field(
        None, gt=0, description="Deadline for the whole run in seconds"
    )

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"


def parse_days_stale(value: str | None) -> int:
    """Parse the days-stale input as a non-negative integer."""
    if value is None or not value.strip():
        raise ConfigurationError("days-stale is required")
    try:
        days = int(value.strip(), 10)
    except ValueError:
        raise ConfigurationError(f"days-stale must be an integer, got '{value}'")
    if days < 0:
        raise ConfigurationError(f"days-stale must not be negative, got {days}")
    return days


def parse_only_weekdays(value: str | None) -> bool:
    """Only the literal string "true" enables weekday mode."""
    if value is None:
        return False
    return value.strip().lower() == "true"


def parse_ignore_columns(value: str | None) -> list[int]:
    """Split a comma-separated list of project column ids.

    Empty entries (for example from a trailing comma) are discarded.

    Raises:
        ConfigurationError: If an entry is not a decimal integer
    """
    if not value:
        return []

    columns = []
    for entry in value.split(","):
        entry = entry.strip()
        if not entry:
            continue
        try:
            columns.append(int(entry, 10))
        except ValueError:
            raise ConfigurationError(
                f"ignore-columns entries must be column ids, got '{entry}'"
            )
    return columns


def parse_repository(value: str | None) -> tuple[str, str]:
    """Split an ``owner/name`` repository slug."""
    if not value:
        raise ConfigurationError(
            "Repository is required. Pass --repo or set GITHUB_REPOSITORY."
        )
    owner, _, repo = value.strip().partition("/")
    if not owner or not repo or "/" in repo:
        raise ConfigurationError(
            f"Repository must look like 'owner/name', got '{value}'"
        )
    return owner, repo


def load_config(
    token: str | None,
    repository: str | None,
    days_stale: str | None,
    only_weekdays: str | None = None,
    ignore_columns: str | None = None,
    dry_run: bool = False,
    concurrency: int = 8,
    timeout: float | None = None,
) -> ReminderConfig:
    """Build a validated ``ReminderConfig`` from raw string inputs.

    Raises:
        ConfigurationError: If any input is missing or malformed
    """
    if not token:
        raise ConfigurationError(
            "GitHub token is required. Pass --token or set GITHUB_TOKEN."
        )
    owner, repo = parse_repository(repository)

    try:
        policy = StalenessPolicy(
            days_stale=parse_days_stale(days_stale),
            only_weekdays=parse_only_weekdays(only_weekdays),
            ignored_columns=parse_ignore_columns(ignore_columns),
        )
        return ReminderConfig(
            token=token,
            owner=owner,
            repo=repo,
            policy=policy,
            dry_run=dry_run,
            concurrency=concurrency,
            timeout=timeout,
        )
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}")
