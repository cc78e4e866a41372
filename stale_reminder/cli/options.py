"""Standardized CLI option definitions.

Each input can also be supplied through the environment: the GitHub Actions
``INPUT_*`` variables first, then the conventional names.
"""

import typer

TOKEN_OPTION = typer.Option(
    None,
    "--token",
    "-t",
    envvar=["INPUT_TOKEN", "GITHUB_TOKEN"],
    help="GitHub API token (defaults to INPUT_TOKEN or GITHUB_TOKEN env var)",
    show_envvar=False,
)

REPOSITORY_OPTION = typer.Option(
    None,
    "--repo",
    "-r",
    envvar="GITHUB_REPOSITORY",
    help="Repository as owner/name (defaults to GITHUB_REPOSITORY env var)",
    show_envvar=False,
)

DAYS_STALE_OPTION = typer.Option(
    None,
    "--days-stale",
    envvar=["INPUT_DAYS-STALE", "DAYS_STALE"],
    help="Days without activity after which an issue is stale",
    show_envvar=False,
)

ONLY_WEEKDAYS_OPTION = typer.Option(
    "false",
    "--only-weekdays",
    envvar=["INPUT_ONLY-WEEKDAYS", "ONLY_WEEKDAYS"],
    help="'true' to count only Monday-Friday when measuring age",
    show_envvar=False,
)

IGNORE_COLUMNS_OPTION = typer.Option(
    "",
    "--ignore-columns",
    envvar=["INPUT_IGNORE-COLUMNS", "IGNORE_COLUMNS"],
    help="Comma-separated project column ids whose issues are skipped",
    show_envvar=False,
)

DRY_RUN_OPTION = typer.Option(
    False, "--dry-run", "-d", help="Report stale issues without commenting"
)

CONCURRENCY_OPTION = typer.Option(
    8, "--concurrency", "-c", help="Maximum number of API calls in flight"
)

TIMEOUT_OPTION = typer.Option(
    None, "--timeout", help="Give up after this many seconds, keeping posted comments"
)

VERBOSE_OPTION = typer.Option(False, "--verbose", "-v", help="Enable debug logging")
