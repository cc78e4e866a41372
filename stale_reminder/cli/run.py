"""CLI command that runs the stale issue reminder once."""

import logging

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from ..config import ReminderConfig, load_config
from ..exceptions import ConfigurationError
from ..github_client.client import GitHubClient
from ..reminder.runner import RunSummary, run_reminder
from .options import (
    CONCURRENCY_OPTION,
    DAYS_STALE_OPTION,
    DRY_RUN_OPTION,
    IGNORE_COLUMNS_OPTION,
    ONLY_WEEKDAYS_OPTION,
    REPOSITORY_OPTION,
    TIMEOUT_OPTION,
    TOKEN_OPTION,
    VERBOSE_OPTION,
)

console = Console()


def configure_logging(verbose: bool = False) -> None:
    """Route log records to stderr through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )
    # PyGitHub and urllib3 are noisy at DEBUG
    logging.getLogger("github").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def run(
    token: str | None = TOKEN_OPTION,
    repository: str | None = REPOSITORY_OPTION,
    days_stale: str | None = DAYS_STALE_OPTION,
    only_weekdays: str = ONLY_WEEKDAYS_OPTION,
    ignore_columns: str = IGNORE_COLUMNS_OPTION,
    dry_run: bool = DRY_RUN_OPTION,
    concurrency: int = CONCURRENCY_OPTION,
    timeout: float | None = TIMEOUT_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Comment on open issues that have gone stale.

    An issue is stale when it has not been updated for more than
    --days-stale days and its latest timeline event (for example a move
    between project columns) is also older than that. Issues whose cards sit
    in one of --ignore-columns are skipped.

    Examples:
        stale-reminder run --repo myorg/myrepo --days-stale 14

        # Count only weekdays, skip two project columns, preview only
        stale-reminder run --repo myorg/myrepo --days-stale 5 \\
            --only-weekdays true --ignore-columns 1234,5678 --dry-run
    """
    configure_logging(verbose)

    try:
        config = load_config(
            token=token,
            repository=repository,
            days_stale=days_stale,
            only_weekdays=only_weekdays,
            ignore_columns=ignore_columns,
            dry_run=dry_run,
            concurrency=concurrency,
            timeout=timeout,
        )
    except ConfigurationError as e:
        console.print(f"❌ [red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    _print_parameters(config)

    try:
        client = GitHubClient(token=config.token)
        client.get_repository(config.owner, config.repo)
    except Exception as e:
        console.print(f"❌ [red]Error: {escape(str(e))}[/red]")
        console.print("Please check your GitHub token and repository name.")
        raise typer.Exit(1)

    if config.dry_run:
        console.print("⚠️  [yellow]Dry run - no comments will be posted[/yellow]")

    try:
        summary = run_reminder(config, client=client)
    except KeyboardInterrupt:
        console.print("\n❌ [yellow]Operation cancelled by user[/yellow]")
        raise typer.Exit(1)
    except Exception as e:
        console.print(f"❌ [red]Unexpected error: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    _print_summary(summary, config.dry_run)


def _print_parameters(config: ReminderConfig) -> None:
    params_table = Table(title="Reminder Parameters")
    params_table.add_column("Parameter", style="cyan")
    params_table.add_column("Value", style="green")

    policy = config.policy
    params_table.add_row("Repository", config.full_name)
    params_table.add_row("Days Stale", str(policy.days_stale))
    params_table.add_row("Only Weekdays", str(policy.only_weekdays))
    params_table.add_row(
        "Ignored Columns",
        ", ".join(str(c) for c in policy.ignored_columns) or "None",
    )
    params_table.add_row("Dry Run", str(config.dry_run))

    console.print(params_table)


def _print_summary(summary: RunSummary, dry_run: bool) -> None:
    results_table = Table(title="Run Summary")
    results_table.add_column("Metric", style="cyan")
    results_table.add_column("Count", justify="right", style="green")

    results_table.add_row("Open issues", str(summary.fetched))
    results_table.add_row("Ignored via columns", str(summary.excluded))
    results_table.add_row("Inspected", str(summary.inspected))
    results_table.add_row("Stale", str(summary.stale))
    results_table.add_row("Reminded", str(summary.notified))

    console.print(results_table)

    if dry_run and summary.stale:
        stale = [d.issue_number for d in summary.decisions if d.notify]
        console.print(
            "📋 [blue]Would remind: "
            + ", ".join(f"#{n}" for n in sorted(stale))
            + "[/blue]"
        )

    if summary.timed_out:
        console.print(
            "⚠️  [yellow]Deadline reached before all issues were handled[/yellow]"
        )
    for page in summary.failed_pages:
        console.print(f"⚠️  [yellow]{escape(page)}[/yellow]")
    if summary.failed_evaluations:
        console.print(
            "⚠️  [yellow]Could not evaluate: "
            + ", ".join(f"#{n}" for n in sorted(summary.failed_evaluations))
            + "[/yellow]"
        )
    if summary.failed_notifications:
        console.print(
            "⚠️  [yellow]Could not comment on: "
            + ", ".join(f"#{n}" for n in sorted(summary.failed_notifications))
            + "[/yellow]"
        )

    if summary.failure_count:
        console.print(
            f"✨ Finished with {summary.failure_count} failed unit(s) of work"
        )
    else:
        console.print("✨ Finished successfully")
