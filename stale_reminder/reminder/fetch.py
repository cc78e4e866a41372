"""Paginated reads of open issues and project column cards.

Page counts are capped: at most ISSUE_PAGE_LIMIT pages of open issues and
CARD_PAGE_LIMIT pages of cards per column are read. Anything beyond those
ceilings is not considered; a warning is logged when a cap is reached.
"""

import asyncio
import logging
from collections.abc import Callable
from typing import TypeVar

from ..exceptions import FetchError
from ..github_client.client import PAGE_SIZE, GitHubClient
from ..github_client.models import OpenIssue

logger = logging.getLogger(__name__)

ISSUE_PAGE_LIMIT = 5
CARD_PAGE_LIMIT = 2

T = TypeVar("T")


async def _fetch_page(
    fetch: Callable[[int], list[T]],
    source: str,
    page: int,
    semaphore: asyncio.Semaphore,
) -> list[T]:
    async with semaphore:
        try:
            return await asyncio.to_thread(fetch, page)
        except Exception as e:
            raise FetchError(source, page, e) from e


async def _fetch_pages(
    fetch: Callable[[int], list[T]],
    source: str,
    page_limit: int,
    semaphore: asyncio.Semaphore,
) -> tuple[list[list[T]], list[FetchError]]:
    """Fetch ``page_limit`` pages concurrently.

    A failed page contributes nothing and is returned as a FetchError; it
    never cancels the other pages.
    """
    tasks = [
        _fetch_page(fetch, source, page, semaphore) for page in range(page_limit)
    ]
    results = await asyncio.gather(*tasks, return_exceptions=True)

    pages: list[list[T]] = []
    failures: list[FetchError] = []
    for result in results:
        if isinstance(result, FetchError):
            logger.warning(str(result))
            failures.append(result)
        elif isinstance(result, BaseException):
            raise result
        else:
            pages.append(result)

    last_page = results[-1] if results else None
    if isinstance(last_page, list) and len(last_page) >= PAGE_SIZE:
        logger.warning(
            f"Reached the {page_limit * PAGE_SIZE} item cap for {source}; "
            "remaining entries are not considered"
        )

    return pages, failures


async def fetch_open_issues(
    client: GitHubClient,
    owner: str,
    repo: str,
    semaphore: asyncio.Semaphore,
) -> tuple[list[OpenIssue], list[FetchError]]:
    """Fetch up to ISSUE_PAGE_LIMIT pages of open issues.

    Returns:
        Tuple of (issues deduplicated by number, failed pages)
    """
    pages, failures = await _fetch_pages(
        lambda page: client.list_open_issues(owner, repo, page),
        f"open issues of {owner}/{repo}",
        ISSUE_PAGE_LIMIT,
        semaphore,
    )

    issues: dict[int, OpenIssue] = {}
    for page in pages:
        for issue in page:
            issues.setdefault(issue.number, issue)

    logger.info(f"Found {len(issues)} open issues")
    return list(issues.values()), failures


async def fetch_column_issue_numbers(
    client: GitHubClient,
    column_id: int,
    semaphore: asyncio.Semaphore,
) -> tuple[set[str], list[FetchError]]:
    """Issue numbers referenced by the non-archived cards of one column."""
    pages, failures = await _fetch_pages(
        lambda page: client.list_column_cards(column_id, page),
        f"cards of column {column_id}",
        CARD_PAGE_LIMIT,
        semaphore,
    )

    numbers: set[str] = set()
    for page in pages:
        for card in page:
            number = card.issue_number
            if number is not None:
                numbers.add(number)
    return numbers, failures


async def build_exclusion_set(
    client: GitHubClient,
    column_ids: list[int],
    semaphore: asyncio.Semaphore,
) -> tuple[set[str], list[FetchError]]:
    """Union the issue numbers found on every ignored column.

    Returns:
        Tuple of (issue numbers as decimal strings, failed pages)
    """
    results = await asyncio.gather(
        *(
            fetch_column_issue_numbers(client, column_id, semaphore)
            for column_id in column_ids
        )
    )

    excluded: set[str] = set()
    failures: list[FetchError] = []
    for numbers, column_failures in results:
        excluded |= numbers
        failures.extend(column_failures)

    if excluded:
        logger.info(
            "Ignoring the following issues: "
            + ", ".join(sorted(excluded, key=int))
        )
    return excluded, failures
