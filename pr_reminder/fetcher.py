"""Concurrent fetching of open pull requests across repositories.

Listing is fail-fast: the first repository that cannot be listed cancels
every other in-flight call and its error is raised. No partial list of pull
requests is ever returned.
"""

import logging
from collections.abc import Callable

import httpx
import trio

from .config import LIST_CONCURRENCY, LIST_TIMEOUT, MAX_PRS, PR_TIMEOUT, PULLS_MAX_PAGES
from .exceptions import FetchError, GitHubAPIError, NotFoundError, RepositoryNotFoundError
from .extractors.prs import EXTRACTION_ERRORS, extract_pr
from .filters import Filters, include_pr
from .models import FetchResult
from .repo import PullRequestRef, Repository

logger = logging.getLogger(__name__)

FiltersForRepository = Callable[[Repository], Filters]



def sort_by_recency(results: list) -> list:
    """Newest first by creation time, then by update time."""
    return sorted(results, key=lambda r: (r.pr.created_at, r.pr.updated_at), reverse=True)


async def fetch_repository_prs(
    client,
    repo: Repository,
    timeout: float = LIST_TIMEOUT,
    max_pages: int = PULLS_MAX_PAGES,
) -> list[FetchResult]:
    """List open pull requests of one repository.

    Raises RepositoryNotFoundError on 404 and FetchError on any other failure,
    including exceeding the timeout.
    """
    try:
        with trio.fail_after(timeout):
            items = await client.list_open_pull_requests(repo.owner, repo.name, max_pages)
    except NotFoundError as e:
        raise RepositoryNotFoundError(repo.path) from e
    except trio.TooSlowError as e:
        raise FetchError(f"error fetching pull requests from {repo.path}: timed out after {timeout}s") from e
    except (GitHubAPIError, httpx.HTTPError) as e:
        raise FetchError(f"error fetching pull requests from {repo.path}: {e}") from e

    try:
        return [FetchResult(pr=extract_pr(item), repository=repo) for item in items]
    except EXTRACTION_ERRORS as e:
        raise FetchError(f"error fetching pull requests from {repo.path}: unreadable pull request data: {e}") from e


async def fetch_pr(client, ref: PullRequestRef, timeout: float = PR_TIMEOUT) -> FetchResult:
    """Fetch a single pull request by reference."""
    repo = ref.repository
    try:
        with trio.fail_after(timeout):
            item = await client.get_pull_request(repo.owner, repo.name, ref.number)
    except NotFoundError as e:
        raise FetchError(f"PR {ref} not found — check the path and permissions") from e
    except trio.TooSlowError as e:
        raise FetchError(f"error fetching pull request {ref}: timed out after {timeout}s") from e
    except (GitHubAPIError, httpx.HTTPError) as e:
        raise FetchError(f"error fetching pull request {ref}: {e}") from e

    try:
        return FetchResult(pr=extract_pr(item), repository=repo)
    except EXTRACTION_ERRORS as e:
        raise FetchError(f"error fetching pull request {ref}: unreadable pull request data: {e}") from e


async def _fetch_all_or_fail(fetchers: list, concurrency_limit: int) -> list:
    """Run fetchers concurrently; the first FetchError cancels the rest and is raised.

    Each fetcher is an async callable returning its result. Results come back
    in fetcher order.
    """
    limiter = trio.CapacityLimiter(concurrency_limit)
    slots: list = [None] * len(fetchers)
    failures: list[FetchError] = []

    async with trio.open_nursery() as nursery:

        async def run_one(index: int, fetcher) -> None:
            async with limiter:
                try:
                    slots[index] = await fetcher()
                except FetchError as e:
                    failures.append(e)
                    nursery.cancel_scope.cancel()

        for index, fetcher in enumerate(fetchers):
            nursery.start_soon(run_one, index, fetcher)

    if failures:
        raise failures[0]
    return slots


def filter_results(results: list[FetchResult], get_filters: FiltersForRepository) -> list[FetchResult]:
    """Drop drafts, then apply the filters of each result's repository."""
    return [
        result
        for result in results
        if not result.pr.draft and include_pr(result.pr, get_filters(result.repository))
    ]


def keep_latest(results: list[FetchResult], max_prs: int = MAX_PRS) -> list[FetchResult]:
    if len(results) <= max_prs:
        return results
    logger.info(f"More than {max_prs} pull requests found ({len(results)}), including only the latest {max_prs}")
    return sort_by_recency(results)[:max_prs]


def log_found_prs(results: list[FetchResult]) -> None:
    logger.info(f"Found {len(results)} open pull requests:")
    for result in results:
        logger.info(f"{result.repository.path}/{result.pr.number}")


async def find_open_prs(
    client,
    repositories: list[Repository],
    get_filters: FiltersForRepository,
    concurrency_limit: int = LIST_CONCURRENCY,
    list_timeout: float = LIST_TIMEOUT,
    max_prs: int = MAX_PRS,
) -> list[FetchResult]:
    """List, de-draft and filter open pull requests of all repositories.

    Raises the first FetchError if any repository cannot be listed.
    """
    paths = ", ".join(r.path for r in repositories)
    logger.info(f"Fetching open pull requests for {len(repositories)} repositories: {paths}")

    fetchers = [
        lambda repo=repo: fetch_repository_prs(client, repo, list_timeout)
        for repo in repositories
    ]
    per_repository = await _fetch_all_or_fail(fetchers, concurrency_limit)

    results = [result for repo_results in per_repository for result in repo_results]
    results = keep_latest(filter_results(results, get_filters), max_prs)
    log_found_prs(results)
    return results


async def get_prs(
    client,
    references: list[PullRequestRef],
    get_filters: FiltersForRepository,
    concurrency_limit: int = LIST_CONCURRENCY,
    pr_timeout: float = PR_TIMEOUT,
    max_prs: int = MAX_PRS,
) -> list[FetchResult]:
    """Fetch specific pull requests, then drop drafts and apply filters.

    Same fail-fast policy as find_open_prs.
    """
    if len(references) > max_prs:
        logger.info(f"More than {max_prs} PRs requested ({len(references)}), fetching only the first {max_prs}")
        references = references[:max_prs]
    else:
        logger.info(f"Fetching {len(references)} pull requests")

    fetchers = [lambda ref=ref: fetch_pr(client, ref, pr_timeout) for ref in references]
    results = await _fetch_all_or_fail(fetchers, concurrency_limit)

    results = keep_latest(filter_results(results, get_filters), max_prs)
    log_found_prs(results)
    return results
