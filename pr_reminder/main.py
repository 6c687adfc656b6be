"""Run orchestrator: fetch, filter and enrich open pull requests.

Uses trio for concurrent API requests. The whole run is bounded by a
deadline; per-call timeouts nest inside it.
"""

import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path

import trio
from rich.console import Console
from rich.table import Table

from .config import (
    LIST_CONCURRENCY,
    LIST_TIMEOUT,
    LOG_FILE,
    MAX_PRS,
    PR_TIMEOUT,
    REVIEWS_CONCURRENCY,
    REVIEWS_TIMEOUT,
    RUN_TIMEOUT,
)
from .exceptions import FetchError
from .fetcher import find_open_prs, get_prs, sort_by_recency
from .github_client import GitHubClient
from .models import Collaborator, EnrichedPullRequest
from .reminder_config import ReminderConfig
from .repo import PullRequestRef
from .reviews import add_reviewer_info

logger = logging.getLogger(__name__)


def setup_logging(log_file: str | None = LOG_FILE, level: int = logging.INFO) -> None:
    """Log to stderr, and to a file when one is configured."""
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode="a"))

    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(message)s",
        handlers=handlers,
    )


@dataclass
class ReminderResult:
    """Ordered pull requests for the formatting stage."""

    prs: list[EnrichedPullRequest] = field(default_factory=list)
    no_prs_message: str | None = None

    @property
    def has_prs(self) -> bool:
        return bool(self.prs)


async def run(
    config: ReminderConfig,
    client,
    run_timeout: float = RUN_TIMEOUT,
    list_concurrency: int = LIST_CONCURRENCY,
    reviews_concurrency: int = REVIEWS_CONCURRENCY,
    list_timeout: float = LIST_TIMEOUT,
    pr_timeout: float = PR_TIMEOUT,
    reviews_timeout: float = REVIEWS_TIMEOUT,
    max_prs: int = MAX_PRS,
    references: list[PullRequestRef] | None = None,
) -> ReminderResult:
    """Single fetch pass: list, filter, enrich and order.

    With ``references``, only those pull requests are fetched instead of
    listing the configured repositories.

    Raises FetchError if the listing fails or the run deadline passes while
    listing. Review fetches that hit the deadline only lose their reviewer data.
    """
    deadline = trio.current_time() + run_timeout
    try:
        with trio.fail_at(deadline):
            if references:
                results = await get_prs(
                    client,
                    references,
                    config.get_filters_for_repository,
                    concurrency_limit=list_concurrency,
                    pr_timeout=pr_timeout,
                    max_prs=max_prs,
                )
            else:
                results = await find_open_prs(
                    client,
                    config.repositories,
                    config.get_filters_for_repository,
                    concurrency_limit=list_concurrency,
                    list_timeout=list_timeout,
                    max_prs=max_prs,
                )
    except trio.TooSlowError as e:
        raise FetchError(f"timed out after {run_timeout}s fetching pull requests") from e

    prs = await add_reviewer_info(
        client,
        results,
        concurrency_limit=reviews_concurrency,
        reviews_timeout=reviews_timeout,
        deadline=deadline,
    )
    return ReminderResult(prs=sort_by_recency(prs), no_prs_message=config.no_prs_message)


def _names(collaborators: tuple[Collaborator, ...]) -> str:
    return ", ".join(c.display_name for c in collaborators)


def build_table(result: ReminderResult) -> Table:
    table = Table(title=f"Open pull requests ({len(result.prs)})")
    table.add_column("Repository", style="cyan")
    table.add_column("#", justify="right")
    table.add_column("Title")
    table.add_column("Author")
    table.add_column("Approved by", style="green")
    table.add_column("Commented by", style="yellow")

    for pr in result.prs:
        commented = _names(pr.commenters)
        if pr.review_error:
            commented = "[dim](reviews unavailable)[/]"
        table.add_row(
            pr.repository.path,
            str(pr.number),
            pr.pr.title,
            pr.author.display_name if pr.author else "",
            _names(pr.approvers),
            commented,
        )
    return table


async def main(
    config_path: Path | None = None,
    console: Console | None = None,
    references: list[PullRequestRef] | None = None,
) -> ReminderResult:
    """Load config, run one fetch pass and print the result."""
    console = console or Console()
    config = ReminderConfig.load(config_path)

    client = GitHubClient()
    async with client:
        result = await run(config, client, references=references)
    logger.info(f"Run finished after {client.request_count} API requests")

    if result.has_prs:
        console.print(build_table(result))
    elif result.no_prs_message:
        console.print(result.no_prs_message)
    else:
        console.print("[dim]No open pull requests found and no message configured[/]")
    return result
