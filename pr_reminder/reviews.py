"""Review/approval fetching and aggregation.

Reviews are fetched per pull request under a concurrency cap. Failures are
isolated: a pull request whose reviews cannot be fetched is still returned,
without reviewer data.
"""

import logging
import math
from datetime import UTC, datetime

import trio

from .config import COMMENTS_MAX_PAGES, REVIEWS_CONCURRENCY, REVIEWS_MAX_PAGES, REVIEWS_TIMEOUT
from .exceptions import ReviewFetchError
from .extractors.prs import EXTRACTION_ERRORS
from .extractors.reviews import extract_comment_signal, extract_review_signal
from .models import Collaborator, Disposition, EnrichedPullRequest, FetchResult, ReviewSignal

logger = logging.getLogger(__name__)

_NO_TIMESTAMP = datetime.min.replace(tzinfo=UTC)


async def fetch_review_signals(
    client,
    result: FetchResult,
    reviews_max_pages: int = REVIEWS_MAX_PAGES,
    comments_max_pages: int = COMMENTS_MAX_PAGES,
) -> list[ReviewSignal]:
    """Fetch reviews, inline comments and conversation comments for one PR.

    Returns signals in chronological order. Raises ReviewFetchError if any
    of the three calls fails or returns data that cannot be read.
    """
    repo = result.repository
    number = result.pr.number
    reviews: list[dict] = []
    review_comments: list[dict] = []
    comments: list[dict] = []
    errors: list[str] = []

    async def fetch_reviews():
        try:
            reviews.extend(await client.get_pr_reviews(repo.owner, repo.name, number, reviews_max_pages))
        except Exception as e:
            errors.append(f"reviews: {e}")

    async def fetch_review_comments():
        try:
            review_comments.extend(
                await client.get_pr_review_comments(repo.owner, repo.name, number, comments_max_pages)
            )
        except Exception as e:
            errors.append(f"review comments: {e}")

    async def fetch_comments():
        try:
            comments.extend(await client.get_pr_comments(repo.owner, repo.name, number, comments_max_pages))
        except Exception as e:
            errors.append(f"comments: {e}")

    async with trio.open_nursery() as nursery:
        nursery.start_soon(fetch_reviews)
        nursery.start_soon(fetch_review_comments)
        nursery.start_soon(fetch_comments)

    if errors:
        raise ReviewFetchError(
            f"error fetching reviews for pull request {repo.path}/{number}: {'; '.join(errors)}"
        )

    try:
        signals = [extract_review_signal(r) for r in reviews]
        signals += [extract_comment_signal(c) for c in review_comments]
        signals += [extract_comment_signal(c) for c in comments]
    except EXTRACTION_ERRORS as e:
        raise ReviewFetchError(
            f"unreadable review data for pull request {repo.path}/{number}: {e}"
        ) from e

    signals.sort(key=lambda s: s.submitted_at or _NO_TIMESTAMP)
    logger.info(
        f"Found {len(reviews)} reviews and {len(review_comments) + len(comments)} comments "
        f"for PR {repo.path}/{number}"
    )
    return signals


def classify_signals(
    author_login: str, signals: list[ReviewSignal]
) -> tuple[tuple[Collaborator, ...], tuple[Collaborator, ...]]:
    """Split review signals into (approvers, commenters).

    Bots and signals without a login are dropped. Approval wins over
    commenting, so a login ends up in at most one of the two lists. Authors
    commenting on their own PR are not commenters, but a self-approval is kept.
    """
    approvers: dict[str, Collaborator] = {}
    commenters: dict[str, Collaborator] = {}

    for signal in signals:
        if not signal.login or signal.is_bot:
            continue

        login = signal.login
        if signal.disposition is Disposition.APPROVED:
            if login not in approvers:
                approvers[login] = Collaborator(login=login, name=signal.name)
            commenters.pop(login, None)
            continue

        if login == author_login or login in commenters or login in approvers:
            continue
        commenters[login] = Collaborator(login=login, name=signal.name)

    return tuple(approvers.values()), tuple(commenters.values())


def enrich(result: FetchResult, signals: list[ReviewSignal], error: str | None = None) -> EnrichedPullRequest:
    approvers, commenters = classify_signals(result.pr.author_login, signals)
    return EnrichedPullRequest(
        pr=result.pr,
        repository=result.repository,
        author=result.pr.author,
        approvers=approvers,
        commenters=commenters,
        review_error=error,
    )


async def add_reviewer_info(
    client,
    results: list[FetchResult],
    concurrency_limit: int = REVIEWS_CONCURRENCY,
    reviews_timeout: float = REVIEWS_TIMEOUT,
    reviews_max_pages: int = REVIEWS_MAX_PAGES,
    comments_max_pages: int = COMMENTS_MAX_PAGES,
    deadline: float = math.inf,
) -> list[EnrichedPullRequest]:
    """Enrich every pull request with approvers and commenters.

    Each pull request gets ``reviews_timeout`` seconds, cut short by
    ``deadline`` (an absolute trio clock time) when that comes first.

    Never fails because of a single pull request: its error is logged and
    attached to its result. Output order follows the input order.
    """
    logger.info(f"Fetching reviews and comments for {len(results)} pull requests")

    limiter = trio.CapacityLimiter(concurrency_limit)
    slots: list[EnrichedPullRequest | None] = [None] * len(results)

    async def enrich_one(index: int, result: FetchResult) -> None:
        async with limiter:
            own_deadline = trio.current_time() + reviews_timeout
            try:
                with trio.fail_at(min(own_deadline, deadline)):
                    signals = await fetch_review_signals(client, result, reviews_max_pages, comments_max_pages)
            except Exception as e:
                if isinstance(e, trio.TooSlowError):
                    if deadline < own_deadline:
                        error = "run deadline reached fetching reviews"
                    else:
                        error = f"timed out after {reviews_timeout}s fetching reviews"
                else:
                    error = str(e)
                logger.warning(
                    f"Unable to fetch reviews/comments for PR {result.repository.path}/{result.pr.number}: {error}"
                )
                slots[index] = enrich(result, [], error)
                return
        slots[index] = enrich(result, signals)

    async with trio.open_nursery() as nursery:
        for index, result in enumerate(results):
            nursery.start_soon(enrich_one, index, result)

    return [pr for pr in slots if pr is not None]
