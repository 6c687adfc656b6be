"""Review signal extractors (reviews and comments)."""

from ..models import Disposition, ReviewSignal
from .prs import is_bot, parse_datetime

APPROVED_STATE = "APPROVED"


def _signal(user: dict | None, disposition: Disposition, timestamp: str | None) -> ReviewSignal:
    user = user or {}
    return ReviewSignal(
        login=user.get("login") or None,
        name=user.get("name") or None,
        is_bot=is_bot(user),
        disposition=disposition,
        submitted_at=parse_datetime(timestamp),
    )


def extract_review_signal(review_data: dict) -> ReviewSignal:
    """Extract a review. Only APPROVED reviews count as approvals."""
    disposition = (
        Disposition.APPROVED if review_data.get("state") == APPROVED_STATE else Disposition.OTHER
    )
    return _signal(review_data.get("user"), disposition, review_data.get("submitted_at"))


def extract_comment_signal(comment_data: dict) -> ReviewSignal:
    """Extract an inline review comment or a conversation comment."""
    return _signal(comment_data.get("user"), Disposition.OTHER, comment_data.get("created_at"))
