"""Pull request data extractor."""

from datetime import datetime

from ..models import Collaborator, RawPullRequest

# What extractors raise on payloads of the wrong shape
EXTRACTION_ERRORS = (AttributeError, KeyError, TypeError, ValueError)


def is_bot(user: dict) -> bool:
    """Check if user is a bot/GitHub App.

    GitHub reports apps with user type "Bot"; their logins end in "[bot]".
    """
    login = user.get("login") or ""
    return user.get("type") == "Bot" or login.endswith("[bot]")


def parse_datetime(dt_str: str | None) -> datetime | None:
    """Parse ISO datetime string, returns None if input is empty."""
    if not dt_str:
        return None
    return datetime.fromisoformat(dt_str.replace("Z", "+00:00"))


def parse_datetime_required(dt_str: str) -> datetime:
    """Parse ISO datetime string, raises if input is empty."""
    if not dt_str:
        raise ValueError("datetime string is required")
    return datetime.fromisoformat(dt_str.replace("Z", "+00:00"))


def extract_collaborator(user: dict | None) -> Collaborator | None:
    """Extract a collaborator, or None when the user has no login."""
    if not user or not user.get("login"):
        return None
    return Collaborator(login=user["login"], name=user.get("name") or None)


def extract_pr(pr_data: dict) -> RawPullRequest:
    """Extract PR data from GitHub API response."""
    labels = tuple(label["name"] for label in pr_data.get("labels") or [] if label.get("name"))

    return RawPullRequest(
        number=pr_data["number"],
        title=pr_data.get("title") or "",
        author=extract_collaborator(pr_data.get("user")),
        created_at=parse_datetime_required(pr_data["created_at"]),
        updated_at=parse_datetime_required(pr_data.get("updated_at") or pr_data["created_at"]),
        labels=labels,
        draft=pr_data.get("draft", False),
        state=pr_data.get("state", "open"),
        merged=pr_data.get("merged", False) or pr_data.get("merged_at") is not None,
        html_url=pr_data.get("html_url"),
    )
