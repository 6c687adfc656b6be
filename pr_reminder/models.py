"""Pydantic models for pull requests and review data."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from .repo import Repository


class Collaborator(BaseModel):
    """A reviewer or author identity. Equal when logins are equal."""

    model_config = ConfigDict(frozen=True)

    login: str = Field(min_length=1)
    name: str | None = None

    @property
    def display_name(self) -> str:
        """GitHub name if available, otherwise login."""
        return self.name or self.login

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Collaborator):
            return NotImplemented
        return self.login == other.login

    def __hash__(self) -> int:
        return hash(self.login)


class RawPullRequest(BaseModel):
    """Open pull request as listed by GitHub."""

    model_config = ConfigDict(frozen=True)

    number: int
    title: str
    author: Collaborator | None
    created_at: datetime
    updated_at: datetime
    labels: tuple[str, ...] = ()
    draft: bool = False
    state: str = "open"
    merged: bool = False
    html_url: str | None = None

    @property
    def author_login(self) -> str:
        return self.author.login if self.author else ""


class Disposition(Enum):
    APPROVED = "approved"
    OTHER = "other"


class ReviewSignal(BaseModel):
    """One reviewer event (review or comment) on a pull request."""

    model_config = ConfigDict(frozen=True)

    login: str | None
    name: str | None = None
    is_bot: bool = False
    disposition: Disposition = Disposition.OTHER
    submitted_at: datetime | None = None


class EnrichedPullRequest(BaseModel):
    """Pull request with reviewer state, handed to the formatting stage."""

    model_config = ConfigDict(frozen=True)

    pr: RawPullRequest
    repository: Repository
    author: Collaborator | None
    approvers: tuple[Collaborator, ...] = ()
    commenters: tuple[Collaborator, ...] = ()  # reviewers who commented but did not approve
    review_error: str | None = None

    @property
    def number(self) -> int:
        return self.pr.number

    @property
    def has_reviews(self) -> bool:
        return bool(self.approvers or self.commenters)


@dataclass(frozen=True)
class FetchResult:
    """A listed pull request paired with the repository it came from."""

    pr: RawPullRequest
    repository: Repository
