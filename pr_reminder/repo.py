"""Repository identity and detection.

A repository is referenced either by its full path (``owner/name``) or by
its short name. Without configured repositories, the current one comes from
the ``GITHUB_REPOSITORY`` env var set by GitHub Actions.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from .exceptions import ConfigurationError


@dataclass(frozen=True)
class Repository:
    """Repository identity."""

    owner: str
    name: str

    @property
    def path(self) -> str:
        return f"{self.owner}/{self.name}"

    def __str__(self) -> str:
        return self.path


@dataclass(frozen=True)
class PullRequestRef:
    """Reference to a single pull request."""

    repository: Repository
    number: int

    def __str__(self) -> str:
        return f"{self.repository.path}/{self.number}"


def parse_repository(value: str) -> Repository:
    """Parse ``owner/name`` into a Repository.

    Raises ConfigurationError for anything that is not exactly two
    non-empty segments.
    """
    parts = value.strip().split("/")
    if len(parts) != 2:
        raise ConfigurationError(f"invalid owner/repository format: {value}")
    owner, name = parts
    if not owner or not name:
        raise ConfigurationError(f"owner or repository name cannot be empty in: {value}")
    return Repository(owner=owner, name=name)


def parse_pull_request_ref(value: str) -> PullRequestRef:
    """Parse ``owner/name/number`` into a PullRequestRef."""
    path, _, number = value.strip().rpartition("/")
    if not path or not number.isdigit() or int(number) < 1:
        raise ConfigurationError(f"invalid pull request reference (expected owner/name/number): {value}")
    return PullRequestRef(repository=parse_repository(path), number=int(number))


def get_repository_from_env() -> Repository | None:
    """Get repo from GITHUB_REPOSITORY (set by GitHub Actions)."""
    value = os.environ.get("GITHUB_REPOSITORY")
    if value:
        return parse_repository(value)
    return None


def get_current_repository() -> Repository:
    """Repository to use when none are configured.

    Raises ConfigurationError if GITHUB_REPOSITORY is not set.
    """
    repo = get_repository_from_env()
    if repo:
        return repo

    raise ConfigurationError(
        "no repositories configured and GITHUB_REPOSITORY is not set. Either:\n"
        "  1. List repositories in pr-reminder.yaml, or\n"
        "  2. Set the GITHUB_REPOSITORY env var (owner/name)"
    )
