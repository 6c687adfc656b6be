"""Reminder configuration: repositories and the filters that apply to them.

Loaded from YAML:

    repositories:
      - my-org/backend
      - my-org/frontend
    filters:
      labels-ignore: [wip]
    repository-filters:
      frontend:              # short name or owner/name
        authors: [alice, bob]
    no-prs-message: "No open PRs, nice work!"

Repository filter keys are checked once, when the config is built: each key
must match exactly one configured repository.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .config import MAX_REPOSITORIES
from .exceptions import ConfigurationError
from .filters import Filters
from .repo import Repository, get_current_repository, parse_repository

CONFIG_FILE_CANDIDATES = ["pr-reminder.yaml", ".pr-reminder.yaml", "pr-reminder.yml", ".pr-reminder.yml"]


def _parse_filters(data: Any, where: str) -> Filters:
    if data is None:
        return Filters()
    if not isinstance(data, dict):
        raise ConfigurationError(f"{where} must be a mapping, got {type(data).__name__}")
    try:
        return Filters.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"invalid {where}: {e}") from e


@dataclass
class ReminderConfig:
    """Repositories to query and the filters for each of them."""

    repositories: list[Repository]
    global_filters: Filters = field(default_factory=Filters)
    repository_filters: dict[str, Filters] = field(default_factory=dict)
    no_prs_message: str | None = None

    def __post_init__(self):
        self.validate()

    @classmethod
    def load(cls, path: Path | str | None = None) -> ReminderConfig:
        """Load config from YAML file.

        Without a file, the current repository is queried with no filters.
        """
        if path is None:
            for candidate in CONFIG_FILE_CANDIDATES:
                if Path(candidate).exists():
                    path = candidate
                    break

        if path is None:
            return cls.from_dict({})

        if not Path(path).exists():
            raise ConfigurationError(f"config file not found: {path}")

        with open(path) as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigurationError(f"unable to parse {path}: {e}") from e

        if data is not None and not isinstance(data, dict):
            raise ConfigurationError(f"{path} must contain a mapping")
        return cls.from_dict(data or {})

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ReminderConfig:
        """Create config from dictionary (e.g., parsed YAML)."""
        repository_paths = data.get("repositories") or []
        if isinstance(repository_paths, str):
            repository_paths = [repository_paths]

        if repository_paths:
            repositories = [parse_repository(str(p)) for p in repository_paths]
        else:
            repositories = [get_current_repository()]

        raw_repository_filters = data.get("repository-filters") or {}
        if not isinstance(raw_repository_filters, dict):
            raise ConfigurationError("repository-filters must be a mapping")

        return cls(
            repositories=repositories,
            global_filters=_parse_filters(data.get("filters"), "filters"),
            repository_filters={
                str(key): _parse_filters(value, f"filters for repository {key}")
                for key, value in raw_repository_filters.items()
            },
            no_prs_message=data.get("no-prs-message"),
        )

    def validate(self) -> None:
        if not self.repositories:
            raise ConfigurationError("at least one repository is required")
        if len(self.repositories) > MAX_REPOSITORIES:
            raise ConfigurationError(
                f"too many repositories: maximum of {MAX_REPOSITORIES} repositories allowed, "
                f"got {len(self.repositories)}"
            )

        seen: set[str] = set()
        for repo in self.repositories:
            if repo.path in seen:
                raise ConfigurationError(f"duplicate repository '{repo.path}' found in repositories")
            seen.add(repo.path)

        for key in self.repository_filters:
            matches = [r for r in self.repositories if key in (r.path, r.name)]
            if not matches:
                raise ConfigurationError(
                    f"repository-filters contains entry for '{key}' which does not match any repository"
                )
            if len(matches) > 1:
                raise ConfigurationError(
                    f"repository-filters contains ambiguous entry for '{key}' which matches "
                    "multiple repositories (needs owner/repo format)"
                )

    def get_filters_for_repository(self, repo: Repository) -> Filters:
        """Repository-specific filters by full path, then short name, else global filters."""
        for key in (repo.path, repo.name):
            if key in self.repository_filters:
                return self.repository_filters[key]
        return self.global_filters

    def to_yaml(self) -> str:
        """Serialize config to YAML."""
        data: dict[str, Any] = {"repositories": [r.path for r in self.repositories]}
        global_filters = self.global_filters.model_dump(by_alias=True, exclude_defaults=True)
        if global_filters:
            data["filters"] = global_filters
        if self.repository_filters:
            data["repository-filters"] = {
                key: filters.model_dump(by_alias=True, exclude_defaults=True)
                for key, filters in self.repository_filters.items()
            }
        if self.no_prs_message:
            data["no-prs-message"] = self.no_prs_message
        return yaml.dump(data, default_flow_style=False, sort_keys=False)
