"""Tests for reminder configuration and per-repository filter resolution."""

import pytest
import yaml

from pr_reminder.exceptions import ConfigurationError
from pr_reminder.filters import Filters
from pr_reminder.reminder_config import ReminderConfig
from pr_reminder.repo import Repository


class TestFromDict:
    def test_full_config(self):
        config = ReminderConfig.from_dict(
            {
                "repositories": ["org/a", "org/b"],
                "filters": {"labels-ignore": ["infra"]},
                "repository-filters": {"b": {"authors": ["bob"]}},
                "no-prs-message": "All clear",
            }
        )
        assert config.repositories == [Repository("org", "a"), Repository("org", "b")]
        assert config.global_filters.labels_ignore == ["infra"]
        assert config.repository_filters["b"].authors == ["bob"]
        assert config.no_prs_message == "All clear"

    def test_single_repository_string(self):
        config = ReminderConfig.from_dict({"repositories": "org/a"})
        assert config.repositories == [Repository("org", "a")]

    def test_defaults_to_current_repository(self, monkeypatch):
        monkeypatch.setenv("GITHUB_REPOSITORY", "env-org/env-repo")
        config = ReminderConfig.from_dict({})
        assert config.repositories == [Repository("env-org", "env-repo")]
        assert config.global_filters == Filters()

    def test_invalid_repository(self):
        with pytest.raises(ConfigurationError, match="invalid owner/repository format"):
            ReminderConfig.from_dict({"repositories": ["not-a-path"]})

    def test_invalid_global_filters(self):
        with pytest.raises(ConfigurationError, match="invalid filters"):
            ReminderConfig.from_dict(
                {"repositories": ["org/a"], "filters": {"authors": ["x"], "authors-ignore": ["y"]}}
            )

    def test_invalid_repository_filters(self):
        with pytest.raises(ConfigurationError, match="filters for repository a"):
            ReminderConfig.from_dict(
                {"repositories": ["org/a"], "repository-filters": {"a": {"ignored-terms": [""]}}}
            )

    def test_filters_must_be_mapping(self):
        with pytest.raises(ConfigurationError, match="must be a mapping"):
            ReminderConfig.from_dict({"repositories": ["org/a"], "filters": ["wip"]})


class TestValidation:
    def test_duplicate_repositories(self):
        with pytest.raises(ConfigurationError, match="duplicate repository 'org/a'"):
            ReminderConfig.from_dict({"repositories": ["org/a", "org/a"]})

    def test_too_many_repositories(self):
        with pytest.raises(ConfigurationError, match="too many repositories"):
            ReminderConfig.from_dict({"repositories": [f"org/repo{i}" for i in range(31)]})

    def test_ambiguous_short_name_rejected(self):
        with pytest.raises(ConfigurationError, match="ambiguous entry for 'shared'"):
            ReminderConfig.from_dict(
                {
                    "repositories": ["org1/shared", "org2/shared"],
                    "repository-filters": {"shared": {"authors": ["alice"]}},
                }
            )

    def test_full_path_resolves_ambiguity(self):
        config = ReminderConfig.from_dict(
            {
                "repositories": ["org1/shared", "org2/shared"],
                "repository-filters": {"org1/shared": {"authors": ["alice"]}},
            }
        )
        assert config.get_filters_for_repository(Repository("org1", "shared")).authors == ["alice"]
        assert config.get_filters_for_repository(Repository("org2", "shared")) == Filters()

    def test_unmatched_key_rejected(self):
        with pytest.raises(ConfigurationError, match="'other' which does not match any repository"):
            ReminderConfig.from_dict(
                {"repositories": ["org/a"], "repository-filters": {"other": {"authors": ["alice"]}}}
            )

    def test_rejected_at_construction(self):
        """Invalid keys fail when the config is built, not when filters are looked up."""
        with pytest.raises(ConfigurationError):
            ReminderConfig(
                repositories=[Repository("org", "a")],
                repository_filters={"org/b": Filters()},
            )

    def test_no_repositories(self):
        with pytest.raises(ConfigurationError, match="at least one repository"):
            ReminderConfig(repositories=[])


class TestGetFiltersForRepository:
    @pytest.fixture
    def config(self):
        return ReminderConfig(
            repositories=[Repository("org", "a"), Repository("org", "b"), Repository("org", "c")],
            global_filters=Filters(labels_ignore=["global"]),
            repository_filters={
                "org/a": Filters(authors=["by-path"]),
                "b": Filters(authors=["by-name"]),
            },
        )

    def test_full_path_match(self, config):
        assert config.get_filters_for_repository(Repository("org", "a")).authors == ["by-path"]

    def test_short_name_match(self, config):
        assert config.get_filters_for_repository(Repository("org", "b")).authors == ["by-name"]

    def test_global_fallback(self, config):
        assert config.get_filters_for_repository(Repository("org", "c")).labels_ignore == ["global"]

    def test_full_path_preferred_over_short_name(self):
        config = ReminderConfig(
            repositories=[Repository("org", "a")],
            repository_filters={"a": Filters(authors=["by-name"]), "org/a": Filters(authors=["by-path"])},
        )
        assert config.get_filters_for_repository(Repository("org", "a")).authors == ["by-path"]


class TestLoad:
    def test_load_yaml(self, tmp_path):
        path = tmp_path / "pr-reminder.yaml"
        path.write_text(
            "repositories:\n"
            "  - org/a\n"
            "filters:\n"
            "  labels-ignore: [infra]\n"
            "no-prs-message: Nothing to review\n"
        )
        config = ReminderConfig.load(path)
        assert config.repositories == [Repository("org", "a")]
        assert config.global_filters.labels_ignore == ["infra"]
        assert config.no_prs_message == "Nothing to review"

    def test_load_discovers_file_in_cwd(self, tmp_path, monkeypatch):
        (tmp_path / ".pr-reminder.yml").write_text("repositories: [org/hidden]\n")
        monkeypatch.chdir(tmp_path)
        assert ReminderConfig.load().repositories == [Repository("org", "hidden")]

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="config file not found"):
            ReminderConfig.load(tmp_path / "nope.yaml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "pr-reminder.yaml"
        path.write_text("repositories: [org/a\n")
        with pytest.raises(ConfigurationError, match="unable to parse"):
            ReminderConfig.load(path)

    def test_to_yaml_round_trip(self):
        config = ReminderConfig.from_dict(
            {
                "repositories": ["org/a", "org/b"],
                "filters": {"labels-ignore": ["infra"]},
                "repository-filters": {"b": {"authors": ["bob"]}},
            }
        )
        reloaded = ReminderConfig.from_dict(yaml.safe_load(config.to_yaml()))
        assert reloaded == config
