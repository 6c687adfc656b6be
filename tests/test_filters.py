"""Tests for filters and the filter evaluator."""

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from pr_reminder.filters import Filters, include_pr
from pr_reminder.models import Collaborator, RawPullRequest


def make_pr(title="Add feature", author="alice", labels=()) -> RawPullRequest:
    return RawPullRequest(
        number=1,
        title=title,
        author=Collaborator(login=author) if author else None,
        created_at=datetime(2025, 1, 1, tzinfo=UTC),
        updated_at=datetime(2025, 1, 1, tzinfo=UTC),
        labels=tuple(labels),
    )


class TestFiltersConstruction:
    def test_empty_filters(self):
        filters = Filters()
        assert filters.authors == []
        assert filters.ignored_terms == []

    def test_hyphenated_keys(self):
        filters = Filters.model_validate(
            {"authors-ignore": ["bob"], "labels-ignore": ["wip"], "ignored-terms": ["DO NOT MERGE"]}
        )
        assert filters.authors_ignore == ["bob"]
        assert filters.labels_ignore == ["wip"]
        assert filters.ignored_terms == ["DO NOT MERGE"]

    def test_field_names_accepted(self):
        assert Filters(labels_ignore=["wip"]).labels_ignore == ["wip"]

    def test_authors_and_authors_ignore_rejected(self):
        with pytest.raises(ValidationError, match="cannot use both authors and authors-ignore"):
            Filters.model_validate({"authors": ["alice"], "authors-ignore": ["bob"]})

    def test_overlapping_labels_rejected(self):
        with pytest.raises(ValidationError, match="labels-ignore"):
            Filters.model_validate({"labels": ["feature", "wip"], "labels-ignore": ["wip"]})

    def test_empty_ignored_term_rejected(self):
        with pytest.raises(ValidationError, match="ignored-terms cannot contain empty strings"):
            Filters.model_validate({"ignored-terms": ["WIP", ""]})

    def test_unknown_key_rejected(self):
        with pytest.raises(ValidationError):
            Filters.model_validate({"author": ["alice"]})

    def test_empty_author_lists_allowed_together(self):
        filters = Filters.model_validate({"authors": [], "authors-ignore": ["bob"]})
        assert filters.authors_ignore == ["bob"]


class TestFiltersParse:
    def test_empty_string(self):
        assert Filters.parse("") == Filters()

    def test_json(self):
        filters = Filters.parse('{"authors": ["alice"], "labels": ["feature"]}')
        assert filters.authors == ["alice"]
        assert filters.labels == ["feature"]

    def test_invalid_json(self):
        with pytest.raises(ValidationError):
            Filters.parse('{"invalid": json}')


class TestIncludePr:
    def test_no_filters_includes(self):
        assert include_pr(make_pr(), Filters()) is True

    def test_ignored_term_in_title(self):
        filters = Filters(ignored_terms=["WIP"])
        assert include_pr(make_pr(title="WIP: refactor"), filters) is False
        assert include_pr(make_pr(title="Refactor"), filters) is True

    def test_ignored_term_is_case_sensitive(self):
        assert include_pr(make_pr(title="wip: refactor"), Filters(ignored_terms=["WIP"])) is True

    def test_labels_ignore(self):
        filters = Filters(labels_ignore=["infra"])
        assert include_pr(make_pr(labels=["infra", "bug"]), filters) is False
        assert include_pr(make_pr(labels=["bug"]), filters) is True

    def test_authors_ignore(self):
        filters = Filters(authors_ignore=["alice"])
        assert include_pr(make_pr(author="alice"), filters) is False
        assert include_pr(make_pr(author="bob"), filters) is True

    def test_labels_allow_list(self):
        filters = Filters(labels=["feature"])
        assert include_pr(make_pr(labels=["feature"]), filters) is True
        assert include_pr(make_pr(labels=["bug"]), filters) is False
        assert include_pr(make_pr(labels=[]), filters) is False

    def test_authors_allow_list(self):
        filters = Filters(authors=["alice"])
        assert include_pr(make_pr(author="alice"), filters) is True
        assert include_pr(make_pr(author="bob"), filters) is False

    def test_missing_author_not_in_allow_list(self):
        assert include_pr(make_pr(author=None), Filters(authors=["alice"])) is False
        assert include_pr(make_pr(author=None), Filters(authors_ignore=["alice"])) is True

    def test_label_deny_wins_over_label_allow(self):
        filters = Filters(labels=["feature"], labels_ignore=["infra"])
        assert include_pr(make_pr(labels=["feature", "infra"]), filters) is False

    def test_ignored_term_wins_over_allow_lists(self):
        filters = Filters(authors=["alice"], labels=["feature"], ignored_terms=["[skip]"])
        assert include_pr(make_pr(title="[skip] docs", labels=["feature"]), filters) is False
