"""Author, label and title filters for pull requests."""

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .models import RawPullRequest


class Filters(BaseModel):
    """Inclusion/exclusion rules. Invalid combinations are rejected on construction.

    Keys use the hyphenated names from the config file (``authors-ignore``,
    ``labels-ignore``, ``ignored-terms``); field names work too.
    """

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    authors: list[str] = Field(default_factory=list)
    authors_ignore: list[str] = Field(default_factory=list, alias="authors-ignore")
    labels: list[str] = Field(default_factory=list)
    labels_ignore: list[str] = Field(default_factory=list, alias="labels-ignore")
    ignored_terms: list[str] = Field(default_factory=list, alias="ignored-terms")

    @model_validator(mode="after")
    def _validate(self) -> "Filters":
        if self.authors and self.authors_ignore:
            raise ValueError("cannot use both authors and authors-ignore filters at the same time")
        if any(label in self.labels_ignore for label in self.labels):
            raise ValueError("labels filter cannot contain labels that are in labels-ignore filter")
        if "" in self.ignored_terms:
            raise ValueError("ignored-terms cannot contain empty strings")
        return self

    @classmethod
    def parse(cls, raw: str) -> "Filters":
        """Build filters from a JSON string. An empty string means no filters."""
        if not raw.strip():
            return cls()
        return cls.model_validate_json(raw)


def include_pr(pr: RawPullRequest, filters: Filters) -> bool:
    """Return True if the pull request passes the filters.

    Exclusion rules run before inclusion rules; the first failing rule wins.
    """
    if any(term in pr.title for term in filters.ignored_terms):
        return False

    if filters.labels_ignore and any(label in filters.labels_ignore for label in pr.labels):
        return False

    if filters.authors_ignore and pr.author_login in filters.authors_ignore:
        return False

    if filters.labels and not any(label in filters.labels for label in pr.labels):
        return False

    if filters.authors and pr.author_login not in filters.authors:
        return False

    return True
