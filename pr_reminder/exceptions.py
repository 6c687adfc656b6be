"""Exception classes for the PR reminder."""


class PRReminderError(Exception):
    """Base exception for all PR reminder errors."""


class ConfigurationError(PRReminderError):
    """Raised when configuration is invalid. Always raised before any API call."""


class GitHubAPIError(PRReminderError):
    """Raised when the GitHub API answers with an error status or an unreadable body."""

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(f"[{status_code}] {message}")


class NotFoundError(GitHubAPIError):
    """Raised when a GitHub resource is not found (HTTP 404)."""


class FetchError(PRReminderError):
    """Raised when listing or fetching pull requests fails. Fatal to the run."""


class RepositoryNotFoundError(FetchError):
    """Raised when a configured repository does not exist or is not visible."""

    def __init__(self, repository_path: str) -> None:
        self.repository_path = repository_path
        super().__init__(
            f"repository {repository_path} not found — check the repository name and permissions"
        )


class ReviewFetchError(PRReminderError):
    """Raised when reviews or comments for one pull request cannot be fetched."""
