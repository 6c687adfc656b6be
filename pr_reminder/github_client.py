"""GitHub API client for pull requests, reviews and comments.

Uses httpx.AsyncClient under trio. Each call is a single attempt: there is
no retry or rate limit pacing, callers bound calls with their own timeouts.
"""

import logging
from collections.abc import AsyncGenerator
from typing import Any

import httpx

from .config import GITHUB_API_URL, GITHUB_TOKEN, PER_PAGE
from .exceptions import GitHubAPIError, NotFoundError

logger = logging.getLogger(__name__)


class GitHubClient:
    """Async GitHub REST API client with token authentication."""

    def __init__(self, token: str | None = None, base_url: str | None = None):
        """Initialize the client.

        Args:
            token: Personal access token or GitHub Actions token
            base_url: API root, defaults to GITHUB_API_URL

        Falls back to the GITHUB_TOKEN environment variable.
        """
        self.token = token or GITHUB_TOKEN
        if not self.token:
            raise ValueError("GitHub auth required. Set GITHUB_TOKEN")

        self.base_url = base_url or GITHUB_API_URL
        self.client: httpx.AsyncClient | None = None
        self._request_count = 0

    async def __aenter__(self):
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={
                "Accept": "application/vnd.github+json",
                "Authorization": f"Bearer {self.token}",
                "X-GitHub-Api-Version": "2022-11-28",
            },
            timeout=30.0,
            http2=True,
        )
        return self

    async def __aexit__(self, *args):
        if self.client:
            await self.client.aclose()

    @property
    def request_count(self) -> int:
        return self._request_count

    async def _request(
        self,
        method: str,
        path: str,
        params: dict | None = None,
    ) -> httpx.Response:
        """Make a request, raising NotFoundError on 404 and GitHubAPIError on other errors."""
        if not self.client:
            raise RuntimeError("Client not initialized. Use async context manager.")

        response = await self.client.request(method, path, params=params)
        self._request_count += 1

        if response.status_code == 404:
            raise NotFoundError(404, f"Not Found: {path}")

        if response.is_error:
            message = response.reason_phrase or "error"
            try:
                data = response.json()
            except ValueError:
                data = None
            if isinstance(data, dict) and data.get("message"):
                message = data["message"]
            raise GitHubAPIError(response.status_code, f"{message}: {path}")

        return response

    @staticmethod
    def _decode(response: httpx.Response, path: str) -> Any:
        """Decode a successful response body, raising GitHubAPIError if it is not JSON."""
        try:
            return response.json()
        except ValueError as e:
            raise GitHubAPIError(response.status_code, f"invalid JSON in response: {path}") from e

    async def get(self, path: str, params: dict | None = None) -> Any:
        """GET request returning JSON."""
        response = await self._request("GET", path, params=params)
        return self._decode(response, path)

    async def paginate(
        self,
        path: str,
        params: dict | None = None,
        max_pages: int | None = None,
    ) -> AsyncGenerator[Any]:
        """Paginate through results, yielding each item.

        Follows the Link header until there is no next page or max_pages is reached.
        """
        params = params.copy() if params else {}
        params["per_page"] = PER_PAGE
        page = 1

        while True:
            params["page"] = page
            response = await self._request("GET", path, params=params)
            items = self._decode(response, path)
            if not isinstance(items, list):
                raise GitHubAPIError(response.status_code, f"expected a list in response: {path}")

            for item in items:
                yield item

            if not items or "next" not in response.links:
                break

            if max_pages and page >= max_pages:
                logger.debug(f"Stopping pagination of {path} at page cap {max_pages}")
                break

            page += 1

    async def paginate_all(
        self,
        path: str,
        params: dict | None = None,
        max_pages: int | None = None,
    ) -> list[dict]:
        """Paginate through results, returning a list."""
        results = []
        async for item in self.paginate(path, params, max_pages):
            results.append(item)
        return results

    async def list_open_pull_requests(self, owner: str, repo: str, max_pages: int = 1) -> list[dict]:
        """List open pull requests of a repository."""
        path = f"/repos/{owner}/{repo}/pulls"
        return await self.paginate_all(path, {"state": "open"}, max_pages)

    async def get_pull_request(self, owner: str, repo: str, number: int) -> dict:
        """Get a single pull request."""
        return await self.get(f"/repos/{owner}/{repo}/pulls/{number}")

    async def get_pr_reviews(self, owner: str, repo: str, number: int, max_pages: int | None = None) -> list[dict]:
        """Get reviews for a PR, oldest first."""
        path = f"/repos/{owner}/{repo}/pulls/{number}/reviews"
        return await self.paginate_all(path, max_pages=max_pages)

    async def get_pr_review_comments(
        self, owner: str, repo: str, number: int, max_pages: int | None = None
    ) -> list[dict]:
        """Get inline code review comments."""
        path = f"/repos/{owner}/{repo}/pulls/{number}/comments"
        return await self.paginate_all(path, max_pages=max_pages)

    async def get_pr_comments(self, owner: str, repo: str, number: int, max_pages: int | None = None) -> list[dict]:
        """Get PR-level comments (issue comments)."""
        path = f"/repos/{owner}/{repo}/issues/{number}/comments"
        return await self.paginate_all(path, max_pages=max_pages)
