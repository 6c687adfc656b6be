"""Shared test fixtures."""

import pytest
from factories import FakeGitHubClient


@pytest.fixture
def github_client_uninit():
    """Create an uninitialized GitHubClient with a fake token.

    Use this for sync tests that don't need the async context manager.
    """
    from pr_reminder.github_client import GitHubClient

    return GitHubClient(token="fake-token")


@pytest.fixture
def fake_client():
    return FakeGitHubClient()
