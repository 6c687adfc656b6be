"""Fetch open pull requests with reviewer state across GitHub repositories."""

__version__ = "0.1.0"
