"""Map GitHub API responses into models."""
