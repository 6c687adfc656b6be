"""Runtime settings for the PR reminder."""

import os

from dotenv import load_dotenv

load_dotenv()

GITHUB_TOKEN = os.environ.get("GITHUB_TOKEN")
GITHUB_API_URL = os.environ.get("GITHUB_API_URL", "https://api.github.com")

# Concurrency and per-call timeouts (seconds)
LIST_CONCURRENCY = int(os.environ.get("PR_REMINDER_LIST_CONCURRENCY", "5"))
REVIEWS_CONCURRENCY = int(os.environ.get("PR_REMINDER_REVIEWS_CONCURRENCY", "5"))
LIST_TIMEOUT = float(os.environ.get("PR_REMINDER_LIST_TIMEOUT", "10"))
PR_TIMEOUT = float(os.environ.get("PR_REMINDER_PR_TIMEOUT", "5"))
REVIEWS_TIMEOUT = float(os.environ.get("PR_REMINDER_REVIEWS_TIMEOUT", "10"))
RUN_TIMEOUT = float(os.environ.get("PR_REMINDER_RUN_TIMEOUT", "60"))

# Only the latest N PRs are kept when more are found
MAX_PRS = int(os.environ.get("PR_REMINDER_MAX_PRS", "50"))

LOG_FILE = os.environ.get("PR_REMINDER_LOG_FILE")

PER_PAGE = 100  # Max items per API page
PULLS_MAX_PAGES = 1
REVIEWS_MAX_PAGES = 4
COMMENTS_MAX_PAGES = 2  # Comment pages carry full bodies, keep them short
MAX_REPOSITORIES = 30
