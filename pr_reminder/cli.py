"""Main CLI entry point for pr-reminder."""

import argparse
import logging
import sys
from functools import partial
from pathlib import Path

import trio
from rich.console import Console

from .exceptions import PRReminderError
from .main import main as fetch_main
from .main import setup_logging
from .reminder_config import ReminderConfig
from .repo import parse_pull_request_ref


def main(argv: list[str] | None = None):
    """Main CLI entry point for pr-reminder."""
    parser = argparse.ArgumentParser(
        prog="pr-reminder",
        description="List open pull requests with their review state",
        epilog="Run 'pr-reminder <command> --help' for more information on a command.",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    fetch_parser = subparsers.add_parser(
        "fetch",
        help="Fetch open PRs and their reviewers from GitHub",
        description="Fetch open pull requests of the configured repositories, once.",
    )
    fetch_parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        help="Config file path (default: pr-reminder.yaml in current directory)",
    )
    fetch_parser.add_argument(
        "--pr",
        action="append",
        default=[],
        metavar="OWNER/NAME/NUMBER",
        help="Fetch only this pull request instead of listing repositories (repeatable)",
    )

    check_parser = subparsers.add_parser(
        "check-config",
        help="Validate the config file without calling GitHub",
    )
    check_parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        help="Config file path (default: pr-reminder.yaml in current directory)",
    )

    args = parser.parse_args(argv)
    console = Console(stderr=True)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    setup_logging(level=logging.DEBUG if args.verbose else logging.INFO)

    try:
        if args.command == "fetch":
            references = [parse_pull_request_ref(value) for value in args.pr]
            trio.run(partial(fetch_main, args.config, references=references or None))

        elif args.command == "check-config":
            config = ReminderConfig.load(args.config)
            console.print("[green]Configuration is valid[/]")
            print(config.to_yaml(), end="")

    except (PRReminderError, ValueError) as e:
        console.print(f"Error: {e}", style="red", markup=False)
        sys.exit(1)


if __name__ == "__main__":
    main()
