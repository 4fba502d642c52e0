"""Command line entry point."""

import argparse
import asyncio
import dataclasses
import logging
import sys

from mrwatch.config import WatchConfig
from mrwatch.exceptions import MrWatchError
from mrwatch.logging import configure_logging, get_logger
from mrwatch.runner import run_once

logger = get_logger()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mrwatch",
        description="Report the review/QA status of open GitLab merge requests to Slack.",
    )
    parser.add_argument("--project", help="Project id to report on (overrides GITLAB_PROJECT_ID)")
    parser.add_argument(
        "--author",
        action="append",
        dest="authors",
        help="Report on this author's merge requests across projects; repeatable (overrides GITLAB_AUTHORS)",
    )
    parser.add_argument("--max-display", type=int, help="Maximum merge requests listed (overrides MRWATCH_MAX_DISPLAY)")
    parser.add_argument("--dry-run", action="store_true", help="Print the message instead of sending it")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every GitLab request")
    return parser


def apply_overrides(config: WatchConfig, args: argparse.Namespace) -> WatchConfig:
    changes: dict[str, object] = {}
    if args.project:
        changes["project_id"] = args.project
    if args.authors:
        changes["authors"] = tuple(args.authors)
    if args.max_display is not None:
        changes["max_display"] = max(args.max_display, 0)
    return dataclasses.replace(config, **changes) if changes else config


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(level=logging.INFO, http_level=logging.DEBUG if args.verbose else logging.INFO)

    try:
        config = apply_overrides(WatchConfig.from_env(), args)
        message = asyncio.run(run_once(config, dry_run=args.dry_run))
    except MrWatchError as e:
        logger.error("Run failed: %s", e)
        return 1

    if args.dry_run:
        print(message)
    return 0


if __name__ == "__main__":
    sys.exit(main())
