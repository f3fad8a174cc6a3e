"""Command-line entry point: ``git-reviewer`` / ``git reviewer``."""

import argparse
import asyncio
import logging
import sys
from collections.abc import Sequence

from gitreviewer import __version__
from gitreviewer.config import configure_logging, get_settings
from gitreviewer.errors import ReviewerError
from gitreviewer.output import OutputMode, ReviewerFormatter
from gitreviewer.pathfilter import split_list_arg
from gitreviewer.reviewer import suggest_reviewers

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="git-reviewer",
        description="Suggest reviewers for the current branch by ownership of the changed lines.",
    )
    parser.add_argument(
        "--since",
        default=None,
        help="Consider commits after this date (YYYY-MM-DD). Defaults to 6 months ago.",
    )
    parser.add_argument("--top", type=int, default=None, help="Number of reviewers to show")
    parser.add_argument("--base", default=None, help="Base branch to compare against")
    parser.add_argument("-C", "--repo", default=".", help="Run as if started in this directory")
    parser.add_argument("--show-files", action="store_true", help="Show changed files for reviewing")
    parser.add_argument("--verbose", action="store_true", help="Show progress and error information")
    parser.add_argument(
        "--force",
        action="store_true",
        help="Continue processing despite checks or errors",
    )
    parser.add_argument(
        "--ignore-extension",
        default="",
        help="Exclude changed paths with these extensions (--ignore-extension svg,png,jpg)",
    )
    parser.add_argument(
        "--only-extension",
        default="",
        help="Only consider changed paths with these extensions (--only-extension go,js)",
    )
    parser.add_argument(
        "--ignore-path",
        default="",
        help="Exclude files under these paths (--ignore-path main.go,src)",
    )
    parser.add_argument(
        "--only-path",
        default="",
        help="Only consider files under these paths (--only-path main.go,src)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"git-reviewer version {__version__}",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the CLI.

    Returns:
        Process exit code: 0 on success, 1 on any reviewer error.
    """
    args = build_parser().parse_args(argv)
    settings = get_settings()
    configure_logging("DEBUG" if args.verbose else settings.log_level)

    formatter = ReviewerFormatter(OutputMode.VERBOSE if args.verbose else OutputMode.SUMMARY)
    try:
        suggestion = asyncio.run(
            suggest_reviewers(
                repo_path=args.repo,
                since=args.since,
                top_n=args.top,
                base=args.base,
                force=args.force,
                ignored_extensions=split_list_arg(args.ignore_extension),
                only_extensions=split_list_arg(args.only_extension),
                ignored_paths=split_list_arg(args.ignore_path),
                only_paths=split_list_arg(args.only_path),
                settings=settings,
            )
        )
    except ReviewerError as e:
        logger.debug(f"Run failed: {type(e).__name__}: {e.message}")
        print(formatter.format_error(e), file=sys.stderr)
        return 1

    files = suggestion.files if args.show_files else None
    sys.stdout.write(formatter.format(suggestion.ranking, files=files))
    return 0


if __name__ == "__main__":
    sys.exit(main())
