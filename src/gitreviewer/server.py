"""FastMCP server for git-reviewer."""

import logging

from fastmcp import FastMCP

from gitreviewer.config import configure_logging, get_settings
from gitreviewer.errors import ReviewerError
from gitreviewer.output import OutputMode, ReviewerFormatter
from gitreviewer.pathfilter import split_list_arg
from gitreviewer.reviewer import suggest_reviewers as run_suggestion

logger = logging.getLogger(__name__)

# Initialize FastMCP server
mcp = FastMCP("git-reviewer")

_formatter: ReviewerFormatter | None = None


def _get_formatter() -> ReviewerFormatter:
    global _formatter
    if _formatter is None:
        _formatter = ReviewerFormatter(OutputMode.VERBOSE)
    return _formatter


@mcp.tool()
async def suggest_reviewers(
    repo_path: str = ".",
    since: str | None = None,
    top_n: int | None = None,
    base: str | None = None,
    show_files: bool = False,
    force: bool = False,
    ignore_extensions: str | None = None,
    only_extensions: str | None = None,
    ignore_paths: str | None = None,
    only_paths: str | None = None,
) -> str:
    """Suggest code reviewers for a branch.

    Ranks contributors by the share of lines they own, according to git
    blame, across the files the branch changes relative to its base.

    Args:
        repo_path: Directory inside the git repository.
        since: Only count lines committed on or after this date (YYYY-MM-DD).
            Defaults to 6 months ago.
        top_n: Number of reviewers to return. Defaults to 3.
        base: Base branch to compare against. Defaults to master.
        show_files: List the changed files above the reviewers.
        force: Rank reviewers even when the branch is behind its base.
        ignore_extensions: Comma separated extensions to skip (e.g. "png,lock").
        only_extensions: Comma separated extensions to keep exclusively.
        ignore_paths: Comma separated path prefixes to skip.
        only_paths: Comma separated path prefixes to keep exclusively.

    Returns:
        One line per reviewer with their ownership percentage, or an error
        message explaining why no ranking could be produced.
    """
    logger.info(f"Reviewer suggestion requested: repo={repo_path}, base={base}, since={since}")
    formatter = _get_formatter()

    try:
        suggestion = await run_suggestion(
            repo_path=repo_path,
            since=since,
            top_n=top_n,
            base=base,
            force=force,
            ignored_extensions=split_list_arg(ignore_extensions),
            only_extensions=split_list_arg(only_extensions),
            ignored_paths=split_list_arg(ignore_paths),
            only_paths=split_list_arg(only_paths),
        )
    except ReviewerError as e:
        logger.warning(f"Reviewer suggestion failed: {e}")
        return formatter.format_error(e)
    except Exception as e:
        logger.exception(f"Unexpected error suggesting reviewers for {repo_path}")
        return f"Error suggesting reviewers: {e}"

    return formatter.format(
        suggestion.ranking,
        files=suggestion.files if show_files else None,
    )


def main() -> None:
    """Run the git-reviewer MCP server."""
    settings = get_settings()
    configure_logging(settings.log_level)
    logger.info("Starting git-reviewer MCP server")
    mcp.run()


if __name__ == "__main__":
    main()
