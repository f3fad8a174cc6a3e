"""Text formatting for reviewer rankings."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from enum import Enum

from gitreviewer.errors import (
    BranchBehindError,
    ConfigurationError,
    NoAttributableDataError,
    NoChangedFilesError,
    RepositoryUnavailableError,
    ReviewerError,
)
from gitreviewer.models import RankedStats

logger = logging.getLogger(__name__)

HEADER_FILES = "Reviewers across the following changed files:"
NO_REVIEWERS = "No reviewers found."


class OutputMode(Enum):
    """Output verbosity modes."""

    SUMMARY = "summary"  # Ranked reviewers only (default)
    VERBOSE = "verbose"  # Adds totals and skipped paths


class ReviewerFormatter:
    """Formats RankedStats for a terminal or an MCP tool response.

    Each reviewer is one line, ``"  <percent>%<TAB><Name <email>>"``.
    """

    def __init__(self, mode: OutputMode = OutputMode.SUMMARY) -> None:
        self.mode = mode

    def format(
        self,
        ranking: RankedStats,
        files: Sequence[str] | None = None,
    ) -> str:
        """Format a ranking.

        Args:
            ranking: Engine result.
            files: Changed files to list above the reviewers, if any.

        Returns:
            Formatted text ending in a newline.
        """
        lines: list[str] = []

        if files:
            lines.append(HEADER_FILES)
            lines.extend(f"  {path}" for path in files)
            lines.append("")

        if ranking.stats:
            lines.extend(self.format_stat_line(stat.percentage, stat.reviewer) for stat in ranking.stats)
        else:
            lines.append(NO_REVIEWERS)

        if self.mode == OutputMode.VERBOSE:
            lines.append("")
            lines.append(
                f"{ranking.total_lines} line(s) by {ranking.contributors} contributor(s) "
                f"since {ranking.since.date().isoformat()}"
            )
            if ranking.skipped:
                lines.append(f"Skipped {len(ranking.skipped)} path(s):")
                lines.extend(f"  {path}: {reason}" for path, reason in sorted(ranking.skipped.items()))

        return "\n".join(lines) + "\n"

    @staticmethod
    def format_stat_line(percentage: float, reviewer: str) -> str:
        return f"  {percentage:5.1f}%\t{reviewer}"

    def format_error(self, error: ReviewerError) -> str:
        """User-facing message for a run-level failure."""
        if isinstance(error, ConfigurationError):
            return f"Problem with input: {error.message}. Run 'git reviewer -h' for usage."
        if isinstance(error, NoAttributableDataError):
            msg = (
                f"No attributable lines found since {error.since.date().isoformat()}. "
                "Try a wider date range with --since."
            )
            if self.mode == OutputMode.VERBOSE and error.skipped:
                details = "\n".join(
                    f"  {path}: {reason}" for path, reason in sorted(error.skipped.items())
                )
                msg = f"{msg}\nSkipped paths:\n{details}"
            return msg
        if isinstance(error, RepositoryUnavailableError):
            return f"Repository problem: {error.message}"
        if isinstance(error, (BranchBehindError, NoChangedFilesError)):
            return error.message
        logger.debug(f"Formatting unrecognised error type {type(error).__name__}")
        return f"Error: {error.message}"


__all__ = ["OutputMode", "ReviewerFormatter"]
