"""Run-level error hierarchy for git-reviewer.

Every error that ends a run derives from ReviewerError so that callers
(the CLI, the MCP server) can catch one type and still branch on the
concrete kind to pick a message. Per-path blame failures are NOT part of
this hierarchy; see gitreviewer.sources.base for those.
"""

from __future__ import annotations

from datetime import datetime


class ReviewerError(Exception):
    """Base exception for all run-level failures.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ConfigurationError(ReviewerError):
    """Raised when caller input is malformed (bad since date, negative top-N).

    Raised before any repository work is started.
    """

    def __init__(self, message: str, value: object | None = None) -> None:
        super().__init__(message)
        self.value = value


class RepositoryUnavailableError(ReviewerError):
    """Raised when the repository itself cannot be used.

    Examples are a base revision that does not resolve or a working
    directory that is not a git repository. Always fatal to the run.
    """

    def __init__(self, message: str, revision: str | None = None) -> None:
        super().__init__(message)
        self.revision = revision


class NoAttributableDataError(ReviewerError):
    """Raised when aggregation finished with zero attributable lines.

    Distinct from RepositoryUnavailableError: the repository was fine, but
    every path was skipped or every line predates the since cut-off.
    """

    def __init__(
        self,
        since: datetime,
        skipped: dict[str, str] | None = None,
    ) -> None:
        self.since = since
        self.skipped = dict(skipped or {})
        msg = f"No attributable lines found since {since.date().isoformat()}"
        if self.skipped:
            msg = f"{msg} ({len(self.skipped)} path(s) skipped)"
        super().__init__(msg)


class BranchBehindError(ReviewerError):
    """Raised when HEAD is older than the base branch tip."""

    def __init__(self, base: str) -> None:
        super().__init__(f"Current branch is behind {base}. Merge up!")
        self.base = base


class NoChangedFilesError(ReviewerError):
    """Raised when the branch has no reviewable changes."""

    def __init__(self, base: str) -> None:
        super().__init__(f"No changes on this branch relative to {base}!")
        self.base = base


__all__ = [
    "ReviewerError",
    "ConfigurationError",
    "RepositoryUnavailableError",
    "NoAttributableDataError",
    "BranchBehindError",
    "NoChangedFilesError",
]
