"""Base protocol and error hierarchy for blame sources.

This module defines the BlameSource protocol that every authorship
evidence provider must implement, along with the per-path error hierarchy
the aggregator uses to tell skippable failures from fatal ones.
"""

from typing import Protocol, runtime_checkable

from gitreviewer.models import AttributionRecord


@runtime_checkable
class BlameSource(Protocol):
    """Protocol for all blame sources.

    The @runtime_checkable decorator enables isinstance() checks without
    explicit inheritance.

    Error Handling Contract:
    - PathNotFoundError: Path absent at the revision (expected, skipped)
    - BlameTimeoutError: Blame took too long (unexpected, skipped)
    - BlameParseError: Malformed blame output (unexpected, skipped)
    - RepositoryUnavailableError: Revision or repository unusable (fatal)
    """

    @property
    def source_name(self) -> str:
        """Unique identifier for this source (e.g., 'git')."""
        ...

    async def blame(self, path: str, revision: str) -> list[AttributionRecord]:
        """Return authorship evidence for ``path`` as of ``revision``.

        Args:
            path: Repository-relative file path.
            revision: Revision to blame against (branch, tag or sha).

        Returns:
            Attribution records, one per run of lines from the same commit.

        Raises:
            PathNotFoundError: If the path does not exist at the revision.
            BlameTimeoutError: If the blame does not finish in time.
            BlameParseError: If the blame output cannot be parsed.
            RepositoryUnavailableError: If the repository or revision is unusable.
        """
        ...


class BlameSourceError(Exception):
    """Base exception for per-path blame failures.

    None of these abort a run; the aggregator records the path as skipped.

    Attributes:
        source_name: The source that raised this error.
        message: Human-readable error description.
    """

    def __init__(self, source_name: str, message: str) -> None:
        self.source_name = source_name
        self.message = message
        super().__init__(f"[{source_name}] {message}")


class PathNotFoundError(BlameSourceError):
    """Raised when a path does not exist at the requested revision.

    This is an EXPECTED condition, e.g. a file added on the branch.
    """

    def __init__(self, source_name: str, path: str, revision: str) -> None:
        super().__init__(source_name, f"Path '{path}' not found at {revision}")
        self.path = path
        self.revision = revision


class BlameTimeoutError(BlameSourceError):
    """Raised when blaming a single path times out."""

    def __init__(
        self,
        source_name: str,
        path: str,
        timeout_seconds: float | None = None,
    ) -> None:
        msg = f"Blame of '{path}' timed out"
        if timeout_seconds is not None:
            msg = f"Blame of '{path}' timed out after {timeout_seconds}s"
        super().__init__(source_name, msg)
        self.path = path
        self.timeout_seconds = timeout_seconds


class BlameParseError(BlameSourceError):
    """Raised when blame output cannot be parsed.

    This typically indicates an unexpected tool version or corrupt output.
    """

    def __init__(self, source_name: str, details: str | None = None) -> None:
        msg = "Failed to parse blame output"
        if details:
            msg = f"Failed to parse blame output: {details}"
        super().__init__(source_name, msg)
        self.details = details


__all__ = [
    "BlameSource",
    "BlameSourceError",
    "PathNotFoundError",
    "BlameTimeoutError",
    "BlameParseError",
]
