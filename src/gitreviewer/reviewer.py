"""End-to-end reviewer suggestion for the current branch.

Glues the git repository helpers, path filtering and mailmap loading to
the attribution engine. Shared by the CLI and the MCP server.
"""

import logging
from collections.abc import Sequence
from datetime import datetime
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from gitreviewer.attribution import AttributionEngine, IdentityAliasTable
from gitreviewer.config import Settings, get_settings
from gitreviewer.errors import BranchBehindError, ConfigurationError, NoChangedFilesError
from gitreviewer.mailmap import build_alias_table, default_mailmap_paths
from gitreviewer.models import RankedStats
from gitreviewer.pathfilter import PathFilter
from gitreviewer.sincedate import parse_since
from gitreviewer.sources.git import GitRepository

logger = logging.getLogger(__name__)


class ReviewSuggestion(BaseModel):
    """Reviewer ranking together with the files it was computed from."""

    model_config = ConfigDict(str_strip_whitespace=True)

    base: str
    files: list[str] = Field(default_factory=list)
    ranking: RankedStats
    branch_behind: bool = False


async def load_aliases(repo: GitRepository, settings: Settings) -> IdentityAliasTable:
    """Build the alias table: global mailmap, project mailmaps, configured extras."""
    global_mailmap = await repo.config_value("mailmap.file")
    paths = default_mailmap_paths(repo.path, global_mailmap, settings.mailmap_files)
    aliases = build_alias_table(paths)
    logger.debug(f"Alias table has {len(aliases)} entr(ies) from {len(paths)} location(s)")
    return aliases


def build_path_filter(
    settings: Settings,
    ignored_extensions: Sequence[str] | None = None,
    only_extensions: Sequence[str] | None = None,
    ignored_paths: Sequence[str] | None = None,
    only_paths: Sequence[str] | None = None,
) -> PathFilter:
    """Combine configured filters with per-call ones."""
    return PathFilter(
        ignored_extensions=[*settings.ignored_extensions, *(ignored_extensions or [])],
        only_extensions=[*settings.only_extensions, *(only_extensions or [])],
        ignored_paths=[*settings.ignored_paths, *(ignored_paths or [])],
        only_paths=[*settings.only_paths, *(only_paths or [])],
    )


async def suggest_reviewers(
    repo_path: Path | str = ".",
    since: str | datetime | None = None,
    top_n: int | None = None,
    base: str | None = None,
    force: bool = False,
    ignored_extensions: Sequence[str] | None = None,
    only_extensions: Sequence[str] | None = None,
    ignored_paths: Sequence[str] | None = None,
    only_paths: Sequence[str] | None = None,
    settings: Settings | None = None,
) -> ReviewSuggestion:
    """Suggest reviewers for the branch checked out at ``repo_path``.

    Args:
        repo_path: Any directory inside the repository.
        since: ``YYYY-MM-DD`` cut-off; defaults to the configured window.
        top_n: Number of reviewers; defaults to ``settings.top_n``.
        base: Base branch; defaults to ``settings.base_branch``.
        force: Continue even when the branch is behind its base.
        ignored_extensions: Extra extensions to skip.
        only_extensions: Only consider these extensions.
        ignored_paths: Extra path prefixes to skip.
        only_paths: Only consider these path prefixes.
        settings: Optional Settings instance.

    Returns:
        ReviewSuggestion with the changed files and the ranking.

    Raises:
        ConfigurationError: Malformed since date or negative top_n.
        RepositoryUnavailableError: Not a repository, or base does not resolve.
        BranchBehindError: HEAD is older than base and ``force`` is False.
        NoChangedFilesError: No changed files left after filtering.
        NoAttributableDataError: No attributable lines in the window.
    """
    settings = settings or get_settings()

    # Input problems surface before any git command runs
    cutoff = parse_since(since, months=settings.default_window_months)
    top_n = settings.top_n if top_n is None else top_n
    if top_n < 0:
        raise ConfigurationError(f"top_n must be >= 0, got {top_n}", value=top_n)
    base = base or settings.base_branch

    probe = GitRepository(repo_path, git_binary=settings.git_binary, timeout=settings.blame_timeout)
    root = await probe.toplevel()
    repo = GitRepository(root, git_binary=settings.git_binary, timeout=settings.blame_timeout)
    await repo.resolve(base)

    behind = await repo.branch_behind(base)
    if behind:
        if not force:
            raise BranchBehindError(base)
        logger.warning(f"Current branch is behind {base}; continuing because force is set")

    changed = await repo.changed_paths(base)
    path_filter = build_path_filter(
        settings,
        ignored_extensions=ignored_extensions,
        only_extensions=only_extensions,
        ignored_paths=ignored_paths,
        only_paths=only_paths,
    )
    files = path_filter.apply(changed)
    logger.info(f"{len(changed)} changed path(s), {len(files)} after filtering")
    if not files:
        raise NoChangedFilesError(base)

    aliases = await load_aliases(repo, settings)
    engine = AttributionEngine(
        repo.blame_source(),
        aliases=aliases,
        max_concurrency=settings.max_concurrency or None,
    )
    ranking = await engine.run(files, since=cutoff, top_n=top_n, revision=base)

    return ReviewSuggestion(base=base, files=files, ranking=ranking, branch_behind=behind)


__all__ = [
    "ReviewSuggestion",
    "build_path_filter",
    "load_aliases",
    "suggest_reviewers",
]
