"""Attribution engine facade.

Sequences aggregation, normalization and top-N selection for one run.
Holds no state between runs.
"""

import logging
from collections.abc import Iterable
from datetime import datetime

from gitreviewer.attribution.aggregator import AttributionAggregator
from gitreviewer.attribution.identity import IdentityAliasTable
from gitreviewer.attribution.normalizer import normalize
from gitreviewer.attribution.topn import select_top_n
from gitreviewer.errors import ConfigurationError
from gitreviewer.models import RankedStats
from gitreviewer.sincedate import parse_since
from gitreviewer.sources.base import BlameSource

logger = logging.getLogger(__name__)

DEFAULT_TOP_N = 3


class AttributionEngine:
    """Rank contributors by ownership of a set of paths.

    Attributes:
        blame_source: Produces attribution records per path.
        aliases: Identity alias table for the run.
        max_concurrency: Bound on simultaneous blame calls (None = unbounded).
    """

    def __init__(
        self,
        blame_source: BlameSource,
        aliases: IdentityAliasTable | None = None,
        max_concurrency: int | None = None,
    ) -> None:
        self._aggregator = AttributionAggregator(
            blame_source,
            aliases=aliases,
            max_concurrency=max_concurrency,
        )

    async def run(
        self,
        paths: Iterable[str],
        since: str | datetime | None = None,
        top_n: int = DEFAULT_TOP_N,
        revision: str = "HEAD",
        now: datetime | None = None,
    ) -> RankedStats:
        """Rank the top contributors for ``paths``.

        Args:
            paths: Repository-relative paths changed on the branch.
            since: ``YYYY-MM-DD`` cut-off, datetime, or None for the default window.
            top_n: Number of reviewers to return (>= 0).
            revision: Revision to blame against.
            now: Reference time for the default window.

        Returns:
            RankedStats with at most ``top_n`` stats, descending by score.

        Raises:
            ConfigurationError: Malformed since date or negative top_n.
            RepositoryUnavailableError: Repository or revision unusable.
            NoAttributableDataError: Nothing attributable in the window.
        """
        if top_n < 0:
            raise ConfigurationError(f"top_n must be >= 0, got {top_n}", value=top_n)
        cutoff = parse_since(since, now)

        aggregation = await self._aggregator.aggregate(paths, since=cutoff, revision=revision)
        totals = aggregation.totals

        # Ties go to the alphabetically first reviewer, whatever order the
        # per-path tasks finished in.
        stats = normalize(totals)
        ranked = select_top_n(top_n, stats, tiebreak=lambda stat: stat.reviewer)

        logger.info(
            f"Ranked {len(ranked)} of {len(stats)} contributor(s) "
            f"over {totals.total} line(s)"
        )

        return RankedStats(
            stats=ranked,
            top_n=top_n,
            since=cutoff,
            total_lines=totals.total,
            contributors=len(stats),
            paths_considered=aggregation.paths,
            skipped=aggregation.skipped,
        )


async def run(
    paths: Iterable[str],
    since: str | datetime | None,
    blame_source: BlameSource,
    aliases: IdentityAliasTable | None = None,
    top_n: int = DEFAULT_TOP_N,
    revision: str = "HEAD",
) -> RankedStats:
    """Functional form of AttributionEngine.run."""
    engine = AttributionEngine(blame_source, aliases)
    return await engine.run(paths, since=since, top_n=top_n, revision=revision)


__all__ = ["DEFAULT_TOP_N", "AttributionEngine", "run"]
