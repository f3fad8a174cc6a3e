"""Attribution aggregation across the paths changed on a branch.

Blames every path concurrently, one task per path, and folds the resulting
attribution records into per-contributor line counts. All producers feed
a single asyncio.Queue; only the consumer draining that queue touches the
shared ContributionTotals.
"""

import asyncio
import contextlib
import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import datetime

from gitreviewer.attribution.identity import IdentityAliasTable, canonicalize
from gitreviewer.errors import NoAttributableDataError, RepositoryUnavailableError
from gitreviewer.models import AttributionRecord, ContributorIdentity
from gitreviewer.sincedate import parse_since
from gitreviewer.sources.base import BlameSource, BlameSourceError, PathNotFoundError

logger = logging.getLogger(__name__)


def _most_used(spellings: dict[str, int]) -> str:
    """Spelling with the most lines, ties going to the alphabetically first."""
    if not spellings:
        return ""
    return min(spellings, key=lambda s: (-spellings[s], s))


class ContributionTotals:
    """Per-contributor line counts plus the grand total.

    Buckets are keyed by ContributorIdentity.key. Every name seen for a
    bucket is counted, and every spelling of its email, so the display label
    can be picked deterministically: the most-used name and email as
    written, ties going to the alphabetically first.
    """

    def __init__(self) -> None:
        self._counts: dict[str, int] = {}
        self._names: dict[str, dict[str, int]] = {}
        self._emails: dict[str, dict[str, int]] = {}
        self.total = 0

    def add(self, identity: ContributorIdentity, lines: int) -> None:
        """Credit ``lines`` to ``identity`` and to the grand total."""
        if lines < 0:
            raise ValueError(f"line count must be >= 0, got {lines}")

        key = identity.key
        self._counts[key] = self._counts.get(key, 0) + lines
        names = self._names.setdefault(key, {})
        names[identity.name] = names.get(identity.name, 0) + lines
        if identity.email:
            emails = self._emails.setdefault(key, {})
            emails[identity.email] = emails.get(identity.email, 0) + lines
        self.total += lines

    @property
    def counts(self) -> dict[str, int]:
        """Copy of the bucket -> line count mapping."""
        return dict(self._counts)

    def count(self, key: str) -> int:
        return self._counts.get(key, 0)

    def label(self, key: str) -> str:
        """Display label (``"Name <email>"``) for a bucket."""
        return ContributorIdentity(
            name=_most_used(self._names.get(key, {})),
            email=_most_used(self._emails.get(key, {})),
        ).label

    def keys(self) -> list[str]:
        return list(self._counts)

    def __len__(self) -> int:
        return len(self._counts)

    def __contains__(self, key: object) -> bool:
        return key in self._counts

    def __repr__(self) -> str:
        return f"ContributionTotals(total={self.total}, counts={self._counts!r})"


@dataclass
class AggregationResult:
    """Outcome of one aggregation pass."""

    totals: ContributionTotals
    since: datetime
    paths: list[str] = field(default_factory=list)
    skipped: dict[str, str] = field(default_factory=dict)
    records_seen: int = 0
    records_filtered: int = 0

    @property
    def paths_attributed(self) -> list[str]:
        """Paths that were blamed successfully."""
        return [path for path in self.paths if path not in self.skipped]


@dataclass
class _PathFinished:
    """End-of-stream marker a producer sends for its path."""

    path: str
    reason: str | None = None
    fatal: RepositoryUnavailableError | None = None


class AttributionAggregator:
    """Fan-out/fan-in aggregation of blame evidence.

    Attributes:
        blame_source: Collaborator that produces AttributionRecords per path.
        aliases: Alias table used to canonicalize identities.
        max_concurrency: Upper bound on simultaneous blame calls. None or 0
            means one task per path with no bound.
    """

    def __init__(
        self,
        blame_source: BlameSource,
        aliases: IdentityAliasTable | None = None,
        max_concurrency: int | None = None,
    ) -> None:
        self._source = blame_source
        self._aliases = aliases or IdentityAliasTable()
        self._max_concurrency = max_concurrency

    async def aggregate(
        self,
        paths: Iterable[str],
        since: str | datetime | None = None,
        revision: str = "HEAD",
        now: datetime | None = None,
    ) -> AggregationResult:
        """Blame ``paths`` at ``revision`` and total lines per contributor.

        Args:
            paths: Repository-relative paths. Duplicates are blamed once.
            since: ``YYYY-MM-DD`` cut-off, datetime, or None for the default
                window. Records committed before it are discarded.
            revision: Revision handed to the blame source.
            now: Reference time for the default window.

        Returns:
            AggregationResult with totals and the skipped paths.

        Raises:
            ConfigurationError: If ``since`` is malformed (before any blame).
            RepositoryUnavailableError: If the blame source reports the
                repository or revision as unusable.
            NoAttributableDataError: If no lines were attributed at all.
        """
        cutoff = parse_since(since, now)
        unique_paths = list(dict.fromkeys(paths))
        result = AggregationResult(
            totals=ContributionTotals(),
            since=cutoff,
            paths=unique_paths,
        )

        logger.info(
            f"Aggregating attribution for {len(unique_paths)} path(s) "
            f"at {revision} since {cutoff.date().isoformat()}"
        )

        if unique_paths:
            await self._gather(unique_paths, revision, result)

        if result.totals.total == 0:
            raise NoAttributableDataError(cutoff, result.skipped)

        logger.info(
            f"Aggregation complete: {result.totals.total} lines across "
            f"{len(result.totals)} contributor(s), {len(result.skipped)} path(s) skipped"
        )
        return result

    async def _gather(
        self,
        paths: Sequence[str],
        revision: str,
        result: AggregationResult,
    ) -> None:
        queue: asyncio.Queue[AttributionRecord | _PathFinished] = asyncio.Queue()
        semaphore = asyncio.Semaphore(self._max_concurrency) if self._max_concurrency else None

        tasks = [
            asyncio.create_task(self._produce(path, revision, queue, semaphore))
            for path in paths
        ]
        try:
            await self._consume(queue, len(tasks), result)
        finally:
            for task in tasks:
                if not task.done():
                    task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)

    async def _produce(
        self,
        path: str,
        revision: str,
        queue: "asyncio.Queue[AttributionRecord | _PathFinished]",
        semaphore: asyncio.Semaphore | None,
    ) -> None:
        guard = semaphore if semaphore is not None else contextlib.nullcontext()
        try:
            async with guard:
                records = await self._source.blame(path, revision)
        except RepositoryUnavailableError as e:
            await queue.put(_PathFinished(path, fatal=e))
            return
        except PathNotFoundError as e:
            logger.info(f"Skipping {path}: {e.message}")
            await queue.put(_PathFinished(path, reason=e.message))
            return
        except BlameSourceError as e:
            logger.warning(f"Skipping {path}: {e}")
            await queue.put(_PathFinished(path, reason=e.message))
            return
        except Exception as e:
            logger.exception(f"Unexpected error blaming {path}")
            await queue.put(_PathFinished(path, reason=f"{type(e).__name__}: {e}"))
            return

        logger.debug(f"{path}: {len(records)} attribution record(s)")
        for record in records:
            await queue.put(record)
        await queue.put(_PathFinished(path))

    async def _consume(
        self,
        queue: "asyncio.Queue[AttributionRecord | _PathFinished]",
        producers: int,
        result: AggregationResult,
    ) -> None:
        pending = producers
        while pending:
            item = await queue.get()
            if isinstance(item, _PathFinished):
                pending -= 1
                if item.fatal is not None:
                    raise item.fatal
                if item.reason is not None:
                    result.skipped[item.path] = item.reason
                continue
            self._fold(item, result)

    def _fold(self, record: AttributionRecord, result: AggregationResult) -> None:
        result.records_seen += 1
        if record.commit_time < result.since:
            result.records_filtered += 1
            return

        identity = canonicalize(
            record.contributor_name,
            record.contributor_email,
            self._aliases,
        )
        result.totals.add(identity, record.line_count)


async def aggregate(
    paths: Iterable[str],
    since: str | datetime | None,
    blame_source: BlameSource,
    aliases: IdentityAliasTable | None = None,
    revision: str = "HEAD",
) -> AggregationResult:
    """Functional form of AttributionAggregator.aggregate."""
    aggregator = AttributionAggregator(blame_source, aliases)
    return await aggregator.aggregate(paths, since=since, revision=revision)


__all__ = [
    "AggregationResult",
    "AttributionAggregator",
    "ContributionTotals",
    "aggregate",
]
