"""Contribution attribution engine.

Canonicalizes contributor identities, aggregates blame evidence into
per-contributor line counts, normalizes them into ownership scores and
selects the top reviewers.
"""

from gitreviewer.attribution.aggregator import (
    AggregationResult,
    AttributionAggregator,
    ContributionTotals,
    aggregate,
)
from gitreviewer.attribution.engine import DEFAULT_TOP_N, AttributionEngine, run
from gitreviewer.attribution.identity import (
    IdentityAliasTable,
    canonicalize,
    contributor_key,
)
from gitreviewer.attribution.normalizer import normalize
from gitreviewer.attribution.topn import BoundedMinHeap, select_top_n

__all__ = [
    # Aggregator exports
    "AggregationResult",
    "AttributionAggregator",
    "ContributionTotals",
    "aggregate",
    # Engine exports
    "DEFAULT_TOP_N",
    "AttributionEngine",
    "run",
    # Identity exports
    "IdentityAliasTable",
    "canonicalize",
    "contributor_key",
    # Scoring exports
    "normalize",
    "BoundedMinHeap",
    "select_top_n",
]
