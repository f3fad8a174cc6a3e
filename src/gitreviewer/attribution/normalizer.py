"""Convert accumulated line counts into ownership scores."""

from gitreviewer.attribution.aggregator import ContributionTotals
from gitreviewer.models import Stat


def normalize(totals: ContributionTotals) -> list[Stat]:
    """Score every contributor as their share of the grand total.

    Must run once, after every record of the run has been folded in, so all
    scores share the same denominator.

    Args:
        totals: Completed totals for one run.

    Returns:
        One Stat per contributor, in bucket discovery order.

    Raises:
        ValueError: If the grand total is zero.
    """
    if totals.total <= 0:
        raise ValueError("Cannot normalize contributions with a zero grand total")

    grand_total = float(totals.total)
    return [
        Stat(
            reviewer=totals.label(key),
            score=count / grand_total,
            lines=count,
        )
        for key, count in totals.counts.items()
    ]


__all__ = ["normalize"]
