"""Since-date parser for the attribution window."""

import calendar
import re
from datetime import datetime, timezone

from gitreviewer.errors import ConfigurationError

# YYYY-MM-DD, nothing else
SINCE_PATTERN = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")

DEFAULT_WINDOW_MONTHS = 6


def months_before(moment: datetime, months: int) -> datetime:
    """Step a datetime back by whole calendar months.

    The day of month is clamped to the length of the target month, so
    2026-08-31 minus 6 months is 2026-02-28.

    Args:
        moment: Starting point.
        months: Number of months to step back (>= 0).

    Returns:
        Datetime with the same time of day and timezone as ``moment``.
    """
    if months < 0:
        raise ValueError(f"months must be >= 0, got {months}")

    month_index = moment.year * 12 + (moment.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def default_since(
    now: datetime | None = None,
    months: int = DEFAULT_WINDOW_MONTHS,
) -> datetime:
    """Default since cut-off: ``months`` before ``now`` (UTC)."""
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return months_before(now, months)


def parse_since(
    since: str | datetime | None,
    now: datetime | None = None,
    months: int = DEFAULT_WINDOW_MONTHS,
) -> datetime:
    """Resolve the since cut-off for a run.

    Args:
        since: Caller-supplied ``YYYY-MM-DD`` string, an already-built
            datetime, or None/empty for the default window.
        now: Reference time for the default window. Defaults to now (UTC).
        months: Length of the default window in months.

    Returns:
        Timezone-aware datetime. Parsed dates are midnight UTC.

    Raises:
        ConfigurationError: If ``since`` is not a valid ``YYYY-MM-DD`` date.
    """
    if isinstance(since, datetime):
        if since.tzinfo is None:
            return since.replace(tzinfo=timezone.utc)
        return since

    if since is None or not since.strip():
        return default_since(now, months)

    value = since.strip()
    if not SINCE_PATTERN.match(value):
        raise ConfigurationError(
            f"Invalid since date '{value}': expected format YYYY-MM-DD",
            value=since,
        )

    try:
        return datetime.strptime(value, "%Y-%m-%d").replace(tzinfo=timezone.utc)
    except ValueError as e:
        raise ConfigurationError(f"Invalid since date '{value}': {e}", value=since) from e


__all__ = ["DEFAULT_WINDOW_MONTHS", "default_since", "months_before", "parse_since"]
