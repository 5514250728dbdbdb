"""Human readable revision timestamps."""

from datetime import datetime, UTC
from zoneinfo import ZoneInfo

MINUTE_IN_SECONDS = 60
HOUR_IN_SECONDS = 60 * MINUTE_IN_SECONDS
DAY_IN_SECONDS = 24 * HOUR_IN_SECONDS
WEEK_IN_SECONDS = 7 * DAY_IN_SECONDS
MONTH_IN_SECONDS = 30 * DAY_IN_SECONDS
YEAR_IN_SECONDS = 365 * DAY_IN_SECONDS

_UNITS = (
    (HOUR_IN_SECONDS, MINUTE_IN_SECONDS, "min", "mins"),
    (DAY_IN_SECONDS, HOUR_IN_SECONDS, "hour", "hours"),
    (WEEK_IN_SECONDS, DAY_IN_SECONDS, "day", "days"),
    (MONTH_IN_SECONDS, WEEK_IN_SECONDS, "week", "weeks"),
    (YEAR_IN_SECONDS, MONTH_IN_SECONDS, "month", "months"),
)


def _aware(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; they are stored as UTC
    return value if value.tzinfo else value.replace(tzinfo=UTC)


def _round_half_up(value: float) -> int:
    return int(value + 0.5)


def human_time_diff(start: datetime, end: datetime | None = None) -> str:
    """Describe the distance between two datetimes, e.g. ``"5 mins"`` or ``"2 weeks"``.

    The result is never smaller than one unit, so anything under a minute
    reads as ``"1 min"``.
    """
    if end is None:
        end = datetime.now(UTC)
    start, end = _aware(start), _aware(end)
    diff = abs((end - start).total_seconds())

    for limit, unit, singular, plural in _UNITS:
        if diff < limit:
            count = max(_round_half_up(diff / unit), 1)
            return f"{count} {singular if count == 1 else plural}"

    years = max(_round_half_up(diff / YEAR_IN_SECONDS), 1)
    return f"{years} {'year' if years == 1 else 'years'}"


def format_revision_date(value: datetime, timezone: str = "UTC") -> str:
    """Format a timestamp as ``"Oct 9 @ 14:05"`` in the given timezone."""
    local = _aware(value).astimezone(ZoneInfo(timezone))
    return f"{local:%b} {local.day} @ {local:%H:%M}"
