"""
Period resolution for time reports.

Turns a caller's period description into a concrete, inclusive [start, end]
instant range. `now` is always passed in so results are reproducible.

Two vocabularies exist:

- Time report: a day count ("7", "30") meaning the last N days ending at the
  current instant, or "this-month"; explicit start+end override both.
- Timesheet: "this-week", "this-month", "last-month", "this-year", "custom";
  explicit startDate/endDate override the matching bound, with endDate
  extended to the last millisecond of its day.

The day-count form ends at the literal current instant while the calendar
tokens snap to day boundaries. Both behaviours are kept as-is because
changing either would alter reported totals.
"""

import calendar
import re
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta, tzinfo
from enum import StrEnum

from ..errors import InvalidDateFormat
from ..models.base import ensure_aware

DEFAULT_PERIOD_DAYS = 7
# Largest day count a timedelta can hold
MAX_PERIOD_DAYS = timedelta.max.days
THIS_MONTH = "this-month"

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


class TimeRange(StrEnum):
    """Named ranges accepted by the timesheet."""

    THIS_WEEK = "this-week"
    THIS_MONTH = "this-month"
    LAST_MONTH = "last-month"
    THIS_YEAR = "this-year"
    CUSTOM = "custom"


@dataclass(frozen=True)
class DateRange:
    """
    Inclusive instant range. A missing bound means "no limit on that side";
    a range with neither bound admits everything.
    """

    start: datetime | None = None
    end: datetime | None = None

    @property
    def is_bounded(self) -> bool:
        return self.start is not None or self.end is not None

    def contains(self, instant: datetime) -> bool:
        """True when start <= instant <= end for whichever bounds are set."""
        instant = ensure_aware(instant)
        if self.start is not None and instant < self.start:
            return False
        if self.end is not None and instant > self.end:
            return False
        return True


UNBOUNDED = DateRange()


# =============================================================================
# Calendar helpers
# =============================================================================


def start_of_day(dt: datetime) -> datetime:
    return dt.replace(hour=0, minute=0, second=0, microsecond=0)


def end_of_day(dt: datetime) -> datetime:
    """Last millisecond of dt's day (23:59:59.999)."""
    return dt.replace(hour=23, minute=59, second=59, microsecond=999000)


def start_of_month(dt: datetime) -> datetime:
    return start_of_day(dt.replace(day=1))


def end_of_month(dt: datetime) -> datetime:
    last_day = calendar.monthrange(dt.year, dt.month)[1]
    return end_of_day(dt.replace(day=last_day))


def start_of_week(dt: datetime) -> datetime:
    """Sunday 00:00 of dt's week."""
    days_since_sunday = (dt.weekday() + 1) % 7
    return start_of_day(dt - timedelta(days=days_since_sunday))


def start_of_previous_month(dt: datetime) -> datetime:
    first = start_of_month(dt)
    return start_of_month(first - timedelta(days=1))


# =============================================================================
# Parsing
# =============================================================================


def parse_date_param(field: str, value: str, tz: tzinfo = UTC) -> datetime:
    """
    Parse a request date string.

    Date-only values ("2024-05-01") are midnight in `tz`; datetimes without
    an offset are also read in `tz`.

    Raises:
        InvalidDateFormat: when the value is not an ISO date or datetime.
    """
    text = value.strip()
    try:
        if len(text) == 10 and "T" not in text and " " not in text:
            parsed = datetime.strptime(text, "%Y-%m-%d")
        else:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        raise InvalidDateFormat(field, value) from None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=tz)
    return parsed


def parse_period_days(period: str | None, default: int = DEFAULT_PERIOD_DAYS) -> int:
    """
    Read a day count from the start of `period`.

    Anything that does not begin with a non-zero integer falls back to
    `default`. Counts are clamped to what a timedelta can hold.

    >>> parse_period_days("30")
    30
    >>> parse_period_days("14d")
    14
    >>> parse_period_days("week")
    7
    """
    if not period:
        return default
    match = _LEADING_INT.match(period)
    if not match:
        return default
    digits = match.group(1)
    try:
        days = int(digits)
    except ValueError:
        # past the interpreter's int conversion limit
        days = -MAX_PERIOD_DAYS if digits.startswith("-") else MAX_PERIOD_DAYS
    days = max(-MAX_PERIOD_DAYS, min(days, MAX_PERIOD_DAYS))
    return days or default


def _present(value: str | None) -> bool:
    return value is not None and value.strip() != ""


def _days_back(now: datetime, days: int) -> datetime | None:
    """
    Start of the N-day window ending at `now`.

    A window reaching past the first representable date has no lower bound;
    a negative count that runs past the last one starts after every instant.
    """
    try:
        return now - timedelta(days=days - 1)
    except OverflowError:
        if days > 0:
            return None
        return datetime.max.replace(tzinfo=UTC)


# =============================================================================
# Resolvers
# =============================================================================


def resolve_report_period(
    period: str | None,
    start: str | None = None,
    end: str | None = None,
    *,
    now: datetime,
    tz: tzinfo = UTC,
    default_days: int = DEFAULT_PERIOD_DAYS,
) -> DateRange:
    """
    Resolve the time-report period.

    Args:
        period: Day count string or "this-month"; None with no dates means
            no filtering at all.
        start, end: Explicit bounds, used verbatim when both are given.
        now: Reference instant.
        tz: Zone used for calendar boundaries and zone-less dates.
        default_days: Day count for unparseable or zero periods.
    """
    if _present(start) and _present(end):
        return DateRange(parse_date_param("start", start, tz), parse_date_param("end", end, tz))

    if period is None or period.strip() == "":
        return UNBOUNDED

    local_now = ensure_aware(now).astimezone(tz)
    if period.strip() == THIS_MONTH:
        return DateRange(start_of_month(local_now), end_of_month(local_now))

    days = parse_period_days(period, default_days)
    return DateRange(_days_back(local_now, days), local_now)


def resolve_timesheet_range(
    time_range: str | None,
    start_date: str | None = None,
    end_date: str | None = None,
    *,
    now: datetime,
    tz: tzinfo = UTC,
) -> DateRange:
    """
    Resolve the timesheet range.

    Args:
        time_range: One of TimeRange values, or None.
        start_date: Overrides the lower bound when present.
        end_date: Overrides the upper bound when present, extended to 23:59:59.999.
        now: Reference instant.
        tz: Zone used for calendar boundaries and zone-less dates.
    """
    local_now = ensure_aware(now).astimezone(tz)
    start: datetime | None = None
    end: datetime | None = None

    if time_range:
        token = TimeRange(time_range)
        if token is TimeRange.THIS_WEEK:
            start, end = start_of_week(local_now), local_now
        elif token is TimeRange.THIS_MONTH:
            start, end = start_of_month(local_now), end_of_month(local_now)
        elif token is TimeRange.LAST_MONTH:
            previous = start_of_previous_month(local_now)
            start, end = previous, end_of_month(previous)
        elif token is TimeRange.THIS_YEAR:
            start, end = start_of_day(local_now.replace(month=1, day=1)), local_now

    if _present(start_date):
        start = parse_date_param("startDate", start_date, tz)
    if _present(end_date):
        end = end_of_day(parse_date_param("endDate", end_date, tz))

    return DateRange(start, end)
