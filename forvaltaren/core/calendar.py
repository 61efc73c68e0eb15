"""Date helpers evaluated in the landlord-facing reference time zone.

Instants are stored as naive UTC (see ``models.base.utcnow``). Calendar
questions such as "which month is this" or "is this lease active today"
are answered in the reference zone and converted back to naive UTC
before they reach a query.
"""

from datetime import date, datetime, time, timedelta, timezone
from functools import lru_cache
from zoneinfo import ZoneInfo

from forvaltaren.core.config import get_settings


@lru_cache
def reference_zone() -> ZoneInfo:
    return ZoneInfo(get_settings().reference_timezone)


def to_local(instant: datetime, tz: ZoneInfo | None = None) -> datetime:
    """Naive UTC (or aware) instant -> aware local datetime."""
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(tz or reference_zone())


def to_utc_naive(local: datetime) -> datetime:
    return local.astimezone(timezone.utc).replace(tzinfo=None)


def local_today(now: datetime, tz: ZoneInfo | None = None) -> date:
    return to_local(now, tz).date()


def local_midnight(day: date, tz: ZoneInfo | None = None) -> datetime:
    """First instant of ``day`` in the reference zone, as naive UTC."""
    return to_utc_naive(datetime.combine(day, time.min, tzinfo=tz or reference_zone()))


def month_window(now: datetime, tz: ZoneInfo | None = None) -> tuple[datetime, datetime]:
    """(first local midnight, last local instant) of ``now``'s month, naive UTC.

    Offsets are resolved separately for each boundary, so a month that
    spans a DST change still starts at 00:00 and ends at 23:59:59.999999
    local time.
    """
    tz = tz or reference_zone()
    local = to_local(now, tz)
    first = date(local.year, local.month, 1)
    if local.month == 12:
        next_first = date(local.year + 1, 1, 1)
    else:
        next_first = date(local.year, local.month + 1, 1)
    start = local_midnight(first, tz)
    end = local_midnight(next_first, tz) - timedelta(microseconds=1)
    return start, end


def due_date_for(year: int, month: int, due_day: int) -> date:
    """Due date for a period. ``due_day`` is capped at 28 so February never overflows."""
    if not 1 <= due_day <= 28:
        raise ValueError("due_day must be between 1 and 28")
    return date(year, month, due_day)


def period_of(due_date: datetime, tz: ZoneInfo | None = None) -> tuple[int, int]:
    """(year, month) of the local calendar day a due date falls on."""
    local = to_local(due_date, tz)
    return local.year, local.month
