"""
Civil date handling in the fixed business timezone (America/Sao_Paulo).

A "YYYY-MM-DD" string is a civil calendar day, not an instant. There are
three distinct ways to turn one into a date object and they must stay
separate:

* ``parse_local_date`` - the civil day itself; use it for weekday math.
* ``parse_date_to_utc_midnight`` - 00:00 UTC; matches date-only columns
  as the database stores them.
* ``parse_date_as_business_noon`` - 12:00 UTC; an instant that is still the
  same civil day when rendered in the business timezone.

``business_now`` is the only place the wall clock is read. Every function
that depends on "now" takes an optional ``now`` so callers and tests can
pin the instant.
"""

from datetime import date as date_type
from datetime import datetime
from typing import List, Optional, Union

import pendulum
from pendulum import Date, DateTime

from .time_utils import parse_time_to_minutes

BUSINESS_TIMEZONE = "America/Sao_Paulo"

MINUTES_PER_DAY = 24 * 60

DateLike = Union[str, date_type, datetime]


def business_now() -> DateTime:
    """Current instant in the business timezone."""
    return pendulum.now(BUSINESS_TIMEZONE)


def _business_clock(now: Optional[datetime]) -> DateTime:
    if now is None:
        return business_now()
    return pendulum.instance(now).in_timezone(BUSINESS_TIMEZONE)


def _split_date(date_str: str) -> tuple[int, int, int]:
    year, month, day = date_str.split("T")[0].split("-")
    return int(year), int(month), int(day)


def parse_local_date(date_str: str) -> Date:
    """Parse "YYYY-MM-DD" as a civil date, independent of any timezone."""
    return pendulum.date(*_split_date(date_str))


def parse_date_to_utc_midnight(date_str: str) -> DateTime:
    """Parse "YYYY-MM-DD" as 00:00 UTC, the shape of persisted date-only values."""
    year, month, day = _split_date(date_str)
    return pendulum.datetime(year, month, day, tz="UTC")


def parse_date_as_business_noon(date_str: str) -> DateTime:
    """
    Parse "YYYY-MM-DD" as 12:00 UTC.

    Noon UTC stays on the same civil day when shown in the business
    timezone, whatever timezone the host runs in.
    """
    year, month, day = _split_date(date_str)
    return pendulum.datetime(year, month, day, 12, tz="UTC")


def format_date(value: date_type) -> str:
    """Format a civil date as "YYYY-MM-DD"."""
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def format_db_date(value: datetime) -> str:
    """Format a persisted date-only value (UTC midnight) using its UTC components."""
    return pendulum.instance(value).in_timezone("UTC").to_date_string()


def to_business_date(value: DateLike) -> Date:
    """
    Resolve a string, date or instant to a civil day in the business timezone.

    Plain dates and strings are already civil days; instants are converted.
    """
    if isinstance(value, str):
        return parse_local_date(value)
    if isinstance(value, datetime):
        local = pendulum.instance(value).in_timezone(BUSINESS_TIMEZONE)
        return pendulum.date(local.year, local.month, local.day)
    return pendulum.date(value.year, value.month, value.day)


def day_of_week(value: DateLike) -> int:
    """Weekday of a civil day with 0=Sunday ... 6=Saturday (the persisted convention)."""
    return to_business_date(value).isoweekday() % 7


def days_in_month(year: int, month: int) -> int:
    return pendulum.date(year, month, 1).days_in_month


def iter_month_dates(year: int, month: int) -> List[Date]:
    """Every civil day of the given month, in order."""
    return [pendulum.date(year, month, day) for day in range(1, days_in_month(year, month) + 1)]


def month_bounds(year: int, month: int) -> tuple[str, str]:
    """First and last day of the month as "YYYY-MM-DD" strings."""
    dates = iter_month_dates(year, month)
    return format_date(dates[0]), format_date(dates[-1])


def get_business_date_string(now: Optional[datetime] = None) -> str:
    """Today's civil date in the business timezone."""
    return _business_clock(now).to_date_string()


def get_business_today(now: Optional[datetime] = None) -> Date:
    clock = _business_clock(now)
    return pendulum.date(clock.year, clock.month, clock.day)


def get_current_time_in_minutes(now: Optional[datetime] = None) -> int:
    """Current minute of the day in the business timezone."""
    clock = _business_clock(now)
    return clock.hour * 60 + clock.minute


def get_today_utc_midnight(now: Optional[datetime] = None) -> DateTime:
    """Today's business date as 00:00 UTC, for comparing against date-only columns."""
    return parse_date_to_utc_midnight(get_business_date_string(now))


def is_today(value: DateLike, now: Optional[datetime] = None) -> bool:
    """Check whether ``value`` is today's civil date in the business timezone."""
    return to_business_date(value) == get_business_today(now)


def get_minutes_until_appointment(
    date_value: DateLike,
    start_time: str,
    now: Optional[datetime] = None,
) -> int:
    """
    Minutes from now until ``start_time`` on ``date_value``.

    Negative once the start has passed. Works across day and month
    boundaries (23:30 on Jan 31 to 00:30 on Feb 1 is 60 minutes).
    """
    day_offset = to_business_date(date_value).toordinal() - get_business_today(now).toordinal()
    return (
        day_offset * MINUTES_PER_DAY
        + parse_time_to_minutes(start_time)
        - get_current_time_in_minutes(now)
    )


def is_date_time_in_past(
    date_value: DateLike,
    time_str: str,
    now: Optional[datetime] = None,
) -> bool:
    """
    Check whether a date/time has already passed in the business timezone.

    A start time equal to the current minute counts as past.
    """
    target = to_business_date(date_value)
    today = get_business_today(now)

    if target < today:
        return True
    if target > today:
        return False
    return parse_time_to_minutes(time_str) <= get_current_time_in_minutes(now)
