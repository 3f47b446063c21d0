"""
Settlement period arithmetic.

A period is a calendar month written as "YYYY-MM" and always denotes
the first day of that month. Elapsed months are anniversary based:
a month counts only once its day-of-month has been reached.
"""

import re
from datetime import date, datetime

from app.utils.datetime_utils import utc_now
from app.utils.exceptions import InvalidPeriodError

_PERIOD_RE = re.compile(r"^(\d{4})-(\d{2})$")


def parse_period(period: str) -> date:
    """
    Convert a period token to the first day of its month.

    Args:
        period: Period token ("YYYY-MM")

    Returns:
        First calendar day of the month

    Raises:
        InvalidPeriodError: Malformed token or month outside 1..12
    """
    if not isinstance(period, str):
        raise InvalidPeriodError(period)

    match = _PERIOD_RE.match(period)
    if not match:
        raise InvalidPeriodError(period)

    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12 or year < 1:
        raise InvalidPeriodError(period)

    return date(year, month, 1)


def format_period(value: date | datetime) -> str:
    """Format a date as its period token."""
    return f"{value.year:04d}-{value.month:02d}"


def months_elapsed(start: date | datetime, end: date | datetime) -> int:
    """
    Count full months between two moments.

    (y2 - y1) * 12 + (m2 - m1), minus one when the end day-of-month
    precedes the start day-of-month. Never negative.

    Args:
        start: Earlier moment (conversion time)
        end: Later moment (period date)

    Returns:
        Whole months elapsed, clamped to zero
    """
    months = (end.year - start.year) * 12 + (end.month - start.month)
    if end.day < start.day:
        months -= 1
    return max(months, 0)


def get_current_period(now: datetime | None = None) -> str:
    """Period token for the current UTC month."""
    now = now or utc_now()
    return format_period(now)


def get_previous_period(now: datetime | None = None) -> str:
    """
    Period token for the month before the current one.

    This is the period the monthly jobs settle by default.
    """
    now = now or utc_now()
    if now.month == 1:
        return f"{now.year - 1:04d}-12"
    return f"{now.year:04d}-{now.month - 1:02d}"


def is_in_period(moment: date | datetime, period: str) -> bool:
    """
    Check calendar-month membership.

    Args:
        moment: Date or datetime to test
        period: Period token ("YYYY-MM")

    Returns:
        True if moment falls in the period's month
    """
    start = parse_period(period)
    return moment.year == start.year and moment.month == start.month
