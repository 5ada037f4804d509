"""
Calendar helpers shared by date rules and derived record values.
"""

from datetime import date, datetime

from dateutil.relativedelta import relativedelta


def shift_years(value: date, years: int) -> date:
    """
    Move a date by a whole number of years.

    February 29 falls back to February 28 when the target year is not a leap year.

    Args:
        value: Date (or datetime) to shift
        years: Years to add (negative to subtract)

    Returns:
        The shifted date, same type as the input
    """
    return value + relativedelta(years=years)


def whole_years_between(start: date, end: date) -> int:
    """
    Count complete years from start to end (0 when end precedes start).

    Args:
        start: Earlier date
        end: Later date

    Returns:
        Number of full years elapsed
    """
    if end < start:
        return 0
    return relativedelta(end, start).years


def as_date(value: date | datetime) -> date:
    """Drop the time component of a datetime, pass dates through."""
    if isinstance(value, datetime):
        return value.date()
    return value


def comparable(value: date | datetime, now: datetime) -> tuple[date | datetime, date | datetime]:
    """
    Align a field value with the validation instant so the two can be compared.

    Dates are compared against today's date. Datetimes are compared against the
    instant itself, converting the instant when only one side is timezone-aware.

    Args:
        value: Field value
        now: Validation instant

    Returns:
        Tuple (value, reference) of mutually comparable objects
    """
    if not isinstance(value, datetime):
        return value, now.date()
    if value.tzinfo is not None and now.tzinfo is None:
        return value, now.astimezone()
    if value.tzinfo is None and now.tzinfo is not None:
        return value, now.replace(tzinfo=None)
    return value, now
