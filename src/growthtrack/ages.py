"""
Age calculation and display helpers.

Dates are handled with date-only semantics: time of day and time zone of an
ISO-8601 instant are dropped before any arithmetic.
"""

from datetime import date
from typing import Optional, Union
import logging

import pandas as pd

from .config import (
    DATE_DISPLAY_FORMAT,
    DAYS_PER_MONTH,
    FALLBACK_AGE_IN_DAYS,
    MONTHS_PER_YEAR,
)

DateLike = Union[str, date, pd.Timestamp]


def parse_date(value: DateLike) -> Optional[pd.Timestamp]:
    """
    Parse an ISO-8601 date or instant to a midnight Timestamp.

    Returns:
        Naive Timestamp at midnight of the written calendar date, or None if
        the value cannot be parsed.
    """
    try:
        ts = pd.to_datetime(value, format="ISO8601", errors="coerce")
    except (TypeError, ValueError):
        return None
    if not isinstance(ts, pd.Timestamp) or pd.isna(ts):
        return None
    if ts.tzinfo is not None:
        ts = ts.tz_localize(None)
    return ts.normalize()


def calculate_age_in_days(birth_date: DateLike, measurement_date: DateLike) -> int:
    """
    Whole days from birth date to measurement date.

    The result is negative when the measurement precedes the birth date.
    If either date cannot be parsed, 0 is returned; that is a fallback, not
    a newborn age, so callers must validate date format separately.
    """
    birth = parse_date(birth_date)
    measurement = parse_date(measurement_date)
    if birth is None or measurement is None:
        logging.warning(
            f"Invalid date format (birth={birth_date!r}, measurement={measurement_date!r}) - age set to {FALLBACK_AGE_IN_DAYS}"
        )
        return FALLBACK_AGE_IN_DAYS
    return int((measurement - birth).days)


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}{'' if count == 1 else 's'}"


def format_age(age_in_days: int) -> str:
    """
    Human-readable age: "15 days", "1 month", "2m 10d", "1 year", "1y 3m".

    Months are counted as whole DAYS_PER_MONTH blocks and years as twelve of
    those, so long ages drift from the calendar. Negative ages read "0 days".
    """
    if age_in_days < 0:
        return "0 days"
    days_total = int(age_in_days)
    if days_total < DAYS_PER_MONTH:
        return _plural(days_total, "day")

    months, days = divmod(days_total, DAYS_PER_MONTH)
    if months < MONTHS_PER_YEAR:
        if days == 0:
            return _plural(months, "month")
        return f"{months}m {days}d"

    years, months = divmod(months, MONTHS_PER_YEAR)
    if months == 0:
        return _plural(years, "year")
    return f"{years}y {months}m"


def format_date(date_string: DateLike) -> str:
    """Display form of a date, e.g. "Jan 05, 2024"; unparseable input is returned as-is."""
    ts = parse_date(date_string)
    if ts is None:
        return date_string
    return ts.strftime(DATE_DISPLAY_FORMAT)
