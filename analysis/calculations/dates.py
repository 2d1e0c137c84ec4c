"""
Date coercion helpers shared by the time-based calculations.
Accepts date, datetime, pandas.Timestamp or ISO strings.
"""

import pandas as pd
from datetime import date, datetime
from typing import Union

from analysis.errors import InvalidInputError

DateLike = Union[date, datetime, pd.Timestamp, str]

SECONDS_PER_DAY = 86400.0


def to_timestamp(value: DateLike) -> pd.Timestamp:
    """
    Convert a date-like value to a naive pandas Timestamp.

    Timezone-aware values are converted to UTC first so that aware and naive
    inputs can be compared.

    Raises:
        InvalidInputError: If the value is missing or cannot be parsed
    """
    if value is None:
        raise InvalidInputError("Date is required")

    try:
        ts = pd.Timestamp(value)
    except (ValueError, TypeError) as e:
        raise InvalidInputError(f"Invalid date: {value!r} ({e})")

    if pd.isna(ts):
        raise InvalidInputError(f"Invalid date: {value!r}")

    if ts.tzinfo is not None:
        ts = ts.tz_convert('UTC').tz_localize(None)

    return ts


def days_between(start: DateLike, end: DateLike) -> float:
    """Fractional days from start to end (negative if end is earlier)."""
    delta = to_timestamp(end) - to_timestamp(start)
    return delta.total_seconds() / SECONDS_PER_DAY


def calendar_days_between(start: DateLike, end: DateLike) -> int:
    """Whole calendar days from start's date to end's date."""
    return (to_timestamp(end).normalize() - to_timestamp(start).normalize()).days
