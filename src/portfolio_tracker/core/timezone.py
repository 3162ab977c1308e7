"""Timezone utilities for Indian market time (Asia/Kolkata)."""

from datetime import date, datetime
from typing import Optional, Union

import pytz
from dateutil import parser as date_parser

IST_TZ = pytz.timezone("Asia/Kolkata")


def now_ist() -> datetime:
    """Return current time in Asia/Kolkata timezone."""
    return datetime.now(IST_TZ)


def today_ist() -> date:
    """Return the current calendar date in Asia/Kolkata."""
    return now_ist().date()


def to_ist(dt: datetime) -> datetime:
    """Convert a datetime to Asia/Kolkata timezone."""
    if dt.tzinfo is None:
        # Assume naive datetime is already IST
        return IST_TZ.localize(dt)
    return dt.astimezone(IST_TZ)


def parse_datetime_ist(value: str, default_tz: Optional[pytz.BaseTzInfo] = None) -> datetime:
    """
    Parse a datetime string and return it in Asia/Kolkata timezone.

    If no timezone is provided in the string, assumes IST.
    """
    dt = date_parser.parse(value)
    if dt.tzinfo is None:
        tz = default_tz or IST_TZ
        dt = tz.localize(dt)
    return to_ist(dt)


def parse_provider_date(value: Union[str, date, datetime], dayfirst: bool = False) -> date:
    """
    Parse a date coming from an external provider into an IST calendar date.

    Accepts ISO strings, timestamps with offsets ("2024-01-03T00:00:00+05:30"),
    day-first strings ("03-01-2024" with dayfirst=True) and date objects.
    """
    if isinstance(value, datetime):
        return to_ist(value).date()
    if isinstance(value, date):
        return value
    if dayfirst:
        return date_parser.parse(value, dayfirst=True).date()
    return parse_datetime_ist(value).date()
