"""
Calendar Datetime Utilities

- parse_google_calendar_datetime: Parse a Google Calendar start/end dict
- parse_rfc3339: Parse API timestamps such as watch expiry and publish times
- to_utc_iso: Convert a datetime to a UTC ISO-8601 string for the API
- add_years: Shift a datetime by whole calendar years
- format_event_time_range: Human readable "<weekday>, <month> <day>, HH:MM - HH:MM"
"""

import re
from datetime import datetime
from typing import Optional

import pytz


def get_timezone(name: str):
    """Return the pytz timezone for name, falling back to UTC."""
    try:
        return pytz.timezone(name)
    except pytz.UnknownTimeZoneError:
        return pytz.UTC


def parse_google_calendar_datetime(date_dict: dict, tz_name: Optional[str] = None) -> datetime:
    """
    Parse Google Calendar datetime format to an aware datetime.

    Args:
        date_dict: Google Calendar {'dateTime': ...} or {'date': ...} dict
        tz_name: Timezone for all-day dates (defaults to the dict's timeZone, then UTC)

    Returns:
        Timezone-aware datetime
    """
    if 'dateTime' in date_dict:
        dt_str = date_dict['dateTime']
        dt = datetime.fromisoformat(dt_str.replace('Z', '+00:00'))
        if dt.tzinfo is None:
            dt = get_timezone(date_dict.get('timeZone') or tz_name or 'UTC').localize(dt)
        return dt
    if 'date' in date_dict:
        # All-day event: midnight in the event's timezone
        dt = datetime.strptime(date_dict['date'], "%Y-%m-%d")
        return get_timezone(date_dict.get('timeZone') or tz_name or 'UTC').localize(dt)
    raise ValueError(f"Unrecognized calendar datetime: {date_dict!r}")


def parse_rfc3339(value: str) -> datetime:
    """
    Parse an RFC 3339 timestamp into an aware datetime.

    Google APIs send anywhere from zero to nine fractional digits; the
    fraction is normalized to microseconds.
    """
    value = re.sub(r"\.(\d+)", lambda m: "." + m.group(1)[:6].ljust(6, "0"), value.strip())
    dt = datetime.fromisoformat(value.replace('Z', '+00:00'))
    if dt.tzinfo is None:
        dt = pytz.UTC.localize(dt)
    return dt


def to_utc_iso(dt: datetime) -> str:
    """
    Convert a datetime to UTC ISO format for the Google Calendar API.

    Naive datetimes are taken to be UTC already.
    """
    if dt.tzinfo is None:
        dt = pytz.UTC.localize(dt)
    return dt.astimezone(pytz.UTC).isoformat().replace('+00:00', 'Z')


def add_years(dt: datetime, years: int) -> datetime:
    """Same month, day and time `years` later; Feb 29 rolls over to Mar 1."""
    try:
        return dt.replace(year=dt.year + years)
    except ValueError:
        return dt.replace(year=dt.year + years, month=3, day=1)


def format_event_time_range(start: datetime, end: datetime, tz_name: str) -> str:
    """
    Format an event's time range in the given timezone, 24-hour clock.

    Example: "Friday, March 7, 09:30 - 11:00"
    """
    tz = get_timezone(tz_name)
    start_local = start.astimezone(tz)
    end_local = end.astimezone(tz)
    return (
        f"{start_local.strftime('%A')}, {start_local.strftime('%B')} {start_local.day}, "
        f"{start_local.strftime('%H:%M')} - {end_local.strftime('%H:%M')}"
    )
