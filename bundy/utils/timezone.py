"""
Target time zone helpers.

All calendar bucketing (report dates, scheduler fire day, "last action today")
goes through these functions with an explicitly configured zone, never the
process-local one.
"""
import datetime
from typing import Tuple

import pytz

DATE_LABEL_FORMAT = '%d/%m/%Y'
DATE_KEY_FORMAT = '%Y-%m-%d'


def get_timezone(name: str):
    """Return the pytz zone for name (raises pytz.UnknownTimeZoneError)."""
    return pytz.timezone(name)


def utcnow() -> datetime.datetime:
    """Current instant as an aware UTC datetime"""
    return datetime.datetime.now(pytz.UTC)


def ensure_utc(instant: datetime.datetime) -> datetime.datetime:
    """Treat naive datetimes as UTC; convert aware ones to UTC."""
    if instant.tzinfo is None:
        return instant.replace(tzinfo=pytz.UTC)
    return instant.astimezone(pytz.UTC)


def to_local(instant: datetime.datetime, tz) -> datetime.datetime:
    return ensure_utc(instant).astimezone(tz)


def local_date(instant: datetime.datetime, tz) -> datetime.date:
    """Calendar date of an instant in the target zone"""
    return to_local(instant, tz).date()


def format_hhmm(instant: datetime.datetime, tz) -> str:
    """Zero-padded 24-hour time without separator, e.g. 0915"""
    return to_local(instant, tz).strftime('%H%M')


def format_date_label(day: datetime.date) -> str:
    """Day/month/year label used in report headers, e.g. 05/01/2024"""
    return day.strftime(DATE_LABEL_FORMAT)


def date_key(day: datetime.date) -> str:
    """YYYY-MM-DD key used by the scheduler flag and export file names"""
    return day.strftime(DATE_KEY_FORMAT)


def parse_date(value: str) -> datetime.date:
    return datetime.datetime.strptime(value, DATE_KEY_FORMAT).date()


def local_day_bounds(start_date: datetime.date, end_date: datetime.date,
                     tz) -> Tuple[datetime.datetime, datetime.datetime]:
    """
    Expand inclusive calendar bounds to UTC instants.

    The start becomes 00:00:00 of start_date and the end 23:59:59 of end_date,
    both interpreted in tz.
    """
    start_local = tz.localize(datetime.datetime.combine(start_date, datetime.time(0, 0, 0)))
    end_local = tz.localize(datetime.datetime.combine(end_date, datetime.time(23, 59, 59)))
    return start_local.astimezone(pytz.UTC), end_local.astimezone(pytz.UTC)


def format_clock_time(instant: datetime.datetime, tz) -> str:
    """12-hour time such as 9:05 am, as shown on the kiosk cards"""
    local = to_local(instant, tz)
    hour = local.hour % 12 or 12
    suffix = 'am' if local.hour < 12 else 'pm'
    return f"{hour}:{local.minute:02d} {suffix}"


def format_last_action(instant, now: datetime.datetime, tz) -> str:
    """
    Label for an employee's most recent entry.

    Returns an empty string when there is no entry. Entries from today (in tz)
    only show the time; older entries are prefixed with their date.
    """
    if instant is None:
        return ''
    time_str = format_clock_time(instant, tz)
    day = local_date(instant, tz)
    if day == local_date(now, tz):
        return f"Last action: {time_str}"
    return f"Last action: {format_date_label(day)} {time_str}"
