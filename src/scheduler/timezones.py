"""
Timezone helpers: local clock readings and display strings for absolute instants
"""
from datetime import datetime, timezone as dt_timezone
from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dateutil import parser as dparse

from config.settings import Config


@lru_cache(maxsize=128)
def get_zone(timezone: str) -> ZoneInfo:
    return ZoneInfo(timezone)


def is_valid_timezone(timezone: str) -> bool:
    if not isinstance(timezone, str) or not timezone:
        return False
    try:
        get_zone(timezone)
        return True
    except (ZoneInfoNotFoundError, ValueError):
        return False


def to_local(instant: datetime, timezone: str) -> datetime:
    """Wall-clock reading of an aware instant in the given IANA zone"""
    return instant.astimezone(get_zone(timezone))


def local_minutes_of_day(instant: datetime, timezone: str) -> int:
    """Minutes since local midnight, using the UTC offset in force at that instant"""
    local = to_local(instant, timezone)
    return local.hour * 60 + local.minute


def _clock_label(local: datetime) -> str:
    hour = local.hour % 12 or 12
    suffix = "AM" if local.hour < 12 else "PM"
    return f"{hour}:{local.minute:02d} {suffix}"


def format_local_range(start: datetime, end: datetime, timezone: str) -> str:
    """e.g. "9:00 AM – 10:00 AM" in the given zone"""
    return f"{_clock_label(to_local(start, timezone))} – {_clock_label(to_local(end, timezone))}"


def format_local_range_long(start: datetime, end: datetime, timezone: str) -> str:
    """e.g. "Mon, Oct 19 · 9:00 AM — 10:00 AM" in the given zone"""
    local_start = to_local(start, timezone)
    local_end = to_local(end, timezone)
    date_label = f"{local_start.strftime('%a, %b')} {local_start.day}"
    return f"{date_label} · {_clock_label(local_start)} — {_clock_label(local_end)}"


def format_long_date(instant: datetime, timezone: str) -> str:
    """e.g. "Monday, October 19" in the given zone"""
    local = to_local(instant, timezone)
    return f"{local.strftime('%A, %B')} {local.day}"


def timezone_label(timezone: str) -> str:
    return Config.get_timezone_label(timezone)


def parse_instant(value) -> datetime:
    """Parse an ISO 8601 string (or datetime) into an aware UTC datetime"""
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = dparse.isoparse(str(value).strip())

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=dt_timezone.utc)
    return parsed.astimezone(dt_timezone.utc)


def to_iso_utc(instant: datetime) -> str:
    """ISO 8601 in UTC with a trailing Z"""
    return instant.astimezone(dt_timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.000Z")
