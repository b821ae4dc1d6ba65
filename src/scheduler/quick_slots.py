"""
Quick-schedule presets: prefilled slot sets that skip the availability search
"""
from datetime import date, datetime, time, timedelta, timezone as dt_timezone
from typing import Dict, List, Tuple

from src.scheduler.timezones import get_zone

COFFEE_CHAT_MINUTES = 30

QUICK_PRESETS = {
    "this-week": "Next 3 business days at 10 AM",
    "next-week": "Mon, Wed, Fri at 2 PM",
    "coffee-chat": "3 x 30-min slots in next 3 business days",
}


def next_business_days(count: int, start: date) -> List[date]:
    """The next `count` weekdays strictly after `start`"""
    days = []
    current = start + timedelta(days=1)
    while len(days) < count:
        if current.weekday() < 5:
            days.append(current)
        current += timedelta(days=1)
    return days


def _next_weekday(start: date, weekday: int) -> date:
    days_ahead = (weekday - start.weekday()) % 7
    return start + timedelta(days=days_ahead or 7)


def _at(day: date, hour: int, timezone: str, duration_minutes: int) -> Tuple[datetime, datetime]:
    start = datetime.combine(day, time(hour, 0), tzinfo=get_zone(timezone)).astimezone(dt_timezone.utc)
    return start, start + timedelta(minutes=duration_minutes)


def this_week_slots(today: date, timezone: str, duration_minutes: int) -> List[Tuple[datetime, datetime]]:
    return [_at(day, 10, timezone, duration_minutes) for day in next_business_days(3, today)]


def next_week_slots(today: date, timezone: str, duration_minutes: int) -> List[Tuple[datetime, datetime]]:
    monday = _next_weekday(today, 0)
    wednesday = _next_weekday(today, 2)
    friday = _next_weekday(today, 4)
    # Wednesday and Friday belong to the same week as that Monday
    if wednesday < monday:
        wednesday += timedelta(days=7)
    if friday < monday:
        friday += timedelta(days=7)
    return [_at(day, 14, timezone, duration_minutes) for day in (monday, wednesday, friday)]


def coffee_chat_slots(today: date, timezone: str, duration_minutes: int = None) -> List[Tuple[datetime, datetime]]:
    return [_at(day, 11, timezone, COFFEE_CHAT_MINUTES) for day in next_business_days(3, today)]


def generate_quick_slots(preset: str, timezone: str, duration_minutes: int,
                         now: datetime = None) -> List[Dict[str, datetime]]:
    """Slots for a preset id, anchored on today's date in `timezone`"""
    generators = {
        "this-week": this_week_slots,
        "next-week": next_week_slots,
        "coffee-chat": coffee_chat_slots,
    }
    if preset not in generators:
        raise ValueError(f"Unknown quick-schedule preset: {preset}. Available: {list(QUICK_PRESETS)}")

    now = now or datetime.now(dt_timezone.utc)
    today = now.astimezone(get_zone(timezone)).date()
    return [
        {"start": start, "end": end}
        for start, end in generators[preset](today, timezone, duration_minutes)
    ]
