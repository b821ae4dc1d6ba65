"""
Working-hours window arithmetic on minutes since local midnight
"""
from typing import Tuple

MINUTES_PER_DAY = 1440


def time_string_to_minutes(time_str: str) -> int:
    """Convert "HH:MM" to minutes since midnight; malformed input maps to 0"""
    if not time_str or ":" not in time_str:
        return 0

    hour_part, minute_part = time_str.split(":", 1)
    try:
        hours = int(hour_part)
    except ValueError:
        return 0
    try:
        minutes = int(minute_part)
    except ValueError:
        minutes = 0
    return hours * 60 + minutes


def normalize_for_window(slot_start: int, slot_end: int,
                         window_start: int, window_end: int) -> Tuple[int, int, int, int]:
    """
    Put a slot and a working window on one continuous timeline.

    A window whose end is before its start crosses midnight (22:00-06:00):
    its end moves to the next day, and the slot start/end follow it when they
    fall in the early-morning part. Otherwise only a slot that itself spans
    midnight has its end moved forward a day.
    """
    normalized_start = slot_start
    normalized_end = slot_end
    normalized_window_end = window_end

    if window_end < window_start:
        normalized_window_end = window_end + MINUTES_PER_DAY

        if normalized_start < window_start:
            normalized_start += MINUTES_PER_DAY

        if normalized_end <= window_end:
            normalized_end += MINUTES_PER_DAY
        elif normalized_end < normalized_start:
            normalized_end += MINUTES_PER_DAY
    elif normalized_end < normalized_start:
        normalized_end += MINUTES_PER_DAY

    return normalized_start, normalized_end, window_start, normalized_window_end


def is_within_normalized_window(slot_start: int, slot_end: int,
                                window_start: int, window_end: int) -> bool:
    """True when the slot lies fully inside the window"""
    start, end, w_start, w_end = normalize_for_window(slot_start, slot_end, window_start, window_end)
    return start >= w_start and end <= w_end
