"""
Shared fixtures: a fixed clock, a two-person team and its free/busy snapshot
"""
from datetime import datetime, timezone

import pytest

from src.calendar.mock_calendar_manager import MockCalendarManager
from src.scheduler.models import SearchConfiguration
from src.scheduler.slot_finder import SlotFinder

# Monday 08:07 in Los Angeles (PDT)
MONDAY_MORNING = datetime(2026, 10, 19, 15, 7, tzinfo=timezone.utc)

WEEKDAYS = ("2026-10-19", "2026-10-20", "2026-10-21", "2026-10-22", "2026-10-23")


def team_template(**overrides):
    template = {
        "meetingPurpose": "Roadmap sync",
        "duration": 60,
        "searchWindowDays": 7,
        "participants": [
            {"displayName": "Avery", "email": "host@example.com", "timezone": "America/Los_Angeles",
             "startHour": "09:00", "endHour": "17:00", "role": "host", "sendInvite": True},
            {"displayName": "Sam", "email": "london@example.com", "timezone": "Europe/London",
             "startHour": "09:00", "endHour": "17:00", "role": "required", "flexibleHours": True},
        ],
        "respectedTimezones": [],
    }
    template.update(overrides)
    return template


def host_only_template(**overrides):
    template = team_template(**overrides)
    template["participants"] = template["participants"][:1]
    return template


def afternoon_busy():
    """16:00-17:00 UTC taken on the managed calendar every weekday of the first week"""
    return {
        "primary": [
            {"start": f"{day}T16:00:00Z", "end": f"{day}T17:00:00Z"} for day in WEEKDAYS
        ]
    }


@pytest.fixture
def now():
    return MONDAY_MORNING


@pytest.fixture
def team_config():
    return SearchConfiguration.from_template(team_template())


@pytest.fixture
def calendar_manager():
    return MockCalendarManager(busy=afternoon_busy())


@pytest.fixture
def slot_finder(calendar_manager):
    return SlotFinder(calendar_manager)
