"""
In-memory calendar backend for tests and offline runs
"""
import json
import logging
from typing import List, Dict, Any

logger = logging.getLogger(__name__)

class MockCalendarManager:
    """Serves a fixed free/busy snapshot and records created holds"""

    backend_name = "mock"

    def __init__(self, busy: Dict[str, List[Dict[str, str]]] = None,
                 supports_free_busy: bool = True, error: Exception = None,
                 calendar_errors: Dict[str, List[Dict[str, str]]] = None):
        self.busy = busy or {}
        self.calendar_errors = calendar_errors or {}
        self.supports_free_busy = supports_free_busy
        self.error = error
        self.queries: List[Dict[str, Any]] = []
        self.created_events: List[Dict[str, Any]] = []

    @classmethod
    def from_freebusy_response(cls, response: Dict[str, Any]) -> "MockCalendarManager":
        """Build from the provider response shape {"calendars": {id: {"busy": [...]}}}"""
        calendars = response.get("calendars", {}) if response else {}
        busy = {
            calendar_id: list(calendar.get("busy") or [])
            for calendar_id, calendar in calendars.items()
        }
        calendar_errors = {
            calendar_id: list(calendar["errors"])
            for calendar_id, calendar in calendars.items()
            if calendar.get("errors")
        }
        return cls(busy=busy, calendar_errors=calendar_errors)

    @classmethod
    def from_file(cls, path: str) -> "MockCalendarManager":
        with open(path, "r") as f:
            return cls.from_freebusy_response(json.load(f))

    def find_free_busy(self, time_min: str, time_max: str,
                       calendar_ids: List[str]) -> Dict[str, Any]:
        logger.info(f"📋 MOCK: free/busy for {len(calendar_ids)} calendars")
        self.queries.append({
            "timeMin": time_min,
            "timeMax": time_max,
            "calendarIds": list(calendar_ids),
        })

        if self.error is not None:
            raise self.error

        calendars = {}
        for calendar_id in calendar_ids:
            calendars[calendar_id] = {"busy": list(self.busy.get(calendar_id, []))}
            if calendar_id in self.calendar_errors:
                calendars[calendar_id]["errors"] = list(self.calendar_errors[calendar_id])
        return {"calendars": calendars}

    def create_event(self, calendar_id: str, event: Dict[str, Any]) -> Dict[str, Any]:
        if self.error is not None:
            raise self.error

        created = dict(event)
        created["id"] = f"mock_hold_{len(self.created_events) + 1}"
        created["calendarId"] = calendar_id
        self.created_events.append(created)
        logger.info(f"📋 MOCK: created hold '{event.get('summary')}'")
        return created
