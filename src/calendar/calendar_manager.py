"""
Google Calendar integration: free/busy lookups and hold event creation
"""
import logging
from typing import List, Dict, Any

from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from config.settings import Config

logger = logging.getLogger(__name__)

class CalendarManager:
    """Calendar backend backed by the Google Calendar v3 API"""

    backend_name = "google"
    supports_free_busy = True

    def __init__(self, account: str = None, service=None):
        self.config = Config()
        self.account = account
        self._service = service

    def _get_credentials(self) -> Credentials:
        """Load OAuth credentials for the managed account"""
        try:
            token_path = self.config.get_token_path(self.account or "default")
            return Credentials.from_authorized_user_file(token_path)
        except FileNotFoundError as e:
            logger.error(f"❌ Calendar token not available for {self.account}: {e}")
            raise ValueError(f"Calendar account {self.account} is not connected.") from e

    def _build_calendar_service(self):
        """Build (once) the Google Calendar service"""
        if self._service is None:
            credentials = self._get_credentials()
            self._service = build("calendar", "v3", credentials=credentials, cache_discovery=False)
        return self._service

    def find_free_busy(self, time_min: str, time_max: str,
                       calendar_ids: List[str]) -> Dict[str, Any]:
        """
        Query busy intervals for several calendars at once.

        Returns the API response shape:
        {"calendars": {calendar_id: {"busy": [{"start": iso, "end": iso}, ...]}}}
        Errors propagate to the caller; nothing is cached between calls.
        """
        request_body = {
            "timeMin": time_min,
            "timeMax": time_max,
            "timeZone": "UTC",
            "items": [{"id": calendar_id.strip()} for calendar_id in calendar_ids],
        }

        logger.info(f"📅 Querying free/busy for {len(calendar_ids)} calendars")
        logger.info(f"   Range: {time_min} to {time_max}")

        try:
            response = self._build_calendar_service().freebusy().query(body=request_body).execute()
        except HttpError as e:
            logger.error(f"HTTP error querying free/busy: {e}")
            raise

        calendars = response.get("calendars", {})
        for calendar_id, calendar in calendars.items():
            if calendar.get("errors"):
                logger.warning(f"⚠️  Free/busy errors for {calendar_id}: {calendar['errors']}")
            logger.info(f"   {calendar_id}: {len(calendar.get('busy', []))} busy intervals")

        return response

    def create_event(self, calendar_id: str, event: Dict[str, Any]) -> Dict[str, Any]:
        """Insert one event (a hold) and return the created resource"""
        try:
            created_event = self._build_calendar_service().events().insert(
                calendarId=calendar_id or self.config.DEFAULT_CALENDAR_ID,
                body=event,
                sendUpdates="all" if event.get("attendees") else "none",
            ).execute()
        except HttpError as e:
            logger.error(f"Failed to create event '{event.get('summary')}': {e}")
            raise

        logger.info(f"✅ Created hold '{event.get('summary')}' ({created_event.get('id')})")
        return created_event

def create_calendar_manager(backend: str = None, account: str = None):
    """Calendar backend for the configured (or requested) provider"""
    backend = (backend or Config.CALENDAR_BACKEND).lower()

    if backend == "mock":
        from src.calendar.mock_calendar_manager import MockCalendarManager
        logger.info("🔄 Using mock calendar backend")
        return MockCalendarManager()

    if backend == "google":
        logger.info("✅ Using Google Calendar backend")
        return CalendarManager(account=account)

    raise ValueError(f"Unknown calendar backend: {backend}")
