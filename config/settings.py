"""
Configuration settings for the Fair Slot Finder
"""
import os
from typing import Dict, Any

class Config:
    # Calendar backend: "google" talks to the Calendar API, "mock" uses an in-memory snapshot
    CALENDAR_BACKEND = os.getenv("SLOT_FINDER_CALENDAR_BACKEND", "google")
    CALENDAR_TOKENS_PATH = os.getenv("SLOT_FINDER_TOKENS_PATH", os.path.expanduser("~/.slot-finder/tokens"))
    DEFAULT_CALENDAR_ID = "primary"
    DEFAULT_TIMEZONE = os.getenv("SLOT_FINDER_DEFAULT_TIMEZONE", "America/Los_Angeles")

    # LLM Configuration (natural-language availability requests)
    LLM_BASE_URL = os.getenv("SLOT_FINDER_LLM_BASE_URL", "https://api.openai.com/v1")
    LLM_API_KEY = os.getenv("OPENAI_API_KEY", "")
    DEFAULT_MODEL = os.getenv("SLOT_FINDER_LLM_MODEL", "gpt-4o-mini")
    LLM_TIMEOUT = 15
    LLM_MAX_RETRIES = 2
    MAX_TOKENS = 300
    TEMPERATURE = 0.1

    # API Configuration
    API_HOST = "0.0.0.0"
    API_PORT = int(os.getenv("SLOT_FINDER_API_PORT", "5000"))

    # Search engine tunables
    FLEX_MINUTES = int(os.getenv("SLOT_FINDER_FLEX_MINUTES", "120"))
    MAX_CANDIDATE_SLOTS = int(os.getenv("SLOT_FINDER_MAX_SLOTS", "80"))
    SLOT_STEP_MINUTES = 30
    GUARDRAIL_HOURS_START = "09:00"
    GUARDRAIL_HOURS_END = "17:00"

    # Session defaults
    MEETING_DURATION_OPTIONS = [30, 45, 60, 75, 90]
    SEARCH_WINDOW_OPTIONS = [7, 10, 14, 21, 30]
    DEFAULT_MEETING_DURATION = 60
    DEFAULT_SEARCH_WINDOW_DAYS = 10
    HOST_HOURS_START = "08:30"
    HOST_HOURS_END = "17:30"
    TEAMMATE_HOURS_START = "09:00"
    TEAMMATE_HOURS_END = "17:30"

    # Hold events
    HOLD_COLOR_ID = "11"
    HOLD_TRANSPARENCY = "opaque"

    COMMON_TIMEZONES = {
        "America/Los_Angeles": "US Pacific (PT)",
        "America/Denver": "US Mountain (MT)",
        "America/Chicago": "US Central (CT)",
        "America/New_York": "US Eastern (ET)",
        "America/Toronto": "Toronto (ET)",
        "Europe/London": "London (GMT/BST)",
        "Europe/Paris": "Paris (CET)",
        "Europe/Berlin": "Berlin (CET)",
        "Asia/Singapore": "Singapore (SGT)",
        "Asia/Tokyo": "Tokyo (JST)",
        "Asia/Hong_Kong": "Hong Kong (HKT)",
        "Australia/Sydney": "Sydney (AET)",
    }

    AVAILABILITY_REQUEST_PROMPT = """You are a meeting scheduling assistant. Extract the availability search parameters from the request below and return ONLY a valid JSON response.

REQUIRED JSON FORMAT:
{{"purpose": "meeting purpose", "duration": 60, "search_window_days": 10, "respected_timezones": ["Asia/Tokyo"]}}

EXTRACTION RULES:
1. duration: meeting length in minutes, one of {durations} (default: {default_duration})
2. search_window_days: how far ahead to search, one of {windows} (default: {default_window})
   - "this week" = 7, "next two weeks" = 14, "this month" = 30
3. respected_timezones: IANA timezone names for locations whose working hours must be respected
4. purpose: short meeting title, empty string if none is given

REQUEST: {request_text}

Return ONLY the JSON object (no explanations):"""

    @classmethod
    def get_search_limits(cls) -> Dict[str, Any]:
        """Get the tunable constants used by the slot search engine"""
        return {
            "flex_minutes": cls.FLEX_MINUTES,
            "max_slots": cls.MAX_CANDIDATE_SLOTS,
            "step_minutes": cls.SLOT_STEP_MINUTES,
            "guardrail_start": cls.GUARDRAIL_HOURS_START,
            "guardrail_end": cls.GUARDRAIL_HOURS_END,
        }

    @classmethod
    def get_model_config(cls, model_name: str = None) -> Dict[str, Any]:
        """Get LLM client configuration"""
        return {
            "base_url": cls.LLM_BASE_URL,
            "api_key": cls.LLM_API_KEY,
            "model": model_name or cls.DEFAULT_MODEL,
            "max_tokens": cls.MAX_TOKENS,
            "temperature": cls.TEMPERATURE,
        }

    @classmethod
    def get_timezone_label(cls, timezone: str) -> str:
        """Human label for a timezone, falling back to the IANA id"""
        return cls.COMMON_TIMEZONES.get(timezone, timezone)

    @classmethod
    def get_token_path(cls, account: str) -> str:
        """Get token file path for a calendar account"""
        username = account.split("@")[0] if "@" in account else account
        token_path = os.path.join(cls.CALENDAR_TOKENS_PATH, f"{username}.token")

        if not os.path.exists(token_path):
            raise FileNotFoundError(f"Token file not found: {token_path}")

        return token_path
