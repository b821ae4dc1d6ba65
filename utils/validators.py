"""
Validation utilities for availability search payloads
"""
import re
from typing import Dict, Any, List

from dateutil import parser as dparse

from config.settings import Config
from src.scheduler.models import PARTICIPANT_ROLES, ROLE_HOST
from src.scheduler.timezones import is_valid_timezone

class RequestValidator:
    """Validator for incoming search configurations"""

    @staticmethod
    def validate_email(email: str) -> bool:
        """Validate email format"""
        email_pattern = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'
        return bool(re.match(email_pattern, email))

    @staticmethod
    def validate_clock_time(value: str) -> bool:
        """Validate an "HH:MM" local clock time"""
        if not isinstance(value, str):
            return False
        match = re.match(r'^(\d{1,2}):(\d{2})$', value)
        if not match:
            return False
        return int(match.group(1)) < 24 and int(match.group(2)) < 60

    @staticmethod
    def validate_iso_datetime(value: str) -> bool:
        if not isinstance(value, str):
            return False
        try:
            dparse.isoparse(value)
            return True
        except (TypeError, ValueError):
            return False

    @staticmethod
    def validate_config_structure(config_data: Dict[str, Any]) -> List[str]:
        """
        Validate a template-shaped configuration and return a list of errors.

        Missing title, missing participants and missing calendars are left to
        the search itself, which refuses them with dedicated messages.
        """
        errors = []

        if not isinstance(config_data, dict):
            return ["Configuration must be a JSON object"]

        errors.extend(RequestValidator._text_field_errors(
            config_data, ("meetingPurpose", "calendarId", "viewTimezone"), "Configuration"
        ))

        duration = config_data.get("duration", Config.DEFAULT_MEETING_DURATION)
        if duration not in Config.MEETING_DURATION_OPTIONS:
            errors.append(f"Invalid duration: {duration}. Expected one of {Config.MEETING_DURATION_OPTIONS}")

        window = config_data.get("searchWindowDays", Config.DEFAULT_SEARCH_WINDOW_DAYS)
        if window not in Config.SEARCH_WINDOW_OPTIONS:
            errors.append(f"Invalid searchWindowDays: {window}. Expected one of {Config.SEARCH_WINDOW_OPTIONS}")

        view_timezone = config_data.get("viewTimezone")
        if view_timezone and not is_valid_timezone(view_timezone):
            errors.append(f"Invalid viewTimezone: {view_timezone}")

        participants = config_data.get("participants", [])
        if not isinstance(participants, list):
            errors.append("'participants' must be a list")
            participants = []

        hosts = 0
        for i, participant in enumerate(participants):
            if not isinstance(participant, dict):
                errors.append(f"Participant {i} must be an object")
                continue

            errors.extend(RequestValidator._text_field_errors(
                participant, ("displayName", "email", "calendarId"), f"Participant {i}"
            ))

            role = participant.get("role", "required")
            if role not in PARTICIPANT_ROLES:
                errors.append(f"Participant {i} has invalid role: {role}")
            if role == ROLE_HOST:
                hosts += 1

            if not is_valid_timezone(participant.get("timezone", "")):
                errors.append(f"Participant {i} has invalid timezone: {participant.get('timezone')}")

            for field in ("startHour", "endHour"):
                if field in participant and not RequestValidator.validate_clock_time(participant[field]):
                    errors.append(f"Participant {i} has invalid {field}: {participant[field]}. Expected HH:MM")

            email = participant.get("email")
            email = email.strip() if isinstance(email, str) else ""
            if email and not RequestValidator.validate_email(email):
                errors.append(f"Invalid email format in participant {i}: {email}")

        if participants and hosts != 1:
            errors.append(f"Exactly one participant must have role 'host' (found {hosts})")

        guardrails = config_data.get("respectedTimezones", [])
        if not isinstance(guardrails, list):
            errors.append("'respectedTimezones' must be a list")
            guardrails = []

        for i, guard in enumerate(guardrails):
            if isinstance(guard, dict):
                errors.extend(RequestValidator._text_field_errors(guard, ("label",), f"Timezone guardrail {i}"))
            if not isinstance(guard, dict) or not is_valid_timezone(guard.get("timezone", "")):
                errors.append(f"Timezone guardrail {i} has invalid timezone")

        return errors

    @staticmethod
    def _text_field_errors(data: Dict[str, Any], fields, owner: str) -> List[str]:
        """Optional fields that must be strings when present"""
        return [
            f"{owner} has non-text {field}: {data[field]!r}"
            for field in fields
            if data.get(field) is not None and not isinstance(data[field], str)
        ]

    @staticmethod
    def validate_selection_structure(slots: Any) -> List[str]:
        """Validate a list of selected {start, end} slots"""
        if not isinstance(slots, list):
            return ["'slots' must be a list"]

        errors = []
        for i, slot in enumerate(slots):
            if not isinstance(slot, dict) or "start" not in slot or "end" not in slot:
                errors.append(f"Slot {i} must have 'start' and 'end' fields")
                continue
            for field in ("start", "end"):
                if not RequestValidator.validate_iso_datetime(slot[field]):
                    errors.append(f"Slot {i} has invalid {field}: {slot[field]}")
        return errors

class DataSanitizer:
    """Sanitize and clean input data"""

    @staticmethod
    def sanitize_email(email: str) -> str:
        return (email or "").strip().lower()

    @staticmethod
    def sanitize_text(text: str) -> str:
        """Collapse whitespace and strip markup characters"""
        text = re.sub(r'\s+', ' ', (text or "").strip())
        text = re.sub(r'[<>]', '', text)
        return text

    @staticmethod
    def sanitize_config(config_data: Dict[str, Any]) -> Dict[str, Any]:
        """Sanitize a template-shaped configuration"""
        sanitized = dict(config_data)

        if "meetingPurpose" in sanitized:
            sanitized["meetingPurpose"] = DataSanitizer.sanitize_text(sanitized["meetingPurpose"])

        participants = []
        for participant in sanitized.get("participants") or []:
            participant = dict(participant)
            if "email" in participant:
                participant["email"] = DataSanitizer.sanitize_email(participant["email"])
            if "displayName" in participant:
                participant["displayName"] = DataSanitizer.sanitize_text(participant["displayName"])
            participants.append(participant)
        sanitized["participants"] = participants

        guardrails = []
        for guard in sanitized.get("respectedTimezones") or []:
            guard = dict(guard)
            if "label" in guard:
                guard["label"] = DataSanitizer.sanitize_text(guard["label"])
            guardrails.append(guard)
        sanitized["respectedTimezones"] = guardrails

        return sanitized
