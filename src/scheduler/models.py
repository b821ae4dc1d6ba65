"""
Data model for a scheduling session: participants, guardrails, configuration and slots
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from config.settings import Config
from src.scheduler.timezones import to_iso_utc

ROLE_HOST = "host"
ROLE_REQUIRED = "required"
ROLE_OPTIONAL = "optional"
PARTICIPANT_ROLES = (ROLE_HOST, ROLE_REQUIRED, ROLE_OPTIONAL)

STATUS_IN_HOURS = "inHours"
STATUS_FLEX = "flex"
STATUS_OUTSIDE = "outside"

SUMMARY_IDEAL = "ideal"
SUMMARY_FLEX = "flex"

EMPTY_RESULT_MESSAGE = "No slots found in the selected window."
EMPTY_RESULT_SUGGESTIONS = (
    "Enable flexible hours for teammates who can stretch their day.",
    "Remove a timezone guardrail.",
    "Widen the search window.",
)


@dataclass(frozen=True)
class Participant:
    """One invitee (or the host) with their working-hours window"""
    participant_id: str
    timezone: str
    start_hour: str = Config.TEAMMATE_HOURS_START
    end_hour: str = Config.TEAMMATE_HOURS_END
    display_name: str = ""
    email: str = ""
    role: str = ROLE_REQUIRED
    send_invite: bool = False
    flexible_hours: bool = False
    calendar_id: Optional[str] = None

    @property
    def name(self) -> str:
        if self.display_name:
            return self.display_name
        return "Host" if self.role == ROLE_HOST else "Teammate"

    @classmethod
    def from_template(cls, data: Dict[str, Any], index: int = 0) -> "Participant":
        role = data.get("role", ROLE_REQUIRED)
        default_start = Config.HOST_HOURS_START if role == ROLE_HOST else Config.TEAMMATE_HOURS_START
        default_end = Config.HOST_HOURS_END if role == ROLE_HOST else Config.TEAMMATE_HOURS_END
        return cls(
            participant_id=str(data.get("id") or f"participant-{index + 1}"),
            timezone=data.get("timezone") or Config.DEFAULT_TIMEZONE,
            start_hour=data.get("startHour") or default_start,
            end_hour=data.get("endHour") or default_end,
            display_name=(data.get("displayName") or "").strip(),
            email=(data.get("email") or "").strip(),
            role=role,
            send_invite=bool(data.get("sendInvite", False)),
            flexible_hours=bool(data.get("flexibleHours", False)),
            calendar_id=data.get("calendarId") or None,
        )

    def to_template(self) -> Dict[str, Any]:
        template = {
            "displayName": self.display_name,
            "email": self.email,
            "timezone": self.timezone,
            "startHour": self.start_hour,
            "endHour": self.end_hour,
            "sendInvite": self.send_invite,
            "role": self.role,
            "flexibleHours": self.flexible_hours,
        }
        if self.calendar_id:
            template["calendarId"] = self.calendar_id
        return template


@dataclass(frozen=True)
class TimezoneGuardrail:
    """A location without a calendar whose local day must stay reasonable"""
    guardrail_id: str
    timezone: str
    label: str = ""

    @property
    def display_label(self) -> str:
        return f"{self.label} ({self.timezone})" if self.label else self.timezone

    @classmethod
    def from_template(cls, data: Dict[str, Any], index: int = 0) -> "TimezoneGuardrail":
        return cls(
            guardrail_id=str(data.get("id") or f"guardrail-{index + 1}"),
            timezone=data.get("timezone") or Config.DEFAULT_TIMEZONE,
            label=(data.get("label") or "").strip(),
        )

    def to_template(self) -> Dict[str, Any]:
        return {"timezone": self.timezone, "label": self.label}


@dataclass(frozen=True)
class SearchConfiguration:
    """Everything the search needs; built once per search and never mutated"""
    purpose: str
    participants: Tuple[Participant, ...]
    respected_timezones: Tuple[TimezoneGuardrail, ...] = ()
    duration: int = Config.DEFAULT_MEETING_DURATION
    search_window_days: int = Config.DEFAULT_SEARCH_WINDOW_DAYS
    calendar_id: Optional[str] = Config.DEFAULT_CALENDAR_ID
    view_timezone: Optional[str] = None

    @property
    def trimmed_purpose(self) -> str:
        return (self.purpose or "").strip()

    @property
    def host(self) -> Optional[Participant]:
        for participant in self.participants:
            if participant.role == ROLE_HOST:
                return participant
        return self.participants[0] if self.participants else None

    @property
    def effective_view_timezone(self) -> str:
        if self.view_timezone:
            return self.view_timezone
        host = self.host
        return host.timezone if host else Config.DEFAULT_TIMEZONE

    def calendar_identifiers(self) -> List[str]:
        """Managed calendar plus every participant calendar/email, de-duplicated in order"""
        identifiers: Dict[str, None] = {}
        if self.calendar_id:
            identifiers[self.calendar_id] = None
        for participant in self.participants:
            if participant.calendar_id:
                identifiers[participant.calendar_id] = None
            if participant.email.strip():
                identifiers[participant.email.strip()] = None
        return list(identifiers)

    @classmethod
    def from_template(cls, data: Dict[str, Any]) -> "SearchConfiguration":
        """Build from the camelCase template shape used by the API and CLI"""
        participants = tuple(
            Participant.from_template(item, index)
            for index, item in enumerate(data.get("participants") or [])
        )
        guardrails = tuple(
            TimezoneGuardrail.from_template(item, index)
            for index, item in enumerate(data.get("respectedTimezones") or [])
        )
        return cls(
            purpose=data.get("meetingPurpose") or "",
            participants=participants,
            respected_timezones=guardrails,
            duration=int(data.get("duration") or Config.DEFAULT_MEETING_DURATION),
            search_window_days=int(data.get("searchWindowDays") or Config.DEFAULT_SEARCH_WINDOW_DAYS),
            calendar_id=data.get("calendarId", Config.DEFAULT_CALENDAR_ID),
            view_timezone=data.get("viewTimezone") or None,
        )

    def to_template(self) -> Dict[str, Any]:
        template = {
            "meetingPurpose": self.purpose,
            "duration": self.duration,
            "searchWindowDays": self.search_window_days,
            "participants": [participant.to_template() for participant in self.participants],
            "respectedTimezones": [guard.to_template() for guard in self.respected_timezones],
        }
        if self.calendar_id:
            template["calendarId"] = self.calendar_id
        return template


@dataclass(frozen=True)
class BusyInterval:
    start: datetime
    end: datetime

    def overlaps(self, slot_start: datetime, slot_end: datetime) -> bool:
        return slot_start < self.end and slot_end > self.start


@dataclass(frozen=True)
class SlotParticipantStatus:
    participant_id: str
    name: str
    role: str
    timezone: str
    local_range: str
    status: str
    flexible: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.participant_id,
            "name": self.name,
            "role": self.role,
            "timezone": self.timezone,
            "localRange": self.local_range,
            "status": self.status,
            "flexible": self.flexible,
        }


@dataclass(frozen=True)
class SlotGuardrailStatus:
    guardrail_id: str
    timezone: str
    label: str
    local_range: str
    within_hours: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.guardrail_id,
            "timezone": self.timezone,
            "label": self.label,
            "localRange": self.local_range,
            "withinHours": self.within_hours,
        }


@dataclass(frozen=True)
class CandidateSlot:
    start: datetime
    end: datetime
    participants: Tuple[SlotParticipantStatus, ...]
    guardrails: Tuple[SlotGuardrailStatus, ...]
    summary_status: str

    @property
    def slot_id(self) -> str:
        return f"{to_iso_utc(self.start)}_{to_iso_utc(self.end)}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.slot_id,
            "start": to_iso_utc(self.start),
            "end": to_iso_utc(self.end),
            "participants": [status.to_dict() for status in self.participants],
            "guardrails": [status.to_dict() for status in self.guardrails],
            "summaryStatus": self.summary_status,
        }


@dataclass(frozen=True)
class SelectedSlot:
    slot: CandidateSlot
    hold_title: str

    def to_dict(self) -> Dict[str, Any]:
        data = self.slot.to_dict()
        data["holdTitle"] = self.hold_title
        return data


@dataclass
class SearchResult:
    slots: List[CandidateSlot]
    search_start: datetime
    search_end: datetime
    calendar_ids: List[str]
    rejections: Dict[str, int] = field(default_factory=dict)
    capped: bool = False
    calendar_errors: List[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.slots

    @property
    def message(self) -> Optional[str]:
        return EMPTY_RESULT_MESSAGE if self.is_empty else None

    @property
    def suggestions(self) -> List[str]:
        return list(EMPTY_RESULT_SUGGESTIONS) if self.is_empty else []

    def to_dict(self) -> Dict[str, Any]:
        return {
            "slots": [slot.to_dict() for slot in self.slots],
            "searchStart": to_iso_utc(self.search_start),
            "searchEnd": to_iso_utc(self.search_end),
            "calendarIds": list(self.calendar_ids),
            "rejections": dict(self.rejections),
            "capped": self.capped,
            "calendarErrors": list(self.calendar_errors),
            "message": self.message,
            "suggestions": self.suggestions,
        }
