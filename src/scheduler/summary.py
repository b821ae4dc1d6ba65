"""
Summary & draft generation for the slots a person picked, plus hold event payloads
"""
import logging
from typing import Dict, List, Any, Iterable

from config.settings import Config
from src.scheduler.errors import HoldCreationError, NoSlotsSelectedError
from src.scheduler.models import (
    CandidateSlot, SearchConfiguration, SelectedSlot, STATUS_FLEX,
)
from src.scheduler.timezones import format_long_date, timezone_label, to_iso_utc
from utils.meeting_logger import MeetingLogger

logger = logging.getLogger(__name__)

EMAIL_GREETING = "Hi,\n\nWe have availability at the following times:"
EMAIL_CLOSING = "Let me know which works best and I’ll confirm the invite.\n\nThanks!"


def default_hold_title(purpose: str, index: int) -> str:
    return f"[Hold] {purpose.strip()} {index + 1}"


def summarize_slot_timezones(slot: CandidateSlot) -> List[Dict[str, Any]]:
    """One entry per distinct participant timezone, flagged when anyone there relies on flex"""
    summaries: Dict[str, Dict[str, Any]] = {}
    for participant in slot.participants:
        existing = summaries.get(participant.timezone)
        if existing is None:
            summaries[participant.timezone] = {
                "timezone": participant.timezone,
                "label": timezone_label(participant.timezone),
                "range": participant.local_range,
                "hasFlex": participant.status == STATUS_FLEX,
            }
        elif participant.status == STATUS_FLEX:
            existing["hasFlex"] = True
    return list(summaries.values())


def format_slot_block(slot: CandidateSlot, index: int, view_timezone: str) -> str:
    timezone_lines = "\n".join(
        f"   - {summary['label']}: {summary['range']}{' (flex window)' if summary['hasFlex'] else ''}"
        for summary in summarize_slot_timezones(slot)
    )

    guard_lines = "\n".join(
        f"   - {f'{guard.label} ({guard.timezone})' if guard.label else guard.timezone}: "
        f"{guard.local_range} • {'within working hours' if guard.within_hours else 'outside normal hours'}"
        for guard in slot.guardrails
    )
    guard_section = f"\n   Guardrails:\n{guard_lines}" if guard_lines else ""

    return f"{index + 1}. {format_long_date(slot.start, view_timezone)}\n{timezone_lines}{guard_section}"


def build_email_draft(slots: List[CandidateSlot], view_timezone: str) -> str:
    slot_text = "\n\n".join(
        format_slot_block(slot, index, view_timezone) for index, slot in enumerate(slots)
    )
    return f"{EMAIL_GREETING}\n\n{slot_text}\n\n{EMAIL_CLOSING}"


def build_hold_payloads(config: SearchConfiguration, selected: List[SelectedSlot]) -> List[Dict[str, Any]]:
    """Event bodies for the event-creation collaborator, one per selected slot"""
    host = config.host
    host_timezone = host.timezone if host and host.timezone else Config.DEFAULT_TIMEZONE
    purpose = config.trimmed_purpose

    attendees = [
        {"email": participant.email.strip()}
        for participant in config.participants
        if participant.send_invite and participant.email.strip()
    ]

    description_lines = []
    if purpose:
        description_lines.append(f"Purpose: {purpose}")
    if config.respected_timezones:
        labels = ", ".join(guard.label or guard.timezone for guard in config.respected_timezones)
        description_lines.append(f"Guardrails: {labels}")
    description = "\n".join(description_lines)

    holds = []
    for index, item in enumerate(selected):
        holds.append({
            "summary": item.hold_title.strip() or default_hold_title(purpose, index),
            "description": description,
            "start": {"dateTime": to_iso_utc(item.slot.start), "timeZone": host_timezone},
            "end": {"dateTime": to_iso_utc(item.slot.end), "timeZone": host_timezone},
            "attendees": list(attendees),
            "colorId": Config.HOLD_COLOR_ID,
            "transparency": Config.HOLD_TRANSPARENCY,
        })
    return holds


class SchedulingSession:
    """
    The pick-and-send half of one scheduling flow.

    Holds the candidate list from a search, the slots the person toggled on,
    their editable hold titles and the outreach draft. Once the draft has been
    edited by hand it is never regenerated.
    """

    def __init__(self, config: SearchConfiguration, slot_finder, candidates: Iterable[CandidateSlot] = ()):
        self.config = config
        self.slot_finder = slot_finder
        self.candidates = list(candidates)
        self.selected: List[CandidateSlot] = []
        self.hold_titles: List[str] = []
        self.email_draft = ""
        self.draft_edited = False

    def toggle_slot(self, slot: CandidateSlot) -> bool:
        """Select or deselect a slot; returns True when it is now selected"""
        for existing in self.selected:
            if existing.slot_id == slot.slot_id:
                self.selected = [item for item in self.selected if item.slot_id != slot.slot_id]
                return False
        self.selected.append(slot)
        return True

    def select_by_ids(self, slot_ids: Iterable[str]) -> None:
        by_id = {slot.slot_id: slot for slot in self.candidates}
        for slot_id in slot_ids:
            if slot_id not in by_id:
                raise KeyError(f"Unknown slot: {slot_id}")
            if all(item.slot_id != slot_id for item in self.selected):
                self.selected.append(by_id[slot_id])

    def select_times(self, times: Iterable[Dict[str, Any]]) -> None:
        """Select slots by start/end instants, re-evaluating each against the configuration"""
        for item in times:
            slot = self.slot_finder.evaluate_slot(self.config, item["start"], item["end"])
            if all(existing.slot_id != slot.slot_id for existing in self.selected):
                self.selected.append(slot)

    def prepare_summary(self) -> List[SelectedSlot]:
        """Sort the selection, re-evaluate it, and generate titles and the outreach draft"""
        if not self.selected:
            raise NoSlotsSelectedError()

        ordered = sorted(self.selected, key=lambda slot: slot.start)
        self.selected = [
            self.slot_finder.evaluate_slot(self.config, slot.start, slot.end) for slot in ordered
        ]
        self.hold_titles = [
            default_hold_title(self.config.trimmed_purpose, index) for index in range(len(self.selected))
        ]

        if not self.draft_edited:
            self.email_draft = build_email_draft(self.selected, self.config.effective_view_timezone)

        MeetingLogger.log_selected_slots(self.selected)
        return self.selected_slots()

    def selected_slots(self) -> List[SelectedSlot]:
        return [
            SelectedSlot(slot=slot, hold_title=self._title_for(index))
            for index, slot in enumerate(self.selected)
        ]

    def set_hold_title(self, index: int, title: str) -> None:
        if index < 0 or index >= len(self.selected):
            raise IndexError(f"No selected slot at position {index + 1}")
        while len(self.hold_titles) < len(self.selected):
            self.hold_titles.append(default_hold_title(self.config.trimmed_purpose, len(self.hold_titles)))
        self.hold_titles[index] = title

    def edit_draft(self, text: str) -> None:
        self.email_draft = text
        self.draft_edited = True

    def hold_payloads(self) -> List[Dict[str, Any]]:
        if not self.selected:
            raise NoSlotsSelectedError()
        return build_hold_payloads(self.config, self.selected_slots())

    def commit(self, calendar_manager) -> List[Dict[str, Any]]:
        """Create one hold per selected slot on the managed calendar"""
        holds = self.hold_payloads()
        calendar_id = self.config.calendar_id or Config.DEFAULT_CALENDAR_ID
        created = []
        for hold in holds:
            try:
                created.append(calendar_manager.create_event(calendar_id, hold))
            except Exception as e:
                logger.error(f"Error creating calendar hold '{hold['summary']}' "
                             f"after {len(created)} created: {e}")
                raise HoldCreationError(str(e) or None, created=created) from e
        logger.info(f"✅ Created {len(created)} holds on {calendar_id}")
        return created

    def _title_for(self, index: int) -> str:
        if index < len(self.hold_titles):
            return self.hold_titles[index]
        return default_hold_title(self.config.trimmed_purpose, index)

    def to_dict(self) -> Dict[str, Any]:
        selected = self.selected_slots()
        return {
            "selectedSlots": [item.to_dict() for item in selected],
            "timezoneSummaries": [summarize_slot_timezones(item.slot) for item in selected],
            "holdTitles": [item.hold_title for item in selected],
            "emailDraft": self.email_draft,
            "holds": build_hold_payloads(self.config, selected),
        }
