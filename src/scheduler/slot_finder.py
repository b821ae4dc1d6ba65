"""
Slot Finder - searches a horizon for half-hour-aligned slots that are free and fair for everyone
"""
import logging
from datetime import datetime, timedelta, time, timezone as dt_timezone
from typing import Dict, List, Any, Optional, Tuple

from config.settings import Config
from src.scheduler.errors import (
    FreeBusyLookupError, FreeBusyUnsupportedError, MissingPurposeError,
    NoCalendarsError, NoParticipantsError,
)
from src.scheduler.models import (
    BusyInterval, CandidateSlot, SearchConfiguration, SearchResult,
    STATUS_FLEX, STATUS_OUTSIDE, SUMMARY_FLEX, SUMMARY_IDEAL,
)
from src.scheduler.status_evaluator import GuardrailStatusEvaluator, ParticipantStatusEvaluator
from src.scheduler.timezones import get_zone, parse_instant, to_iso_utc
from utils.meeting_logger import MeetingLogger

logger = logging.getLogger(__name__)

REJECTED_CONFLICT = "conflict"
REJECTED_PARTICIPANT_HOURS = "participant_hours"
REJECTED_GUARDRAIL_HOURS = "guardrail_hours"


def round_to_next_half_hour(now: datetime, timezone: str, step_minutes: int = 30) -> datetime:
    """Next step boundary on the local clock strictly after `now`"""
    now_utc = now.astimezone(dt_timezone.utc)
    # local minute only; the arithmetic stays in UTC across repeated hours
    remainder = now_utc.astimezone(get_zone(timezone)).minute % step_minutes
    rounded = now_utc.replace(second=0, microsecond=0)
    if remainder:
        rounded += timedelta(minutes=step_minutes - remainder)
    if rounded <= now_utc:
        rounded += timedelta(minutes=step_minutes)
    return rounded


class SlotFinder:
    """
    Runs one availability search: a single free/busy lookup for the whole
    horizon, then a synchronous walk over every weekday step boundary.
    Holds no state between searches.
    """

    def __init__(self, calendar_manager, flex_minutes: int = None, max_slots: int = None,
                 step_minutes: int = None, guardrail_start: str = None, guardrail_end: str = None):
        limits = Config.get_search_limits()
        self.calendar_manager = calendar_manager
        self.max_slots = limits["max_slots"] if max_slots is None else max_slots
        self.step_minutes = step_minutes or limits["step_minutes"]
        self.participant_evaluator = ParticipantStatusEvaluator(
            limits["flex_minutes"] if flex_minutes is None else flex_minutes
        )
        self.guardrail_evaluator = GuardrailStatusEvaluator(
            guardrail_start or limits["guardrail_start"],
            guardrail_end or limits["guardrail_end"],
        )

    def validate_request(self, config: SearchConfiguration) -> List[str]:
        """Refuse the search before any network call; returns the calendar ids to query"""
        if not config.trimmed_purpose:
            raise MissingPurposeError()

        if not getattr(self.calendar_manager, "supports_free_busy", False):
            raise FreeBusyUnsupportedError()

        if not config.participants:
            raise NoParticipantsError()

        calendar_ids = config.calendar_identifiers()
        if not calendar_ids:
            raise NoCalendarsError()

        return calendar_ids

    def compute_search_window(self, config: SearchConfiguration,
                              now: datetime = None) -> Tuple[datetime, datetime]:
        now = now or datetime.now(dt_timezone.utc)
        zone = get_zone(config.effective_view_timezone)
        search_start = round_to_next_half_hour(now, config.effective_view_timezone, self.step_minutes)
        search_end = (search_start.astimezone(zone) + timedelta(days=config.search_window_days))
        return search_start, search_end.astimezone(dt_timezone.utc)

    def find_common_free_slots(self, config: SearchConfiguration,
                               now: datetime = None) -> SearchResult:
        """Search the configured horizon; an empty result is not an error"""
        calendar_ids = self.validate_request(config)
        search_start, search_end = self.compute_search_window(config, now)

        MeetingLogger.log_search_configuration(config, calendar_ids, search_start, search_end)

        try:
            free_busy = self.calendar_manager.find_free_busy(
                to_iso_utc(search_start), to_iso_utc(search_end), calendar_ids
            )
            busy_lookup = self._collect_busy(free_busy, calendar_ids)
        except Exception as e:
            logger.error(f"Free/busy lookup failed: {e}")
            raise FreeBusyLookupError(str(e) or None) from e

        result = self._scan(config, busy_lookup, calendar_ids, search_start, search_end)
        result.calendar_errors = self._calendars_with_errors(free_busy, calendar_ids)

        MeetingLogger.log_search_result(result)
        return result

    def evaluate_slot(self, config: SearchConfiguration, slot_start: datetime,
                      slot_end: datetime) -> CandidateSlot:
        """Annotate a slot with participant and guardrail status; used by search and summary"""
        participant_status = self.participant_evaluator.evaluate(slot_start, slot_end, config.participants)
        guardrail_status = self.guardrail_evaluator.evaluate(slot_start, slot_end, config.respected_timezones)

        summary_status = SUMMARY_FLEX if any(
            item.status == STATUS_FLEX for item in participant_status
        ) else SUMMARY_IDEAL

        return CandidateSlot(
            start=slot_start,
            end=slot_end,
            participants=tuple(participant_status),
            guardrails=tuple(guardrail_status),
            summary_status=summary_status,
        )

    def _collect_busy(self, free_busy: Optional[Dict[str, Any]],
                      calendar_ids: List[str]) -> Dict[str, List[BusyInterval]]:
        """Parse busy intervals for the calendars in scope; missing calendars are always free"""
        calendars = (free_busy or {}).get("calendars") or {}
        lookup = {}
        for calendar_id in calendar_ids:
            busy = (calendars.get(calendar_id) or {}).get("busy") or []
            lookup[calendar_id] = [
                BusyInterval(parse_instant(item["start"]), parse_instant(item["end"]))
                for item in busy
            ]
        return lookup

    def _calendars_with_errors(self, free_busy: Optional[Dict[str, Any]],
                               calendar_ids: List[str]) -> List[str]:
        """Calendars the provider could not read; they contribute no busy time"""
        calendars = (free_busy or {}).get("calendars") or {}
        unreadable = [
            calendar_id for calendar_id in calendar_ids
            if (calendars.get(calendar_id) or {}).get("errors")
        ]
        for calendar_id in unreadable:
            logger.warning(f"⚠️  Free/busy unavailable for {calendar_id}, treated as free")
        return unreadable

    def _has_conflict(self, busy_lookup: Dict[str, List[BusyInterval]],
                      slot_start: datetime, slot_end: datetime) -> bool:
        for calendar_id, intervals in busy_lookup.items():
            if any(interval.overlaps(slot_start, slot_end) for interval in intervals):
                logger.debug(f"Slot {to_iso_utc(slot_start)} conflicts on {calendar_id}")
                return True
        return False

    def _scan(self, config: SearchConfiguration, busy_lookup: Dict[str, List[BusyInterval]],
              calendar_ids: List[str], search_start: datetime, search_end: datetime) -> SearchResult:
        zone = get_zone(config.effective_view_timezone)
        duration = timedelta(minutes=config.duration)
        step = timedelta(minutes=self.step_minutes)

        result = SearchResult(
            slots=[],
            search_start=search_start,
            search_end=search_end,
            calendar_ids=list(calendar_ids),
            rejections={REJECTED_CONFLICT: 0, REJECTED_PARTICIPANT_HOURS: 0, REJECTED_GUARDRAIL_HOURS: 0},
        )

        day = search_start.astimezone(zone).date()
        while len(result.slots) < self.max_slots:
            day_start = datetime.combine(day, time(0, 0), tzinfo=zone).astimezone(dt_timezone.utc)
            if day_start >= search_end:
                break

            next_day = day + timedelta(days=1)
            if day.weekday() >= 5:
                day = next_day
                continue

            next_day_start = datetime.combine(next_day, time(0, 0), tzinfo=zone).astimezone(dt_timezone.utc)
            slot_start = day_start
            while slot_start < next_day_start:
                candidate_start = slot_start
                slot_start = slot_start + step

                if candidate_start < search_start or candidate_start >= search_end:
                    continue

                candidate_end = candidate_start + duration
                if candidate_end > search_end:
                    continue

                if self._has_conflict(busy_lookup, candidate_start, candidate_end):
                    result.rejections[REJECTED_CONFLICT] += 1
                    continue

                slot = self.evaluate_slot(config, candidate_start, candidate_end)

                if any(item.status == STATUS_OUTSIDE for item in slot.participants):
                    result.rejections[REJECTED_PARTICIPANT_HOURS] += 1
                    continue

                if not all(item.within_hours for item in slot.guardrails):
                    result.rejections[REJECTED_GUARDRAIL_HOURS] += 1
                    continue

                result.slots.append(slot)
                if len(result.slots) >= self.max_slots:
                    result.capped = True
                    break

            day = next_day

        return result
