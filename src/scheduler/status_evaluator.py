"""
Classifies a candidate slot against each participant's and guardrail's local working day
"""
from datetime import datetime
from typing import Iterable, List

from config.settings import Config
from src.scheduler.models import (
    Participant, TimezoneGuardrail, SlotParticipantStatus, SlotGuardrailStatus,
    STATUS_IN_HOURS, STATUS_FLEX, STATUS_OUTSIDE,
)
from src.scheduler.timezones import local_minutes_of_day, format_local_range
from src.scheduler.window import (
    is_within_normalized_window, time_string_to_minutes, MINUTES_PER_DAY,
)


class ParticipantStatusEvaluator:
    """Local-time status of every participant for one slot"""

    def __init__(self, flex_minutes: int = None):
        self.flex_minutes = Config.FLEX_MINUTES if flex_minutes is None else flex_minutes

    def classify(self, participant: Participant, start_minutes: int, end_minutes: int) -> str:
        work_start = time_string_to_minutes(participant.start_hour)
        work_end = time_string_to_minutes(participant.end_hour)

        if is_within_normalized_window(start_minutes, end_minutes, work_start, work_end):
            return STATUS_IN_HOURS

        if participant.flexible_hours:
            flex_start = max(0, work_start - self.flex_minutes)
            flex_end = min(MINUTES_PER_DAY, work_end + self.flex_minutes)
            if is_within_normalized_window(start_minutes, end_minutes, flex_start, flex_end):
                return STATUS_FLEX

        return STATUS_OUTSIDE

    def evaluate(self, slot_start: datetime, slot_end: datetime,
                 participants: Iterable[Participant]) -> List[SlotParticipantStatus]:
        statuses = []
        for participant in participants:
            start_minutes = local_minutes_of_day(slot_start, participant.timezone)
            end_minutes = local_minutes_of_day(slot_end, participant.timezone)
            statuses.append(SlotParticipantStatus(
                participant_id=participant.participant_id,
                name=participant.name,
                role=participant.role,
                timezone=participant.timezone,
                local_range=format_local_range(slot_start, slot_end, participant.timezone),
                status=self.classify(participant, start_minutes, end_minutes),
                flexible=participant.flexible_hours,
            ))
        return statuses


class GuardrailStatusEvaluator:
    """Guardrails always use the fixed canonical day and never flex"""

    def __init__(self, window_start: str = None, window_end: str = None):
        self.window_start = time_string_to_minutes(window_start or Config.GUARDRAIL_HOURS_START)
        self.window_end = time_string_to_minutes(window_end or Config.GUARDRAIL_HOURS_END)

    def is_within_hours(self, slot_start: datetime, slot_end: datetime, timezone: str) -> bool:
        return is_within_normalized_window(
            local_minutes_of_day(slot_start, timezone),
            local_minutes_of_day(slot_end, timezone),
            self.window_start,
            self.window_end,
        )

    def evaluate(self, slot_start: datetime, slot_end: datetime,
                 guardrails: Iterable[TimezoneGuardrail]) -> List[SlotGuardrailStatus]:
        return [
            SlotGuardrailStatus(
                guardrail_id=guard.guardrail_id,
                timezone=guard.timezone,
                label=guard.label,
                local_range=format_local_range(slot_start, slot_end, guard.timezone),
                within_hours=self.is_within_hours(slot_start, slot_end, guard.timezone),
            )
            for guard in guardrails
        ]
