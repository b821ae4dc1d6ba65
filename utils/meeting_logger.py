"""
Structured log lines for availability searches and slot selections
"""
import logging
from datetime import datetime
from typing import List

logger = logging.getLogger(__name__)

class MeetingLogger:
    """Specialized logger for slot search events"""

    @staticmethod
    def log_search_configuration(config, calendar_ids: List[str],
                                 search_start: datetime, search_end: datetime):
        """Log what a search is about to evaluate"""

        logger.info(f"🔍 AVAILABILITY SEARCH: {config.trimmed_purpose}")
        logger.info(f"   ⏱️  Duration: {config.duration} minutes")
        logger.info(f"   📅 Window: {search_start.isoformat()} to {search_end.isoformat()} "
                    f"({config.search_window_days} days, weekdays in {config.effective_view_timezone})")
        logger.info(f"   🗓️  Calendars: {', '.join(calendar_ids)}")

        for participant in config.participants:
            flex_note = " (flexible)" if participant.flexible_hours else ""
            logger.info(f"   👤 {participant.name} [{participant.role}] {participant.timezone} "
                        f"{participant.start_hour}-{participant.end_hour}{flex_note}")

        for guard in config.respected_timezones:
            logger.info(f"   🌐 Guardrail: {guard.display_label}")

    @staticmethod
    def log_search_result(result):
        """Log totals for a finished search"""

        flex_count = sum(1 for slot in result.slots if slot.summary_status == "flex")
        ideal_count = len(result.slots) - flex_count

        logger.info(f"📊 SEARCH RESULT:")
        logger.info(f"   ✅ Accepted slots: {len(result.slots)} ({ideal_count} ideal, {flex_count} flex)")
        logger.info(f"   ❌ Rejected: {result.rejections.get('conflict', 0)} conflicts, "
                    f"{result.rejections.get('participant_hours', 0)} outside participant hours, "
                    f"{result.rejections.get('guardrail_hours', 0)} outside guardrail hours")

        if result.capped:
            logger.info(f"   ✂️  Stopped at the slot cap")

        if result.is_empty:
            logger.info(f"   ℹ️  {result.message}")

    @staticmethod
    def log_selected_slots(slots):
        """Log the final, chronologically sorted selection"""

        logger.info(f"📋 SELECTED SLOTS ({len(slots)}):")
        for i, slot in enumerate(slots, 1):
            logger.info(f"   {i}. {slot.start.isoformat()} to {slot.end.isoformat()} [{slot.summary_status}]")
