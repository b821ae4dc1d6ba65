"""
LLM client that turns free-text availability requests into search parameters
"""
import json
import logging
import re
import time
from typing import Dict, Any, List, Optional

from openai import OpenAI

from config.settings import Config
from src.scheduler.timezones import is_valid_timezone

logger = logging.getLogger(__name__)

WORD_NUMBERS = {"one": 1, "two": 2, "three": 3, "four": 4, "a": 1, "an": 1}

# City and region names that map onto a timezone guardrail
TIMEZONE_KEYWORDS = {
    "los angeles": "America/Los_Angeles", "san francisco": "America/Los_Angeles",
    "pacific": "America/Los_Angeles", "denver": "America/Denver",
    "chicago": "America/Chicago", "new york": "America/New_York",
    "eastern": "America/New_York", "toronto": "America/Toronto",
    "london": "Europe/London", "paris": "Europe/Paris", "berlin": "Europe/Berlin",
    "singapore": "Asia/Singapore", "tokyo": "Asia/Tokyo", "japan": "Asia/Tokyo",
    "hong kong": "Asia/Hong_Kong", "sydney": "Australia/Sydney",
}


def snap_to_option(value: int, options: List[int]) -> int:
    """Closest allowed option; ties go to the smaller one"""
    return min(options, key=lambda option: (abs(option - value), option))


class LLMClient:
    """OpenAI-compatible client with a deterministic regex fallback"""

    def __init__(self, model_name: str = None, client=None):
        self.config = Config()
        self.model_config = self.config.get_model_config(model_name)
        self.model_name = self.model_config["model"]

        if client is not None:
            self.client = client
        elif self.model_config["api_key"]:
            self.client = OpenAI(
                api_key=self.model_config["api_key"],
                base_url=self.model_config["base_url"],
                timeout=self.config.LLM_TIMEOUT,
                max_retries=self.config.LLM_MAX_RETRIES,
            )
        else:
            logger.warning("⚠️  No LLM API key configured, requests will use fallback parsing")
            self.client = None

    def _make_chat_request(self, prompt: str) -> Optional[str]:
        if self.client is None:
            return None

        try:
            start_time = time.time()
            response = self.client.chat.completions.create(
                model=self.model_name,
                messages=[{"role": "user", "content": prompt}],
                max_tokens=self.model_config["max_tokens"],
                temperature=self.model_config["temperature"],
            )
            content = response.choices[0].message.content
            logger.info(f"LLM response in {time.time() - start_time:.2f}s")
            return content.strip() if content else None
        except Exception as e:
            logger.error(f"LLM request failed: {e}")
            return None

    def parse_availability_request(self, request_text: str) -> Dict[str, Any]:
        """
        Extract purpose, duration, search window and respected timezones.

        The result always has the keys purpose, duration, search_window_days,
        respected_timezones and source ("openai" or "fallback").
        """
        prompt = self.config.AVAILABILITY_REQUEST_PROMPT.format(
            durations=self.config.MEETING_DURATION_OPTIONS,
            default_duration=self.config.DEFAULT_MEETING_DURATION,
            windows=self.config.SEARCH_WINDOW_OPTIONS,
            default_window=self.config.DEFAULT_SEARCH_WINDOW_DAYS,
            request_text=request_text[:500],
        )

        response = self._make_chat_request(prompt)
        if response:
            parsed = self._extract_json(response)
            cleaned = self._validate_and_clean(parsed) if parsed else None
            if cleaned:
                cleaned["source"] = "openai"
                logger.info(f"LLM parsed request: {cleaned}")
                return cleaned
            logger.warning("LLM response unusable, using fallback parsing")

        return self._fallback_parsing(request_text)

    def _extract_json(self, response: str) -> Optional[Dict[str, Any]]:
        match = re.search(r'\{.*\}', response, re.DOTALL)
        if not match:
            return None
        try:
            data = json.loads(match.group(0))
        except json.JSONDecodeError:
            return None
        return data if isinstance(data, dict) else None

    def _validate_and_clean(self, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        try:
            duration = int(data.get("duration", self.config.DEFAULT_MEETING_DURATION))
            window = int(data.get("search_window_days", self.config.DEFAULT_SEARCH_WINDOW_DAYS))
        except (TypeError, ValueError):
            return None

        timezones = data.get("respected_timezones") or []
        if not isinstance(timezones, list):
            return None

        return {
            "purpose": str(data.get("purpose") or "").strip(),
            "duration": snap_to_option(duration, self.config.MEETING_DURATION_OPTIONS),
            "search_window_days": snap_to_option(window, self.config.SEARCH_WINDOW_OPTIONS),
            "respected_timezones": [tz for tz in timezones if isinstance(tz, str) and is_valid_timezone(tz)],
        }

    def _fallback_parsing(self, request_text: str) -> Dict[str, Any]:
        """Regex-based extraction used when the model is unavailable"""
        text = request_text.lower()

        return {
            "purpose": self._extract_purpose(request_text),
            "duration": self._extract_duration(text),
            "search_window_days": self._extract_window(text),
            "respected_timezones": self._extract_timezones(text),
            "source": "fallback",
        }

    def _extract_duration(self, text: str) -> int:
        minutes = None

        hour_match = re.search(r'\b(\d+(?:\.\d+)?|an?|one|two)\s*(?:-\s*)?(?:hours?|hrs?|h)\b', text)
        minute_match = re.search(r'(\d+)\s*(?:-\s*)?(?:minutes?|mins?|m)\b', text)

        if 'hour and a half' in text or '1.5 hour' in text:
            minutes = 90
        elif 'half hour' in text or 'half an hour' in text:
            minutes = 30
        elif minute_match:
            minutes = int(minute_match.group(1))
        elif hour_match:
            raw = hour_match.group(1)
            hours = WORD_NUMBERS[raw] if raw in WORD_NUMBERS else float(raw)
            minutes = int(hours * 60)

        if minutes is None:
            return self.config.DEFAULT_MEETING_DURATION
        return snap_to_option(minutes, self.config.MEETING_DURATION_OPTIONS)

    def _extract_window(self, text: str) -> int:
        days = None

        week_match = re.search(r'(\d+|one|two|three|four)\s+weeks?', text)
        day_match = re.search(r'(\d+)\s+(?:business\s+)?days?', text)

        if day_match:
            days = int(day_match.group(1))
        elif week_match:
            raw = week_match.group(1)
            days = (WORD_NUMBERS[raw] if raw in WORD_NUMBERS else int(raw)) * 7
        elif 'month' in text:
            days = 30
        elif 'this week' in text or 'next week' in text:
            days = 7

        if days is None:
            return self.config.DEFAULT_SEARCH_WINDOW_DAYS
        return snap_to_option(days, self.config.SEARCH_WINDOW_OPTIONS)

    def _extract_timezones(self, text: str) -> List[str]:
        found = []
        for keyword, timezone in TIMEZONE_KEYWORDS.items():
            if re.search(rf'\b{re.escape(keyword)}\b', text) and timezone not in found:
                found.append(timezone)
        for timezone, label in self.config.COMMON_TIMEZONES.items():
            city = label.split(" (")[0].lower()
            if (timezone.lower() in text or re.search(rf'\b{re.escape(city)}\b', text)) and timezone not in found:
                found.append(timezone)
        return found

    def _extract_purpose(self, request_text: str) -> str:
        quoted = re.search(r'["“]([^"”]+)["”]', request_text)
        if quoted:
            return quoted.group(1).strip()

        about = re.search(r'\b(?:for|about|to discuss)\s+(?:the\s+)?([A-Za-z][\w\s-]{2,40}?)(?:[,.;]|\s+(?:with|next|this|in|over|and)\b|$)',
                          request_text, re.IGNORECASE)
        if about and not re.match(r'^\d', about.group(1)):
            candidate = about.group(1).strip()
            if not re.search(r'\b(minutes?|mins?|hours?|days?|weeks?)\b', candidate, re.IGNORECASE):
                return candidate
        return ""
