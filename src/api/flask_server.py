"""
Flask API server for the Fair Slot Finder
"""
import logging
import time
from flask import Flask, request, jsonify
from flask_cors import CORS
import signal
import sys
from datetime import datetime

from config.settings import Config
from src.ai_agent.llm_client import LLMClient
from src.calendar.calendar_manager import create_calendar_manager
from src.scheduler.errors import (
    FreeBusyLookupError, HoldCreationError, NoSlotsSelectedError, SearchValidationError,
)
from src.scheduler.models import SearchConfiguration
from src.scheduler.quick_slots import QUICK_PRESETS, generate_quick_slots
from src.scheduler.slot_finder import SlotFinder
from src.scheduler.summary import SchedulingSession
from src.scheduler.timezones import is_valid_timezone, parse_instant, to_iso_utc
from utils.logger import SlotFinderLogger
from utils.validators import RequestValidator, DataSanitizer

logger = logging.getLogger(__name__)

class PayloadError(ValueError):
    """Request body failed structural validation"""

    def __init__(self, errors):
        super().__init__("; ".join(errors))
        self.errors = errors

class SlotFinderAPI:
    """
    HTTP surface over the slot finder: search, summarize, commit holds
    """

    def __init__(self, calendar_manager=None, llm_client=None):
        self.config = Config()
        self.app = Flask(__name__)
        CORS(self.app)  # Enable CORS for the dashboard frontend

        self.calendar_manager = calendar_manager or create_calendar_manager()
        self.slot_finder = SlotFinder(self.calendar_manager)
        self._llm_client = llm_client

        self._setup_routes()

    @property
    def llm_client(self) -> LLMClient:
        if self._llm_client is None:
            self._llm_client = LLMClient()
        return self._llm_client

    def _parse_config(self, data) -> SearchConfiguration:
        config_data = data.get("config") if isinstance(data, dict) else None
        if config_data is None:
            raise PayloadError(["Missing 'config' object"])

        errors = RequestValidator.validate_config_structure(config_data)
        if errors:
            raise PayloadError(errors)

        return SearchConfiguration.from_template(DataSanitizer.sanitize_config(config_data))

    def _parse_now(self, data):
        now = data.get("now")
        if now is None:
            return None
        if not RequestValidator.validate_iso_datetime(now):
            raise PayloadError([f"Invalid 'now': {now}"])
        return parse_instant(now)

    def _build_session(self, data) -> SchedulingSession:
        """Rebuild a selection from the request: slots are re-evaluated, never trusted"""
        config = self._parse_config(data)
        slots = data.get("slots", [])

        errors = RequestValidator.validate_selection_structure(slots)
        if errors:
            raise PayloadError(errors)

        session = SchedulingSession(config, self.slot_finder)
        session.select_times(
            {"start": parse_instant(slot["start"]), "end": parse_instant(slot["end"])}
            for slot in slots
        )
        session.prepare_summary()

        hold_titles = data.get("holdTitles")
        if hold_titles is not None and not isinstance(hold_titles, list):
            raise PayloadError(["'holdTitles' must be a list"])

        for index, title in enumerate(hold_titles or []):
            if index < len(session.selected) and isinstance(title, str):
                session.set_hold_title(index, title)

        if isinstance(data.get("emailDraft"), str):
            session.edit_draft(data["emailDraft"])

        return session

    def _setup_routes(self):
        """Setup Flask routes"""

        @self.app.route('/health', methods=['GET'])
        def health_check():
            return jsonify({
                "status": "healthy",
                "timestamp": datetime.now().isoformat(),
                "calendar_backend": getattr(self.calendar_manager, "backend_name", "unknown"),
                "supports_free_busy": bool(getattr(self.calendar_manager, "supports_free_busy", False)),
            })

        @self.app.route('/availability', methods=['POST'])
        def find_availability():
            """Run one availability search"""
            start_time = time.time()
            data = request.get_json(silent=True) or {}

            config = self._parse_config(data)
            result = self.slot_finder.find_common_free_slots(config, now=self._parse_now(data))
            response = result.to_dict()

            SlotFinderLogger.log_request_response(
                "/availability", data.get("config", {}), response, time.time() - start_time
            )
            return jsonify(response)

        @self.app.route('/summary', methods=['POST'])
        def summarize_selection():
            """Hold titles, per-timezone summaries, outreach draft and hold payloads"""
            data = request.get_json(silent=True) or {}
            session = self._build_session(data)
            return jsonify(session.to_dict())

        @self.app.route('/holds', methods=['POST'])
        def create_holds():
            """Create one hold per selected slot on the managed calendar"""
            data = request.get_json(silent=True) or {}
            session = self._build_session(data)
            created = session.commit(self.calendar_manager)

            response = session.to_dict()
            response["created"] = [event.get("id") for event in created]
            return jsonify(response)

        @self.app.route('/parse-request', methods=['POST'])
        def parse_request():
            data = request.get_json(silent=True) or {}
            if not isinstance(data, dict):
                raise PayloadError(["Request body must be a JSON object"])
            text = data.get("text")
            if not isinstance(text, str) or not text.strip():
                raise PayloadError(["Missing 'text'"])
            return jsonify(self.llm_client.parse_availability_request(text))

        @self.app.route('/quick-slots', methods=['GET'])
        def quick_slots():
            preset = request.args.get("preset", "this-week")
            timezone = request.args.get("timezone", self.config.DEFAULT_TIMEZONE)
            duration = request.args.get("duration", self.config.DEFAULT_MEETING_DURATION, type=int)

            if preset not in QUICK_PRESETS:
                raise PayloadError([f"Unknown preset: {preset}"])
            if not is_valid_timezone(timezone):
                raise PayloadError([f"Invalid timezone: {timezone}"])

            slots = generate_quick_slots(preset, timezone, duration)
            return jsonify({
                "preset": preset,
                "description": QUICK_PRESETS[preset],
                "slots": [{"start": to_iso_utc(s["start"]), "end": to_iso_utc(s["end"])} for s in slots],
            })

        @self.app.errorhandler(PayloadError)
        def payload_error(error):
            logger.warning(f"Rejected request payload: {error.errors}")
            return jsonify({"error": "Invalid request", "details": error.errors}), 400

        @self.app.errorhandler(SearchValidationError)
        def search_refused(error):
            return jsonify({"error": error.message}), 400

        @self.app.errorhandler(NoSlotsSelectedError)
        def nothing_selected(error):
            return jsonify({"error": error.message}), 400

        @self.app.errorhandler(FreeBusyLookupError)
        def lookup_failed(error):
            return jsonify({"error": error.message}), 502

        @self.app.errorhandler(HoldCreationError)
        def holds_failed(error):
            return jsonify({
                "error": error.message,
                "created": [event.get("id") for event in error.created],
            }), 502

        @self.app.errorhandler(404)
        def not_found(error):
            return jsonify({"error": "Endpoint not found"}), 404

        @self.app.errorhandler(500)
        def internal_error(error):
            return jsonify({"error": "Internal server error"}), 500

    def _setup_signal_handlers(self):
        """Setup graceful shutdown handlers"""
        def signal_handler(signum, frame):
            logger.info(f"Received signal {signum}, shutting down gracefully...")
            sys.exit(0)

        signal.signal(signal.SIGINT, signal_handler)
        signal.signal(signal.SIGTERM, signal_handler)

    def run(self, host=None, port=None, debug=False):
        """Run the Flask server"""
        host = host or self.config.API_HOST
        port = port or self.config.API_PORT

        self._setup_signal_handlers()

        logger.info(f"Starting Slot Finder API server on {host}:{port}")
        logger.info(f"Calendar backend: {getattr(self.calendar_manager, 'backend_name', 'unknown')}")

        self.app.run(
            host=host,
            port=port,
            debug=debug,
            threaded=True,
            use_reloader=False
        )

def create_app(calendar_manager=None, llm_client=None) -> Flask:
    """Factory function to create Flask app"""
    api = SlotFinderAPI(calendar_manager=calendar_manager, llm_client=llm_client)
    return api.app
