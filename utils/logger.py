"""
Logging utilities for the Fair Slot Finder
"""
import logging
import sys
from datetime import datetime
import json

class SlotFinderLogger:
    """Logging setup shared by the API server and the CLI"""

    @staticmethod
    def setup_logging(log_level: str = "INFO", log_file: str = None):
        """Setup logging configuration"""

        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

        root_logger = logging.getLogger()
        root_logger.setLevel(getattr(logging, log_level.upper()))

        # Clear existing handlers
        root_logger.handlers.clear()

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

        if log_file:
            file_handler = logging.FileHandler(log_file)
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)

        # Suppress some noisy loggers
        for noisy in ('urllib3', 'googleapiclient', 'openai', 'httpx'):
            logging.getLogger(noisy).setLevel(logging.WARNING)

        return root_logger

    @staticmethod
    def log_request_response(endpoint: str, request_data: dict,
                             response_data: dict, processing_time: float):
        """Log an API request/response pair for debugging"""
        logger = logging.getLogger(__name__)

        log_entry = {
            "timestamp": datetime.now().isoformat(),
            "endpoint": endpoint,
            "processing_time_seconds": round(processing_time, 3),
            "request_summary": {
                "purpose": request_data.get("meetingPurpose"),
                "participants_count": len(request_data.get("participants") or []),
                "guardrails_count": len(request_data.get("respectedTimezones") or []),
                "duration": request_data.get("duration"),
                "search_window_days": request_data.get("searchWindowDays"),
            },
            "response_summary": {
                "slots": len(response_data.get("slots") or []),
                "holds": len(response_data.get("holds") or []),
                "error": response_data.get("error"),
            }
        }

        logger.info(f"Request processed: {json.dumps(log_entry, indent=2)}")
