#!/usr/bin/env python3
"""
Main entry point for the Fair Slot Finder

Runs the API server, or a one-off availability search / outreach draft
from a JSON configuration file.
"""

import sys
import json
import logging
from pathlib import Path

# Add the project root to the Python path
sys.path.insert(0, str(Path(__file__).parent))

from src.api.flask_server import SlotFinderAPI
from src.calendar.calendar_manager import create_calendar_manager
from src.calendar.mock_calendar_manager import MockCalendarManager
from src.scheduler.errors import SlotFinderError
from src.scheduler.models import SearchConfiguration
from src.scheduler.slot_finder import SlotFinder
from src.scheduler.summary import SchedulingSession
from src.scheduler.timezones import parse_instant
from utils.logger import SlotFinderLogger
from utils.validators import RequestValidator

logger = logging.getLogger(__name__)

def load_configuration(config_file: str) -> SearchConfiguration:
    """Load and validate a template-shaped configuration file"""
    with open(config_file, 'r') as f:
        config_data = json.load(f)

    errors = RequestValidator.validate_config_structure(config_data)
    if errors:
        raise ValueError("Invalid configuration:\n  " + "\n  ".join(errors))

    return SearchConfiguration.from_template(config_data)

def build_calendar_manager(busy_file: str = None):
    """A free/busy snapshot file selects the mock backend"""
    if busy_file:
        return MockCalendarManager.from_file(busy_file)
    return create_calendar_manager()

def run_search(config_file: str, busy_file: str = None, now: str = None):
    """Search availability for one configuration"""
    config = load_configuration(config_file)
    finder = SlotFinder(build_calendar_manager(busy_file))
    result = finder.find_common_free_slots(config, now=parse_instant(now) if now else None)
    return config, finder, result

def run_draft(config_file: str, selection: str, busy_file: str = None, now: str = None):
    """Search, pick slots by 1-based position and build the outreach draft"""
    config, finder, result = run_search(config_file, busy_file, now)

    session = SchedulingSession(config, finder, result.slots)
    for position in [int(part) for part in selection.split(',') if part.strip()]:
        if position < 1 or position > len(result.slots):
            raise ValueError(f"Slot {position} is not in the search result ({len(result.slots)} slots)")
        session.toggle_slot(result.slots[position - 1])

    session.prepare_summary()
    return session

def run_server(host="0.0.0.0", port=5000):
    """Run the Flask API server"""
    SlotFinderLogger.setup_logging(log_level="INFO")
    logger.info("Starting Fair Slot Finder...")

    try:
        api = SlotFinderAPI()
        api.run(host=host, port=port)
    except KeyboardInterrupt:
        logger.info("Server shutdown requested")

def _write_output(payload, output_file: str = None):
    if output_file:
        with open(output_file, 'w') as f:
            json.dump(payload, f, indent=2, ensure_ascii=False)
    else:
        print(json.dumps(payload, indent=2, ensure_ascii=False))

def main():
    """Main CLI entry point"""
    import argparse

    parser = argparse.ArgumentParser(description='Fair multi-participant meeting slot finder')
    parser.add_argument('--log-level', default='WARNING', help='Logging level for search commands')
    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    server_parser = subparsers.add_parser('server', help='Run API server')
    server_parser.add_argument('--host', default='0.0.0.0', help='Host to bind to')
    server_parser.add_argument('--port', type=int, default=5000, help='Port to bind to')

    search_parser = subparsers.add_parser('search', help='Find available slots')
    search_parser.add_argument('config_file', help='Configuration JSON file')
    search_parser.add_argument('--busy', help='Free/busy snapshot JSON (uses the mock backend)')
    search_parser.add_argument('--now', help='Search as of this ISO 8601 instant')
    search_parser.add_argument('--output', help='Output JSON file')

    draft_parser = subparsers.add_parser('draft', help='Build the outreach draft for chosen slots')
    draft_parser.add_argument('config_file', help='Configuration JSON file')
    draft_parser.add_argument('--select', required=True, help='Comma-separated slot numbers, e.g. 1,3')
    draft_parser.add_argument('--busy', help='Free/busy snapshot JSON (uses the mock backend)')
    draft_parser.add_argument('--now', help='Search as of this ISO 8601 instant')
    draft_parser.add_argument('--output', help='Output JSON file')

    args = parser.parse_args()

    if args.command == 'server':
        run_server(host=args.host, port=args.port)
        return 0

    if args.command not in ('search', 'draft'):
        parser.print_help()
        return 1

    SlotFinderLogger.setup_logging(log_level=args.log_level)

    try:
        if args.command == 'search':
            _, _, result = run_search(args.config_file, args.busy, args.now)
            _write_output(result.to_dict(), args.output)
        else:
            session = run_draft(args.config_file, args.select, args.busy, args.now)
            _write_output(session.to_dict(), args.output)
    except (SlotFinderError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    return 0

if __name__ == '__main__':
    sys.exit(main())
