#!/usr/bin/env python3
"""
Main entry point for the LockIn Scheduling Assistant

Runs the API server, or talks to the assistant directly from the command line.
"""

import json
import logging
import sys
from pathlib import Path

# Add the project directory to the Python path
sys.path.insert(0, str(Path(__file__).parent))

from config.settings import Config
from src.api.flask_server import SmartCalendarAPI, build_llm_client
from src.calendar.conversation_store import ConversationStore
from src.calendar.event_store import EventStore
from src.scheduler.smart_scheduler import SmartScheduler
from utils.logger import SmartCalendarLogger


def run_server(host=None, port=None, model=None, use_mock=False):
    """Run the Flask API server"""
    SmartCalendarLogger.setup_logging(log_level=Config.LOG_LEVEL, log_file=Config.LOG_FILE)
    logger = logging.getLogger(__name__)

    logger.info(f"Starting LockIn Scheduling Assistant ({'mock model' if use_mock else model or Config.DEFAULT_MODEL})...")

    try:
        api = SmartCalendarAPI(model_name=model, use_mock=use_mock)
        api.run(host=host, port=port)
    except KeyboardInterrupt:
        logger.info("Server shutdown requested")


def run_chat(message, conversation_id=None, model=None, use_mock=False):
    """Send one message to the assistant and print the reply as JSON"""
    SmartCalendarLogger.setup_logging(log_level="WARNING")

    event_store = EventStore()
    scheduler = SmartScheduler(build_llm_client(model, use_mock), event_store, ConversationStore())
    result = scheduler.process_chat_message(message, conversation_id=conversation_id)
    print(json.dumps(result.to_response(), indent=2))


def list_events():
    """Print the default owner's events in start-time order"""
    events = EventStore().list_events(Config.DEFAULT_OWNER)
    print(json.dumps([event.to_dict() for event in events], indent=2))


def main():
    """Main CLI entry point"""
    import argparse

    parser = argparse.ArgumentParser(description='LockIn Scheduling Assistant')
    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    server_parser = subparsers.add_parser('server', help='Run API server')
    server_parser.add_argument('--host', default=Config.API_HOST, help='Host to bind to')
    server_parser.add_argument('--port', type=int, default=Config.API_PORT, help='Port to bind to')
    server_parser.add_argument('--model', help='Model name override')
    server_parser.add_argument('--mock', action='store_true', help='Use the offline mock model')

    chat_parser = subparsers.add_parser('chat', help='Send one chat message')
    chat_parser.add_argument('message', help='Message text')
    chat_parser.add_argument('--conversation-id', help='Continue an existing conversation')
    chat_parser.add_argument('--model', help='Model name override')
    chat_parser.add_argument('--mock', action='store_true', help='Use the offline mock model')

    subparsers.add_parser('events', help='List scheduled events')

    args = parser.parse_args()

    if args.command == 'server':
        run_server(host=args.host, port=args.port, model=args.model, use_mock=args.mock)

    elif args.command == 'chat':
        try:
            run_chat(args.message, conversation_id=args.conversation_id,
                     model=args.model, use_mock=args.mock)
        except Exception as e:
            print(json.dumps({"error": f"Failed to process request: {e}"}), file=sys.stderr)
            sys.exit(1)

    elif args.command == 'events':
        list_events()

    else:
        parser.print_help()


if __name__ == '__main__':
    main()
