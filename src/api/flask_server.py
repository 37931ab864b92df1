"""
Flask API server for the LockIn Scheduling Assistant
"""
import logging
import signal
import sys
import time
from datetime import datetime

from flask import Flask, request, jsonify
from flask_cors import CORS

from config.settings import Config
from src.calendar.conversation_store import ConversationStore
from src.calendar.database import StoreError
from src.calendar.event_store import EventStore
from src.scheduler.conflict_guard import EventConflictError
from src.scheduler.smart_scheduler import SmartScheduler
from utils.validators import RequestValidator, DataSanitizer

logger = logging.getLogger(__name__)


def build_llm_client(model_name: str = None, use_mock: bool = False):
    """Create the language-model gateway (real or offline mock)"""
    if use_mock:
        from src.ai_agent.mock_llm_client import MockLLMClient
        return MockLLMClient()
    from src.ai_agent.llm_client import LLMClient
    return LLMClient(model_name)


class SmartCalendarAPI:
    """
    Flask API server for chat-driven scheduling and manual event entry
    """

    def __init__(self, model_name: str = None, llm_client=None, event_store=None,
                 conversation_store=None, use_mock: bool = False):
        self.config = Config()
        self.app = Flask(__name__)
        CORS(self.app)  # Enable CORS for the browser client

        self.event_store = event_store or EventStore()
        self.conversation_store = conversation_store or ConversationStore()

        try:
            llm_client = llm_client or build_llm_client(model_name, use_mock)
            self.scheduler = SmartScheduler(llm_client, self.event_store, self.conversation_store)
            self.model_name = getattr(llm_client, "model_name", model_name)
            logger.info("SmartScheduler initialized successfully")
        except Exception as e:
            logger.error(f"Failed to initialize SmartScheduler: {e}")
            self.scheduler = None
            self.model_name = model_name

        self._setup_routes()

    def _owner(self) -> str:
        return DataSanitizer.sanitize_owner(request.headers.get(self.config.USER_HEADER))

    def _setup_routes(self):
        """Setup Flask routes"""

        @self.app.route('/health', methods=['GET'])
        def health_check():
            return jsonify({
                "status": "healthy" if self.scheduler is not None else "degraded",
                "timestamp": datetime.now().isoformat(),
                "model": self.model_name,
            })

        @self.app.route('/chat', methods=['POST'])
        def chat():
            """Main endpoint for chat messages"""
            start_time = time.time()
            data = request.get_json(silent=True)

            errors = RequestValidator.validate_chat_request(data)
            if errors:
                logger.warning(f"Rejected chat request: {errors}")
                return jsonify({"error": errors[0], "details": errors}), 400

            if self.scheduler is None:
                logger.error("Scheduler not available")
                return jsonify({"error": "Failed to process request"}), 500

            data = DataSanitizer.sanitize_chat_request(data)
            owner = self._owner()
            logger.info(f"🚀 CHAT MESSAGE from {owner}: {data['message'][:100]}")

            try:
                result = self.scheduler.process_chat_message(
                    data["message"], conversation_id=data["conversationId"], owner=owner
                )
            except Exception as e:
                logger.exception(f"Error processing chat message: {e}")
                return jsonify({"error": "Failed to process request"}), 500

            logger.info(f"✅ CHAT COMPLETED in {time.time() - start_time:.2f}s "
                        f"(events created: {result.events_created})")
            return jsonify(result.to_response())

        @self.app.route('/events', methods=['GET'])
        def list_events():
            try:
                events = self.event_store.list_events(self._owner())
            except StoreError as e:
                logger.error(f"Error fetching events: {e}")
                return jsonify({"error": "Failed to fetch events"}), 500
            return jsonify([event.to_dict() for event in events])

        @self.app.route('/events', methods=['POST'])
        def create_event():
            draft, errors = RequestValidator.validate_event_request(request.get_json(silent=True))
            if errors:
                return jsonify({"error": "Invalid event", "details": errors}), 400

            try:
                event = self.event_store.add_event(
                    owner=self._owner(),
                    title=draft.title,
                    start_time=draft.start_time,
                    end_time=draft.end_time,
                    flexibility=draft.resolved_flexibility,
                    priority=draft.resolved_priority,
                )
            except EventConflictError as e:
                logger.info(f"Event '{draft.title}' rejected: {e}")
                return jsonify({
                    "error": "Event overlaps with an existing event",
                    "conflicts": [event.to_dict() for event in e.conflicts],
                }), 409
            except StoreError as e:
                logger.error(f"Error creating event: {e}")
                return jsonify({"error": "Failed to create event"}), 500

            return jsonify(event.to_dict()), 201

        @self.app.route('/conversations/<conversation_id>', methods=['GET'])
        def get_conversation(conversation_id):
            try:
                if self.conversation_store.get_owner(conversation_id) != self._owner():
                    return jsonify({"error": "Conversation not found"}), 404
                turns = self.conversation_store.get_turns(conversation_id)
            except StoreError as e:
                logger.error(f"Error fetching conversation {conversation_id}: {e}")
                return jsonify({"error": "Failed to fetch conversation"}), 500
            return jsonify({
                "conversationId": conversation_id,
                "turns": [turn.to_message() for turn in turns],
            })

        @self.app.errorhandler(404)
        def not_found(error):
            return jsonify({"error": "Endpoint not found"}), 404

        @self.app.errorhandler(405)
        def method_not_allowed(error):
            return jsonify({"error": "Method not allowed"}), 405

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
        logger.info(f"Starting LockIn API server on {host}:{port}")
        logger.info(f"Scheduler status: {'Available' if self.scheduler else 'Not Available'}")

        self.app.run(
            host=host,
            port=port,
            debug=debug,
            threaded=True,  # one thread per request
            use_reloader=False
        )


def create_app(model_name: str = None, **kwargs) -> Flask:
    """Factory function to create Flask app"""
    api = SmartCalendarAPI(model_name, **kwargs)
    return api.app
