"""
Logging utilities for the LockIn Scheduling Assistant
"""
import logging
import sys
from datetime import datetime
import json


class SmartCalendarLogger:
    """Custom logger for the scheduling assistant"""

    @staticmethod
    def setup_logging(log_level: str = "INFO", log_file: str = None):
        """Setup logging configuration"""

        # Create formatter
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

        # Setup root logger
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
        for noisy in ('urllib3', 'httpx', 'httpcore', 'openai', 'werkzeug'):
            logging.getLogger(noisy).setLevel(logging.WARNING)

        return root_logger

    @staticmethod
    def log_chat_exchange(conversation_id: str, owner: str, message: str,
                          outcome, processing_time: float):
        """Log one processed chat message as a single JSON summary"""
        logger = logging.getLogger(__name__)

        log_entry = {
            "timestamp": datetime.now().isoformat(),
            "conversation_id": conversation_id,
            "owner": owner,
            "processing_time_seconds": round(processing_time, 3),
            "message_preview": message[:80],
            "rounds": outcome.rounds,
            "tool_calls": outcome.tool_calls,
            "events_created": outcome.events_created,
            "degraded": outcome.degraded,
        }

        logger.info(f"Chat processed: {json.dumps(log_entry)}")
