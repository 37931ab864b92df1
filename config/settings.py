"""
Configuration settings for the LockIn Scheduling Assistant
"""
import os
from typing import Dict, Any


class Config:
    # OpenAI Responses API configuration
    OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
    OPENAI_BASE_URL = os.getenv("OPENAI_BASE_URL")  # None -> SDK default endpoint

    DEFAULT_MODEL = os.getenv("LOCKIN_MODEL", "gpt-4o-mini")
    SUMMARY_MODEL = os.getenv("LOCKIN_SUMMARY_MODEL", "gpt-4o-mini")
    LLM_TIMEOUT = float(os.getenv("LOCKIN_LLM_TIMEOUT", "30"))
    LLM_MAX_RETRIES = 0  # transport failures surface to the caller
    SUMMARY_MAX_TOKENS = 150

    # Conversation context
    RECENT_TURN_LIMIT = 6  # turns kept verbatim, older ones are summarised

    # Tool loop
    MAX_TOOL_ROUNDS = int(os.getenv("LOCKIN_MAX_TOOL_ROUNDS", "10"))
    EVENT_WRITE_WORKERS = 4

    # Storage
    DATABASE_PATH = os.getenv("LOCKIN_DB_PATH", os.path.join("data", "lockin.db"))
    DEFAULT_OWNER = os.getenv("LOCKIN_DEFAULT_OWNER", "local-user")

    # Event defaults
    DEFAULT_FLEXIBILITY = "FLEXIBLE"
    DEFAULT_PRIORITY = 3
    MIN_PRIORITY = 1
    MAX_PRIORITY = 5

    # Date/Time
    LOCAL_TIMEZONE = os.getenv("LOCKIN_TIMEZONE", "UTC")  # applied to offset-less timestamps
    STORAGE_DATETIME_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

    # API Configuration
    API_HOST = "0.0.0.0"
    API_PORT = 5000
    USER_HEADER = "X-User-Id"

    # Logging
    LOG_LEVEL = os.getenv("LOCKIN_LOG_LEVEL", "INFO")
    LOG_FILE = os.getenv("LOCKIN_LOG_FILE")

    # Replies
    DEFAULT_REPLY = "Events processed successfully"
    DEGRADED_REPLY = ("I couldn't finish scheduling that request. "
                      "Please try breaking it into smaller steps.")
    FALLBACK_SUMMARY = "Previous conversation about calendar scheduling."

    # Prompts
    SCHEDULING_INSTRUCTIONS = (
        "You are a calendar scheduling assistant. Use createEvents function to schedule "
        "events based on user requests. Always use getCurrentEvents to check existing events "
        "for conflicts. Ask ONE clarifying question if needed, then create events on next "
        "response. If user doesn't specify which days, choose suitable ones. Infer meaningful "
        "titles from context. Assume user's local timezone. Only ask if date/time is genuinely "
        "unclear. Max 25 words response."
    )

    SUMMARY_INSTRUCTIONS = (
        "Summarize this conversation history in 2-3 sentences, focusing on key scheduling "
        "requests, decisions made, and important context for future interactions."
    )

    @classmethod
    def get_model_config(cls, model_name: str = None) -> Dict[str, Any]:
        """Get gateway construction parameters"""
        return {
            "model": model_name or cls.DEFAULT_MODEL,
            "summary_model": cls.SUMMARY_MODEL,
            "api_key": cls.OPENAI_API_KEY,
            "base_url": cls.OPENAI_BASE_URL,
            "timeout": cls.LLM_TIMEOUT,
            "max_retries": cls.LLM_MAX_RETRIES,
            "summary_max_tokens": cls.SUMMARY_MAX_TOKENS,
        }

    @classmethod
    def get_database_path(cls) -> str:
        """Get the sqlite database path, creating its directory"""
        directory = os.path.dirname(cls.DATABASE_PATH)
        if directory:
            os.makedirs(directory, exist_ok=True)
        return cls.DATABASE_PATH
