"""Shared test fixtures for the LockIn tests.

- Database isolation with a temporary sqlite file per test
- Event and conversation stores bound to that file
- A scheduler factory wired to a scripted MockLLMClient
"""

from datetime import datetime, timezone
from pathlib import Path

import pytest

from src.ai_agent.mock_llm_client import MockLLMClient
from src.calendar.conversation_store import ConversationStore
from src.calendar.event_store import EventStore
from src.scheduler.smart_scheduler import SmartScheduler

OWNER = "test-user"


def utc(year, month, day, hour, minute=0) -> datetime:
    return datetime(year, month, day, hour, minute, tzinfo=timezone.utc)


@pytest.fixture
def temp_db(tmp_path: Path) -> Path:
    """Path to a fresh database file, removed with tmp_path"""
    return tmp_path / "lockin.db"


@pytest.fixture
def event_store(temp_db: Path) -> EventStore:
    return EventStore(str(temp_db))


@pytest.fixture
def conversation_store(temp_db: Path) -> ConversationStore:
    return ConversationStore(str(temp_db))


@pytest.fixture
def make_scheduler(event_store, conversation_store):
    """Build a SmartScheduler around a MockLLMClient with the given script"""

    def _make(responses=(), default=None, max_tool_rounds=None, **client_kwargs):
        llm_client = MockLLMClient(responses=responses, default=default, **client_kwargs)
        scheduler = SmartScheduler(
            llm_client, event_store, conversation_store, max_tool_rounds=max_tool_rounds
        )
        return scheduler, llm_client

    return _make
