"""
SQLite-backed event store for the LockIn Scheduling Assistant
"""
import logging
import uuid
from datetime import datetime
from typing import List, Optional

from config.settings import Config
from src.calendar import database
from src.calendar.models import CalendarEvent, Flexibility, format_datetime
from src.scheduler.conflict_guard import TimeRange, ensure_no_conflicts

logger = logging.getLogger(__name__)


class EventStore:
    """Persistent collection of scheduled events, queried in start-time order"""

    def __init__(self, db_path: str = None):
        self.db_path = db_path or Config.get_database_path()
        database.initialize(self.db_path)

    def list_events(self, owner: str) -> List[CalendarEvent]:
        """Get all events for an owner ordered by start time ascending"""
        with database.connect(self.db_path) as conn:
            rows = conn.execute(
                "SELECT * FROM events WHERE owner = ? ORDER BY start_time ASC, created_at ASC",
                (owner,),
            ).fetchall()
        events = [CalendarEvent.from_row(row) for row in rows]
        logger.debug(f"📋 Loaded {len(events)} events for {owner}")
        return events

    def get_event(self, event_id: str) -> Optional[CalendarEvent]:
        with database.connect(self.db_path) as conn:
            row = conn.execute("SELECT * FROM events WHERE id = ?", (event_id,)).fetchone()
        return CalendarEvent.from_row(row) if row else None

    def add_event(self, owner: str, title: str, start_time: datetime, end_time: datetime,
                  flexibility: str = Config.DEFAULT_FLEXIBILITY,
                  priority: int = Config.DEFAULT_PRIORITY) -> CalendarEvent:
        """
        Create an event after checking it against the owner's existing events.

        The check and the insert share one write transaction, so two writers
        cannot both commit overlapping events. Raises EventConflictError.
        """
        candidate = TimeRange.of(start_time, end_time)
        event = CalendarEvent(
            event_id=str(uuid.uuid4()),
            title=title,
            start_time=start_time,
            end_time=end_time,
            flexibility=Flexibility(flexibility).value,
            priority=priority,
            owner=owner,
            created_at=database.utc_now(),
        )

        with database.connect(self.db_path) as conn:
            conn.execute("BEGIN IMMEDIATE")
            rows = conn.execute(
                "SELECT * FROM events WHERE owner = ? AND start_time < ? AND end_time > ?",
                (owner, format_datetime(end_time), format_datetime(start_time)),
            ).fetchall()
            ensure_no_conflicts(candidate, [CalendarEvent.from_row(row) for row in rows])
            conn.execute(
                "INSERT INTO events (id, owner, title, start_time, end_time, flexibility, priority, created_at) "
                "VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    event.event_id,
                    owner,
                    title,
                    format_datetime(start_time),
                    format_datetime(end_time),
                    event.flexibility,
                    priority,
                    event.created_at,
                ),
            )

        logger.info(f"📅 Created event '{title}' {format_datetime(start_time)} -> "
                    f"{format_datetime(end_time)} for {owner}")
        return event
