"""
Calendar and conversation data types shared by the stores and the scheduler
"""
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, Any, Optional
from zoneinfo import ZoneInfo

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from config.settings import Config


class Flexibility(str, Enum):
    """How freely an event may be rescheduled"""
    FLEXIBLE = "FLEXIBLE"
    DAY_LOCKED = "DAY_LOCKED"
    LOCKED = "LOCKED"


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


def to_utc(value: datetime) -> datetime:
    """Normalise a datetime to UTC, reading naive values in the local timezone"""
    if value.tzinfo is None:
        value = value.replace(tzinfo=ZoneInfo(Config.LOCAL_TIMEZONE))
    return value.astimezone(timezone.utc).replace(microsecond=0)


def parse_datetime(value: str) -> datetime:
    """Parse an ISO-8601 timestamp (trailing 'Z' accepted) into an aware UTC datetime"""
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Invalid datetime: {value!r}")
    text = value.strip()
    if text.endswith("Z") or text.endswith("z"):
        text = text[:-1] + "+00:00"
    return to_utc(datetime.fromisoformat(text))


def format_datetime(value: datetime) -> str:
    return to_utc(value).strftime(Config.STORAGE_DATETIME_FORMAT)


class EventDraft(BaseModel):
    """
    An event-shaped payload awaiting validation and commit.

    Used for createEvents tool items and manual event submissions. Null or
    missing flexibility/priority are resolved by ``resolved_flexibility`` and
    ``resolved_priority``.
    """
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    title: str = Field(min_length=1)
    start_time: datetime = Field(alias="startTime")
    end_time: datetime = Field(alias="endTime")
    flexibility: Optional[Flexibility] = None
    priority: Optional[int] = Field(default=None, ge=Config.MIN_PRIORITY, le=Config.MAX_PRIORITY)

    @field_validator("title")
    @classmethod
    def _strip_title(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("title must not be blank")
        return value

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def _normalise_time(cls, value):
        if isinstance(value, str):
            return parse_datetime(value)
        if isinstance(value, datetime):
            return to_utc(value)
        return value

    @model_validator(mode="after")
    def _check_order(self) -> "EventDraft":
        if self.start_time >= self.end_time:
            raise ValueError("startTime must be before endTime")
        return self

    @property
    def resolved_flexibility(self) -> str:
        return (self.flexibility or Flexibility(Config.DEFAULT_FLEXIBILITY)).value

    @property
    def resolved_priority(self) -> int:
        return self.priority if self.priority is not None else Config.DEFAULT_PRIORITY


@dataclass(frozen=True)
class ConversationTurn:
    """One message in a conversation"""
    role: str
    content: str

    def to_message(self) -> Dict[str, str]:
        """Convert to the model input message format"""
        return {"role": self.role, "content": self.content}


class CalendarEvent:
    """A persisted calendar event"""

    def __init__(self, event_id: str, title: str, start_time: datetime, end_time: datetime,
                 flexibility: str = Config.DEFAULT_FLEXIBILITY,
                 priority: int = Config.DEFAULT_PRIORITY,
                 owner: str = Config.DEFAULT_OWNER, created_at: Optional[str] = None):
        self.event_id = event_id
        self.title = title
        self.start_time = start_time
        self.end_time = end_time
        self.flexibility = Flexibility(flexibility).value
        self.priority = priority
        self.owner = owner
        self.created_at = created_at

    @classmethod
    def from_row(cls, row) -> "CalendarEvent":
        return cls(
            event_id=row["id"],
            title=row["title"],
            start_time=parse_datetime(row["start_time"]),
            end_time=parse_datetime(row["end_time"]),
            flexibility=row["flexibility"],
            priority=row["priority"],
            owner=row["owner"],
            created_at=row["created_at"],
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary format for JSON serialization"""
        return {
            "id": self.event_id,
            "title": self.title,
            "startTime": format_datetime(self.start_time),
            "endTime": format_datetime(self.end_time),
            "flexibility": self.flexibility,
            "priority": self.priority,
            "userId": self.owner,
            "createdAt": self.created_at,
        }

    def __repr__(self) -> str:
        return (f"CalendarEvent({self.event_id!r}, {self.title!r}, "
                f"{format_datetime(self.start_time)} -> {format_datetime(self.end_time)})")
