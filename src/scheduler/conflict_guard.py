"""
Conflict Guard - overlap checks run before an event is committed
"""
import logging
from datetime import datetime
from typing import Iterable, List, NamedTuple

logger = logging.getLogger(__name__)


class EventConflictError(Exception):
    """Raised when a new event would overlap existing events"""

    def __init__(self, conflicts):
        self.conflicts = list(conflicts)
        titles = ", ".join(event.title for event in self.conflicts)
        super().__init__(f"Event overlaps with existing event(s): {titles}")


class TimeRange(NamedTuple):
    """Half-open interval [start, end)"""
    start: datetime
    end: datetime

    @classmethod
    def of(cls, start: datetime, end: datetime) -> "TimeRange":
        if start >= end:
            raise ValueError(f"Start time {start.isoformat()} must be before end time {end.isoformat()}")
        return cls(start, end)

    def overlaps(self, other: "TimeRange") -> bool:
        # touching endpoints are not an overlap
        return self.start < other.end and other.start < self.end


def event_range(event) -> TimeRange:
    return TimeRange(event.start_time, event.end_time)


def has_overlap(candidate: TimeRange, existing: Iterable[TimeRange]) -> bool:
    """Check if the candidate range overlaps any of the existing ranges"""
    return any(candidate.overlaps(other) for other in existing)


def find_conflicts(candidate: TimeRange, events: Iterable) -> List:
    """Return the events whose time range overlaps the candidate"""
    conflicts = [event for event in events if candidate.overlaps(event_range(event))]
    if conflicts:
        logger.info(f"⚠️  {len(conflicts)} conflict(s) for {candidate.start.isoformat()} - "
                    f"{candidate.end.isoformat()}")
    return conflicts


def ensure_no_conflicts(candidate: TimeRange, events: Iterable) -> None:
    """Raise EventConflictError if the candidate overlaps any event"""
    conflicts = find_conflicts(candidate, events)
    if conflicts:
        raise EventConflictError(conflicts)
