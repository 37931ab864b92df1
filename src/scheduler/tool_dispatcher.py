"""
Tool Dispatcher - executes model tool calls against the event store
"""
import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Dict, List, Tuple

from pydantic import ValidationError

from config.settings import Config
from src.ai_agent.tool_schemas import (
    CREATE_EVENTS,
    GET_CURRENT_EVENTS,
    CreateEventsArgs,
    GetCurrentEventsArgs,
    ToolArgumentError,
    ToolCallRequest,
    ToolCallResult,
    UnknownToolError,
    parse_tool_arguments,
)
from src.calendar.models import CalendarEvent, EventDraft, format_datetime
from src.scheduler.conflict_guard import EventConflictError, TimeRange, find_conflicts

logger = logging.getLogger(__name__)


def _describe(event) -> Dict[str, Any]:
    return {
        "title": event.title,
        "startTime": format_datetime(event.start_time),
        "endTime": format_datetime(event.end_time),
    }


class ToolDispatcher:
    """Runs one tool call at a time and turns the outcome into a ToolCallResult"""

    def __init__(self, event_store, max_workers: int = None):
        self.event_store = event_store
        self.max_workers = max_workers or Config.EVENT_WRITE_WORKERS
        self._handlers = {
            GET_CURRENT_EVENTS: self.get_current_events,
            CREATE_EVENTS: self.create_events,
        }

    def dispatch(self, request: ToolCallRequest, owner: str) -> ToolCallResult:
        """
        Execute a single tool call.

        Unknown tools and undecodable arguments produce an error result for
        the model instead of an exception; store errors propagate.
        """
        logger.info(f"🔧 Tool call {request.name} ({request.call_id})")
        try:
            arguments = parse_tool_arguments(request)
        except (UnknownToolError, ToolArgumentError) as e:
            logger.warning(f"Rejected tool call {request.name}: {e}")
            return ToolCallResult(call_id=request.call_id, output={"error": str(e)})

        return self._handlers[request.name](request.call_id, arguments, owner)

    def get_current_events(self, call_id: str, arguments: GetCurrentEventsArgs, owner: str) -> ToolCallResult:
        events = self.event_store.list_events(owner)
        logger.info(f"📋 getCurrentEvents returned {len(events)} event(s)")
        return ToolCallResult(call_id=call_id, output={"events": [event.to_dict() for event in events]})

    def create_events(self, call_id: str, arguments: CreateEventsArgs, owner: str) -> ToolCallResult:
        existing = self.event_store.list_events(owner)
        accepted, rejected = self._screen_drafts(arguments.events, existing)
        created = self._commit_all(accepted, owner, rejected) if accepted else []

        rejected.sort(key=lambda item: item["index"])
        logger.info(f"📅 createEvents: {len(created)} created, {len(rejected)} rejected")
        return ToolCallResult(
            call_id=call_id,
            output={
                "created": [event.to_dict() for event in created],
                "rejected": rejected,
            },
            events_created=len(created),
        )

    def _screen_drafts(self, payloads: List[Dict[str, Any]],
                       existing: List[CalendarEvent]) -> Tuple[List[Tuple[int, EventDraft]], List[Dict[str, Any]]]:
        """Validate each payload and check it against existing events and earlier accepted drafts"""
        accepted: List[Tuple[int, EventDraft]] = []
        rejected: List[Dict[str, Any]] = []

        for index, payload in enumerate(payloads):
            try:
                draft = EventDraft.model_validate(payload)
            except ValidationError as e:
                title = payload.get("title") if isinstance(payload, dict) else None
                logger.warning(f"Invalid event payload #{index}: {e.errors()}")
                rejected.append({
                    "index": index,
                    "title": title,
                    "reason": "invalid",
                    "details": [error["msg"] for error in e.errors()],
                })
                continue

            candidate = TimeRange(draft.start_time, draft.end_time)
            conflicts = find_conflicts(candidate, existing + [d for _, d in accepted])
            if conflicts:
                rejected.append({
                    "index": index,
                    "title": draft.title,
                    "reason": "conflict",
                    "conflicts": [_describe(event) for event in conflicts],
                })
                continue

            accepted.append((index, draft))

        return accepted, rejected

    def _commit_all(self, accepted: List[Tuple[int, EventDraft]], owner: str,
                    rejected: List[Dict[str, Any]]) -> List[CalendarEvent]:
        """Write accepted drafts concurrently, returning created events in payload order"""
        created: Dict[int, CalendarEvent] = {}
        store_error = None

        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(accepted))) as executor:
            futures = {executor.submit(self._commit, draft, owner): (index, draft) for index, draft in accepted}
            for future in as_completed(futures):
                index, draft = futures[future]
                try:
                    created[index] = future.result()
                except EventConflictError as e:
                    # another writer got there first
                    rejected.append({
                        "index": index,
                        "title": draft.title,
                        "reason": "conflict",
                        "conflicts": [_describe(event) for event in e.conflicts],
                    })
                except Exception as e:
                    logger.error(f"❌ Failed to store event '{draft.title}': {e}")
                    store_error = store_error or e

        if store_error is not None:
            raise store_error
        return [created[index] for index in sorted(created)]

    def _commit(self, draft: EventDraft, owner: str) -> CalendarEvent:
        return self.event_store.add_event(
            owner=owner,
            title=draft.title,
            start_time=draft.start_time,
            end_time=draft.end_time,
            flexibility=draft.resolved_flexibility,
            priority=draft.resolved_priority,
        )
