"""Tests for the sqlite event and conversation stores"""

from datetime import datetime, timedelta, timezone

import pytest

from conftest import OWNER, utc
from src.calendar.database import StoreError
from src.calendar.models import ConversationTurn, EventDraft, parse_datetime
from src.scheduler.conflict_guard import EventConflictError


class TestEventStore:

    def test_add_and_list_in_start_order(self, event_store):
        event_store.add_event(OWNER, "Lunch", utc(2024, 6, 3, 12), utc(2024, 6, 3, 13))
        event_store.add_event(OWNER, "Standup", utc(2024, 6, 3, 9), utc(2024, 6, 3, 9, 15))
        event_store.add_event(OWNER, "Gym", utc(2024, 6, 2, 18), utc(2024, 6, 2, 19))

        titles = [event.title for event in event_store.list_events(OWNER)]

        assert titles == ["Gym", "Standup", "Lunch"]

    def test_defaults(self, event_store):
        event = event_store.add_event(OWNER, "Gym", utc(2024, 6, 3, 18), utc(2024, 6, 3, 19))

        assert event.flexibility == "FLEXIBLE"
        assert event.priority == 3
        assert event_store.get_event(event.event_id).title == "Gym"

    def test_overlapping_event_is_rejected(self, event_store):
        event_store.add_event(OWNER, "Gym", utc(2024, 6, 3, 18), utc(2024, 6, 3, 19))

        with pytest.raises(EventConflictError) as excinfo:
            event_store.add_event(OWNER, "Run", utc(2024, 6, 3, 18, 30), utc(2024, 6, 3, 19, 30))

        assert [event.title for event in excinfo.value.conflicts] == ["Gym"]
        assert len(event_store.list_events(OWNER)) == 1

    def test_adjacent_event_is_accepted(self, event_store):
        event_store.add_event(OWNER, "Gym", utc(2024, 6, 3, 18), utc(2024, 6, 3, 19))
        event_store.add_event(OWNER, "Dinner", utc(2024, 6, 3, 19), utc(2024, 6, 3, 20))

        assert len(event_store.list_events(OWNER)) == 2

    def test_owners_do_not_conflict(self, event_store):
        event_store.add_event("alice", "Gym", utc(2024, 6, 3, 18), utc(2024, 6, 3, 19))
        event_store.add_event("bob", "Gym", utc(2024, 6, 3, 18), utc(2024, 6, 3, 19))

        assert len(event_store.list_events("alice")) == 1
        assert len(event_store.list_events("bob")) == 1

    def test_zero_length_event_is_rejected(self, event_store):
        with pytest.raises(ValueError):
            event_store.add_event(OWNER, "Nothing", utc(2024, 6, 3, 18), utc(2024, 6, 3, 18))

    def test_times_with_offsets_are_normalised(self, event_store):
        plus_two = timezone(timedelta(hours=2))
        event = event_store.add_event(
            OWNER, "Call", datetime(2024, 6, 3, 20, 0, tzinfo=plus_two), datetime(2024, 6, 3, 21, 0, tzinfo=plus_two)
        )

        stored = event_store.get_event(event.event_id).to_dict()
        assert stored["startTime"] == "2024-06-03T18:00:00Z"
        assert stored["endTime"] == "2024-06-03T19:00:00Z"

    def test_unwritable_database_raises_store_error(self, tmp_path):
        from src.calendar.event_store import EventStore

        with pytest.raises(StoreError):
            EventStore(str(tmp_path))  # a directory, not a file


class TestConversationStore:

    def test_new_conversation_has_no_history(self, conversation_store):
        conversation_id, history = conversation_store.resolve(None, OWNER)

        assert conversation_id
        assert history == []
        assert conversation_store.get_owner(conversation_id) is None

    def test_append_creates_conversation_and_keeps_order(self, conversation_store):
        conversation_id, _ = conversation_store.resolve(None, OWNER)
        conversation_store.append_turns(conversation_id, OWNER, [
            ConversationTurn("user", "Book gym"),
            ConversationTurn("assistant", "Which day?"),
        ])
        conversation_store.append_turns(conversation_id, OWNER, [
            ConversationTurn("user", "Monday"),
            ConversationTurn("assistant", "Booked"),
        ])

        resolved_id, history = conversation_store.resolve(conversation_id, OWNER)

        assert resolved_id == conversation_id
        assert conversation_store.get_owner(conversation_id) == OWNER
        assert [turn.content for turn in history] == ["Book gym", "Which day?", "Monday", "Booked"]

    def test_foreign_conversation_is_not_resolved(self, conversation_store):
        conversation_id, _ = conversation_store.resolve(None, "alice")
        conversation_store.append_turns(conversation_id, "alice", [ConversationTurn("user", "hi")])

        resolved_id, history = conversation_store.resolve(conversation_id, "bob")

        assert resolved_id != conversation_id
        assert history == []

    def test_turns_are_immutable(self):
        turn = ConversationTurn("user", "hi")
        with pytest.raises(AttributeError):
            turn.content = "changed"


class TestEventDraft:

    def test_parses_tool_payload(self):
        draft = EventDraft.model_validate({
            "title": "  Gym ",
            "startTime": "2024-06-03T18:00:00Z",
            "endTime": "2024-06-03T19:00:00Z",
            "flexibility": None,
            "priority": None,
        })

        assert draft.title == "Gym"
        assert draft.start_time == utc(2024, 6, 3, 18)
        assert draft.resolved_flexibility == "FLEXIBLE"
        assert draft.resolved_priority == 3

    def test_flexibility_and_priority_may_be_omitted(self):
        draft = EventDraft.model_validate({
            "title": "Gym", "startTime": "2024-06-03T18:00:00Z", "endTime": "2024-06-03T19:00:00Z",
        })

        assert draft.resolved_flexibility == "FLEXIBLE"
        assert draft.resolved_priority == 3

    @pytest.mark.parametrize("payload", [
        {"title": "Gym", "startTime": "2024-06-03T18:00:00Z"},
        {"title": "", "startTime": "2024-06-03T18:00:00Z", "endTime": "2024-06-03T19:00:00Z"},
        {"title": "Gym", "startTime": "2024-06-03T18:00:00Z", "endTime": "2024-06-03T19:00:00Z", "priority": 0},
        {"title": "Gym", "startTime": "2024-06-03T18:00:00Z", "endTime": "2024-06-03T19:00:00Z", "flexibility": "SOMETIMES"},
        {"title": "Gym", "startTime": "2024-06-03T18:00:00Z", "endTime": "2024-06-03T19:00:00Z", "location": "Club"},
    ])
    def test_rejects_invalid_payloads(self, payload):
        from pydantic import ValidationError

        with pytest.raises(ValidationError):
            EventDraft.model_validate(payload)

    def test_parse_datetime_accepts_z_suffix(self):
        assert parse_datetime("2024-06-03T18:00:00Z") == utc(2024, 6, 3, 18)
