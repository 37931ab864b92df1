"""
Smart Scheduler - Main orchestrator for the conversational scheduling assistant
"""
import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

from config.settings import Config
from src.ai_agent.tool_schemas import TOOLS
from src.calendar.models import ConversationTurn, Role
from src.scheduler.context_builder import ContextWindowBuilder
from src.scheduler.tool_dispatcher import ToolDispatcher
from utils.logger import SmartCalendarLogger

logger = logging.getLogger(__name__)


class LoopState(Enum):
    AWAITING_MODEL = "awaiting_model"
    HAS_TOOL_CALLS = "has_tool_calls"
    DONE = "done"
    FORCED_STOP = "forced_stop"


@dataclass
class LoopOutcome:
    reply: str
    rounds: int = 0
    tool_calls: int = 0
    events_created: int = 0
    degraded: bool = False


@dataclass
class ChatResult:
    conversation_id: str
    message: str
    events_created: bool
    degraded: bool = False

    def to_response(self) -> Dict[str, Any]:
        return {
            "success": True,
            "message": self.message,
            "conversationId": self.conversation_id,
            "eventsCreated": self.events_created,
            "degraded": self.degraded,
        }


class SmartScheduler:
    """
    Main scheduling coordinator.

    Turns one user message into a bounded context, runs the model/tool loop
    and persists the exchange. The gateway is passed in so tests can use a
    scripted client.
    """

    def __init__(self, llm_client, event_store, conversation_store,
                 max_tool_rounds: int = None, recent_turn_limit: int = None):
        self.config = Config()
        self.llm_client = llm_client
        self.event_store = event_store
        self.conversation_store = conversation_store
        if max_tool_rounds is None:
            max_tool_rounds = self.config.MAX_TOOL_ROUNDS
        if max_tool_rounds < 1:
            raise ValueError(f"max_tool_rounds must be >= 1, got {max_tool_rounds}")
        self.max_tool_rounds = max_tool_rounds
        self.context_builder = ContextWindowBuilder(llm_client, recent_turn_limit)
        self.dispatcher = ToolDispatcher(event_store)

        logger.info(f"SmartScheduler initialized (max {self.max_tool_rounds} rounds, "
                    f"{self.context_builder.recent_turn_limit} recent turns)")

    def process_chat_message(self, message: str, conversation_id: Optional[str] = None,
                             owner: Optional[str] = None) -> ChatResult:
        """
        Handle one inbound chat message end to end.

        Gateway and store errors propagate to the caller; nothing is written
        to the conversation log unless the loop completes.
        """
        start_time = time.time()
        owner = owner or self.config.DEFAULT_OWNER

        conversation_id, history = self.conversation_store.resolve(conversation_id, owner)
        logger.info(f"💬 Message for conversation {conversation_id} ({len(history)} prior turns)")

        context = self.context_builder.build(history, message)
        outcome = self.run_tool_loop([turn.to_message() for turn in context], owner)

        self.conversation_store.append_turns(conversation_id, owner, [
            ConversationTurn(role=Role.USER.value, content=message),
            ConversationTurn(role=Role.ASSISTANT.value, content=outcome.reply),
        ])

        SmartCalendarLogger.log_chat_exchange(
            conversation_id, owner, message, outcome, time.time() - start_time
        )
        return ChatResult(
            conversation_id=conversation_id,
            message=outcome.reply,
            events_created=outcome.events_created > 0,
            degraded=outcome.degraded,
        )

    def run_tool_loop(self, context: List[Dict[str, Any]], owner: str) -> LoopOutcome:
        """
        Drive the model until it stops requesting tools.

        Every model call counts as a round. If the last permitted round still
        asks for tools, those calls are not executed and a degraded reply is
        returned.
        """
        transcript = list(context)
        outcome = LoopOutcome(reply=self.config.DEFAULT_REPLY)
        state = LoopState.AWAITING_MODEL
        response = None

        while True:
            if state is LoopState.AWAITING_MODEL:
                response = self.llm_client.complete(
                    instructions=self.config.SCHEDULING_INSTRUCTIONS,
                    context=transcript,
                    tools=TOOLS,
                )
                outcome.rounds += 1

                if not response.has_tool_calls:
                    state = LoopState.DONE
                elif outcome.rounds >= self.max_tool_rounds:
                    state = LoopState.FORCED_STOP
                else:
                    state = LoopState.HAS_TOOL_CALLS

            elif state is LoopState.HAS_TOOL_CALLS:
                results = []
                for call in response.tool_calls:
                    result = self.dispatcher.dispatch(call, owner)
                    outcome.tool_calls += 1
                    outcome.events_created += result.events_created
                    results.append(result)

                transcript.extend(response.output_items)
                transcript.extend(result.to_input_item() for result in results)
                state = LoopState.AWAITING_MODEL

            elif state is LoopState.DONE:
                outcome.reply = response.text or self.config.DEFAULT_REPLY
                logger.info(f"✅ Loop finished after {outcome.rounds} round(s)")
                return outcome

            else:
                logger.warning(f"⚠️  Tool loop stopped after {outcome.rounds} rounds; "
                               f"dropping {len(response.tool_calls)} pending tool call(s)")
                outcome.reply = self.config.DEGRADED_REPLY
                outcome.degraded = True
                return outcome
