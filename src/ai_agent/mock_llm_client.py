"""
Mock LLM client for testing and offline runs without the OpenAI API
"""
import json
import logging
from typing import Any, Dict, List, Optional, Sequence

from src.ai_agent.llm_client import ModelResponse
from src.ai_agent.tool_schemas import GET_CURRENT_EVENTS, ToolCallRequest
from src.calendar.models import ConversationTurn

logger = logging.getLogger(__name__)


def text_response(text: str) -> ModelResponse:
    return ModelResponse(text=text, output_items=[{"role": "assistant", "content": text}])


def tool_call_response(name: str, arguments: Any = None, call_id: str = "call_1") -> ModelResponse:
    """Build a response requesting a single tool call; dict arguments are JSON-encoded"""
    if arguments is None:
        arguments = {}
    if not isinstance(arguments, str):
        arguments = json.dumps(arguments)
    call = ToolCallRequest(name=name, arguments=arguments, call_id=call_id)
    return ModelResponse(
        tool_calls=[call],
        output_items=[{"type": "function_call", "call_id": call_id, "name": name, "arguments": arguments}],
    )


class MockLLMClient:
    """
    Gateway stand-in that replays scripted responses.

    Each scripted entry is a ModelResponse or an exception instance to raise.
    When the script runs out, ``default`` is returned; without a default the
    client asks for getCurrentEvents once and then replies with text.
    """

    def __init__(self, responses: Sequence = (), default: Optional[ModelResponse] = None,
                 summary: str = "The user has been scheduling events.",
                 summary_error: Optional[Exception] = None, model_name: str = "mock-llm"):
        self.model_name = model_name
        self._script = list(responses)
        self.default = default
        self.summary = summary
        self.summary_error = summary_error
        self.calls: List[Dict[str, Any]] = []
        self.summary_calls: List[List[ConversationTurn]] = []
        logger.info(f"Initialized Mock LLM client: {self.model_name}")

    def complete(self, instructions: str, context: Sequence[Dict[str, Any]],
                 tools: Optional[List[Dict[str, Any]]] = None, model: str = None,
                 max_output_tokens: int = None) -> ModelResponse:
        self.calls.append({"instructions": instructions, "context": list(context), "tools": tools})

        if self._script:
            scripted = self._script.pop(0)
            if isinstance(scripted, Exception):
                raise scripted
            return scripted
        if self.default is not None:
            return self.default
        return self._default_response(context)

    def summarize(self, turns: Sequence[ConversationTurn]) -> str:
        self.summary_calls.append(list(turns))
        if self.summary_error is not None:
            raise self.summary_error
        return self.summary

    def _default_response(self, context: Sequence[Dict[str, Any]]) -> ModelResponse:
        last_item = context[-1] if context else {}
        if last_item.get("type") == "function_call_output":
            try:
                events = json.loads(last_item.get("output", "{}")).get("events", [])
            except (ValueError, AttributeError):
                events = []
            return text_response(f"Mock mode: you have {len(events)} event(s) scheduled.")
        return tool_call_response(GET_CURRENT_EVENTS, call_id=f"mock_call_{len(self.calls)}")
