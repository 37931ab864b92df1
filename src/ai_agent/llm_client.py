"""
Language-model gateway for the LockIn Scheduling Assistant
"""
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from openai import OpenAI, OpenAIError

from config.settings import Config
from src.ai_agent.tool_schemas import ToolCallRequest
from src.calendar.models import ConversationTurn

logger = logging.getLogger(__name__)


class LLMGatewayError(Exception):
    """Raised when the completion service cannot be reached or rejects a request"""


@dataclass
class ModelResponse:
    """
    One completion result.

    ``output_items`` holds the model's own output (assistant text and function
    calls) in input-item form, so it can be replayed on the next call.
    """
    text: str = ""
    tool_calls: List[ToolCallRequest] = field(default_factory=list)
    output_items: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def has_tool_calls(self) -> bool:
        return bool(self.tool_calls)


class LLMClient:
    """Thin wrapper around the OpenAI Responses API with tool-call parsing"""

    def __init__(self, model_name: str = None, client: OpenAI = None):
        self.config = Config()
        self.model_config = self.config.get_model_config(model_name)
        self.model_name = self.model_config["model"]
        self.summary_model = self.model_config["summary_model"]
        self.summary_max_tokens = self.model_config["summary_max_tokens"]

        if client is None:
            try:
                client = OpenAI(
                    api_key=self.model_config["api_key"],
                    base_url=self.model_config["base_url"],
                    timeout=self.model_config["timeout"],
                    max_retries=self.model_config["max_retries"],
                )
            except OpenAIError as e:
                raise LLMGatewayError(f"Cannot create OpenAI client: {e}") from e
        self.client = client

        self._total_requests = 0
        logger.info(f"Initialized LLM gateway: {self.model_name} (summaries: {self.summary_model})")

    def complete(self, instructions: str, context: Sequence[Dict[str, Any]],
                 tools: Optional[List[Dict[str, Any]]] = None, model: str = None,
                 max_output_tokens: int = None) -> ModelResponse:
        """
        Send one request and return the parsed response.

        No retries are attempted here; any API or transport failure is raised
        as LLMGatewayError.
        """
        request = {
            "model": model or self.model_name,
            "instructions": instructions,
            "input": list(context),
        }
        if tools:
            request["tools"] = tools
        if max_output_tokens:
            request["max_output_tokens"] = max_output_tokens

        self._total_requests += 1
        start_time = time.time()
        try:
            raw_response = self.client.responses.create(**request)
        except OpenAIError as e:
            logger.error(f"❌ Model request failed ({request['model']}): {e}")
            raise LLMGatewayError(str(e)) from e

        response = self._parse_response(raw_response)
        logger.info(f"🤖 {request['model']} responded in {time.time() - start_time:.2f}s "
                    f"with {len(response.tool_calls)} tool call(s)")
        return response

    def summarize(self, turns: Sequence[ConversationTurn]) -> str:
        """Compress older turns into a short scheduling-focused summary"""
        transcript = "\n".join(f"{turn.role}: {turn.content}" for turn in turns)
        response = self.complete(
            instructions=self.config.SUMMARY_INSTRUCTIONS,
            context=[{"role": "user", "content": f"Summarize this conversation:\n{transcript}"}],
            model=self.summary_model,
            max_output_tokens=self.summary_max_tokens,
        )
        return response.text.strip()

    def _parse_response(self, raw_response) -> ModelResponse:
        """Split Responses API output into reply text, tool calls and replayable items"""
        response = ModelResponse()
        text_parts = []

        for item in getattr(raw_response, "output", None) or []:
            item_type = getattr(item, "type", None)

            if item_type == "function_call":
                call = ToolCallRequest(name=item.name, arguments=item.arguments or "", call_id=item.call_id)
                response.tool_calls.append(call)
                response.output_items.append({
                    "type": "function_call",
                    "call_id": call.call_id,
                    "name": call.name,
                    "arguments": call.arguments,
                })
            elif item_type == "message":
                message_text = "".join(
                    part.text for part in (getattr(item, "content", None) or [])
                    if getattr(part, "type", None) == "output_text"
                )
                text_parts.append(message_text)
                response.output_items.append({"role": "assistant", "content": message_text})
            elif hasattr(item, "model_dump"):
                # reasoning and other items are passed back untouched
                response.output_items.append(item.model_dump(exclude_none=True))

        response.text = "".join(text_parts).strip()
        return response
