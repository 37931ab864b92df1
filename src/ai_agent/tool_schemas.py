"""
Tool definitions exposed to the model and their argument models
"""
import json
from dataclasses import dataclass, field
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, ValidationError

GET_CURRENT_EVENTS = "getCurrentEvents"
CREATE_EVENTS = "createEvents"

# Sent verbatim on every call; keep stable.
TOOLS: List[Dict[str, Any]] = [
    {
        "type": "function",
        "name": CREATE_EVENTS,
        "description": "Create one or more calendar events",
        "parameters": {
            "type": "object",
            "properties": {
                "events": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {
                            "title": {"type": "string"},
                            "startTime": {"type": "string"},
                            "endTime": {"type": "string"},
                            "flexibility": {
                                "type": ["string", "null"],
                                "enum": ["FLEXIBLE", "DAY_LOCKED", "LOCKED", None],
                            },
                            "priority": {"type": ["integer", "null"], "minimum": 1, "maximum": 5},
                        },
                        "required": ["title", "startTime", "endTime", "flexibility", "priority"],
                        "additionalProperties": False,
                    },
                }
            },
            "required": ["events"],
            "additionalProperties": False,
        },
        "strict": True,
    },
    {
        "type": "function",
        "name": GET_CURRENT_EVENTS,
        "description": "Get all current events to check for conflicts",
        "parameters": {
            "type": "object",
            "properties": {},
            "required": [],
            "additionalProperties": False,
        },
        "strict": True,
    },
]


class UnknownToolError(ValueError):
    """Raised for a tool call whose name is not one of TOOLS"""


class ToolArgumentError(ValueError):
    """Raised when a tool call's arguments cannot be decoded or validated"""


@dataclass(frozen=True)
class ToolCallRequest:
    name: str
    arguments: str
    call_id: str


@dataclass
class ToolCallResult:
    call_id: str
    output: Dict[str, Any] = field(default_factory=dict)
    events_created: int = 0

    def to_input_item(self) -> Dict[str, Any]:
        """Format as a function_call_output item for the next model call"""
        return {
            "type": "function_call_output",
            "call_id": self.call_id,
            "output": json.dumps(self.output),
        }


class GetCurrentEventsArgs(BaseModel):
    model_config = ConfigDict(extra="forbid")


class CreateEventsArgs(BaseModel):
    """Items are validated one at a time so a bad item does not reject its siblings"""
    model_config = ConfigDict(extra="forbid")

    events: List[Any]


TOOL_ARGUMENT_MODELS = {
    GET_CURRENT_EVENTS: GetCurrentEventsArgs,
    CREATE_EVENTS: CreateEventsArgs,
}


def parse_tool_arguments(request: ToolCallRequest) -> BaseModel:
    """Decode a tool call's JSON arguments into the argument model for its tool"""
    model = TOOL_ARGUMENT_MODELS.get(request.name)
    if model is None:
        raise UnknownToolError(f"Unknown tool: {request.name}")

    try:
        payload = json.loads(request.arguments) if request.arguments else {}
    except json.JSONDecodeError as e:
        raise ToolArgumentError(f"Arguments for {request.name} are not valid JSON: {e}") from e
    if not isinstance(payload, dict):
        raise ToolArgumentError(f"Arguments for {request.name} must be a JSON object")

    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise ToolArgumentError(f"Invalid arguments for {request.name}: {e.errors()}") from e
