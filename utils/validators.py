"""
Validation utilities for the LockIn HTTP boundary
"""
import re
from typing import Dict, Any, List, Optional, Tuple

from pydantic import ValidationError

from config.settings import Config
from src.calendar.models import EventDraft

MAX_MESSAGE_LENGTH = 4000


class RequestValidator:
    """Validator for incoming chat and event requests"""

    @staticmethod
    def validate_chat_request(request_data: Any) -> List[str]:
        """Validate a /chat payload and return list of errors"""
        if not isinstance(request_data, dict):
            return ["Request body must be a JSON object"]

        errors = []
        message = request_data.get("message")
        if not isinstance(message, str) or not DataSanitizer.sanitize_text(message):
            errors.append("Missing required field: message")
        elif len(message) > MAX_MESSAGE_LENGTH:
            errors.append(f"Message exceeds {MAX_MESSAGE_LENGTH} characters")

        conversation_id = request_data.get("conversationId")
        if conversation_id is not None and not isinstance(conversation_id, str):
            errors.append("'conversationId' must be a string")

        return errors

    @staticmethod
    def validate_event_request(request_data: Any) -> Tuple[Optional[EventDraft], List[str]]:
        """Validate a manual event payload; returns the draft or the list of errors"""
        if not isinstance(request_data, dict):
            return None, ["Request body must be a JSON object"]

        try:
            return EventDraft.model_validate(request_data), []
        except ValidationError as e:
            errors = []
            for error in e.errors():
                location = ".".join(str(part) for part in error["loc"]) or "body"
                errors.append(f"{location}: {error['msg']}")
            return None, errors


class DataSanitizer:
    """Sanitize and clean input data"""

    @staticmethod
    def sanitize_text(text: str) -> str:
        """Drop control characters and collapse spaces, keeping line breaks"""
        text = re.sub(r'[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]', '', text)
        text = text.replace('\r\n', '\n').replace('\r', '\n')
        text = re.sub(r'[ \t]+', ' ', text)
        return re.sub(r' ?\n ?', '\n', text).strip()

    @staticmethod
    def sanitize_owner(owner: Optional[str]) -> str:
        """Fall back to the default owner for missing or malformed ids"""
        if owner and re.match(r'^[A-Za-z0-9._@:-]{1,128}$', owner.strip()):
            return owner.strip()
        return Config.DEFAULT_OWNER

    @staticmethod
    def sanitize_chat_request(request_data: Dict[str, Any]) -> Dict[str, Any]:
        sanitized = request_data.copy()
        sanitized["message"] = DataSanitizer.sanitize_text(sanitized["message"])
        conversation_id = sanitized.get("conversationId")
        sanitized["conversationId"] = conversation_id.strip() if conversation_id else None
        return sanitized
