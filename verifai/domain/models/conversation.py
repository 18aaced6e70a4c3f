"""Conversation transcript exchanged with the model server."""

import json
import logging
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class ToolCallRequest(BaseModel):
    """A tool invocation requested by the model."""

    id: str = Field(..., description="Call identifier, synthesized when the model omits it")
    name: str = Field(..., description="Requested tool name")
    arguments: Dict[str, Any] = Field(default_factory=dict, description="Decoded call arguments")

    @classmethod
    def from_payload(cls, payload: Dict[str, Any], placeholder_id: str) -> "ToolCallRequest":
        """Decode one entry of a chat response's ``tool_calls`` list.

        Arguments may arrive either as a mapping or as a JSON-encoded string.
        Undecodable arguments degrade to an empty mapping.
        """
        function = payload.get("function")
        if not isinstance(function, dict):
            function = {}
        raw_arguments = function.get("arguments")

        if isinstance(raw_arguments, str):
            try:
                arguments = json.loads(raw_arguments) if raw_arguments.strip() else {}
            except ValueError:
                logger.warning(f"⚠️ Could not decode tool call arguments: {raw_arguments[:100]}")
                arguments = {}
        elif isinstance(raw_arguments, dict):
            arguments = raw_arguments
        else:
            arguments = {}

        if not isinstance(arguments, dict):
            arguments = {}

        return cls(
            id=str(payload.get("id") or placeholder_id),
            name=str(function.get("name") or ""),
            arguments=arguments,
        )

    def to_payload(self) -> Dict[str, Any]:
        """Serialize in the shape the chat endpoint expects."""
        return {
            "id": self.id,
            "type": "function",
            "function": {"name": self.name, "arguments": self.arguments},
        }


class ConversationMessage(BaseModel):
    """One entry of the ordered transcript."""

    role: str
    content: str = ""

    def to_payload(self) -> Dict[str, Any]:
        return {"role": self.role, "content": self.content}


class SystemMessage(ConversationMessage):
    role: str = "system"


class UserMessage(ConversationMessage):
    role: str = "user"


class AssistantMessage(ConversationMessage):
    role: str = "assistant"
    tool_calls: List[ToolCallRequest] = Field(default_factory=list)

    def to_payload(self) -> Dict[str, Any]:
        payload = super().to_payload()
        if self.tool_calls:
            payload["tool_calls"] = [call.to_payload() for call in self.tool_calls]
        return payload


class ToolMessage(ConversationMessage):
    role: str = "tool"
    tool_call_id: str
    name: str

    def to_payload(self) -> Dict[str, Any]:
        payload = super().to_payload()
        payload["tool_call_id"] = self.tool_call_id
        payload["name"] = self.name
        return payload


def extract_tool_calls(response: Any, first_placeholder: int = 1) -> List[ToolCallRequest]:
    """Return the tool calls requested by a chat response, if any.

    Args:
        response: Decoded chat response body
        first_placeholder: Number used for the first synthesized call id

    Returns:
        Requested tool calls in the order the model listed them
    """
    if not isinstance(response, dict):
        return []
    message = response.get("message")
    if not isinstance(message, dict):
        return []
    raw_calls = message.get("tool_calls") or []
    if not isinstance(raw_calls, list):
        return []

    # Entries without a function mapping are dropped
    usable = [c for c in raw_calls if isinstance(c, dict) and isinstance(c.get("function"), dict)]
    if len(usable) < len(raw_calls):
        logger.warning(f"⚠️ Ignoring {len(raw_calls) - len(usable)} malformed tool call(s)")

    calls = []
    for offset, raw in enumerate(usable):
        calls.append(ToolCallRequest.from_payload(raw, f"search_{first_placeholder + offset}"))
    return calls
