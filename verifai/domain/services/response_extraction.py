"""Ordered strategies for pulling answer text out of a chat response.

Model server versions disagree on where the answer lives. Each strategy is
a pure function returning non-empty text or None; the first hit wins.
"""

from typing import Any, Callable, Optional, Sequence

ExtractionStrategy = Callable[[Any], Optional[str]]


def _non_empty(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value
    return None


def message_content(response: Any) -> Optional[str]:
    if isinstance(response, dict) and isinstance(response.get("message"), dict):
        return _non_empty(response["message"].get("content"))
    return None


def response_field(response: Any) -> Optional[str]:
    if isinstance(response, dict):
        return _non_empty(response.get("response"))
    return None


def content_field(response: Any) -> Optional[str]:
    if isinstance(response, dict):
        return _non_empty(response.get("content"))
    return None


def raw_string(response: Any) -> Optional[str]:
    return _non_empty(response)


def message_fallbacks(response: Any) -> Optional[str]:
    """``message`` given as a bare string or carrying a ``text`` field."""
    if not isinstance(response, dict):
        return None
    message = response.get("message")
    if isinstance(message, dict):
        return _non_empty(message.get("text"))
    return _non_empty(message)


DEFAULT_STRATEGIES: Sequence[ExtractionStrategy] = (
    message_content,
    response_field,
    content_field,
    raw_string,
    message_fallbacks,
)


def extract_content(response: Any, strategies: Sequence[ExtractionStrategy] = DEFAULT_STRATEGIES) -> Optional[str]:
    for strategy in strategies:
        content = strategy(response)
        if content is not None:
            return content
    return None


def signals_completion(response: Any) -> bool:
    return isinstance(response, dict) and response.get("done") is True
