"""Error taxonomy for fact-checking sessions."""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel


class CancelReason(str, Enum):
    """Why a session's cancellation token fired."""

    TIMEOUT = "timeout"
    USER = "user"
    SHUTDOWN = "shutdown"


class VerifAIError(Exception):
    """Base class for all VerifAI errors."""


class FactCheckValidationError(VerifAIError):
    """Input rejected before any network activity (empty claim, no model)."""


class RequestError(VerifAIError):
    """An HTTP request to an external collaborator failed."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class TransientNetworkError(RequestError):
    """Retryable failure surfaced after all attempts were used."""


class FatalRequestError(RequestError):
    """Non-retryable failure (4xx other than 429, malformed response)."""


class SessionAbortedError(VerifAIError):
    """The session's cancellation token fired."""

    def __init__(self, message: str, reason: CancelReason):
        super().__init__(message)
        self.reason = reason


class FactCheckTimeoutError(SessionAbortedError):
    """The overall session timeout expired."""

    def __init__(self, message: str = "Request timed out. The AI model may be taking too long."):
        super().__init__(message, CancelReason.TIMEOUT)


class FactCheckCancelledError(SessionAbortedError):
    """The session was aborted by something other than the timeout."""

    def __init__(self, reason: CancelReason = CancelReason.USER, message: str = "Fact-check was cancelled."):
        super().__init__(message, reason)


class SessionBusyError(VerifAIError):
    """A fact-check is already running for this consumer."""


class SettingsQuotaExceededError(VerifAIError):
    """The settings store has no room left for the write."""


class ErrorDescription(BaseModel):
    """User-facing description of a failed fact-check."""

    title: str
    suggestions: List[str]


def describe_error(error: BaseException) -> ErrorDescription:
    """Map an error to a title and a list of suggestions for the user.

    Args:
        error: Error raised by a fact-check

    Returns:
        Description suitable for display next to a retry affordance
    """
    message = str(error) or "Unknown error occurred"

    if isinstance(error, FactCheckValidationError):
        return ErrorDescription(title=message, suggestions=[])

    if isinstance(error, FactCheckTimeoutError) or "timed out" in message:
        return ErrorDescription(
            title="Request timed out",
            suggestions=[
                "The AI model may be overloaded",
                "Try a smaller/faster model",
                "Check if Ollama is still running",
            ],
        )

    if isinstance(error, FactCheckCancelledError):
        return ErrorDescription(title="Fact-check cancelled", suggestions=[])

    if isinstance(error, SessionBusyError):
        return ErrorDescription(
            title="A fact-check is already in progress",
            suggestions=["Wait for the current fact-check to finish or cancel it"],
        )

    if isinstance(error, TransientNetworkError):
        return ErrorDescription(
            title="Cannot connect to Ollama",
            suggestions=[
                "Make sure Ollama is running (ollama serve)",
                "Check that Ollama is accessible at localhost:11434",
                "Verify your firewall isn't blocking the connection",
            ],
        )

    if "No models" in message:
        return ErrorDescription(
            title="No AI models available",
            suggestions=[
                "Pull a model with: ollama pull qwen2.5",
                "Or try: ollama pull llama3.2",
            ],
        )

    if "model" in message:
        return ErrorDescription(
            title="AI Model Error",
            suggestions=[
                "The selected model may not be available",
                "Try refreshing the model list",
                "Try a different model",
            ],
        )

    return ErrorDescription(
        title="Fact-check failed",
        suggestions=[
            "Check that Ollama is running",
            "Try again in a moment",
            f"Error: {message[:100]}",
        ],
    )
