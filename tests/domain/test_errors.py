"""Tests for user-facing error descriptions."""

from verifai.domain.errors import (
    FactCheckCancelledError,
    FactCheckTimeoutError,
    FactCheckValidationError,
    FatalRequestError,
    SessionBusyError,
    TransientNetworkError,
    describe_error,
)


def test_timeout_suggests_smaller_model():
    description = describe_error(FactCheckTimeoutError())

    assert description.title == "Request timed out"
    assert "Try a smaller/faster model" in description.suggestions


def test_connection_failure():
    description = describe_error(TransientNetworkError("Request to http://localhost:11434/api/chat failed: refused"))

    assert description.title == "Cannot connect to Ollama"
    assert any("ollama serve" in s for s in description.suggestions)


def test_validation_message_is_the_title():
    description = describe_error(FactCheckValidationError("Please select a model first."))

    assert description.title == "Please select a model first."
    assert description.suggestions == []


def test_model_errors():
    description = describe_error(FatalRequestError("Request failed (404): model 'x' not found", status_code=404))

    assert description.title == "AI Model Error"


def test_busy_and_cancelled():
    assert describe_error(SessionBusyError("busy")).title == "A fact-check is already in progress"
    assert describe_error(FactCheckCancelledError()).title == "Fact-check cancelled"


def test_generic_error_includes_message():
    description = describe_error(RuntimeError("something odd"))

    assert description.title == "Fact-check failed"
    assert "Error: something odd" in description.suggestions
