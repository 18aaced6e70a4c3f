"""Tests for answer text extraction from chat responses."""

import pytest

from verifai.domain.services.response_extraction import extract_content, signals_completion


@pytest.mark.parametrize(
    "response, expected",
    [
        ({"message": {"content": "from message"}, "response": "from response"}, "from message"),
        ({"message": {"content": ""}, "response": "from response"}, "from response"),
        ({"content": "top-level content"}, "top-level content"),
        ("raw body", "raw body"),
        ({"message": "message as string"}, "message as string"),
        ({"message": {"text": "message text"}}, "message text"),
    ],
)
def test_strategies_in_order(response, expected):
    assert extract_content(response) == expected


@pytest.mark.parametrize("response", [None, {}, "   ", {"message": {"content": "  "}}, {"done": True}, 42])
def test_nothing_usable(response):
    assert extract_content(response) is None


def test_custom_strategy_list():
    assert extract_content({"answer": "x"}, strategies=[lambda r: r.get("answer")]) == "x"


def test_signals_completion():
    assert signals_completion({"done": True})
    assert not signals_completion({"done": False})
    assert not signals_completion("done")
