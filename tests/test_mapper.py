"""Unit tests for the request/response mapper."""
import pytest
from hypothesis import given
from hypothesis import strategies as st

from codechat.errors import MalformedResponse
from codechat.llm import (
    ChatMessage,
    SamplingParams,
    build_context_window,
    build_request_body,
    parse_reply,
    parse_transport_error,
)
from codechat.session import Message, Role


def _log(count: int) -> list[Message]:
    roles = [Role.ASSISTANT, Role.USER]
    return [Message(role=roles[i % 2], text=f"message {i}") for i in range(count)]


class TestBuildContextWindow:
    """Tests for build_context_window."""

    def test_system_prompt_comes_first(self):
        """Test that the instruction precedes the history."""
        window = build_context_window(_log(3), 6, "Be concise.")

        assert window[0] == ChatMessage(role="system", content="Be concise.")
        assert [m.content for m in window[1:]] == ["message 0", "message 1", "message 2"]

    def test_roles_are_mapped(self):
        """Test that log roles become wire roles."""
        window = build_context_window(_log(2), 6, "sys")

        assert [m.role for m in window] == ["system", "assistant", "user"]

    def test_keeps_most_recent_messages(self):
        """Test that only the last N messages are included, oldest first."""
        window = build_context_window(_log(10), 6, "sys")

        assert [m.content for m in window[1:]] == [f"message {i}" for i in range(4, 10)]

    def test_size_below_one_fails(self):
        """Test that an empty window is rejected."""
        with pytest.raises(ValueError, match="Context size"):
            build_context_window(_log(2), 0, "sys")

    @given(st.integers(min_value=1, max_value=60), st.integers(min_value=1, max_value=12))
    def test_window_never_exceeds_size(self, log_length: int, size: int):
        """Property test: window holds min(size, len(log)) messages in order."""
        log = _log(log_length)
        window = build_context_window(log, size, "sys")

        history = window[1:]
        assert len(history) == min(size, log_length)
        assert [m.content for m in history] == [m.text for m in log[-size:]]


class TestBuildRequestBody:
    """Tests for build_request_body."""

    def test_body_fields(self):
        """Test the complete wire payload."""
        window = [
            ChatMessage(role="system", content="sys"),
            ChatMessage(role="user", content="What is a stack?"),
        ]
        sampling = SamplingParams(model="deepseek-chat", temperature=0.3, max_tokens=200)

        body = build_request_body(window, sampling)

        assert body == {
            "model": "deepseek-chat",
            "messages": [
                {"role": "system", "content": "sys"},
                {"role": "user", "content": "What is a stack?"},
            ],
            "temperature": 0.3,
            "max_tokens": 200,
            "stream": False,
        }

    def test_deterministic(self):
        """Test that identical inputs give identical bodies."""
        window = build_context_window(_log(4), 6, "sys")
        sampling = SamplingParams(model="m")

        assert build_request_body(window, sampling) == build_request_body(window, sampling)


class TestParseReply:
    """Tests for parse_reply."""

    def test_extracts_first_choice(self):
        """Test the happy path."""
        raw = {"choices": [
            {"message": {"content": "first"}},
            {"message": {"content": "second"}},
        ]}

        assert parse_reply(raw) == "first"

    @pytest.mark.parametrize("raw", [
        {},
        {"choices": None},
        {"choices": []},
        {"choices": [None]},
        {"choices": [{}]},
        {"choices": [{"message": None}]},
        {"choices": [{"message": {}}]},
        {"choices": [{"message": {"content": None}}]},
        {"choices": [{"message": {"content": 42}}]},
        {"choices": [{"message": {"content": ""}}]},
        ["not", "an", "object"],
    ])
    def test_malformed_bodies_fail(self, raw):
        """Test that every broken path raises MalformedResponse."""
        with pytest.raises(MalformedResponse):
            parse_reply(raw)

    def test_malformed_message_is_user_facing(self):
        """Test that the display text does not leak parser detail."""
        with pytest.raises(MalformedResponse) as exc_info:
            parse_reply({})

        assert exc_info.value.user_message == "invalid response format from API"
        assert exc_info.value.detail == "missing 'choices'"


class TestParseTransportError:
    """Tests for parse_transport_error."""

    def test_structured_message_is_verbatim(self):
        """Test that error.message is surfaced as-is."""
        assert parse_transport_error(500, '{"error":{"message":"rate limited"}}') == "rate limited"

    def test_accepts_bytes_and_dicts(self):
        """Test alternative body representations."""
        assert parse_transport_error(429, b'{"error": {"message": "slow down"}}') == "slow down"
        assert parse_transport_error(401, {"error": {"message": "bad key"}}) == "bad key"

    @pytest.mark.parametrize("body", [
        None,
        "",
        "<html>Bad Gateway</html>",
        "{}",
        '{"error": "plain string"}',
        '{"error": {"message": ""}}',
        '{"error": {"code": 500}}',
    ])
    def test_falls_back_to_status(self, body):
        """Test the synthesized message when no structured error exists."""
        assert parse_transport_error(502, body) == "request failed with status 502"
