"""Mapping between conversation history and the chat completions wire format.

Pure functions only: building the bounded context window, composing the
request body, and extracting the reply or error text from a response.
"""

import json
from collections.abc import Sequence
from typing import Any

from ..errors import MalformedResponse
from .models import ChatMessage, SamplingParams


def build_context_window(
    log: Sequence[Any],
    size: int,
    system_prompt: str,
) -> list[ChatMessage]:
    """Build the messages sent with a request.

    Args:
        log: Conversation messages in chronological order. Each item needs
            ``role`` and ``text`` attributes.
        size: Number of most recent messages to include
        system_prompt: Instruction placed before the history

    Returns:
        System instruction followed by at most ``size`` messages, oldest first

    Raises:
        ValueError: If size is less than 1
    """
    if size < 1:
        raise ValueError(f"Context size must be >= 1, got {size}")

    window = [ChatMessage(role="system", content=system_prompt)]
    for message in list(log)[-size:]:
        window.append(ChatMessage(role=message.role, content=message.text))
    return window


def build_request_body(window: Sequence[ChatMessage], sampling: SamplingParams) -> dict[str, Any]:
    """Compose the JSON payload for a non-streaming chat completion."""
    return {
        "model": sampling.model,
        "messages": [{"role": msg.role, "content": msg.content} for msg in window],
        "temperature": sampling.temperature,
        "max_tokens": sampling.max_tokens,
        "stream": False,
    }


def parse_reply(raw: Any) -> str:
    """Extract ``choices[0].message.content`` from a decoded response.

    Raises:
        MalformedResponse: If any part of the path is missing or the content
            is not a non-empty string
    """
    if not isinstance(raw, dict):
        raise MalformedResponse(f"expected a JSON object, got {type(raw).__name__}")

    choices = raw.get("choices")
    if not isinstance(choices, list) or not choices:
        raise MalformedResponse("missing 'choices'")

    first = choices[0]
    message = first.get("message") if isinstance(first, dict) else None
    if not isinstance(message, dict):
        raise MalformedResponse("missing 'choices[0].message'")

    content = message.get("content")
    if not isinstance(content, str) or not content:
        raise MalformedResponse("missing 'choices[0].message.content'")

    return content


def parse_transport_error(http_status: int, raw_body: str | bytes | dict[str, Any] | None) -> str:
    """Derive a display message for a non-2xx response.

    Returns ``error.message`` verbatim when the body carries one, otherwise a
    message naming the status code.
    """
    body: Any = raw_body
    if isinstance(body, (str, bytes)):
        try:
            body = json.loads(body) if body else None
        except ValueError:
            body = None

    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict):
            message = error.get("message")
            if isinstance(message, str) and message:
                return message

    return f"request failed with status {http_status}"
