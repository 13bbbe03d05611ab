"""Pytest configuration and shared fixtures."""
import asyncio
import os
from typing import Any

import pytest

from codechat.llm import InferenceTransport, SamplingParams

STACK_REPLY = {"choices": [{"message": {"role": "assistant", "content": "A LIFO data structure."}}]}


class FakeTransport(InferenceTransport):
    """In-memory transport returning scripted results.

    Each queued item is either a decoded JSON body or an exception to raise.
    When ``gate`` is set, ``send`` waits on it so tests can observe the
    pending state.
    """

    def __init__(self, *results: Any, gate: asyncio.Event | None = None):
        self.results = list(results)
        self.bodies: list[dict[str, Any]] = []
        self.gate = gate
        self.closed = False

    async def send(self, body: dict[str, Any]) -> dict[str, Any]:
        self.bodies.append(body)
        if self.gate is not None:
            await self.gate.wait()
        result = self.results.pop(0) if self.results else STACK_REPLY
        if isinstance(result, BaseException):
            raise result
        return result

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def sampling():
    """Return sampling parameters used by session tests."""
    return SamplingParams(model="test-model", temperature=0.7, max_tokens=1000)


@pytest.fixture
def clean_env(monkeypatch):
    """Remove codechat variables from the environment."""
    for var in list(os.environ):
        if var.startswith("CODECHAT_") or var == "OPENROUTER_API_KEY":
            monkeypatch.delenv(var, raising=False)
    return monkeypatch
