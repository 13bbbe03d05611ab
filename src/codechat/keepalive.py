"""Background keepalive for cold-starting inference backends.

Free-tier endpoints spin down when idle. The pinger periodically sends a
minimal completion request so the first real question does not pay the
cold-start cost. It shares a transport with chat sessions but never their
state, and its failures are logged and dropped.
"""

import asyncio
import logging
from typing import Any

from .config import KEEPALIVE_INTERVAL_SECONDS, KEEPALIVE_PROMPT, ChatSettings
from .errors import KeepaliveFailure
from .llm.base import InferenceTransport
from .llm.mapper import build_request_body
from .llm.models import ChatMessage, SamplingParams

logger = logging.getLogger(__name__)


class KeepalivePinger:
    """Periodic fire-and-forget ping with an explicit lifecycle.

    Usage:
        async with KeepalivePinger(transport, sampling, system_prompt):
            ...  # pings every ``interval`` seconds until the block exits
    """

    def __init__(
        self,
        transport: InferenceTransport,
        sampling: SamplingParams,
        system_prompt: str,
        interval: float = KEEPALIVE_INTERVAL_SECONDS,
        prompt: str = KEEPALIVE_PROMPT,
    ):
        if interval <= 0:
            raise ValueError(f"Keepalive interval must be positive, got {interval}")

        self._transport = transport
        self._body = build_request_body(
            [
                ChatMessage(role="system", content=system_prompt),
                ChatMessage(role="user", content=prompt),
            ],
            sampling,
        )
        self._interval = interval
        self._task: asyncio.Task[None] | None = None

        self.pings_attempted = 0
        self.pings_failed = 0

    @classmethod
    def from_settings(cls, settings: ChatSettings, transport: InferenceTransport) -> "KeepalivePinger":
        return cls(
            transport=transport,
            sampling=settings.keepalive_sampling(),
            system_prompt=settings.system_prompt,
            interval=settings.keepalive_interval,
        )

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Schedule the ping loop on the running event loop.

        Calling start on a running pinger does nothing.
        """
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(
            self._run(), name="codechat-keepalive"
        )
        logger.debug("Keepalive started (interval %.0fs)", self._interval)

    async def stop(self) -> None:
        """Cancel the ping loop and wait for it to finish."""
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            # Propagate a cancellation aimed at the caller of stop().
            current = asyncio.current_task()
            if current is not None and current.cancelling():
                raise
        logger.debug("Keepalive stopped")

    async def ping(self) -> bool:
        """Send one keepalive request.

        Returns:
            True if the API answered with a 2xx response, False otherwise.
            Never raises except for cancellation.
        """
        self.pings_attempted += 1
        try:
            await self._transport.send(dict(self._body))
        except Exception as e:
            self.pings_failed += 1
            failure = KeepaliveFailure(e)
            logger.warning("Ping failed. Likely offline or API temporarily down.")
            logger.debug("%s", failure, exc_info=e)
            return False

        logger.debug("Keepalive ping succeeded")
        return True

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            await self.ping()

    async def __aenter__(self) -> "KeepalivePinger":
        self.start()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.stop()
