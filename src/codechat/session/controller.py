"""Conversation session controller.

Owns the message log of one chat session and is its only writer. A session
moves between two states: idle and waiting. ``submit`` is the single entry
point that appends to the log, and at most one request is outstanding at a
time regardless of what the presentation layer does with its input widget.
"""

import logging

from ..config import ChatSettings
from ..errors import ChatError, MalformedResponse
from ..llm.base import InferenceTransport
from ..llm.mapper import build_context_window, build_request_body, parse_reply
from ..llm.models import ChatMessage, SamplingParams
from .models import Message, Role, SessionState, SessionStatus

logger = logging.getLogger(__name__)

DEFAULT_CONTEXT_SIZE = 6


class SessionController:
    """Conversation state machine for a single chat widget.

    Usage:
        controller = SessionController(transport, sampling, system_prompt, greeting)
        await controller.submit("What is a stack?")
        state = controller.get_state()
    """

    def __init__(
        self,
        transport: InferenceTransport,
        sampling: SamplingParams,
        system_prompt: str,
        greeting: str,
        context_size: int = DEFAULT_CONTEXT_SIZE,
    ):
        """Create a session seeded with the assistant greeting.

        Args:
            transport: Transport used for inference requests
            sampling: Model and sampling limits for every request
            system_prompt: Instruction prefixed to each context window
            greeting: Text of the seed assistant message
            context_size: Number of recent messages sent with each request

        Raises:
            ValueError: If context_size is less than 1
        """
        if context_size < 1:
            raise ValueError(f"Context size must be >= 1, got {context_size}")

        self._transport = transport
        self._sampling = sampling
        self._system_prompt = system_prompt
        self._context_size = context_size

        self._log: list[Message] = [Message(role=Role.ASSISTANT, text=greeting)]
        self._pending = False
        self._last_error: str | None = None

    @classmethod
    def from_settings(cls, settings: ChatSettings, transport: InferenceTransport) -> "SessionController":
        """Create a session configured from ``ChatSettings``."""
        return cls(
            transport=transport,
            sampling=settings.sampling(),
            system_prompt=settings.system_prompt,
            greeting=settings.greeting,
            context_size=settings.context_size,
        )

    @property
    def pending(self) -> bool:
        return self._pending

    @property
    def last_error(self) -> str | None:
        return self._last_error

    @property
    def status(self) -> SessionStatus:
        return self.get_state().status

    def get_state(self) -> SessionState:
        """Return an immutable snapshot of the session."""
        return SessionState(
            log=tuple(self._log),
            pending=self._pending,
            last_error=self._last_error,
        )

    def context_window(self) -> list[ChatMessage]:
        """Messages that the next request would carry."""
        return build_context_window(self._log, self._context_size, self._system_prompt)

    def dismiss_error(self) -> None:
        """Clear the error banner. Ignored while a request is outstanding."""
        if not self._pending:
            self._last_error = None

    async def submit(self, raw_text: str) -> bool:
        """Send a user message and reconcile the reply into the log.

        Blank input, or input arriving while a request is outstanding, is
        ignored without touching any state. Failures never raise: they are
        recorded in ``last_error`` and the user message stays in the log.

        Args:
            raw_text: Text typed by the user

        Returns:
            True if the submission was accepted, False if it was ignored
        """
        text = raw_text.strip() if raw_text else ""
        if not text or self._pending:
            return False

        # Claim the session before the first await.
        self._pending = True
        self._last_error = None
        self._log.append(Message(role=Role.USER, text=text))

        try:
            body = build_request_body(self.context_window(), self._sampling)
            raw = await self._transport.send(body)
            reply = parse_reply(raw)
        except MalformedResponse as e:
            logger.warning("Malformed response from inference API: %s", e.detail)
            self._last_error = e.user_message
        except ChatError as e:
            logger.warning("Chat request failed: %s", e.user_message)
            self._last_error = e.user_message
        except Exception as e:
            logger.exception("Unexpected error getting AI response")
            self._last_error = f"Failed to get response from AI: {e}"
        else:
            self._log.append(Message(role=Role.ASSISTANT, text=reply))
        finally:
            self._pending = False

        return True
