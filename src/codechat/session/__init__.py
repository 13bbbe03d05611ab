"""Conversation session state for chat widgets."""

from .controller import SessionController
from .models import Message, Role, SessionState, SessionStatus

__all__ = [
    "Message",
    "Role",
    "SessionController",
    "SessionState",
    "SessionStatus",
]
