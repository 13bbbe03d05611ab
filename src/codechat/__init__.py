"""
Codechat: conversation session core for LLM chat widgets.

Each module hides a specific design decision: the session state machine,
the wire format of the inference API, the transport, and the keepalive.
"""

__version__ = "0.1.0"

from .config import ChatSettings
from .errors import (
    ChatError,
    ConfigurationMissing,
    KeepaliveFailure,
    MalformedResponse,
    TransportFailure,
)
from .keepalive import KeepalivePinger
from .llm import InferenceTransport, SamplingParams, create_transport
from .session import Message, Role, SessionController, SessionState, SessionStatus

__all__ = [
    "ChatSettings",
    "ChatError",
    "ConfigurationMissing",
    "KeepaliveFailure",
    "MalformedResponse",
    "TransportFailure",
    "KeepalivePinger",
    "InferenceTransport",
    "SamplingParams",
    "create_transport",
    "Message",
    "Role",
    "SessionController",
    "SessionState",
    "SessionStatus",
]
