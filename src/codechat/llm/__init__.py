from .base import InferenceTransport
from .factory import create_transport
from .mapper import build_context_window, build_request_body, parse_reply, parse_transport_error
from .models import ChatMessage, SamplingParams
from .providers import OpenAICompatibleTransport

__all__ = [
    "InferenceTransport",
    "create_transport",
    "build_context_window",
    "build_request_body",
    "parse_reply",
    "parse_transport_error",
    "ChatMessage",
    "SamplingParams",
    "OpenAICompatibleTransport",
]
