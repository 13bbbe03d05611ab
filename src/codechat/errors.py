"""Error types raised on the chat request path.

Every error carries a ``user_message`` suitable for an error banner, so the
session controller can convert failures into display strings without
inspecting their type.
"""


class ChatError(Exception):
    """Base class for chat errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.user_message = message


class ConfigurationMissing(ChatError):
    """Required configuration (the API key) is absent.

    Raised before any network activity and surfaced verbatim.
    """


class TransportFailure(ChatError):
    """Network failure or non-2xx response from the inference API."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code

    @property
    def is_network_error(self) -> bool:
        """True when no HTTP response was received at all."""
        return self.status_code is None


class MalformedResponse(ChatError):
    """A 2xx response that lacks the expected reply field."""

    USER_MESSAGE = "invalid response format from API"

    def __init__(self, detail: str):
        super().__init__(self.USER_MESSAGE)
        self.detail = detail

    def __str__(self) -> str:
        return f"{self.USER_MESSAGE}: {self.detail}"


class KeepaliveFailure(ChatError):
    """A background keepalive ping failed (never shown to the user)."""

    def __init__(self, cause: BaseException):
        super().__init__(f"Keepalive ping failed: {cause}")
        self.cause = cause
