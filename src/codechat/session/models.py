"""Data models for a conversation session.

These models are immutable: the controller replaces snapshots rather than
mutating them, so a rendered state can never change underneath its reader.
"""

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_serializer
from uuid_extensions import uuid7


class Role(str, Enum):
    """Author of a message in the conversation log."""

    USER = "user"
    ASSISTANT = "assistant"


class SessionStatus(str, Enum):
    """Status shown by the presentation layer."""

    IDLE = "idle"
    WAITING = "waiting"
    ERROR = "error"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Message(BaseModel):
    """A single entry in the conversation log."""

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    id: str = Field(default_factory=lambda: str(uuid7()), description="Time-ordered unique id")
    role: Role = Field(description="Who authored the message")
    text: str = Field(description="Message text")
    created_at: datetime = Field(default_factory=_utcnow)

    @field_serializer("created_at")
    def serialize_datetime(self, value: datetime) -> str:
        """Serialize datetime to ISO format."""
        return value.isoformat()


class SessionState(BaseModel):
    """Read-only snapshot of a session for rendering."""

    model_config = ConfigDict(frozen=True)

    log: tuple[Message, ...] = Field(min_length=1, description="Conversation in order")
    pending: bool = Field(default=False, description="A request is outstanding")
    last_error: str | None = Field(default=None, description="Error banner text")

    @property
    def status(self) -> SessionStatus:
        if self.pending:
            return SessionStatus.WAITING
        if self.last_error is not None:
            return SessionStatus.ERROR
        return SessionStatus.IDLE
