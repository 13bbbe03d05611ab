from pydantic import BaseModel, ConfigDict, Field


class ChatMessage(BaseModel):
    """A role/content pair as sent on the wire."""

    model_config = ConfigDict(frozen=True)

    role: str = Field(description="Role of the message sender: 'user', 'assistant', or 'system'")
    content: str = Field(description="Content of the message")


class SamplingParams(BaseModel):
    """Model identifier and sampling limits for one request."""

    model_config = ConfigDict(frozen=True)

    model: str = Field(min_length=1, description="Model identifier understood by the API")
    temperature: float = Field(default=0.7, ge=0.0, le=2.0, description="Sampling temperature")
    max_tokens: int = Field(default=1000, ge=1, description="Upper bound on generated tokens")
