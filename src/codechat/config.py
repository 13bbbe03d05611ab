"""Chat client configuration.

Centralizes the deployment-time values of the chat client: credentials,
model, sampling limits, prompts, and keepalive timing. Values come from
environment variables (a ``.env`` file is loaded by the CLI).
"""

import os
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .llm.models import SamplingParams

DEFAULT_MODEL = "deepseek/deepseek-r1-0528:free"

DEFAULT_SYSTEM_PROMPT = """You are CodeChan AI, a technical assistant. Focus on coding and technical questions only.
- Keep responses short and technical (1-2 sentences max)
- No general chit-chat or personal questions
- Answer only programming/tech questions
- If asked off-topic, respond with: "I'm here to help with coding questions. What do you need help with?"
- For code, show only what's needed"""

DEFAULT_GREETING = "Hello! I'm your AI assistant. How can I help you today?"

# Keepalive request configuration
KEEPALIVE_INTERVAL_SECONDS = 86400.0  # Once per day
KEEPALIVE_PROMPT = "ping"
KEEPALIVE_TEMPERATURE = 0.1
KEEPALIVE_MAX_TOKENS = 10

# Environment variable -> field name
_ENV_FIELDS = {
    "CODECHAT_PROVIDER": "provider",
    "CODECHAT_BASE_URL": "base_url",
    "CODECHAT_MODEL": "model",
    "CODECHAT_TEMPERATURE": "temperature",
    "CODECHAT_MAX_TOKENS": "max_tokens",
    "CODECHAT_CONTEXT_SIZE": "context_size",
    "CODECHAT_SYSTEM_PROMPT": "system_prompt",
    "CODECHAT_GREETING": "greeting",
    "CODECHAT_APP_TITLE": "app_title",
    "CODECHAT_REFERER": "referer",
    "CODECHAT_TIMEOUT": "timeout",
    "CODECHAT_KEEPALIVE_INTERVAL": "keepalive_interval",
    "CODECHAT_KEEPALIVE": "keepalive_enabled",
}


class ChatSettings(BaseModel):
    """Validated chat client settings."""

    model_config = ConfigDict(frozen=True)

    provider: str = Field(default="openrouter", description="openrouter, deepseek or openai")
    api_key: str | None = Field(default=None, repr=False, description="Bearer credential")
    base_url: str | None = Field(default=None, description="Override the provider's base URL")
    model: str = Field(default=DEFAULT_MODEL, min_length=1)
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    max_tokens: int = Field(default=1000, ge=1)
    context_size: int = Field(default=6, ge=1, description="Recent messages sent per request")
    system_prompt: str = Field(default=DEFAULT_SYSTEM_PROMPT)
    greeting: str = Field(default=DEFAULT_GREETING, min_length=1)
    app_title: str | None = Field(default="CodeChan AI", description="X-Title header")
    referer: str | None = Field(default=None, description="HTTP-Referer header")
    timeout: float = Field(default=60.0, gt=0.0, description="Request timeout in seconds")
    keepalive_interval: float = Field(default=KEEPALIVE_INTERVAL_SECONDS, gt=0.0)
    keepalive_enabled: bool = Field(default=True)

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None, **overrides: Any) -> "ChatSettings":
        """Load settings from environment variables.

        Args:
            environ: Mapping to read instead of ``os.environ``
            **overrides: Field values that take precedence (None is ignored)

        Returns:
            Validated settings

        Raises:
            pydantic.ValidationError: If a value is out of range or malformed

        Environment variables:
            CODECHAT_API_KEY: API key (falls back to OPENROUTER_API_KEY)
            CODECHAT_PROVIDER, CODECHAT_BASE_URL, CODECHAT_MODEL,
            CODECHAT_TEMPERATURE, CODECHAT_MAX_TOKENS, CODECHAT_CONTEXT_SIZE,
            CODECHAT_SYSTEM_PROMPT, CODECHAT_GREETING, CODECHAT_APP_TITLE,
            CODECHAT_REFERER, CODECHAT_TIMEOUT, CODECHAT_KEEPALIVE_INTERVAL,
            CODECHAT_KEEPALIVE
        """
        env = os.environ if environ is None else environ

        values: dict[str, Any] = {}
        for var, field_name in _ENV_FIELDS.items():
            raw = env.get(var)
            if raw:
                values[field_name] = raw

        api_key = env.get("CODECHAT_API_KEY") or env.get("OPENROUTER_API_KEY")
        if api_key:
            values["api_key"] = api_key

        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key)

    def sampling(self) -> SamplingParams:
        """Sampling parameters for conversation requests."""
        return SamplingParams(
            model=self.model,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )

    def keepalive_sampling(self) -> SamplingParams:
        """Sampling parameters for the cheap keepalive request."""
        return SamplingParams(
            model=self.model,
            temperature=KEEPALIVE_TEMPERATURE,
            max_tokens=KEEPALIVE_MAX_TOKENS,
        )

    def transport_config(self) -> dict[str, Any]:
        """Keyword arguments for ``create_transport``."""
        return {
            "api_key": self.api_key,
            "base_url": self.base_url,
            "app_title": self.app_title,
            "referer": self.referer,
            "timeout": self.timeout,
        }
