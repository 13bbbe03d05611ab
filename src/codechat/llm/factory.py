from typing import Any

from .base import InferenceTransport
from .providers import OpenAICompatibleTransport

DEFAULT_BASE_URLS: dict[str, str | None] = {
    "openrouter": "https://openrouter.ai/api/v1",
    "deepseek": "https://api.deepseek.com",
    "openai": None,
}


def create_transport(provider: str, **config: Any) -> InferenceTransport:
    """Create an inference transport instance.

    This factory function hides the instantiation logic for different providers.
    All supported providers speak the OpenAI chat completions protocol and only
    differ in their default base URL.

    Args:
        provider: Provider type ('openrouter', 'deepseek', 'openai')
        **config: Transport configuration
            - api_key: str | None (absence fails on first request)
            - base_url: str | None (default: provider's URL)
            - app_title: str | None
            - referer: str | None
            - timeout: float

    Returns:
        Initialized transport instance

    Raises:
        ValueError: If provider type is not supported

    Examples:
        >>> transport = create_transport(
        ...     "openrouter",
        ...     api_key="sk-or-...",
        ...     app_title="CodeChan AI"
        ... )
    """
    provider_lower = provider.lower()

    if provider_lower not in DEFAULT_BASE_URLS:
        raise ValueError(
            f"Unsupported provider: {provider}. "
            f"Supported providers: 'openrouter', 'deepseek', 'openai'"
        )

    if config.get("base_url") is None:
        config["base_url"] = DEFAULT_BASE_URLS[provider_lower]
    config.setdefault("api_key", None)

    return OpenAICompatibleTransport(**config)
