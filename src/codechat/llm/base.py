from abc import ABC, abstractmethod
from typing import Any


class InferenceTransport(ABC):
    """Abstract base class for inference API transports.

    This module hides the design decision of how a chat completion request
    reaches the remote API. Implementations must handle:
    - HTTP client setup and authentication
    - Mapping network failures and non-2xx statuses to TransportFailure
    - Failing fast with ConfigurationMissing when credentials are absent

    A transport never retries and never interprets the reply; the caller
    passes the decoded body to the response mapper.

    Supports async context manager protocol for proper resource cleanup:
        async with transport:
            raw = await transport.send(body)
    """

    @abstractmethod
    async def send(self, body: dict[str, Any]) -> dict[str, Any]:
        """POST a chat completion request.

        Args:
            body: Wire payload produced by ``build_request_body``

        Returns:
            Decoded JSON object of a 2xx response

        Raises:
            ConfigurationMissing: If the API key is not configured
            TransportFailure: On network errors or non-2xx statuses
            MalformedResponse: If a 2xx body is not a JSON object
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections or resources."""
        pass

    async def __aenter__(self) -> "InferenceTransport":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit with automatic cleanup.

        Note: Suppresses "Event loop is closed" errors during cleanup.
        This is a known harmless race condition in httpx/anyio cleanup:
        https://github.com/encode/httpx/issues/914
        """
        try:
            await self.close()
        except RuntimeError as e:
            # Suppress harmless cleanup errors from httpx/anyio
            if "Event loop is closed" not in str(e):
                raise
