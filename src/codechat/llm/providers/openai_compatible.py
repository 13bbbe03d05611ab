import logging
from typing import Any

import httpx
from openai import APIConnectionError, APIStatusError, AsyncOpenAI

from ...errors import ConfigurationMissing, MalformedResponse, TransportFailure
from ..base import InferenceTransport
from ..mapper import parse_transport_error

logger = logging.getLogger(__name__)


class OpenAICompatibleTransport(InferenceTransport):
    """Transport for any OpenAI-compatible chat completions endpoint.

    Hidden design decisions:
    - API client initialization (via OpenAI SDK), deferred until first use
    - Bearer authentication and attribution headers
    - Raw response access, so reply parsing stays with the mapper
    - Automatic retries are disabled
    """

    def __init__(
        self,
        api_key: str | None,
        base_url: str | None = None,
        app_title: str | None = None,
        referer: str | None = None,
        timeout: float = 60.0,
        http_client: httpx.AsyncClient | None = None,
        **client_kwargs: Any
    ):
        """Initialize the transport.

        Args:
            api_key: Bearer credential; None defers the failure to ``send``
            base_url: API base URL (None uses the OpenAI default)
            app_title: Sent as ``X-Title`` when set
            referer: Sent as ``HTTP-Referer`` when set
            timeout: Request timeout in seconds
            http_client: Optional pre-built httpx client (used in tests)
            **client_kwargs: Additional kwargs for AsyncOpenAI client
        """
        self._api_key = api_key
        self._base_url = base_url
        self._timeout = timeout
        self._http_client = http_client
        self._client_kwargs = client_kwargs
        self._client: AsyncOpenAI | None = None

        self._headers: dict[str, str] = {}
        if referer:
            self._headers["HTTP-Referer"] = referer
        if app_title:
            self._headers["X-Title"] = app_title

    @property
    def base_url(self) -> str | None:
        """Get the configured base URL."""
        return self._base_url

    @property
    def headers(self) -> dict[str, str]:
        """Get the extra headers sent with each request."""
        return dict(self._headers)

    def _get_client(self) -> AsyncOpenAI:
        if not self._api_key:
            raise ConfigurationMissing(
                "API key is not configured. Set CODECHAT_API_KEY "
                "(or OPENROUTER_API_KEY) in the environment or .env file."
            )
        if self._client is None:
            self._client = AsyncOpenAI(
                api_key=self._api_key,
                base_url=self._base_url,
                timeout=self._timeout,
                max_retries=0,
                default_headers=self._headers or None,
                http_client=self._http_client,
                **self._client_kwargs
            )
        return self._client

    async def send(self, body: dict[str, Any]) -> dict[str, Any]:
        """POST the body to ``/chat/completions`` and decode the reply.

        Args:
            body: Wire payload from ``build_request_body``

        Returns:
            Decoded JSON object of the 2xx response
        """
        client = self._get_client()

        try:
            response = await client.chat.completions.with_raw_response.create(**body)
        except APIStatusError as e:
            message = parse_transport_error(e.status_code, e.response.text)
            logger.debug("Inference API returned %s: %s", e.status_code, message)
            raise TransportFailure(message, status_code=e.status_code) from e
        except APIConnectionError as e:
            raise TransportFailure(f"network error: {e}") from e

        try:
            raw = response.http_response.json()
        except ValueError as e:
            raise MalformedResponse("response body is not valid JSON") from e

        if not isinstance(raw, dict):
            raise MalformedResponse(f"expected a JSON object, got {type(raw).__name__}")
        return raw

    async def close(self) -> None:
        """Close the underlying client.

        Note: Uses the OpenAI SDK's async context manager for proper cleanup.
        See: https://github.com/openai/openai-python#async-usage
        """
        if self._client is not None:
            await self._client.close()
            self._client = None
        elif self._http_client is not None:
            await self._http_client.aclose()
