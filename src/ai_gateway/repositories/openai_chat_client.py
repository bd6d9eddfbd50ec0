"""OpenAI chat-completion client.

Sends a normalized ChatRequest to the OpenAI Chat Completions endpoint and
classifies every failure into the gateway error taxonomy:

- ConfigError: no API key configured (checked before any I/O)
- UpstreamError: the provider answered with a non-success status
- TransportError: connection failure or timeout

A single attempt is made by default. With `max_retries > 0`, transport
failures and 5xx responses are retried with exponential backoff; 4xx
responses are never retried.
"""

import asyncio
import logging
from typing import Any

import httpx

from ai_gateway.config import settings
from ai_gateway.entities import ChatRequest
from ai_gateway.errors import ConfigError, GatewayError, TransportError, UpstreamError

logger = logging.getLogger(__name__)


class OpenAIChatClient:
    """OpenAI implementation of the ChatProvider protocol.

    This class satisfies the ChatProvider protocol through structural
    typing - no explicit inheritance needed.

    Example:
        ```python
        client = OpenAIChatClient.create()
        raw = await client.send(chat_request)
        await client.close()
        ```
    """

    def __init__(
        self,
        api_key: str | None = None,
        url: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        retry_backoff: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the OpenAI chat client.

        Args:
            api_key: Provider credential. Defaults to settings.openai_api_key;
                     pass "" to run without one.
            url: Chat completions endpoint. Defaults to settings.openai_url.
            timeout: Request timeout in seconds. Defaults to settings.
            max_retries: Extra attempts for retryable failures. Defaults to settings.
            retry_backoff: Base backoff delay in seconds. Defaults to settings.
            transport: Optional httpx transport (used by tests).
        """
        self._api_key = api_key if api_key is not None else settings.openai_api_key
        self._url = url or settings.openai_url
        self._timeout = timeout if timeout is not None else settings.upstream_timeout
        self._max_retries = max_retries if max_retries is not None else settings.upstream_max_retries
        self._retry_backoff = (
            retry_backoff if retry_backoff is not None else settings.upstream_retry_backoff
        )
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @classmethod
    def create(
        cls,
        api_key: str | None = None,
        url: str | None = None,
    ) -> "OpenAIChatClient":
        """Factory method to create OpenAIChatClient with defaults.

        Args:
            api_key: Credential. If None, uses settings.
            url: Endpoint URL. If None, uses settings.

        Returns:
            Configured OpenAIChatClient
        """
        return cls(api_key=api_key, url=url)

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-load the async HTTP client.

        Returns:
            The httpx.AsyncClient instance
        """
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                limits=httpx.Limits(max_connections=100, max_keepalive_connections=20),
                transport=self._transport,
            )
        return self._client

    @property
    def is_configured(self) -> bool:
        return bool(self._api_key)

    @property
    def url(self) -> str:
        return self._url

    async def send(self, request: ChatRequest) -> dict[str, Any]:
        """Send a chat-completion request to OpenAI.

        Args:
            request: The normalized request

        Returns:
            The decoded provider response

        Raises:
            ConfigError: If no API key is configured
            UpstreamError: If OpenAI returned a non-success status or a non-JSON body
            TransportError: If OpenAI could not be reached in time
        """
        if not self.is_configured:
            logger.error("OPENAI_API_KEY is missing from the environment")
            raise ConfigError()

        attempt = 0
        while True:
            try:
                return await self._send_once(request)
            except (TransportError, UpstreamError) as e:
                if not self._should_retry(e, attempt):
                    raise
                delay = self._retry_backoff * (2**attempt)
                attempt += 1
                logger.warning(
                    "Retrying OpenAI call (attempt %d of %d) in %.2fs after: %s",
                    attempt,
                    self._max_retries,
                    delay,
                    e.message,
                )
                await asyncio.sleep(delay)

    async def _send_once(self, request: ChatRequest) -> dict[str, Any]:
        headers = {"Authorization": f"Bearer {self._api_key}"}

        try:
            response = await self.client.post(self._url, json=request.to_payload(), headers=headers)
        except httpx.TimeoutException as e:
            raise TransportError(f"OpenAI request timed out after {self._timeout}s: {e}") from e
        except httpx.RequestError as e:
            raise TransportError(f"OpenAI connection failed: {e}") from e

        if not response.is_success:
            logger.error("OpenAI API error %d: %s", response.status_code, response.text[:500])
            raise UpstreamError(status=response.status_code, body=response.text)

        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamError(
                status=response.status_code,
                body=response.text,
                message="OpenAI API returned a non-JSON body",
            ) from e

        if not isinstance(data, dict):
            raise UpstreamError(
                status=response.status_code,
                body=response.text,
                message="OpenAI API returned an unexpected body",
            )
        return data

    def _should_retry(self, error: GatewayError, attempt: int) -> bool:
        if attempt >= self._max_retries:
            return False
        if isinstance(error, TransportError):
            return True
        return isinstance(error, UpstreamError) and error.is_server_error

    async def close(self) -> None:
        """Close the async HTTP client.

        Should be called when shutting down the application.
        """
        if self._client is not None:
            await self._client.aclose()
            self._client = None
