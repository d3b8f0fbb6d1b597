"""OpenRouter upstream adapter implementation."""

from __future__ import annotations

import json

import httpx

from llmrelay.domain.interfaces.upstream_adapter import UpstreamAdapter, UpstreamStream
from llmrelay.domain.models.relay_error import ErrorCategory, RelayError
from llmrelay.domain.models.relay_request import RelayRequest

# Sent as HTTP-Referer and X-Title when the client supplies no override
DEFAULT_REFERER = "https://llmproxy.cloudwise.workers.dev/"
DEFAULT_TITLE = "LLM Proxy Worker"


def _reject_constant(name: str) -> None:
    raise ValueError(f"Non-finite number {name} in upstream body")


class OpenRouterAdapter(UpstreamAdapter):
    """OpenRouter chat-completions adapter.

    Holds one pooled ``httpx.AsyncClient`` for the process lifetime. Both
    modes send the request with ``stream=True`` so the status can be checked
    before the body is consumed; the buffered mode then reads the body in
    full while the streaming mode hands the open body to the caller.

    Example:
        ```python
        adapter = OpenRouterAdapter()
        body = await adapter.complete(relay_request, api_key="sk-or-...")
        await adapter.aclose()
        ```
    """

    API_URL = "https://openrouter.ai/api/v1/chat/completions"
    """OpenRouter chat-completions endpoint."""

    CONNECT_TIMEOUT = 10.0
    """Connect timeout in seconds. Reads are not time-limited."""

    def __init__(
        self,
        api_url: str | None = None,
        connect_timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize OpenRouter adapter.

        Args:
            api_url: Optional endpoint override (for testing).
            connect_timeout: Optional connect timeout override.
            transport: Optional httpx transport (for testing with httpx.MockTransport).
        """
        self.api_url = api_url or self.API_URL
        self.connect_timeout = connect_timeout or self.CONNECT_TIMEOUT
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Shared HTTP client, created on first use."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(None, connect=self.connect_timeout),
                transport=self._transport,
            )
        return self._client

    def build_headers(self, relay_request: RelayRequest, api_key: str) -> dict[str, str]:
        """Build outbound headers. The credential never comes from the client."""
        return {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
            "HTTP-Referer": relay_request.referer or DEFAULT_REFERER,
            "X-Title": relay_request.title or DEFAULT_TITLE,
        }

    async def _send(self, relay_request: RelayRequest, api_key: str) -> httpx.Response:
        request = self.client.build_request(
            "POST",
            self.api_url,
            json=relay_request.to_upstream_payload().to_json(),
            headers=self.build_headers(relay_request, api_key),
        )
        try:
            response = await self.client.send(request, stream=True)
        except httpx.HTTPError as e:
            raise self.map_error(e) from e

        if not response.is_success:
            try:
                error_text = (await response.aread()).decode("utf-8", errors="replace")
            except httpx.HTTPError as e:
                raise self.map_error(e) from e
            finally:
                await response.aclose()
            raise RelayError(
                category=ErrorCategory.UpstreamError,
                message=f"Error from OpenRouter: {error_text}",
                status_code=response.status_code,
            )
        return response

    async def complete(self, relay_request: RelayRequest, api_key: str) -> bytes:
        """Forward a non-streaming request and return the upstream JSON body as received.

        The body is parsed once to confirm it is strict JSON (no NaN or
        Infinity) and then returned byte for byte.
        """
        response = await self._send(relay_request, api_key)
        try:
            body = await response.aread()
            json.loads(body, parse_constant=_reject_constant)
        except (httpx.HTTPError, ValueError, RecursionError) as e:
            raise self.map_error(e) from e
        finally:
            await response.aclose()
        return body

    async def open_stream(self, relay_request: RelayRequest, api_key: str) -> UpstreamStream:
        """Forward a streaming request and return the open upstream body."""
        response = await self._send(relay_request, api_key)
        return UpstreamStream(
            status_code=response.status_code,
            chunks=response.aiter_bytes(),
            close=response.aclose,
        )

    def map_error(self, error: Exception) -> RelayError:
        """Map a transport or decoding failure to a TransportError."""
        reason = str(error) or error.__class__.__name__
        return RelayError(
            category=ErrorCategory.TransportError,
            message=f"Error proxying to OpenRouter: {reason}",
        )

    async def aclose(self) -> None:
        """Close the shared HTTP client."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
