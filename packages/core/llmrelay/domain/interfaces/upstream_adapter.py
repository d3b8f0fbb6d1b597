"""UpstreamAdapter abstract interface for the chat-completions upstream.

This module defines the contract the relay uses to talk to its single
upstream. The relay never touches the HTTP client directly; it only sees
JSON body bytes, byte streams and RelayError.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator, Awaitable, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from llmrelay.domain.models.relay_error import RelayError
    from llmrelay.domain.models.relay_request import RelayRequest


@dataclass
class UpstreamStream:
    """An open upstream response whose body has not been read yet.

    ``chunks`` yields body bytes as they arrive from the upstream; ``close``
    releases the connection and is safe to call more than once.
    """

    status_code: int
    chunks: AsyncIterator[bytes]
    close: Callable[[], Awaitable[None]]


class UpstreamAdapter(ABC):
    """Abstract interface for the upstream chat-completions provider.

    Key Responsibilities:
    - Build the upstream payload and identification headers from a RelayRequest
    - Inject the server-held credential
    - Make exactly one upstream call per relay cycle, no retries
    - Map upstream and transport failures to RelayError

    Example Usage:
        ```python
        adapter = OpenRouterAdapter()
        body = await adapter.complete(relay_request, api_key)

        stream = await adapter.open_stream(relay_request, api_key)
        async for chunk in stream.chunks:
            ...
        await stream.close()
        ```
    """

    @abstractmethod
    def build_headers(self, relay_request: RelayRequest, api_key: str) -> dict[str, str]:
        """Build the outbound headers for a relay request.

        Args:
            relay_request: Validated inbound request (supplies referer/title overrides).
            api_key: Server-held upstream credential.

        Returns:
            Header mapping including Authorization, Content-Type, HTTP-Referer
            and X-Title.
        """
        ...

    @abstractmethod
    async def complete(self, relay_request: RelayRequest, api_key: str) -> bytes:
        """Forward a non-streaming request and return the upstream JSON body.

        The body is returned exactly as the upstream sent it, once it has been
        checked to be strict JSON.

        Raises:
            RelayError: UpstreamError for non-2xx statuses (status passed
                through), TransportError when the upstream cannot be reached
                or its body is not strict JSON.
        """
        ...

    @abstractmethod
    async def open_stream(self, relay_request: RelayRequest, api_key: str) -> UpstreamStream:
        """Forward a streaming request and return the open upstream body.

        The status is checked before returning, so a non-2xx upstream raises
        here rather than surfacing halfway through a stream.

        Raises:
            RelayError: UpstreamError or TransportError, as for complete().
        """
        ...

    @abstractmethod
    def map_error(self, error: Exception) -> RelayError:
        """Map a transport-level exception to a RelayError."""
        ...

    @abstractmethod
    async def aclose(self) -> None:
        """Release pooled connections held by the adapter."""
        ...
