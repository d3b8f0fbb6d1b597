"""Relay route: validate, forward upstream, relay the result."""

from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from starlette.background import BackgroundTask
from starlette.responses import Response, StreamingResponse

from llmrelay.domain.interfaces.upstream_adapter import UpstreamAdapter
from llmrelay.domain.models.relay_error import ErrorCategory, RelayError
from llmrelay.domain.models.relay_request import RelayRequest, parse_relay_request
from llmrelay.infrastructure.config.settings import RelaySettings
from llmrelay.infrastructure.observability.logger import RelayLogger
from llmrelay_proxy.dependencies import get_relay_logger, get_settings, get_upstream_adapter
from llmrelay_proxy.middleware.cors import CORS_HEADERS, preflight_response

router = APIRouter()

RELAY_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]

STREAM_HEADERS: dict[str, str] = {
    "Content-Type": "text/event-stream",
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
}


class RelayHandler:
    """Handles one relay cycle: receive, validate, forward, relay the result.

    The handler holds no per-request state. The credential arrives through
    ``settings`` and is read once per call; it is never taken from the
    inbound request. Every RelayError raised along the way is turned into a
    ``{"error": ...}`` JSON response here, so no failure escapes as an
    unhandled exception.

    Example:
        ```python
        handler = RelayHandler(settings=RelaySettings(), adapter=OpenRouterAdapter())
        response = await handler.handle(request)
        ```
    """

    def __init__(
        self,
        settings: RelaySettings,
        adapter: UpstreamAdapter,
        relay_logger: RelayLogger | None = None,
    ) -> None:
        self._settings = settings
        self._adapter = adapter
        self._log = relay_logger or RelayLogger()

    async def handle(self, request: Request) -> Response:
        """Relay an inbound HTTP request and build the outbound response."""
        if request.method == "OPTIONS":
            response = preflight_response()
            self._log.log_response(response.status_code, None, None)
            return response

        try:
            if request.method != "POST":
                raise RelayError(
                    category=ErrorCategory.MethodNotAllowed,
                    message="Only POST requests are allowed",
                )

            api_key = self._settings.get_api_key()
            if not api_key:
                self._log.event("error", "relay_misconfigured", reason="missing upstream API key")
                raise RelayError(
                    category=ErrorCategory.Misconfiguration,
                    message="Server error: missing API key",
                )

            relay_request = parse_relay_request(await request.body())
            self._log.log_request(relay_request)

            if relay_request.stream:
                return await self._relay_stream(relay_request, api_key)
            return await self._relay_buffered(relay_request, api_key)
        except RelayError as e:
            self._log_failure(e)
            return self._json(e.to_payload(), status_code=e.status_code)

    async def _relay_buffered(self, relay_request: RelayRequest, api_key: str) -> Response:
        body = await self._adapter.complete(relay_request, api_key)
        self._log.event(
            "info", "relay_completed", model_name=relay_request.model_name, stream=False
        )
        response = Response(content=body, media_type="application/json", headers=CORS_HEADERS)
        self._log.log_response(response.status_code, "application/json", body)
        return response

    async def _relay_stream(self, relay_request: RelayRequest, api_key: str) -> Response:
        upstream = await self._adapter.open_stream(relay_request, api_key)
        self._log.event("info", "relay_stream_started", model_name=relay_request.model_name)
        self._log.log_response(200, STREAM_HEADERS["Content-Type"], None)
        return StreamingResponse(
            upstream.chunks,
            status_code=200,
            headers={**STREAM_HEADERS, **CORS_HEADERS},
            background=BackgroundTask(upstream.close),
        )

    def _json(self, content: Any, status_code: int = 200) -> Response:
        response = JSONResponse(content=content, status_code=status_code, headers=CORS_HEADERS)
        self._log.log_response(status_code, "application/json", response.body)
        return response

    def _log_failure(self, error: RelayError) -> None:
        if error.category == ErrorCategory.UpstreamError:
            self._log.event(
                "error", "upstream_error", status=error.status_code, error=error.message
            )
        elif error.category == ErrorCategory.TransportError:
            self._log.event("error", "relay_transport_error", error=error.message)
        else:
            self._log.event(
                "warning",
                "relay_request_rejected",
                category=error.category.value,
                status=error.status_code,
            )


def get_relay_handler(
    settings: RelaySettings = Depends(get_settings),
    adapter: UpstreamAdapter = Depends(get_upstream_adapter),
    relay_logger: RelayLogger = Depends(get_relay_logger),
) -> RelayHandler:
    """Build a RelayHandler from the injected settings, adapter and logger."""
    return RelayHandler(settings=settings, adapter=adapter, relay_logger=relay_logger)


@router.api_route("/{path:path}", methods=RELAY_METHODS, include_in_schema=False)
async def relay(request: Request, handler: RelayHandler = Depends(get_relay_handler)) -> Response:
    return await handler.handle(request)
