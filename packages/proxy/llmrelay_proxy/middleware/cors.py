"""CORS configuration middleware."""

from collections.abc import Callable
from typing import Any

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

CORS_HEADERS: dict[str, str] = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
    # Cache preflight response for 1 day
    "Access-Control-Max-Age": "86400",
}


def preflight_response() -> Response:
    """Build the 204 acknowledgment for a CORS preflight request."""
    return Response(status_code=204, headers=CORS_HEADERS)


class CORSMiddleware(BaseHTTPMiddleware):
    """Middleware to handle CORS (Cross-Origin Resource Sharing).

    Any origin may call the relay. Preflight requests pass through to the
    relay route like any other method, so they are answered and logged in
    one place; this middleware only stamps the CORS headers on every
    response on the way out, including framework-generated errors.
    """

    async def dispatch(self, request: Request, call_next: Callable[..., Any]) -> Response:
        """Process request and add CORS headers.

        Args:
            request: FastAPI request object.
            call_next: Next middleware or route handler.

        Returns:
            Response with CORS headers added.
        """
        response = await call_next(request)

        for name, value in CORS_HEADERS.items():
            response.headers[name] = value

        return response  # type: ignore[no-any-return]
