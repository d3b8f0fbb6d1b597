"""RelayError model for standardized error handling."""

from __future__ import annotations

from enum import Enum


class ErrorCategory(str, Enum):
    """Categories of relay errors."""

    MethodNotAllowed = "method_not_allowed"
    """Inbound method is neither POST nor OPTIONS (405)."""

    Misconfiguration = "misconfiguration"
    """Upstream credential is not configured on the server (500)."""

    InvalidJSON = "invalid_json"
    """Request body is not a JSON object (400)."""

    MissingFields = "missing_fields"
    """modelName or messages missing or empty (400)."""

    InvalidMessage = "invalid_message"
    """A message has an unknown role or non-string content (400)."""

    UpstreamError = "upstream_error"
    """Upstream answered with a non-2xx status (status passed through)."""

    TransportError = "transport_error"
    """Upstream unreachable or its response unreadable (500)."""


DEFAULT_STATUS_CODES: dict[ErrorCategory, int] = {
    ErrorCategory.MethodNotAllowed: 405,
    ErrorCategory.Misconfiguration: 500,
    ErrorCategory.InvalidJSON: 400,
    ErrorCategory.MissingFields: 400,
    ErrorCategory.InvalidMessage: 400,
    ErrorCategory.UpstreamError: 502,
    ErrorCategory.TransportError: 500,
}
"""HTTP status returned to the caller for each category."""


class RelayError(Exception):
    """Standardized error raised anywhere along the relay path.

    Every failure of a single relay cycle is expressed as a RelayError and
    converted to a ``{"error": message}`` JSON body at the application
    boundary. The message is shown to the caller as-is, so it must never
    contain the upstream credential.

    Example:
        ```python
        raise RelayError(
            category=ErrorCategory.UpstreamError,
            message="Error from OpenRouter: rate limited",
            status_code=429,
        )
        ```
    """

    def __init__(
        self,
        category: ErrorCategory | str,
        message: str,
        status_code: int | None = None,
    ) -> None:
        """Initialize RelayError.

        Args:
            category: Error category (ErrorCategory enum or string).
            message: Human-readable error message returned to the caller.
            status_code: HTTP status override. Defaults to the category's status.
        """
        self.category = ErrorCategory(category) if isinstance(category, str) else category
        self.message = message
        self.status_code = status_code or DEFAULT_STATUS_CODES[self.category]
        super().__init__(self.message)

    def __repr__(self) -> str:
        """String representation of the error."""
        return (
            f"RelayError(category={self.category.value}, "
            f"message={self.message!r}, status_code={self.status_code})"
        )

    def __str__(self) -> str:
        """Human-readable error message."""
        return self.message

    def to_payload(self) -> dict[str, str]:
        """Return the JSON body sent to the caller."""
        return {"error": self.message}
