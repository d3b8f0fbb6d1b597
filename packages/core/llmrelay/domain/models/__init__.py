"""Domain models for LLM Relay."""

from llmrelay.domain.models.relay_error import ErrorCategory, RelayError
from llmrelay.domain.models.relay_request import (
    ChatMessage,
    RelayRequest,
    UpstreamPayload,
    parse_relay_request,
)

__all__ = [
    "ChatMessage",
    "ErrorCategory",
    "RelayError",
    "RelayRequest",
    "UpstreamPayload",
    "parse_relay_request",
]
