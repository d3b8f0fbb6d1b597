"""ChatMessage, RelayRequest and UpstreamPayload models for one relay cycle."""

from __future__ import annotations

import json
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, StrictStr, ValidationError

from llmrelay.domain.models.relay_error import ErrorCategory, RelayError

INVALID_JSON_MESSAGE = "Invalid JSON in request body"
MISSING_FIELDS_MESSAGE = 'Missing required fields. Need "modelName" and at least one message'
INVALID_MESSAGE_MESSAGE = (
    "Invalid message format. Each message must have a valid role and content"
)


class ChatMessage(BaseModel):
    """A single chat message in conversation order.

    Messages are relayed verbatim: content is not stripped or rewritten,
    and any extra keys the client sent alongside ``role`` and ``content``
    are kept and forwarded upstream unchanged.

    Example:
        ```python
        msg = ChatMessage(role="user", content="Hello!")
        ```
    """

    role: Literal["system", "user", "assistant"] = Field(
        ...,
        description="Message role: 'system', 'user' or 'assistant'",
    )
    content: StrictStr = Field(
        ...,
        description="Message content text",
    )

    model_config = ConfigDict(
        frozen=True,
        extra="allow",
    )


class UpstreamPayload(BaseModel):
    """JSON body sent to the upstream chat-completions endpoint."""

    messages: list[ChatMessage]
    model: str
    stream: bool = False

    model_config = ConfigDict(frozen=True)

    def to_json(self) -> dict[str, Any]:
        """Serialize to the upstream wire format."""
        return self.model_dump(mode="json")


class RelayRequest(BaseModel):
    """Validated inbound request, built once per HTTP call and never persisted.

    Example:
        ```python
        relay_request = RelayRequest(
            model_name="openai/gpt-4o",
            messages=[ChatMessage(role="user", content="Hello!")],
        )
        payload = relay_request.to_upstream_payload()
        ```
    """

    messages: list[ChatMessage] = Field(
        ...,
        description="Conversation in order",
        min_length=1,
    )
    model_name: str = Field(
        ...,
        alias="modelName",
        description="Upstream model identifier (e.g., 'openai/gpt-4o')",
        min_length=1,
    )
    stream: bool = Field(
        default=False,
        description="Relay the upstream byte stream instead of a buffered JSON body",
    )
    referer: str | None = Field(
        default=None,
        description="Optional HTTP-Referer override sent upstream",
    )
    title: str | None = Field(
        default=None,
        description="Optional X-Title override sent upstream",
    )

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
    )

    def to_upstream_payload(self) -> UpstreamPayload:
        """Derive the upstream body: messages, model and stream flag."""
        return UpstreamPayload(
            messages=list(self.messages),
            model=self.model_name,
            stream=self.stream,
        )


def _optional_text(value: Any) -> str | None:
    if isinstance(value, str) and value:
        return value
    return None


def parse_relay_request(raw_body: bytes) -> RelayRequest:
    """Validate a raw inbound body and build a RelayRequest.

    Checks run in order and stop at the first failure: the body must be a
    JSON object, ``modelName`` and ``messages`` must be present and
    non-empty, then every message must have a known role and string
    content. One bad message rejects the whole request.

    Args:
        raw_body: Request body bytes as received.

    Returns:
        RelayRequest: Validated request.

    Raises:
        RelayError: InvalidJSON, MissingFields or InvalidMessage.
    """
    try:
        body = json.loads(raw_body)
    except (ValueError, RecursionError) as e:
        raise RelayError(
            category=ErrorCategory.InvalidJSON,
            message=INVALID_JSON_MESSAGE,
        ) from e

    if not isinstance(body, dict):
        raise RelayError(
            category=ErrorCategory.InvalidJSON,
            message=INVALID_JSON_MESSAGE,
        )

    messages = body.get("messages")
    model_name = body.get("modelName")
    if (
        not isinstance(model_name, str)
        or not model_name
        or not isinstance(messages, list)
        or not messages
    ):
        raise RelayError(
            category=ErrorCategory.MissingFields,
            message=MISSING_FIELDS_MESSAGE,
        )

    try:
        parsed_messages = [ChatMessage.model_validate(message) for message in messages]
    except ValidationError as e:
        raise RelayError(
            category=ErrorCategory.InvalidMessage,
            message=INVALID_MESSAGE_MESSAGE,
        ) from e

    return RelayRequest(
        messages=parsed_messages,
        model_name=model_name,
        stream=bool(body.get("stream", False)),
        referer=_optional_text(body.get("referer")),
        title=_optional_text(body.get("title")),
    )
