"""Structured logging for the relay path."""

import logging
from contextlib import suppress
from typing import Any

import structlog

from llmrelay.domain.models.relay_request import RelayRequest

MESSAGE_PREVIEW_LENGTH = 20
"""Characters of the last inbound message kept in request logs."""

BODY_PREVIEW_LENGTH = 100
"""Characters of the outbound body kept in response logs."""

_SENSITIVE_KEYS = {"authorization", "api_key", "openrouter_api_key", "key_material"}


def sanitize_for_logging(data: Any) -> Any:
    """Sanitize data to remove sensitive information before logging.

    Redacts credential-bearing fields from dictionaries and nested
    structures, and any string that looks like a bearer token or API key.

    Args:
        data: Data structure to sanitize (dict, list, or primitive).

    Returns:
        Sanitized data structure with credentials replaced by "[REDACTED]".
    """
    if isinstance(data, dict):
        sanitized = {}
        for key, value in data.items():
            if isinstance(key, str) and key.lower() in _SENSITIVE_KEYS:
                sanitized[key] = "[REDACTED]"
            else:
                sanitized[key] = sanitize_for_logging(value)
        return sanitized
    elif isinstance(data, list):
        return [sanitize_for_logging(item) for item in data]
    elif isinstance(data, str):
        if data.startswith("Bearer "):
            return "[REDACTED]"
        if data.startswith("sk-") and len(data) > 20:
            return "[REDACTED]"
    return data


def preview(text: str | None, limit: int) -> str:
    """Truncate text to ``limit`` characters, marking the cut with '...'."""
    if not text:
        return ""
    if len(text) > limit:
        return f"{text[:limit]}..."
    return text


def configure_logging(log_level: str = "INFO", json_format: bool = True) -> None:
    """Configure structlog on top of the standard logging module.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_format: If True, use JSON format for structured logging.
                    If False, use human-readable format (development mode).
    """
    processors: list[Any] = [
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if json_format:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format="%(message)s"
        if json_format
        else "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


class RelayLogger:
    """Best-effort logger for relay traffic.

    Every method swallows its own failures: a broken log sink must never
    change what the caller receives.
    """

    def __init__(self, logger: Any | None = None) -> None:
        self._logger = logger or structlog.get_logger("llmrelay")

    def event(self, level: str, event: str, **context: Any) -> None:
        """Log a structured event with sanitized context."""
        with suppress(Exception):
            log_method = getattr(self._logger, level.lower(), self._logger.info)
            log_method(event, **sanitize_for_logging(context))

    def log_request(self, relay_request: RelayRequest) -> None:
        """Log an accepted inbound request with a short last-message preview."""
        with suppress(Exception):
            last_message = relay_request.messages[-1]
            self.event(
                "info",
                "relay_request_received",
                model_name=relay_request.model_name,
                stream=relay_request.stream,
                message_count=len(relay_request.messages),
                last_message=preview(last_message.content, MESSAGE_PREVIEW_LENGTH),
            )

    def log_response(self, status: int, content_type: str | None, body: bytes | str | None) -> None:
        """Log an outbound response with a truncated body preview."""
        with suppress(Exception):
            if isinstance(body, bytes):
                body = body.decode("utf-8", errors="replace")
            self.event(
                "info",
                "relay_response_sent",
                status=status,
                content_type=content_type,
                body=preview(body, BODY_PREVIEW_LENGTH),
            )
