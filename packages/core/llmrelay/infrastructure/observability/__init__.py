"""Logging setup for LLM Relay."""

from llmrelay.infrastructure.observability.logger import (
    RelayLogger,
    configure_logging,
    preview,
    sanitize_for_logging,
)

__all__ = ["RelayLogger", "configure_logging", "preview", "sanitize_for_logging"]
