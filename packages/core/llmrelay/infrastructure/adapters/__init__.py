"""Upstream adapters for LLM Relay."""

from llmrelay.infrastructure.adapters.openrouter_adapter import (
    DEFAULT_REFERER,
    DEFAULT_TITLE,
    OpenRouterAdapter,
)

__all__ = ["DEFAULT_REFERER", "DEFAULT_TITLE", "OpenRouterAdapter"]
