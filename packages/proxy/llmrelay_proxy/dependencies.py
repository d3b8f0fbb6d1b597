"""
Dependency injection setup for the LLM Relay proxy.
"""

from functools import cache

from llmrelay.domain.interfaces.upstream_adapter import UpstreamAdapter
from llmrelay.infrastructure.adapters.openrouter_adapter import OpenRouterAdapter
from llmrelay.infrastructure.config.settings import RelaySettings
from llmrelay.infrastructure.observability.logger import RelayLogger


@cache
def get_settings() -> RelaySettings:
    """Get a singleton instance of the RelaySettings."""
    return RelaySettings()


@cache
def get_upstream_adapter() -> UpstreamAdapter:
    """Get a singleton instance of the upstream adapter."""
    return OpenRouterAdapter(connect_timeout=get_settings().connect_timeout_seconds)


@cache
def get_relay_logger() -> RelayLogger:
    """Get a singleton instance of the relay traffic logger."""
    return RelayLogger()
