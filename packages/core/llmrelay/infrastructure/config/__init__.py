"""Configuration infrastructure module."""

from llmrelay.infrastructure.config.settings import RelaySettings

__all__ = ["RelaySettings"]
