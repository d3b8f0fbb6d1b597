"""Configuration settings using pydantic-settings."""

from typing import Any

from pydantic import AliasChoices, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class RelaySettings(BaseSettings):
    """Configuration settings for LLM Relay.

    The upstream credential is read from ``OPENROUTER_API_KEY``. All other
    settings are prefixed with 'LLMRELAY_' (e.g., LLMRELAY_LOG_LEVEL=DEBUG).
    Values may also come from a ``.env`` file in the working directory.

    Example:
        ```python
        # From environment variables
        settings = RelaySettings()

        # From dictionary
        settings = RelaySettings.from_dict({"openrouter_api_key": "sk-or-..."})
        ```
    """

    model_config = SettingsConfigDict(
        env_prefix="LLMRELAY_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    openrouter_api_key: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices("OPENROUTER_API_KEY", "openrouter_api_key"),
        description="Upstream OpenRouter API key. Required to relay requests.",
    )

    # Upstream client configuration
    connect_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Connect timeout for the upstream call in seconds",
    )

    # Server configuration
    host: str = Field(default="0.0.0.0", description="Interface the proxy binds to")
    port: int = Field(default=8000, ge=1, le=65535, description="Port the proxy listens on")
    reload: bool = Field(default=False, description="Restart on code changes (development only)")
    shutdown_timeout_seconds: int = Field(
        default=30,
        gt=0,
        description="Seconds allowed for in-flight requests and client cleanup on shutdown",
    )

    # Observability configuration
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    log_json: bool = Field(
        default=True,
        description="Render logs as JSON. Set to false for console output in development.",
    )

    def get_api_key(self) -> str | None:
        """Return the configured credential, or None when unset or blank."""
        if self.openrouter_api_key is None:
            return None
        return self.openrouter_api_key.get_secret_value() or None

    @classmethod
    def from_dict(cls, config: dict[str, Any]) -> "RelaySettings":
        """Create settings from a dictionary.

        Args:
            config: Dictionary with configuration values.

        Returns:
            RelaySettings instance.
        """
        return cls(**config)
