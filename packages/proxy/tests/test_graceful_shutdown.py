"""Tests for application lifecycle and graceful shutdown."""

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from llmrelay.infrastructure.adapters.openrouter_adapter import OpenRouterAdapter
from llmrelay.infrastructure.config.settings import RelaySettings
from llmrelay_proxy.main import cleanup_resources


class TestShutdownConfiguration:
    """Tests for shutdown configuration."""

    def test_shutdown_timeout_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that shutdown timeout defaults to 30 seconds."""
        monkeypatch.delenv("LLMRELAY_SHUTDOWN_TIMEOUT_SECONDS", raising=False)
        assert RelaySettings(_env_file=None).shutdown_timeout_seconds == 30

    def test_shutdown_timeout_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that shutdown timeout can be configured via environment variable."""
        monkeypatch.setenv("LLMRELAY_SHUTDOWN_TIMEOUT_SECONDS", "60")
        assert RelaySettings(_env_file=None).shutdown_timeout_seconds == 60

    def test_lifespan_uses_configured_timeout(self) -> None:
        """Test that shutdown is bounded by the timeout from settings."""
        from llmrelay_proxy import main

        settings = RelaySettings(shutdown_timeout_seconds=45, _env_file=None)
        with patch.object(main, "get_settings", return_value=settings), patch.object(
            main, "_http_clients", []
        ), patch.object(
            main, "cleanup_resources", AsyncMock(side_effect=asyncio.TimeoutError)
        ), patch.object(main, "logger") as mock_logger:
            with TestClient(main.app):
                pass

        mock_logger.warning.assert_called_once()
        assert mock_logger.warning.call_args.args[0] == "shutdown_timeout_exceeded"
        assert mock_logger.warning.call_args.kwargs["timeout_seconds"] == 45


class TestCleanupResources:
    """Tests for resource cleanup during shutdown."""

    @pytest.mark.asyncio
    async def test_cleanup_with_no_resources(self) -> None:
        """Test cleanup when no clients are registered."""
        from llmrelay_proxy import main

        with patch.object(main, "_http_clients", []):
            await cleanup_resources()

    @pytest.mark.asyncio
    async def test_cleanup_http_clients(self) -> None:
        """Test cleanup of HTTP client connections."""
        from llmrelay_proxy import main

        # First has aclose, second only close
        mock_client1 = MagicMock()
        mock_client1.aclose = AsyncMock()
        mock_client2 = MagicMock()
        mock_client2.close = AsyncMock()
        del mock_client2.aclose

        clients = [mock_client1, mock_client2]
        with patch.object(main, "_http_clients", clients):
            await cleanup_resources()

            mock_client1.aclose.assert_called_once()
            mock_client2.close.assert_called_once()
            assert clients == []

    @pytest.mark.asyncio
    async def test_cleanup_handles_errors_gracefully(self) -> None:
        """Test that one failing client does not stop the others closing."""
        from llmrelay_proxy import main

        failing = MagicMock()
        failing.aclose = AsyncMock(side_effect=Exception("Connection error"))
        healthy = MagicMock()
        healthy.aclose = AsyncMock()

        with patch.object(main, "_http_clients", [failing, healthy]):
            await cleanup_resources()

            failing.aclose.assert_called_once()
            healthy.aclose.assert_called_once()

    @pytest.mark.asyncio
    async def test_cleanup_closes_adapter_client(self) -> None:
        """Test that the upstream adapter's pooled client is closed."""
        from llmrelay_proxy import main

        adapter = OpenRouterAdapter()
        client = adapter.client

        with patch.object(main, "_http_clients", [adapter]):
            await cleanup_resources()

        assert client.is_closed


class TestLifespanEvents:
    """Tests for FastAPI lifespan events."""

    def test_app_has_lifespan(self) -> None:
        """Test that the FastAPI app has lifespan configured."""
        from llmrelay_proxy.main import app

        assert app.router.lifespan_context is not None

    def test_lifespan_registers_and_releases_adapter(self) -> None:
        """Test that startup registers the adapter and shutdown releases it."""
        from llmrelay_proxy import main

        with patch.object(main, "_http_clients", []) as clients:
            with TestClient(main.app):
                assert len(clients) == 1
                assert isinstance(clients[0], OpenRouterAdapter)
            assert clients == []

    def test_lifespan_configures_logging(self) -> None:
        """Test that startup configures logging from settings."""
        from llmrelay_proxy import main

        with patch.object(main, "configure_logging") as configure, patch.object(
            main, "_http_clients", []
        ):
            with TestClient(main.app):
                pass

        configure.assert_called_once()


class TestUvicornConfiguration:
    """Tests for uvicorn graceful shutdown configuration."""

    def test_run_uses_settings(self) -> None:
        """Test that the run script passes the server settings to uvicorn."""
        from llmrelay_proxy import run

        settings = RelaySettings(
            host="127.0.0.1",
            port=9000,
            shutdown_timeout_seconds=60,
            log_level="WARNING",
            _env_file=None,
        )
        with patch.object(run, "get_settings", return_value=settings), patch.object(
            run, "uvicorn"
        ) as mock_uvicorn:
            run.main()

        _, kwargs = mock_uvicorn.Config.call_args
        assert mock_uvicorn.Config.call_args.args[0] == "llmrelay_proxy.main:app"
        assert kwargs["host"] == "127.0.0.1"
        assert kwargs["port"] == 9000
        assert kwargs["reload"] is False
        assert kwargs["timeout_graceful_shutdown"] == 60
        assert kwargs["log_level"] == "warning"
        mock_uvicorn.Server.return_value.run.assert_called_once()

    def test_run_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test the bind address and shutdown grace used when nothing is configured."""
        from llmrelay_proxy import run

        for name in ("HOST", "PORT", "RELOAD", "SHUTDOWN_TIMEOUT_SECONDS", "LOG_LEVEL"):
            monkeypatch.delenv(f"LLMRELAY_{name}", raising=False)
        settings = RelaySettings(_env_file=None)
        with patch.object(run, "get_settings", return_value=settings), patch.object(
            run, "uvicorn"
        ) as mock_uvicorn:
            run.main()

        _, kwargs = mock_uvicorn.Config.call_args
        assert kwargs["host"] == "0.0.0.0"
        assert kwargs["port"] == 8000
        assert kwargs["reload"] is False
        assert kwargs["timeout_graceful_shutdown"] == 30
        assert kwargs["log_level"] == "info"
