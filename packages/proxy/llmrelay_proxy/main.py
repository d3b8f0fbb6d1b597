"""FastAPI application entry point for the LLM Relay proxy."""

import asyncio
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

import structlog
from fastapi import FastAPI

from llmrelay.infrastructure.observability.logger import configure_logging
from llmrelay_proxy.api import relay
from llmrelay_proxy.dependencies import get_settings, get_upstream_adapter
from llmrelay_proxy.middleware.cors import CORSMiddleware

# Initialize structured logger
logger = structlog.get_logger(__name__)

# HTTP clients that need closing on shutdown
_http_clients: list[Any] = []


async def cleanup_resources() -> None:
    """Close upstream HTTP clients during shutdown.

    Errors are logged and never raised, so one failing client does not
    keep the others open.
    """
    logger.info("shutdown_started", message="Beginning graceful shutdown")

    for client in _http_clients:
        try:
            if hasattr(client, "aclose"):
                await client.aclose()
            elif hasattr(client, "close"):
                await client.close()
        except Exception as e:
            logger.warning(
                "shutdown_resource_error",
                resource="http_client",
                error=str(e),
                status="warning",
            )

    if _http_clients:
        logger.info(
            "shutdown_resource_closed",
            resource="http_clients",
            count=len(_http_clients),
            status="success",
        )
        _http_clients.clear()

    logger.info("shutdown_completed", message="Graceful shutdown completed successfully")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """FastAPI lifespan context manager for startup and shutdown.

    Yields:
        None: Application runs between startup and shutdown.
    """
    settings = get_settings()
    configure_logging(settings.log_level, json_format=settings.log_json)
    logger.info(
        "application_startup",
        message="LLM Relay proxy starting up",
        credential_configured=settings.get_api_key() is not None,
    )
    _http_clients.append(get_upstream_adapter())
    shutdown_timeout = settings.shutdown_timeout_seconds

    yield

    logger.info("shutdown_signal_received", message="Shutdown signal received, starting graceful shutdown")
    try:
        await asyncio.wait_for(cleanup_resources(), timeout=shutdown_timeout)
    except asyncio.TimeoutError:
        logger.warning(
            "shutdown_timeout_exceeded",
            timeout_seconds=shutdown_timeout,
            message=f"Shutdown timeout ({shutdown_timeout}s) exceeded, forcing exit",
        )
    except Exception as e:
        logger.error(
            "shutdown_error",
            error=str(e),
            message="Unexpected error during shutdown",
        )


app = FastAPI(
    title="LLM Relay",
    version="0.1.0",
    description="Forward proxy that relays chat completions to OpenRouter",
    lifespan=lifespan,
    docs_url=None,
    redoc_url=None,
    openapi_url=None,
)

app.add_middleware(CORSMiddleware)

app.include_router(relay.router)
