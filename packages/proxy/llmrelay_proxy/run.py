"""Console entry point: serve the relay app with uvicorn."""

import uvicorn

from llmrelay_proxy.dependencies import get_settings


def main() -> None:
    """Start the proxy with bind address, reload and shutdown grace taken from settings."""
    settings = get_settings()

    config = uvicorn.Config(
        "llmrelay_proxy.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
        timeout_graceful_shutdown=settings.shutdown_timeout_seconds,
        log_level=settings.log_level.lower(),
    )
    uvicorn.Server(config).run()


if __name__ == "__main__":
    main()
