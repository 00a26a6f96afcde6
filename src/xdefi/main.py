"""Main entry point - runs the HTTP API."""

import logging

import uvicorn

from xdefi.api.app import create_app
from xdefi.config import get_settings

logger = logging.getLogger(__name__)


def configure_logging(debug: bool) -> None:
    """Configure root logging for command-line entry points."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def main():
    """Run the API server."""
    settings = get_settings()
    configure_logging(settings.debug)

    logger.info("Starting xdefi API...")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Aggregator proxy: {settings.get_safe_dict()['okx_proxy_url']}")

    uvicorn.run(
        create_app(),
        host=settings.api_host,
        port=settings.api_port,
        log_level="debug" if settings.debug else "info",
    )


if __name__ == "__main__":
    main()
