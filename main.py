#!/usr/bin/env python3
"""Main entry point for the Waggle match service.

Runs the FastAPI application with Uvicorn. Host, port, log level and reload
are taken from `waggle.config`.

Environment Variables:
    API_HOST (str): The host to bind the server to.
    API_PORT (int): The port to bind the server to.
    LOG_LEVEL (str): The logging level (e.g., 'INFO', 'DEBUG').
    DEBUG (bool): Whether to enable auto-reload for development.
"""

import uvicorn

from waggle.config import settings
from waggle.utils.logging import get_logger

logger = get_logger(__name__)


def main() -> None:
    logger.info(f"Starting Waggle match service on {settings.API_HOST}:{settings.API_PORT}")
    uvicorn.run(
        "waggle.api.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        log_level=settings.LOG_LEVEL.lower(),
        reload=settings.DEBUG,
    )


if __name__ == "__main__":
    main()
