#!/usr/bin/env python3
"""
Main entry point for the YAUS URL shortener service.

Serves POST /shorten and GET /{hash} until SIGINT or SIGTERM is received,
then drains in-flight requests for at most the configured cooldown.

Usage:
    python app.py

Configuration is read from configs/devel/config.yaml (or the file named by
YAUS_CONFIG_FILE) and YAUS_* environment variables, for example:
    YAUS_STORAGE__PATH - Directory holding the database
    YAUS_SERVER__ADDRESS - Listen address (host:port)
    YAUS_SERVER__TIMEOUT__WRITE - Write timeout in seconds
    YAUS_LOG_LEVEL - Logging level
"""

import asyncio
import logging
import sys

from pydantic import ValidationError

from config import Settings, load_settings
from yaus.hasher import create_hasher
from yaus.storage import StorageError, open_backend
from yaus.common.logging_config import setup_logging
from web_app import Server, create_app


async def run(settings: Settings, logger: logging.Logger) -> int:
    """Run the service until it is signalled to stop.

    Returns:
        Process exit code
    """
    try:
        backend = open_backend(
            settings.storage.backend,
            settings.storage.path,
            logger=logger,
        )
    except (StorageError, ValueError) as e:
        logger.error(f"Failed to open storage: {e}")
        return 1

    exit_code = 0
    try:
        app = create_app(
            backend=backend,
            hasher=create_hasher(settings.hasher.name, settings.hasher.length),
            config=settings,
            logger=logger,
        )
        server = Server(app, settings.server_config(), logger=logger)
        await server.serve_until_signalled()
    except Exception as e:
        logger.error(f"Server error: {e}")
        exit_code = 1
    finally:
        try:
            await backend.close()
        except StorageError as e:
            logger.error(f"Failed to close storage: {e}")
            exit_code = 1

    return exit_code


def main():
    """Main entry point."""
    try:
        settings = load_settings()
    except ValidationError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        sys.exit(1)

    logger = setup_logging(
        level=settings.log_level,
        log_file=settings.log_file,
        json_format=settings.log_json,
    )

    logger.info("YAUS URL Shortener")
    logger.info(f"Configuration: {settings.model_dump()}")

    sys.exit(asyncio.run(run(settings, logger)))


if __name__ == "__main__":
    main()
