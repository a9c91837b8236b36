#!/usr/bin/env python3
"""
Minibank Entry Point

Loads the saved snapshot and starts the FastAPI server.
"""

import sys

import uvicorn

from minibank.api import create_app
from minibank.config import get_config
from minibank.errors import BankingError
from minibank.logging_config import setup_logging


def main():
    config = get_config()
    logger = setup_logging(config.log_level, config.log_format)

    try:
        app = create_app()
    except BankingError as e:
        logger.error(f"Could not load snapshot: {e}")
        sys.exit(1)

    logger.info(f"Starting Minibank on http://{config.api_host}:{config.api_port}")

    try:
        uvicorn.run(
            app,
            host=config.api_host,
            port=config.api_port,
            log_level=config.log_level.lower()
        )
    except KeyboardInterrupt:
        logger.info("Shutting down Minibank")


if __name__ == "__main__":
    main()
