#!/usr/bin/env python3
"""
Run the property onboarding API server.
"""

import logging

import uvicorn

from utils.config import Config
from utils.logging import setup_logging


logger = logging.getLogger("run")


def main():
    """Start the web server."""
    config = Config.load()
    setup_logging(config.log_level, config.log_format)

    logger.info("Starting Property Onboarding API on http://%s:%d", config.host, config.port)
    logger.info("Press Ctrl+C to stop")

    uvicorn.run(
        "web.app:app",
        host=config.host,
        port=config.port,
        reload=config.debug,
        log_level=config.log_level.lower(),
    )


if __name__ == "__main__":
    main()
