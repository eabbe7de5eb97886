"""Logging setup for scripts and services embedding the SDK.

The SDK itself only creates module loggers; call ``configure_logging`` once
from the application entry point.
"""

import logging


def configure_logging(debug: bool = False) -> None:
    """Configure root logging and quiet chatty transport loggers."""
    log_level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    logging.getLogger("web3").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("aiohttp").setLevel(logging.WARNING)
