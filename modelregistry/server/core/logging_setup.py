"""Logging setup for the registry server."""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(level: str = "INFO") -> None:
    """Configure the root logger once at startup.

    Args:
        level: Standard logging level name.
    """
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("modelregistry").setLevel(level)
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
