"""Logging setup shared by the API and the CLI scripts."""

import logging
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: Optional[str] = None) -> None:
    """Configure the ``dynasty_cap`` logger hierarchy once."""
    root = logging.getLogger("dynasty_cap")
    root.setLevel(getattr(logging, (level or "INFO").upper(), logging.INFO))
    if root.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    root.addHandler(handler)
