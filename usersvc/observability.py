"""Logging setup for usersvc."""

import logging
import os
from typing import Optional

_configured = False


def setup_logging(level: Optional[str] = None) -> None:
    """Configure the root logger once at startup.

    Level comes from the argument, else `LOG_LEVEL`, else INFO.
    """
    global _configured
    level = level or os.getenv("LOG_LEVEL", "INFO")
    if not _configured:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s - %(message)s",
        ))
        logging.root.addHandler(handler)
        _configured = True
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
