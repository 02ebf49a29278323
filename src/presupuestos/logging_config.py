"""Logging setup shared by the CLI and the HTTP API."""

import logging
import os
from typing import Optional

LOG_LEVEL_ENV = "PRESUPUESTOS_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "WARNING"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging.

    Args:
        level: Level name such as "DEBUG"; falls back to PRESUPUESTOS_LOG_LEVEL
            and then to WARNING
    """
    name = (level or os.environ.get(LOG_LEVEL_ENV) or DEFAULT_LOG_LEVEL).upper()
    numeric = getattr(logging, name, None)
    if not isinstance(numeric, int):
        raise ValueError(f"Invalid log level '{name}'")
    logging.basicConfig(format=LOG_FORMAT)
    # basicConfig is a no-op once handlers exist, the level still applies
    logging.getLogger().setLevel(numeric)
