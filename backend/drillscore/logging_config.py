"""Logging setup shared by scripts and embedding applications."""

import logging
import sys
from typing import Optional

from drillscore.config import get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: Optional[str] = None) -> None:
    """
    Configure root logging.

    Args:
        level: Log level name. Defaults to DEBUG when settings.debug is on,
               otherwise settings.log_level.
    """
    settings = get_settings()
    if level is None:
        level = "DEBUG" if settings.debug else settings.log_level

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
    )
