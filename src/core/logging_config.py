"""Logging configuration."""

import logging
import sys
from typing import Optional

from config import LOG_FORMAT, LOG_LEVEL


def setup_logging(level: Optional[str] = None) -> logging.Logger:
    """Configure the root logger for console output.

    Calling this more than once replaces the handler instead of stacking
    duplicates.

    Args:
        level: Log level name. Defaults to CAMPUS_EVENTS_LOG_LEVEL.

    Returns:
        The configured root logger.
    """
    level_name = (level or LOG_LEVEL).upper()
    root = logging.getLogger()
    root.setLevel(getattr(logging, level_name, logging.INFO))

    for handler in list(root.handlers):
        if getattr(handler, "_campus_events", False):
            root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._campus_events = True
    root.addHandler(handler)

    # SQLAlchemy logs through its own logger; keep it quiet unless asked
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    return root
