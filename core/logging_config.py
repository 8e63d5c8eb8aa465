"""
Logging setup for the draft engine.

Modules log through ``logging.getLogger(__name__)``; the CLI (or any host
application) calls ``setup_logging`` once at startup.
"""

import logging
from typing import Optional

from config.settings import LOG_FORMAT, LOG_LEVEL, LOG_FILE


def setup_logging(level: Optional[str] = None, log_file: Optional[str] = None) -> logging.Logger:
    """Configure root logging with a console handler and an optional file handler"""
    level_name = (level or LOG_LEVEL).upper()
    handlers = [logging.StreamHandler()]

    log_file = log_file or LOG_FILE
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers,
        force=True
    )
    return logging.getLogger('draft')
