"""
Root logger configuration.
"""

import logging
import sys

from travelplan.api.middleware.logging import JSONLogFormatter

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
HANDLER_NAME = "travelplan"


def setup_logging(level: str = "INFO", fmt: str = "text") -> None:
    """
    Configure the root logger.

    Args:
        level: Log level ('DEBUG', 'INFO', 'WARNING', 'ERROR')
        fmt: 'text' for human-readable lines, 'json' for one JSON object per record
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.set_name(HANDLER_NAME)
    handler.setLevel(log_level)
    if fmt == "json":
        handler.setFormatter(JSONLogFormatter())
    else:
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    # Replace handlers from a previous call instead of stacking them.
    for existing in list(root_logger.handlers):
        if existing.get_name() == HANDLER_NAME:
            root_logger.removeHandler(existing)
    root_logger.addHandler(handler)
