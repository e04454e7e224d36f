"""Logging setup for the jsonsite process."""

import logging
import sys

from jsonsite.errors import ConfigurationError

LOG_FORMAT = "%(asctime)s jsonsite %(levelname)s %(filename)s:%(lineno)d: %(message)s"
DISCARD = "DISCARD"


def create_log_handler(sink: str) -> logging.Handler:
    """Create the handler for a log sink selector.

    Args:
        sink: "stdout", "stderr", "DISCARD", or a file name opened for appending

    Returns:
        Logging handler writing to the sink

    Raises:
        ConfigurationError: If the log file cannot be opened
    """
    if sink == "stdout":
        return logging.StreamHandler(sys.stdout)
    if sink == "stderr":
        return logging.StreamHandler(sys.stderr)
    if sink == DISCARD:
        return logging.NullHandler()
    try:
        return logging.FileHandler(sink, mode="a", encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(f"LOG_FILE '{sink}' could not be opened: {e}") from e


def configure_logging(sink: str, level: int = logging.INFO) -> logging.Logger:
    """Route the ``jsonsite`` logger (and aiohttp's) to a single sink.

    Replaces handlers installed by a previous call.
    """
    handler = create_log_handler(sink)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    for name in ("jsonsite", "aiohttp"):
        logger = logging.getLogger(name)
        for existing in list(logger.handlers):
            logger.removeHandler(existing)
            existing.close()
        logger.addHandler(handler)
        logger.setLevel(level)

    return logging.getLogger("jsonsite")
