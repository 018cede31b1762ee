import logging
import sys
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(log_level: Optional[str] = None) -> logging.Logger:
    """
    Configure the ``files_store`` logger hierarchy.

    Args:
        log_level: Log level name (DEBUG, INFO, WARNING, ERROR). Defaults to INFO.

    Returns:
        The package root logger
    """
    level = getattr(logging, (log_level or "INFO").upper(), logging.INFO)

    logger = logging.getLogger("files_store")
    logger.setLevel(level)

    if logger.handlers:
        for handler in logger.handlers:
            handler.setLevel(level)
        return logger

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))

    logger.addHandler(handler)
    logger.propagate = False

    return logger
