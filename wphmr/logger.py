"""Logging setup shared by the wphmr modules."""

import logging
import os
import sys

LOG_LEVEL_ENV = "WPHMR_LOG_LEVEL"


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger that prints to stdout at the ``WPHMR_LOG_LEVEL`` level.

    The level defaults to WARNING, so only problems show up next to the rich
    console output unless the variable asks for more. An unknown level name
    falls back to INFO.
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    level = logging.getLevelName(os.getenv(LOG_LEVEL_ENV, "WARNING").upper())
    if not isinstance(level, int):
        level = logging.INFO
    logger.setLevel(level)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    logger.addHandler(handler)
    logger.propagate = False

    return logger
