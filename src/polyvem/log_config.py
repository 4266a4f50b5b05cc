"""
Logging Setup
=============

Progress messages of every module go through ``logging.getLogger(__name__)``
below the ``polyvem`` package logger. The library installs no handlers;
``verbose_logging`` prints them for the duration of a block.
"""

import logging
import sys
from contextlib import contextmanager
from typing import IO, Iterator, Optional

PACKAGE_LOGGER = 'polyvem'


@contextmanager
def verbose_logging(level: int = logging.INFO,
                    stream: Optional[IO[str]] = None) -> Iterator[logging.Logger]:
    """
    Print package log records while the block runs.

    The handler and the previous logger level are restored on exit, so
    the setting does not leak into later solves.

    Args:
        level: lowest level printed
        stream: output stream, sys.stdout if not given

    Yields:
        the package logger
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    handler = logging.StreamHandler(stream if stream is not None else sys.stdout)
    handler.setFormatter(logging.Formatter("%(message)s"))

    previous_level = logger.level
    logger.addHandler(handler)
    logger.setLevel(level)
    try:
        yield logger
    finally:
        logger.removeHandler(handler)
        logger.setLevel(previous_level)
