"""Destinations and display-width queries.

A destination is any text sink with a ``write`` method (``sys.stderr``, a
file, an ``io.StringIO``).  ``flush`` is called when the destination has one.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Protocol

logger = logging.getLogger(__name__)

DEFAULT_WIDTH = 80


class Destination(Protocol):
    """Interface for anything the loggers can write to."""

    def write(self, data: str) -> object: ...


def flush(destination: Destination) -> None:
    """Flush *destination* if it supports flushing."""
    flush_fn = getattr(destination, "flush", None)
    if flush_fn is not None:
        flush_fn()


def _fileno(destination: object) -> int | None:
    fileno_fn = getattr(destination, "fileno", None)
    if fileno_fn is None:
        return None
    try:
        return fileno_fn()
    except (OSError, ValueError):
        return None


def _columns(fd: int) -> int | None:
    try:
        columns = os.get_terminal_size(fd).columns
    except (OSError, ValueError):
        return None
    return columns if columns > 0 else None


def query_width(destination: Destination) -> int:
    """Return the display width of *destination* in columns.

    Destinations that are not terminals themselves (pipes, files, in-memory
    buffers) are assumed to end up on the same terminal as stderr.  Falls back
    to 80 columns when no width can be determined.
    """
    fd = _fileno(destination)
    if fd is not None:
        columns = _columns(fd)
        if columns is not None:
            return columns

    stderr_fd = _fileno(sys.__stderr__)
    if stderr_fd is not None and stderr_fd != fd:
        columns = _columns(stderr_fd)
        if columns is not None:
            return columns

    logger.debug("No terminal width for %r, using %d", destination, DEFAULT_WIDTH)
    return DEFAULT_WIDTH
