"""Shared state for every logger writing to the console.

A ``StreamRegistry`` holds the one lock that serializes stream mutation,
overlay state and destination writes, the loggers in registration order,
and one ``WriterState`` per destination.  Loggers share a registry; the
process-wide one is returned by ``get_registry``.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterator
from datetime import datetime
from typing import TYPE_CHECKING

from muxlog.config import Settings
from muxlog.overlay import WriterState
from muxlog.terminal import Destination, query_width

if TYPE_CHECKING:
    from muxlog.logger import Logger


def _local_now() -> datetime:
    return datetime.now().astimezone()


class StreamRegistry:
    """Registry of loggers and per-destination overlay state."""

    def __init__(
        self,
        settings: Settings | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.lock = threading.Lock()
        self.settings: Settings = settings if settings is not None else Settings.from_env()
        self.clock: Callable[[], datetime] = clock if clock is not None else _local_now
        self.default: Logger | None = None
        self._streams: list[Logger] = []
        # Keyed by id(); the state keeps the destination alive so ids are not reused.
        self._writers: dict[int, WriterState] = {}

    # -- streams (lock held by caller unless noted) -------------------------

    def register(self, stream: Logger) -> None:
        """Append *stream*.  Acquires the lock."""
        with self.lock:
            self._streams.append(stream)

    @property
    def streams(self) -> list[Logger]:
        return list(self._streams)

    def streams_for(self, destination: Destination) -> Iterator[Logger]:
        """Yield the streams writing to *destination*, in registration order."""
        for stream in self._streams:
            if stream.destination is destination:
                yield stream

    # -- destinations -------------------------------------------------------

    def writer_state(self, destination: Destination) -> WriterState:
        """Return the overlay state of *destination*, creating it on first use."""
        state = self._writers.get(id(destination))
        if state is None or state.destination is not destination:
            state = WriterState(destination)
            self._writers[id(destination)] = state
        return state

    def terminal_width(self, destination: Destination) -> int:
        """Return the cached display width of *destination*."""
        state = self.writer_state(destination)
        if state.term_width == 0:
            if self.settings.term_width:
                state.term_width = self.settings.term_width
            else:
                state.term_width = query_width(destination)
        return state.term_width

    def destinations(self) -> list[Destination]:
        """Every destination currently targeted by a registered stream."""
        seen: dict[int, Destination] = {}
        for stream in self._streams:
            seen.setdefault(id(stream.destination), stream.destination)
        return list(seen.values())


_registry: StreamRegistry | None = None
_registry_lock = threading.Lock()


def get_registry() -> StreamRegistry:
    """Return the process-wide registry, creating it on first use."""
    global _registry
    with _registry_lock:
        if _registry is None:
            _registry = StreamRegistry()
        return _registry
