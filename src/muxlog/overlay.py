"""Per-destination overlay line rendering.

Each destination has one temporary line at the bottom of its output: the
partial (not yet newline-terminated) text of every stream writing there,
joined with ``" | "``.  The line is redrawn in place, writing only the new
suffix when the content grew and rewriting the whole row otherwise.
Committed lines are written through the same state so the overlay is
cleared before the line reaches scrollback.

Every function here expects the registry lock to be held by the caller.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from muxlog.ansi import active_style, strip_styles
from muxlog.terminal import Destination, flush
from muxlog.utils import truncate_to_width, visible_width

if TYPE_CHECKING:
    from muxlog.registry import StreamRegistry

TEMP_LINE_SEPARATOR = " | "
TEMP_LINE_ELLIPSIS = " ..."


class WriterState:
    """What is currently displayed, uncommitted, on one destination."""

    def __init__(self, destination: Destination) -> None:
        self.destination = destination
        self.last_temp: str = ""
        # 0 = not resolved yet
        self.term_width: int = 0
        # Set when a write failed part-way; the screen no longer matches last_temp.
        self.stale: bool = False

    def _write(self, data: str) -> None:
        if data:
            self.destination.write(data)

    def set_temp_output(self, content: str) -> None:
        """Make *content* the displayed temporary line."""
        last = self.last_temp
        try:
            if not self.stale and content.startswith(last):
                self._write(content[len(last) :])
            else:
                self._write(active_style(last).reset_sequence())
                self._write("\r")
                self._write(content)
                # Blank out what is left of the old line.  The cursor ends up
                # past the new content; only write_line takes this path with
                # leftovers, and it moves on to a new line right after.
                excess = visible_width(last) - visible_width(content)
                if excess > 0:
                    self._write(" " * excess)
        except Exception:
            self.stale = True
            raise
        self.stale = False
        self.last_temp = content

    def write_line(self, content: str) -> None:
        """Commit *content* as a permanent line, replacing the overlay."""
        self.set_temp_output(content)
        try:
            self._write(active_style(content).reset_sequence())
            self._write("\n")
        except Exception:
            self.stale = True
            raise
        self.last_temp = ""
        flush(self.destination)


def compose_temp_output(registry: StreamRegistry, destination: Destination) -> str:
    """Join the visible partial lines of every stream on *destination*."""
    max_width = registry.terminal_width(destination) - 1
    fragments: list[str] = []
    for stream in registry.streams_for(destination):
        if not stream.partial_lines_visible:
            continue
        # Lines awaiting commit (their writer is resolving its caller) stay off
        # the overlay.
        pending = stream.pending.rpartition("\n")[2]
        # Only include this stream if it has visible text
        if strip_styles(pending):
            fragments.append(stream.format_line(pending))

    content = TEMP_LINE_SEPARATOR.join(fragments)
    if visible_width(content) > max_width:
        content = truncate_to_width(content, max_width, ellipsis=TEMP_LINE_ELLIPSIS)
    return content


def update_temp_output(registry: StreamRegistry, destination: Destination) -> None:
    """Recompose and redraw the overlay line of *destination*."""
    state = registry.writer_state(destination)
    state.set_temp_output(compose_temp_output(registry, destination))
    flush(destination)
