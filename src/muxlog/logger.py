"""Logger: per-stream buffering, header formatting and line emission.

Text handed to a ``Logger`` is buffered until a newline arrives.  Each
complete line is formatted with the stream's header (prefix, date, time,
caller location) and committed to the destination; whatever remains after
the last newline is shown on the destination's overlay line, merged with
the partial text of every other stream writing there.

All loggers of a registry share one lock.  It is held for the whole of every
operation except while the caller's file and line are looked up, which is
slow and must not stall unrelated writers.
"""

from __future__ import annotations

import os
import re
import sys
import threading
from datetime import datetime, timezone

from muxlog.ansi import active_style, strip_styles
from muxlog.config import Settings, resolve_toggle
from muxlog.overlay import update_temp_output
from muxlog.registry import StreamRegistry, get_registry
from muxlog.templates import (
    DEFAULT_TEMPLATE_PATTERN,
    compile_template_pattern,
    expand_templates,
)
from muxlog.terminal import Destination

# ---------------------------------------------------------------------------
# Header flags
# ---------------------------------------------------------------------------

DATE = 1 << 0  # 2009/01/23
TIME = 1 << 1  # 01:23:23
MICROSECONDS = 1 << 2  # 01:23:23.123123, implies TIME
LONG_FILE = 1 << 3  # /a/b/c/d.py:23
SHORT_FILE = 1 << 4  # d.py:23, overrides LONG_FILE
UTC = 1 << 5  # use UTC rather than the local time zone
STD_FLAGS = DATE | TIME

UNKNOWN_CALLER: tuple[str, int] = ("unknown", 0)


def resolve_caller(call_depth: int) -> tuple[str, int]:
    """Return ``(file, line)`` of the frame *call_depth* levels above our caller.

    ``call_depth=1`` is the function that called the caller of
    ``resolve_caller``.  Returns ``UNKNOWN_CALLER`` when the stack is not that
    deep.
    """
    try:
        frame = sys._getframe(call_depth + 1)
    except ValueError:
        return UNKNOWN_CALLER
    return frame.f_code.co_filename, frame.f_lineno


def short_file_name(path: str) -> str:
    return os.path.basename(path) or path


def _sprint(values: tuple[object, ...]) -> str:
    return " ".join(str(v) for v in values)


# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------


class Logger:
    """A logical log stream writing to a shared destination.

    Parameters
    ----------
    destination:
        Text sink, usually ``sys.stderr`` or ``sys.stdout``.
    prefix:
        Written at the start of every line.  Color templates in the prefix are
        expanded when templates are enabled.
    flags:
        OR-ed header flags (``DATE``, ``TIME``, ...).
    registry:
        Registry shared with the other streams; the process-wide one by
        default.
    settings:
        Only for the default logger of a registry: concrete values for every
        option that other loggers inherit.
    """

    def __init__(
        self,
        destination: Destination,
        prefix: str = "",
        flags: int = 0,
        registry: StreamRegistry | None = None,
        *,
        settings: Settings | None = None,
    ) -> None:
        self._registry = registry if registry is not None else get_registry()
        if settings is None:
            # The default logger registers first and supplies fallbacks.
            default_logger(self._registry)

        self._destination = destination
        self._prefix = prefix
        self._prefix_formatted = prefix
        self._flags = flags
        self._pending = ""
        self._scratch: list[str] = []

        # None = inherit from the default logger
        self._partial_lines_visible: bool | None = None
        self._color_enabled: bool | None = None
        self._color_template_enabled: bool | None = None
        self._template_pattern: re.Pattern[str] | None = None

        self._caller: tuple[str, int] | None = None
        self._now: datetime | None = None

        if settings is not None:
            self._partial_lines_visible = settings.partial_lines_visible
            self._color_enabled = settings.color_enabled
            self._color_template_enabled = settings.color_template_enabled
            self._template_pattern = DEFAULT_TEMPLATE_PATTERN

        self._reprocess_prefix()
        self._registry.register(self)

    # -- resolved options ---------------------------------------------------

    def _defaults(self) -> Logger:
        return self._registry.default or self

    @property
    def registry(self) -> StreamRegistry:
        return self._registry

    @property
    def destination(self) -> Destination:
        return self._destination

    @property
    def pending(self) -> str:
        """Text after the last committed newline."""
        return self._pending

    @property
    def is_default(self) -> bool:
        return self._registry.default is self

    @property
    def partial_lines_visible(self) -> bool:
        return resolve_toggle(
            self._partial_lines_visible,
            bool(self._defaults()._partial_lines_visible),
        )

    @property
    def color_enabled(self) -> bool:
        return resolve_toggle(self._color_enabled, bool(self._defaults()._color_enabled))

    def _active_template_pattern(self) -> re.Pattern[str] | None:
        defaults = self._defaults()
        enabled = resolve_toggle(
            self._color_template_enabled, bool(defaults._color_template_enabled)
        )
        if not enabled:
            return None
        if self._template_pattern is not None:
            return self._template_pattern
        return defaults._template_pattern or DEFAULT_TEMPLATE_PATTERN

    # -- formatting ---------------------------------------------------------

    def _reprocess_prefix(self) -> None:
        pattern = self._active_template_pattern()
        if pattern is not None:
            self._prefix_formatted = expand_templates(self._prefix, pattern)
        else:
            self._prefix_formatted = self._prefix

    def _format_header(
        self,
        buf: list[str],
        now: datetime | None = None,
        caller: tuple[str, int] | None = None,
    ) -> None:
        buf.append(self._prefix_formatted)
        flags = self._flags
        if flags & (DATE | TIME | MICROSECONDS):
            if now is None:
                now = self._now if self._now is not None else self._registry.clock()
            if flags & DATE:
                buf.append(f"{now.year:04d}/{now.month:02d}/{now.day:02d} ")
            if flags & (TIME | MICROSECONDS):
                buf.append(f"{now.hour:02d}:{now.minute:02d}:{now.second:02d}")
                if flags & MICROSECONDS:
                    buf.append(f".{now.microsecond:06d}")
                buf.append(" ")
        if flags & (SHORT_FILE | LONG_FILE):
            if caller is None:
                caller = self._caller if self._caller is not None else UNKNOWN_CALLER
            file, line = caller
            # Derived on every call; the cached path is never rewritten.
            if flags & SHORT_FILE:
                file = short_file_name(file)
            buf.append(f"{file}:{line}: ")

    def format_line(
        self,
        line: str,
        now: datetime | None = None,
        caller: tuple[str, int] | None = None,
    ) -> str:
        """Return *line* with this stream's header, as it will be displayed.

        *now* and *caller* default to the values of the last emission.
        """
        buf = self._scratch
        buf.clear()
        self._format_header(buf, now, caller)
        header = "".join(buf)
        buf.clear()
        # Styles left open by the prefix must not bleed into the message.
        formatted = header + active_style(header).reset_sequence() + line
        if not self.color_enabled:
            formatted = strip_styles(formatted)
        return formatted

    # -- emission -----------------------------------------------------------

    def output(self, call_depth: int, text: str) -> None:
        """Write *text* to the stream.

        Complete lines are committed; a trailing partial line stays on the
        overlay until its newline arrives.  *call_depth* selects the frame
        reported by ``LONG_FILE``/``SHORT_FILE``: 1 is the caller of
        ``output``.

        Every line completed by this call is stamped with this call's time and
        caller, even when other threads write to the same logger meanwhile.

        Destination errors propagate.  A line leaves the pending buffer only
        once it has been written, so nothing is lost when a write fails.
        """
        now = self._registry.clock()  # get this early
        if self._flags & UTC:
            now = now.astimezone(timezone.utc)

        caller: tuple[str, int] | None = None
        if "\n" in text and self._flags & (LONG_FILE | SHORT_FILE):
            # Stack walking happens outside the lock.
            caller = resolve_caller(call_depth)

        lock = self._registry.lock
        with lock:
            pattern = self._active_template_pattern()
            if pattern is not None:
                self._pending += expand_templates(text, pattern)
            else:
                self._pending += text

            while True:
                index = self._pending.find("\n")
                if index == -1:
                    break
                if caller is None and self._flags & (LONG_FILE | SHORT_FILE):
                    # Flags changed since the check above, or a line was left
                    # over by a failed write.
                    lock.release()
                    try:
                        caller = resolve_caller(call_depth)
                    finally:
                        lock.acquire()
                    # Other writers ran meanwhile; rescan the pending text.
                    continue
                self._commit_line(index, now, caller)

            # Cached for rendering the overlay.
            self._now = now
            if caller is not None:
                self._caller = caller
            update_temp_output(self._registry, self._destination)

    def _commit_line(
        self, index: int, now: datetime, caller: tuple[str, int] | None
    ) -> None:
        line = self._pending[:index]
        style = active_style(line)
        state = self._registry.writer_state(self._destination)
        state.write_line(self.format_line(line, now, caller))
        # Re-open an unterminated style so the run continues on the next line.
        self._pending = style.escape_sequence() + self._pending[index + 1 :]

    def print(self, *values: object) -> None:
        """Write *values* separated by spaces, without a trailing newline."""
        self.output(2, _sprint(values))

    def printf(self, fmt: str, *args: object) -> None:
        """Write ``fmt % args``."""
        self.output(2, fmt % args if args else fmt)

    def println(self, *values: object) -> None:
        """Write *values* separated by spaces, followed by a newline."""
        self.output(2, _sprint(values) + "\n")

    def fatal(self, *values: object) -> None:
        """Like ``println``, then exit the process with status 1."""
        self.output(2, _terminated(_sprint(values)))
        sys.exit(1)

    def fatalf(self, fmt: str, *args: object) -> None:
        self.output(2, _terminated(fmt % args if args else fmt))
        sys.exit(1)

    def fatalln(self, *values: object) -> None:
        self.output(2, _sprint(values) + "\n")
        sys.exit(1)

    def panic(self, *values: object) -> None:
        """Like ``print``, then raise ``RuntimeError`` with the message."""
        message = _sprint(values)
        self.output(2, message)
        raise RuntimeError(message)

    def panicf(self, fmt: str, *args: object) -> None:
        message = fmt % args if args else fmt
        self.output(2, message)
        raise RuntimeError(message)

    def panicln(self, *values: object) -> None:
        message = _sprint(values) + "\n"
        self.output(2, message)
        raise RuntimeError(message)

    def close(self) -> None:
        """Commit any pending partial line."""
        with self._registry.lock:
            # A carried-over style alone is not a line.
            has_pending = bool(strip_styles(self._pending))
        if has_pending:
            self.output(2, "\n")

    # -- settings -----------------------------------------------------------

    def _refresh_overlays(self) -> None:
        # Lock held.  Settings of the default logger reach every destination.
        if self.is_default:
            destinations = self._registry.destinations()
        else:
            destinations = [self._destination]
        for destination in destinations:
            update_temp_output(self._registry, destination)

    def _reprocess_prefixes(self) -> None:
        # Lock held.
        if self.is_default:
            for stream in self._registry.streams:
                stream._reprocess_prefix()
        else:
            self._reprocess_prefix()

    def set_output(self, destination: Destination) -> None:
        """Send future output to *destination*."""
        with self._registry.lock:
            old = self._destination
            self._destination = destination
            if old is not destination:
                update_temp_output(self._registry, old)
                update_temp_output(self._registry, destination)

    def get_flags(self) -> int:
        with self._registry.lock:
            return self._flags

    def set_flags(self, flags: int) -> None:
        with self._registry.lock:
            self._flags = flags

    def get_prefix(self) -> str:
        with self._registry.lock:
            return self._prefix

    def set_prefix(self, prefix: str) -> None:
        with self._registry.lock:
            self._prefix = prefix
            self._reprocess_prefix()

    def set_partial_lines_visible(self, flag: bool) -> None:
        with self._registry.lock:
            self._partial_lines_visible = flag
            self._refresh_overlays()

    def show_partial_lines(self) -> None:
        self.set_partial_lines_visible(True)

    def hide_partial_lines(self) -> None:
        self.set_partial_lines_visible(False)

    def set_color_enabled(self, flag: bool) -> None:
        with self._registry.lock:
            self._color_enabled = flag
            self._refresh_overlays()

    def enable_color(self) -> None:
        self.set_color_enabled(True)

    def disable_color(self) -> None:
        self.set_color_enabled(False)

    def set_color_template_enabled(self, flag: bool) -> None:
        with self._registry.lock:
            self._color_template_enabled = flag
            self._reprocess_prefixes()

    def enable_color_template(self) -> None:
        self.set_color_template_enabled(True)

    def disable_color_template(self) -> None:
        self.set_color_template_enabled(False)

    def set_color_template_pattern(self, pattern: str | re.Pattern[str] | None) -> None:
        """Use *pattern* to find template tokens (``None`` inherits the default)."""
        compiled = compile_template_pattern(pattern) if pattern is not None else None
        with self._registry.lock:
            if compiled is None and self.is_default:
                compiled = DEFAULT_TEMPLATE_PATTERN
            self._template_pattern = compiled
            self._reprocess_prefixes()

    def set_term_width(self, width: int) -> None:
        """Fix the display width of this logger's destination."""
        if width <= 0:
            raise ValueError(f"Terminal width must be positive, got {width}")
        with self._registry.lock:
            self._registry.writer_state(self._destination).term_width = width


def _terminated(text: str) -> str:
    return text if text.endswith("\n") else text + "\n"


# ---------------------------------------------------------------------------
# Default logger
# ---------------------------------------------------------------------------

_default_lock = threading.Lock()


def default_logger(registry: StreamRegistry | None = None) -> Logger:
    """Return the default logger of *registry*, creating it on first use.

    It writes to ``sys.stderr`` with ``STD_FLAGS`` and takes its options from
    the registry's settings.
    """
    registry = registry if registry is not None else get_registry()
    with _default_lock:
        if registry.default is None:
            registry.default = Logger(
                sys.stderr, "", STD_FLAGS, registry=registry, settings=registry.settings
            )
        return registry.default
