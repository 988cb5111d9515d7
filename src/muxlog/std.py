"""Package-level functions operating on the default logger.

The default logger writes to ``sys.stderr`` and supplies the inherited value
of every option the other loggers leave unset.
"""

from __future__ import annotations

import re
import sys

from muxlog.logger import Logger, _sprint, _terminated, default_logger
from muxlog.terminal import Destination


def _std() -> Logger:
    return default_logger()


def output(call_depth: int, text: str) -> None:
    """Write *text* through the default logger; see ``Logger.output``."""
    _std().output(call_depth + 1, text)


def print(*values: object) -> None:  # noqa: A001
    _std().output(2, _sprint(values))


def printf(fmt: str, *args: object) -> None:
    _std().output(2, fmt % args if args else fmt)


def println(*values: object) -> None:
    _std().output(2, _sprint(values) + "\n")


def fatal(*values: object) -> None:
    _std().output(2, _terminated(_sprint(values)))
    sys.exit(1)


def fatalf(fmt: str, *args: object) -> None:
    _std().output(2, _terminated(fmt % args if args else fmt))
    sys.exit(1)


def fatalln(*values: object) -> None:
    _std().output(2, _sprint(values) + "\n")
    sys.exit(1)


def panic(*values: object) -> None:
    message = _sprint(values)
    _std().output(2, message)
    raise RuntimeError(message)


def panicf(fmt: str, *args: object) -> None:
    message = fmt % args if args else fmt
    _std().output(2, message)
    raise RuntimeError(message)


def panicln(*values: object) -> None:
    message = _sprint(values) + "\n"
    _std().output(2, message)
    raise RuntimeError(message)


# -- settings -----------------------------------------------------------------


def set_output(destination: Destination) -> None:
    _std().set_output(destination)


def get_flags() -> int:
    return _std().get_flags()


def set_flags(flags: int) -> None:
    _std().set_flags(flags)


def get_prefix() -> str:
    return _std().get_prefix()


def set_prefix(prefix: str) -> None:
    _std().set_prefix(prefix)


def show_partial_lines() -> None:
    _std().show_partial_lines()


def hide_partial_lines() -> None:
    _std().hide_partial_lines()


def enable_color() -> None:
    _std().enable_color()


def disable_color() -> None:
    _std().disable_color()


def enable_color_template() -> None:
    _std().enable_color_template()


def disable_color_template() -> None:
    _std().disable_color_template()


def set_color_template_pattern(pattern: str | re.Pattern[str] | None) -> None:
    _std().set_color_template_pattern(pattern)


def set_term_width(width: int) -> None:
    _std().set_term_width(width)
