"""CLI entry point for muxlog. Uses Click for argument parsing."""

from __future__ import annotations

import codecs
import logging
import os
import subprocess
import sys
import threading

import click

from muxlog.ansi import RESET_FORECOLOR, escape
from muxlog.config import Settings
from muxlog.logger import TIME, Logger
from muxlog.registry import StreamRegistry
from muxlog.templates import ANSI_COLOR_CODES

logger = logging.getLogger(__name__)

_PREFIX_COLORS = ["cyan", "green", "yellow", "magenta", "blue", "red"]
_READ_SIZE = 4096


@click.group()
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"]),
    default="warning",
    help="Level for muxlog's own diagnostics",
)
def main(log_level):
    """Multiplex concurrent console output onto one terminal."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


# ---------------------------------------------------------------------------
# run
# ---------------------------------------------------------------------------


def _command_name(index: int, command: str) -> str:
    words = command.split()
    if not words:
        return f"cmd{index}"
    return os.path.basename(words[0]) or f"cmd{index}"


def _pump(proc: subprocess.Popen, stream: Logger) -> None:
    """Copy the child's output into *stream* until it closes its pipe."""
    assert proc.stdout is not None
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    carry = ""
    try:
        while True:
            chunk = proc.stdout.read1(_READ_SIZE)
            if not chunk:
                break
            text = carry + decoder.decode(chunk)
            # A CRLF may be split across reads; hold back a trailing CR.
            carry = "\r" if text.endswith("\r") else ""
            if carry:
                text = text[:-1]
            if text:
                stream.print(text.replace("\r\n", "\n"))
        tail = carry + decoder.decode(b"", final=True)
        if tail:
            stream.print(tail)
        stream.close()
    except OSError:
        logger.exception("Output of pid %d could not be written", proc.pid)
        # Keep draining so the child never blocks on a full pipe.
        while proc.stdout.read1(_READ_SIZE):
            pass


@main.command()
@click.argument("commands", nargs=-1, required=True)
@click.option("--time/--no-time", "show_time", default=False, help="Prefix lines with the time")
@click.option(
    "--color/--no-color",
    default=None,
    help="Force color on or off (default: on when stdout is a terminal)",
)
@click.option("--hide-partial", is_flag=True, help="Do not show unterminated lines")
@click.option("--width", type=click.IntRange(min=2), default=None, help="Display width")
def run(commands, show_time, color, hide_partial, width):
    """Run shell COMMANDS concurrently, multiplexing their output."""
    out = sys.stdout
    settings = Settings.from_env()
    if color is not None:
        settings.color_enabled = color
    elif not out.isatty():
        settings.color_enabled = False
    if hide_partial:
        settings.partial_lines_visible = False
    if width is not None:
        settings.term_width = width
    registry = StreamRegistry(settings=settings)

    names = [_command_name(i, command) for i, command in enumerate(commands)]
    name_width = max(len(name) for name in names)
    flags = TIME if show_time else 0

    workers: list[tuple[subprocess.Popen, threading.Thread]] = []
    for i, (name, command) in enumerate(zip(names, commands)):
        color_code = ANSI_COLOR_CODES[_PREFIX_COLORS[i % len(_PREFIX_COLORS)]]
        prefix = f"{escape(color_code)}{name.ljust(name_width)}{RESET_FORECOLOR} "
        stream = Logger(out, prefix, flags, registry=registry)
        proc = subprocess.Popen(
            command,
            shell=True,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
        )
        logger.debug("Started %r as pid %d", command, proc.pid)
        thread = threading.Thread(target=_pump, args=(proc, stream), daemon=True)
        thread.start()
        workers.append((proc, thread))

    status = 0
    for proc, thread in workers:
        thread.join()
        code = proc.wait()
        logger.debug("pid %d exited with %d", proc.pid, code)
        if code != 0 and status == 0:
            status = code
    if status != 0:
        sys.exit(status)


# ---------------------------------------------------------------------------
# colors
# ---------------------------------------------------------------------------


@main.command()
def colors():
    """Show every color template name in its own style."""
    registry = StreamRegistry()
    stream = Logger(sys.stdout, registry=registry)
    stream.enable_color_template()
    for name, _code in sorted(ANSI_COLOR_CODES.items(), key=lambda item: (item[1], item[0])):
        stream.println(f"@[{name}:{name}]")


if __name__ == "__main__":
    main()
