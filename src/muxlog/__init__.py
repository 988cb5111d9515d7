"""muxlog: shared console logging with a live overlay line for partial output."""

# ANSI style tracking
from muxlog.ansi import ActiveStyle, active_style, strip_styles

# Settings
from muxlog.config import Settings

# Loggers and header flags
from muxlog.logger import (
    DATE,
    LONG_FILE,
    MICROSECONDS,
    SHORT_FILE,
    STD_FLAGS,
    TIME,
    UTC,
    Logger,
    default_logger,
)

# Registry
from muxlog.registry import StreamRegistry, get_registry

# Default-logger functions
from muxlog.std import (
    disable_color,
    disable_color_template,
    enable_color,
    enable_color_template,
    fatal,
    fatalf,
    fatalln,
    get_flags,
    get_prefix,
    hide_partial_lines,
    output,
    panic,
    panicf,
    panicln,
    print,
    printf,
    println,
    set_color_template_pattern,
    set_flags,
    set_output,
    set_prefix,
    set_term_width,
    show_partial_lines,
)

# Color templates
from muxlog.templates import ANSI_COLOR_CODES, add_ansi_code, expand_templates

__all__ = [
    # ANSI
    "ActiveStyle",
    "active_style",
    "strip_styles",
    # Settings
    "Settings",
    # Logger
    "DATE",
    "LONG_FILE",
    "MICROSECONDS",
    "SHORT_FILE",
    "STD_FLAGS",
    "TIME",
    "UTC",
    "Logger",
    "default_logger",
    # Registry
    "StreamRegistry",
    "get_registry",
    # Default logger
    "disable_color",
    "disable_color_template",
    "enable_color",
    "enable_color_template",
    "fatal",
    "fatalf",
    "fatalln",
    "get_flags",
    "get_prefix",
    "hide_partial_lines",
    "output",
    "panic",
    "panicf",
    "panicln",
    "print",
    "printf",
    "println",
    "set_color_template_pattern",
    "set_flags",
    "set_output",
    "set_prefix",
    "set_term_width",
    "show_partial_lines",
    # Templates
    "ANSI_COLOR_CODES",
    "add_ansi_code",
    "expand_templates",
]
