"""Color template expansion.

Markup tokens look like ``@[red]`` (style persists until reset) or
``@[bright,red:text]`` (style applies to *text* only and is closed with the
minimal reset).  Tokens naming an unknown code are left untouched.
"""

from __future__ import annotations

import re

from muxlog.ansi import ActiveStyle, escape

# Process-wide and mutable: see add_ansi_code().
ANSI_COLOR_CODES: dict[str, int] = {
    "r": 0,
    "reset": 0,
    "bright": 1,
    "dim": 2,
    "grey": 30,
    "red": 31,
    "green": 32,
    "yellow": 33,
    "blue": 34,
    "magenta": 35,
    "cyan": 36,
    "white": 37,
}

# Group 1: comma-separated names.  Group 2: optional ":text" span.  Group 3: text.
DEFAULT_TEMPLATE_PATTERN = re.compile(r"@\[([\w,]+?)(:([^)]*?))?\]")


def add_ansi_code(name: str, code: int) -> None:
    """Register (or replace) a template name for SGR *code*."""
    ANSI_COLOR_CODES[name] = code


def compile_template_pattern(pattern: str | re.Pattern[str]) -> re.Pattern[str]:
    """Compile *pattern* and check it exposes the three template groups."""
    compiled = re.compile(pattern) if isinstance(pattern, str) else pattern
    if compiled.groups < 3:
        raise ValueError(
            f"Template pattern needs 3 groups (names, ':text' span, text), "
            f"got {compiled.groups}"
        )
    return compiled


def expand_templates(
    text: str,
    pattern: re.Pattern[str] = DEFAULT_TEMPLATE_PATTERN,
) -> str:
    """Replace every template token in *text* with raw escape sequences."""

    def _replace(match: re.Match[str]) -> str:
        style = ActiveStyle()
        parts: list[str] = []
        for name in match.group(1).split(","):
            code = ANSI_COLOR_CODES.get(name)
            if code is None:
                return match.group(0)
            style.add(code)
            parts.append(escape(code))
        if match.group(2) is not None:
            parts.append(match.group(3) or "")
            parts.append(style.reset_sequence())
        return "".join(parts)

    return pattern.sub(_replace, text)
