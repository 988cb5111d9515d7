"""Active ANSI style tracking.

Scans text for SGR escape sequences of the form ``ESC[<digits>m`` and keeps
the minimal state needed to close (or re-open) a styled run: an intensity
code and a forecolor code.  Background, underline and friends are not
modelled.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

# ---------------------------------------------------------------------------
# SGR constants
# ---------------------------------------------------------------------------

CODE_RESET_ALL = 0
CODE_HIGHEST_INTENSITY = 2
CODE_RESET_FORECOLOR = 39

RESET_ALL = "\x1b[0m"
RESET_FORECOLOR = "\x1b[39m"

# Only single-parameter SGR sequences are tracked.
STYLE_RE = re.compile(r"\x1b\[(\d+)m")


def escape(code: int) -> str:
    """Return the escape sequence selecting SGR *code*."""
    return f"\x1b[{code}m"


def strip_styles(text: str) -> str:
    """Remove every ``ESC[<digits>m`` sequence from *text*."""
    return STYLE_RE.sub("", text)


# ---------------------------------------------------------------------------
# ActiveStyle
# ---------------------------------------------------------------------------


@dataclass
class ActiveStyle:
    """Style left active after a run of text.

    ``0`` on either axis means neutral.
    """

    intensity: int = 0
    forecolor: int = 0

    def add(self, code: int) -> None:
        """Apply a single SGR code."""
        if code == CODE_RESET_ALL:
            self.intensity = 0
            self.forecolor = 0
        elif code <= CODE_HIGHEST_INTENSITY:
            self.intensity = code
        elif code == CODE_RESET_FORECOLOR:
            self.forecolor = 0
        else:
            self.forecolor = code

    @property
    def any_active(self) -> bool:
        return self.intensity != 0 or self.forecolor != 0

    def reset_sequence(self) -> str:
        """Return the shortest sequence that returns to neutral.

        A full reset is needed whenever intensity is active (there is no
        portable "intensity off" code); a forecolor reset is enough otherwise.
        """
        if self.intensity != 0:
            return RESET_ALL
        if self.forecolor != 0:
            return RESET_FORECOLOR
        return ""

    def escape_sequence(self) -> str:
        """Return the sequence that re-establishes this style."""
        parts: list[str] = []
        if self.intensity != 0:
            parts.append(escape(self.intensity))
        if self.forecolor != 0:
            parts.append(escape(self.forecolor))
        return "".join(parts)


def active_style(text: str) -> ActiveStyle:
    """Scan *text* in order and return the style active at its end."""
    style = ActiveStyle()
    for match in STYLE_RE.finditer(text):
        style.add(int(match.group(1)))
    return style
