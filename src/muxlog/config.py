"""Default settings for the shared console logger.

Settings seed the default logger of a registry; every other logger leaves
its options unset (``None``) and falls back to the default logger.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass

logger = logging.getLogger(__name__)

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")


@dataclass
class Settings:
    """Defaults applied to the default logger."""

    color_enabled: bool = True
    partial_lines_visible: bool = True
    color_template_enabled: bool = False
    # Fixed display width for every destination; None means query the terminal.
    term_width: int | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """Build settings from ``NO_COLOR`` and ``MUXLOG_*`` variables."""
        env = os.environ if environ is None else environ
        settings = cls()

        if env.get("NO_COLOR"):
            settings.color_enabled = False
        else:
            settings.color_enabled = _env_flag(env, "MUXLOG_COLOR", True)

        settings.color_template_enabled = _env_flag(env, "MUXLOG_COLOR_TEMPLATES", False)
        settings.partial_lines_visible = _env_flag(env, "MUXLOG_PARTIAL_LINES", True)

        raw_width = env.get("MUXLOG_TERM_WIDTH")
        if raw_width:
            try:
                width = int(raw_width)
            except ValueError:
                width = 0
            if width > 0:
                settings.term_width = width
            else:
                logger.warning("Ignoring invalid MUXLOG_TERM_WIDTH=%r", raw_width)

        return settings


def _env_flag(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    logger.warning("Ignoring invalid %s=%r", name, raw)
    return default


def resolve_toggle(value: bool | None, fallback: bool) -> bool:
    """Return *value* unless it is unset, in which case return *fallback*."""
    if value is not None:
        return value
    return fallback
