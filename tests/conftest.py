"""Shared fixtures."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from muxlog.config import Settings
from muxlog.registry import StreamRegistry
from muxlog.templates import ANSI_COLOR_CODES

from .recording_destination import RecordingDestination

FIXED_NOW = datetime(2009, 1, 23, 1, 23, 23, 123123, tzinfo=timezone.utc)


@pytest.fixture
def registry() -> StreamRegistry:
    """A private registry with an 80-column display and a frozen clock."""
    return StreamRegistry(settings=Settings(term_width=80), clock=lambda: FIXED_NOW)


@pytest.fixture
def dest() -> RecordingDestination:
    return RecordingDestination()


@pytest.fixture(autouse=True)
def _restore_color_codes():
    saved = dict(ANSI_COLOR_CODES)
    yield
    ANSI_COLOR_CODES.clear()
    ANSI_COLOR_CODES.update(saved)
