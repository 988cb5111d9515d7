"""Tests for muxlog.registry."""

from __future__ import annotations

import io
import sys

import pytest

import muxlog.registry as registry_module
from muxlog.config import Settings
from muxlog.logger import STD_FLAGS, Logger, default_logger
from muxlog.registry import StreamRegistry, get_registry

from .recording_destination import RecordingDestination


class TestRegistration:
    def test_default_logger_registers_first(
        self, registry: StreamRegistry, dest: RecordingDestination
    ) -> None:
        first = Logger(dest, registry=registry)
        second = Logger(dest, registry=registry)
        assert registry.default is not None
        assert registry.streams == [registry.default, first, second]

    def test_default_logger_properties(self, registry: StreamRegistry) -> None:
        default = default_logger(registry)
        assert default.is_default
        assert default.destination is sys.stderr
        assert default.get_flags() == STD_FLAGS
        assert default.get_prefix() == ""
        assert default_logger(registry) is default

    def test_default_takes_registry_settings(self) -> None:
        registry = StreamRegistry(
            settings=Settings(color_enabled=False, partial_lines_visible=False)
        )
        default = default_logger(registry)
        assert default.color_enabled is False
        assert default.partial_lines_visible is False

    def test_streams_is_a_copy(self, registry: StreamRegistry, dest: RecordingDestination) -> None:
        Logger(dest, registry=registry)
        streams = registry.streams
        streams.clear()
        assert len(registry.streams) == 2

    def test_streams_for_uses_identity(self, registry: StreamRegistry) -> None:
        a_dest = RecordingDestination()
        b_dest = RecordingDestination()
        a = Logger(a_dest, registry=registry)
        b = Logger(b_dest, registry=registry)
        c = Logger(a_dest, registry=registry)
        assert list(registry.streams_for(a_dest)) == [a, c]
        assert list(registry.streams_for(b_dest)) == [b]

    def test_destinations(self, registry: StreamRegistry) -> None:
        a_dest = RecordingDestination()
        b_dest = RecordingDestination()
        Logger(a_dest, registry=registry)
        Logger(b_dest, registry=registry)
        Logger(a_dest, registry=registry)
        assert registry.destinations() == [sys.stderr, a_dest, b_dest]


class TestWriterState:
    def test_one_state_per_destination(
        self, registry: StreamRegistry, dest: RecordingDestination
    ) -> None:
        state = registry.writer_state(dest)
        assert registry.writer_state(dest) is state
        assert registry.writer_state(RecordingDestination()) is not state

    def test_configured_width(self, dest: RecordingDestination) -> None:
        registry = StreamRegistry(settings=Settings(term_width=42))
        assert registry.terminal_width(dest) == 42

    def test_width_is_cached(
        self, dest: RecordingDestination, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        calls: list[object] = []

        def fake_query(destination: object) -> int:
            calls.append(destination)
            return 120

        monkeypatch.setattr(registry_module, "query_width", fake_query)
        registry = StreamRegistry(settings=Settings())
        assert registry.terminal_width(dest) == 120
        assert registry.terminal_width(dest) == 120
        assert calls == [dest]

    def test_non_terminal_falls_back(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(sys, "__stderr__", io.StringIO())
        registry = StreamRegistry(settings=Settings())
        assert registry.terminal_width(io.StringIO()) == 80


class TestProcessRegistry:
    def test_get_registry_is_shared(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(registry_module, "_registry", None)
        first = get_registry()
        assert get_registry() is first

    def test_logger_uses_process_registry(self, monkeypatch: pytest.MonkeyPatch) -> None:
        fresh = StreamRegistry(settings=Settings(term_width=80))
        monkeypatch.setattr(registry_module, "_registry", fresh)
        stream = Logger(RecordingDestination())
        assert stream.registry is fresh
        assert fresh.default is not None
