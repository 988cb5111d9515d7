"""Tests for muxlog.utils -- width measurement and truncation."""

from __future__ import annotations

from muxlog.utils import truncate_to_width, visible_width


class TestVisibleWidth:
    """Measure the visible terminal width of text."""

    def test_plain_ascii(self) -> None:
        assert visible_width("hello") == 5

    def test_empty_string(self) -> None:
        assert visible_width("") == 0

    def test_ansi_codes_do_not_count(self) -> None:
        assert visible_width("\x1b[1m\x1b[31mabc\x1b[0m") == 3

    def test_wide_cjk_characters_count_as_two(self) -> None:
        assert visible_width("A\u4e16B") == 4

    def test_combining_mark_counts_as_zero(self) -> None:
        assert visible_width("e\u0301") == 1

    def test_tab_advances_to_next_stop(self) -> None:
        assert visible_width("\t") == 8
        assert visible_width("a\tb") == 9
        assert visible_width("12345678\t") == 16

    def test_tab_after_escape_sequence(self) -> None:
        assert visible_width("\x1b[31mab\tc\x1b[39m") == 9


class TestTruncateToWidth:
    """Truncate text to a maximum visible width."""

    def test_short_text_unchanged(self) -> None:
        assert truncate_to_width("hi", 10) == "hi"

    def test_exact_width_unchanged(self) -> None:
        assert truncate_to_width("hello", 5) == "hello"

    def test_truncates_with_ellipsis(self) -> None:
        assert truncate_to_width("hello world", 8) == "hello..."

    def test_custom_ellipsis(self) -> None:
        result = truncate_to_width("abcdefghij", 7, ellipsis=" ...")
        assert result == "abc ..."

    def test_zero_width_returns_empty(self) -> None:
        assert truncate_to_width("hello", 0) == ""

    def test_ellipsis_wider_than_limit(self) -> None:
        assert truncate_to_width("hello world", 2, ellipsis=" ...") == " ."

    def test_escape_sequences_preserved(self) -> None:
        result = truncate_to_width("\x1b[31mhello world\x1b[39m", 8)
        assert result == "\x1b[31mhello..."
        assert visible_width(result) == 8

    def test_wide_character_not_split(self) -> None:
        result = truncate_to_width("世世世世", 6)
        # Two wide characters (4 cols) + "..." would be 7, so only one fits.
        assert result == "世..."

    def test_tab_counts_to_its_stop(self) -> None:
        result = truncate_to_width("\tabcdef", 10, ellipsis="..")
        assert result == "\t.."
        assert visible_width(result) == 10
