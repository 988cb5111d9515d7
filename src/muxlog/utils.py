"""Terminal text utilities: visible width measurement and truncation.

Escape sequences occupy no columns; East Asian wide characters and emoji
occupy two; tabs advance to the next multiple of 8.  Truncation cuts at
grapheme boundaries and keeps escape sequences intact.
"""

from __future__ import annotations

import re

import grapheme
import wcwidth as _wcwidth

# CSI sequences: ESC[ <params> <final byte>
_CSI_RE = re.compile(r"\x1b\[[0-9;]*[mGKHJ]")

# ---------------------------------------------------------------------------
# Width cache (capped at 512 entries)
# ---------------------------------------------------------------------------

_width_cache: dict[str, int] = {}
_WIDTH_CACHE_MAX = 512

# Columns between tab stops; widths are measured from column 0.
TAB_WIDTH = 8


def _cache_width(key: str, value: int) -> int:
    if len(_width_cache) >= _WIDTH_CACHE_MAX:
        _width_cache.clear()
    _width_cache[key] = value
    return value


def _grapheme_width(g: str) -> int:
    """Return the display width of a single grapheme cluster."""
    if not g:
        return 0
    if len(g) == 1:
        cp = ord(g)
        if cp < 0x20 or (0x7F <= cp <= 0x9F):
            return 0
        return max(_wcwidth.wcwidth(g), 0)
    # Emoji presentation / ZWJ sequences render double width.
    if "\ufe0f" in g or "\u200d" in g:
        return 2
    return max(_wcwidth.wcswidth(g), 0)


def _advance(cols: int, g: str) -> int:
    """Return the column after drawing grapheme *g* at column *cols*."""
    if g == "\t":
        return cols + TAB_WIDTH - cols % TAB_WIDTH
    return cols + _grapheme_width(g)


def _is_plain_ascii(text: str) -> bool:
    return all(0x20 <= ord(ch) <= 0x7E for ch in text)


# ---------------------------------------------------------------------------
# visible_width
# ---------------------------------------------------------------------------


def visible_width(text: str) -> int:
    """Return the number of terminal columns *text* occupies."""
    if not text:
        return 0
    stripped = _CSI_RE.sub("", text)
    if _is_plain_ascii(stripped):
        return len(stripped)

    cached = _width_cache.get(stripped)
    if cached is not None:
        return cached

    total = 0
    for g in grapheme.graphemes(stripped):
        total = _advance(total, g)
    return _cache_width(stripped, total)


# ---------------------------------------------------------------------------
# truncate_to_width
# ---------------------------------------------------------------------------


def truncate_to_width(text: str, max_width: int, ellipsis: str = "...") -> str:
    """Truncate *text* to *max_width* columns, ending with *ellipsis*.

    The ellipsis counts towards the width.  Text that already fits is
    returned unchanged.
    """
    if max_width <= 0:
        return ""
    if visible_width(text) <= max_width:
        return text

    target_width = max_width - visible_width(ellipsis)
    if target_width <= 0:
        return _take_columns(ellipsis, max_width)
    return _take_columns(text, target_width) + ellipsis


def _take_columns(text: str, max_cols: int) -> str:
    """Return the longest prefix of *text* fitting in *max_cols* columns."""
    result: list[str] = []
    cols = 0
    pos = 0
    for match in _CSI_RE.finditer(text):
        cols, done = _take_plain(text[pos : match.start()], max_cols, cols, result)
        if done:
            return "".join(result)
        result.append(match.group(0))
        pos = match.end()
    _take_plain(text[pos:], max_cols, cols, result)
    return "".join(result)


def _take_plain(
    chunk: str, max_cols: int, cols: int, result: list[str]
) -> tuple[int, bool]:
    for g in grapheme.graphemes(chunk):
        next_cols = _advance(cols, g)
        if next_cols > max_cols:
            return cols, True
        result.append(g)
        cols = next_cols
    return cols, False
