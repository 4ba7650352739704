"""Word, whitespace and text-object arithmetic over single lines.

All helpers take a line and a 0-based character offset and return offsets.
Reads past either end of the line see a space, so boundary positions never
raise; callers translate offsets to 1-based columns.
"""

from __future__ import annotations

from typing import Optional, Tuple

Span = Tuple[int, int]  # half-open [start, end)

_BLANK = 0
_WORD = 1
_PUNCT = 2

BRACKET_PAIRS = {
    "(": ")",
    ")": "(",
    "[": "]",
    "]": "[",
    "{": "}",
    "}": "{",
    "<": ">",
    ">": "<",
}
QUOTES = frozenset({'"', "'", "`"})


def char_at(line: str, index: int) -> str:
    if 0 <= index < len(line):
        return line[index]
    return " "


def is_word_char(ch: str) -> bool:
    return ch.isalnum()


def _char_class(ch: str, big: bool = False) -> int:
    if ch.isspace():
        return _BLANK
    if big or is_word_char(ch):
        return _WORD
    return _PUNCT


def word_end(line: str, start: int, inclusive: bool = True) -> int:
    """Offset just past the word under ``start``.

    On a non-alphanumeric character the answer is ``start + 1``. With
    ``inclusive`` the whitespace that follows the word is swallowed too, which
    is what ``dw`` removes.
    """

    if not is_word_char(char_at(line, start)):
        return start + 1
    end = start
    while end < len(line) and is_word_char(line[end]):
        end += 1
    if inclusive:
        while end < len(line) and line[end].isspace():
            end += 1
    return end


def word_start(line: str, start: int, big: bool = False) -> int:
    """Offset of the beginning of the current or previous word."""

    index = min(start, len(line)) - 1
    while index > 0 and char_at(line, index).isspace():
        index -= 1
    if index <= 0:
        return 0
    kind = _char_class(char_at(line, index), big)
    while index > 0 and _char_class(char_at(line, index - 1), big) == kind:
        index -= 1
    return index


def next_word_start(line: str, start: int, big: bool = False) -> int:
    """Offset of the next word start; ``len(line)`` means end of line."""

    if start >= len(line):
        return len(line)
    kind = _char_class(char_at(line, start), big)
    index = start
    if kind != _BLANK:
        while index < len(line) and _char_class(line[index], big) == kind:
            index += 1
    while index < len(line) and line[index].isspace():
        index += 1
    return index


def next_word_end(line: str, start: int, big: bool = False) -> int:
    """Offset of the last character of the current or next word (``e``)."""

    index = start + 1
    while index < len(line) and line[index].isspace():
        index += 1
    if index >= len(line):
        return max(0, len(line) - 1)
    kind = _char_class(line[index], big)
    while index + 1 < len(line) and _char_class(line[index + 1], big) == kind:
        index += 1
    return index


def first_non_blank(line: str) -> int:
    stripped = len(line) - len(line.lstrip())
    return stripped if stripped < len(line) else 0


def find_char(
    line: str, start: int, target: str, *, forward: bool = True, till: bool = False
) -> Optional[int]:
    """Locate ``target`` for ``f``/``F``/``t``/``T``; ``None`` when absent."""

    if forward:
        found = line.find(target, start + 1)
        if found < 0:
            return None
        return found - 1 if till else found
    found = line.rfind(target, 0, max(0, start))
    if found < 0:
        return None
    return found + 1 if till else found


def word_object(line: str, index: int, *, around: bool = False, big: bool = False) -> Optional[Span]:
    """Span for ``iw``/``aw`` (``iW``/``aW`` with ``big``)."""

    if not line:
        return None
    index = max(0, min(index, len(line) - 1))
    kind = _char_class(line[index], big)
    start = index
    end = index
    while start > 0 and _char_class(line[start - 1], big) == kind:
        start -= 1
    while end < len(line) and _char_class(line[end], big) == kind:
        end += 1
    if around and kind != _BLANK:
        trailing = end
        while trailing < len(line) and line[trailing].isspace():
            trailing += 1
        if trailing > end:
            end = trailing
        else:
            while start > 0 and line[start - 1].isspace():
                start -= 1
    return (start, end)


def quote_object(line: str, index: int, quote: str, *, around: bool = False) -> Optional[Span]:
    """Span for ``i"``/``a"`` and friends, searched on one line."""

    opening = None
    for position, ch in enumerate(line):
        if ch != quote:
            continue
        if opening is None:
            opening = position
            continue
        if opening <= index <= position or index < opening:
            if around:
                return (opening, position + 1)
            return (opening + 1, position)
        opening = None
    return None


def bracket_object(line: str, index: int, bracket: str, *, around: bool = False) -> Optional[Span]:
    """Span for ``i(``/``a(`` and friends, searched on one line."""

    opening_char = bracket if bracket in "([{<" else BRACKET_PAIRS[bracket]
    closing_char = BRACKET_PAIRS[opening_char]

    depth = 0
    opening = None
    for position in range(min(index, len(line) - 1), -1, -1):
        ch = line[position]
        if ch == closing_char and position != index:
            depth += 1
        elif ch == opening_char:
            if depth == 0:
                opening = position
                break
            depth -= 1
    if opening is None:
        return None

    depth = 0
    for position in range(opening, len(line)):
        ch = line[position]
        if ch == opening_char:
            depth += 1
        elif ch == closing_char:
            depth -= 1
            if depth == 0:
                if around:
                    return (opening, position + 1)
                return (opening + 1, position)
    return None


TEXT_OBJECT_CHARS = frozenset("wWbB()[]{}<>\"'`")


def text_object(line: str, index: int, char: str, *, around: bool) -> Optional[Span]:
    """Dispatch a text-object character to its span finder."""

    if char == "w":
        return word_object(line, index, around=around)
    if char == "W":
        return word_object(line, index, around=around, big=True)
    if char in QUOTES:
        return quote_object(line, index, char, around=around)
    if char == "b":
        return bracket_object(line, index, "(", around=around)
    if char == "B":
        return bracket_object(line, index, "{", around=around)
    if char in BRACKET_PAIRS:
        return bracket_object(line, index, char, around=around)
    return None


__all__ = [
    "BRACKET_PAIRS",
    "QUOTES",
    "TEXT_OBJECT_CHARS",
    "bracket_object",
    "char_at",
    "find_char",
    "first_non_blank",
    "is_word_char",
    "next_word_end",
    "next_word_start",
    "quote_object",
    "text_object",
    "word_end",
    "word_object",
    "word_start",
]
