"""Line-oriented text storage for vim_fm buffers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple

from .state import Position
from .errors import BufferValidationError


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))


@dataclass(slots=True)
class TextDocument:
    """Ordered list of lines plus one opaque tag per line.

    Rows and columns are 1-based. Every edit works on explicit line indices;
    text is never re-located by searching the joined buffer. A tag follows its
    line through splits, merges and deletions, which is how directory entries
    stay bound to the line that names them.

    The document never holds zero lines: removing the last one leaves a single
    empty, untagged line behind.
    """

    _lines: List[str] = field(default_factory=lambda: [""])
    _tags: List[object] = field(default_factory=lambda: [None])
    version: int = 0

    @classmethod
    def from_lines(
        cls, lines: Iterable[str], tags: Optional[Iterable[object]] = None
    ) -> "TextDocument":
        line_list = list(lines)
        tag_list = list(tags) if tags is not None else [None] * len(line_list)
        if not line_list:
            line_list = [""]
            tag_list = tag_list or [None]
        if len(tag_list) != len(line_list):
            raise BufferValidationError("Tag count does not match line count")
        return cls(_lines=line_list, _tags=tag_list)

    @classmethod
    def from_text(cls, text: str) -> "TextDocument":
        return cls.from_lines(text.split("\n"))

    def snapshot(self) -> Tuple[str, ...]:
        return tuple(self._lines)

    def tag_snapshot(self) -> Tuple[object, ...]:
        return tuple(self._tags)

    def restore(self, lines: Sequence[str], tags: Sequence[object]) -> None:
        if len(lines) != len(tags):
            raise BufferValidationError("Tag count does not match line count")
        self._lines = list(lines) or [""]
        self._tags = list(tags) or [None]
        self._touch()

    @property
    def line_count(self) -> int:
        return len(self._lines)

    @property
    def text(self) -> str:
        return "\n".join(self._lines)

    def has_row(self, row: int) -> bool:
        return 1 <= row <= len(self._lines)

    def get_line(self, row: int) -> str:
        if not self.has_row(row):
            return ""
        return self._lines[row - 1]

    def line_length(self, row: int) -> int:
        return len(self.get_line(row))

    def get_tag(self, row: int) -> object:
        if not self.has_row(row):
            return None
        return self._tags[row - 1]

    def set_tag(self, row: int, tag: object) -> None:
        if self.has_row(row):
            self._tags[row - 1] = tag

    # -- character edits -------------------------------------------------

    def insert(self, col: int, row: int, text: str) -> None:
        """Insert ``text`` before column ``col``; newlines split the line."""

        if not self.has_row(row) or not text:
            return
        line = self._lines[row - 1]
        index = _clamp(col - 1, 0, len(line))
        if "\n" not in text:
            self._lines[row - 1] = line[:index] + text + line[index:]
            self._touch()
            return

        pieces = text.split("\n")
        new_lines = [line[:index] + pieces[0], *pieces[1:-1], pieces[-1] + line[index:]]
        new_tags: List[object] = [None] * len(new_lines)
        # the tag stays with whichever line keeps the original text
        if index == 0 and line:
            new_tags[-1] = self._tags[row - 1]
        else:
            new_tags[0] = self._tags[row - 1]
        self._lines[row - 1 : row] = new_lines
        self._tags[row - 1 : row] = new_tags
        self._touch()

    def delete_at(self, col: int, row: int) -> str:
        return self.delete_range(col, row, 1)

    def delete_range(self, col: int, row: int, length: int) -> str:
        """Remove up to ``length`` characters starting at ``col``."""

        if not self.has_row(row) or length <= 0:
            return ""
        line = self._lines[row - 1]
        start = col - 1
        if start < 0 or start >= len(line):
            return ""
        end = min(len(line), start + length)
        removed = line[start:end]
        self._lines[row - 1] = line[:start] + line[end:]
        self._touch()
        return removed

    def split_line(self, col: int, row: int) -> None:
        self.insert(col, row, "\n")

    # -- line edits --------------------------------------------------------

    def delete_line(self, row: int) -> str:
        """Clear the content of ``row`` but keep the line (and its tag)."""

        if not self.has_row(row):
            return ""
        removed = self._lines[row - 1]
        self._lines[row - 1] = ""
        self._touch()
        return removed

    def delete_line_full(self, row: int) -> Tuple[str, object]:
        """Remove ``row`` entirely and return its text and tag."""

        if not self.has_row(row):
            return ("", None)
        text = self._lines.pop(row - 1)
        tag = self._tags.pop(row - 1)
        if not self._lines:
            self._lines.append("")
            self._tags.append(None)
        self._touch()
        return (text, tag)

    def insert_line(self, row: int, text: str = "", tag: object = None) -> int:
        """Insert a new line so that it becomes ``row``; returns the row used."""

        index = _clamp(row - 1, 0, len(self._lines))
        self._lines.insert(index, text)
        self._tags.insert(index, tag)
        self._touch()
        return index + 1

    def merge_lines(self, row: int) -> int:
        """Join ``row + 1`` onto the end of ``row``.

        Returns the length of ``row`` before the merge (the join column minus
        one), or ``-1`` when there is no following line.
        """

        if not self.has_row(row) or not self.has_row(row + 1):
            return -1
        upper = self._lines[row - 1]
        lower = self._lines.pop(row)
        lower_tag = self._tags.pop(row)
        self._lines[row - 1] = upper + lower
        if self._tags[row - 1] is None:
            self._tags[row - 1] = lower_tag
        self._touch()
        return len(upper)

    # -- ranges ------------------------------------------------------------

    def text_between(self, start: Position, end: Position) -> str:
        """Return the text from ``start`` up to (excluding) ``end``."""

        (c1, r1), (c2, r2) = self._ordered(start, end)
        if r1 == r2:
            return self.get_line(r1)[c1 - 1 : c2 - 1]
        parts = [self.get_line(r1)[c1 - 1 :]]
        parts.extend(self.get_line(r) for r in range(r1 + 1, r2))
        parts.append(self.get_line(r2)[: c2 - 1])
        return "\n".join(parts)

    def delete_between(self, start: Position, end: Position) -> str:
        """Remove the text from ``start`` up to (excluding) ``end``."""

        (c1, r1), (c2, r2) = self._ordered(start, end)
        if r1 == r2:
            return self.delete_range(c1, r1, c2 - c1)
        removed = self.text_between((c1, r1), (c2, r2))
        head = self.get_line(r1)[: c1 - 1]
        tail = self.get_line(r2)[c2 - 1 :]
        tag = self._tags[r1 - 1]
        if tag is None:
            tag = self._tags[r2 - 1]
        self._lines[r1 - 1 : r2] = [head + tail]
        self._tags[r1 - 1 : r2] = [tag]
        self._touch()
        return removed

    def _ordered(self, start: Position, end: Position) -> Tuple[Position, Position]:
        first, second = sorted((start, end), key=lambda pos: (pos[1], pos[0]))
        r1 = _clamp(first[1], 1, self.line_count)
        r2 = _clamp(second[1], 1, self.line_count)
        c1 = _clamp(first[0], 1, self.line_length(r1) + 1)
        c2 = _clamp(second[0], 1, self.line_length(r2) + 1)
        return (c1, r1), (c2, r2)

    def _touch(self) -> None:
        self.version += 1


__all__ = ["TextDocument"]
