"""Linear undo/redo history of whole-buffer snapshots."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from .state import Position


@dataclass(frozen=True, slots=True)
class UndoEntry:
    lines: Tuple[str, ...]
    tags: Tuple[object, ...]
    cursor: Position
    label: str = ""


class UndoStack:
    """Snapshot list plus an index in ``[0, len]``.

    ``push`` drops any redo entries, appends and resets the index to the
    top. The first ``undo`` from
    the top also records the live state handed in, so that ``redo`` can bring
    back exactly what was on screen before undoing.
    """

    def __init__(self) -> None:
        self._entries: List[UndoEntry] = []
        self._index: int = 0

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def index(self) -> int:
        return self._index

    def push(self, entry: UndoEntry) -> None:
        del self._entries[self._index :]
        self._entries.append(entry)
        self._index = len(self._entries)

    def can_undo(self) -> bool:
        return self._index > 0

    def can_redo(self) -> bool:
        return self._index < len(self._entries) - 1

    def undo(self, current: Optional[UndoEntry] = None) -> Optional[UndoEntry]:
        if not self.can_undo():
            return None
        if self._index == len(self._entries) and current is not None:
            self._entries.append(current)
        self._index -= 1
        return self._entries[self._index]

    def redo(self) -> Optional[UndoEntry]:
        if not self.can_redo():
            return None
        self._index += 1
        return self._entries[self._index]

    def clear(self) -> None:
        self._entries.clear()
        self._index = 0


__all__ = ["UndoEntry", "UndoStack"]
