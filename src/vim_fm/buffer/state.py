"""Cursor position state for buffers.

Positions are 1-based ``(column, row)`` pairs counted in characters. Column
``len(line) + 1`` is the insertion point just past the last character.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

Position = Tuple[int, int]  # (column, row), 1-based
Selection = Tuple[Position, Position]  # (anchor, cursor)


@dataclass(slots=True)
class Cursor:
    """Mutable cursor; every move clamps or no-ops instead of failing."""

    x: int = 1
    y: int = 1

    @property
    def position(self) -> Position:
        return (self.x, self.y)

    def move_to(self, x: int, y: int) -> None:
        self.x = max(1, x)
        self.y = max(1, y)

    def set_x(self, x: int) -> None:
        self.x = max(1, x)

    def set_y(self, y: int) -> None:
        self.y = max(1, y)

    def up(self) -> None:
        if self.y > 1:
            self.y -= 1

    def down(self, limit: Optional[int] = None) -> None:
        if limit is not None and self.y >= limit:
            return
        self.y += 1

    def left(self) -> None:
        if self.x > 1:
            self.x -= 1

    def right(self, constraint: int) -> None:
        """Move one column right unless that passes ``constraint``.

        A ``constraint`` of ``0`` means unbounded, mirroring insert-style
        advances after typing a character.
        """

        if constraint > 0 and self.x + 1 > constraint:
            return
        self.x += 1

    def reset_x(self) -> None:
        self.x = 1

    def clamp(self, line_count: int, line_length: int, *, insert: bool = False) -> None:
        """Pull the cursor back inside the buffer.

        Normal-style modes stop on the last character; insert allows the
        position just past it.
        """

        self.y = max(1, min(self.y, max(1, line_count)))
        limit = line_length + 1 if insert else line_length
        self.x = max(1, min(self.x, max(1, limit)))


@dataclass(slots=True)
class SelectionState:
    """Visual-mode anchor tracked alongside the cursor."""

    anchor: Optional[Position] = None

    def start(self, position: Position) -> None:
        self.anchor = position

    def clear(self) -> None:
        self.anchor = None

    def selection(self, cursor: Position) -> Optional[Selection]:
        if self.anchor is None:
            return None
        return (self.anchor, cursor)


__all__ = ["Cursor", "Position", "Selection", "SelectionState"]
