"""High-level buffer façade combining document, cursor, selection and undo."""

from __future__ import annotations

from contextlib import AbstractContextManager
from typing import ContextManager, Iterable, Optional

from vim_fm.runtime import telemetry

from .document import TextDocument
from .state import Cursor, SelectionState
from .undo import UndoEntry, UndoStack


class Buffer:
    """The editable text of one directory plus its cursor and history."""

    def __init__(
        self,
        *,
        name: str = "default",
        path: Optional[str] = None,
        document: Optional[TextDocument] = None,
        cursor: Optional[Cursor] = None,
        history: Optional[UndoStack] = None,
    ) -> None:
        self.name = name
        self.path = path
        self.document = document or TextDocument()
        self.cursor = cursor or Cursor()
        self.selection = SelectionState()
        self.history = history or UndoStack()

    @classmethod
    def from_lines(
        cls,
        lines: Iterable[str],
        *,
        tags: Optional[Iterable[object]] = None,
        name: str = "default",
        path: Optional[str] = None,
    ) -> "Buffer":
        return cls(name=name, path=path, document=TextDocument.from_lines(lines, tags))

    @classmethod
    def from_text(cls, text: str, *, name: str = "default") -> "Buffer":
        return cls(name=name, document=TextDocument.from_text(text))

    @property
    def lines(self) -> tuple[str, ...]:
        return self.document.snapshot()

    @property
    def current_line(self) -> str:
        return self.document.get_line(self.cursor.y)

    def clamp_cursor(self, *, insert: bool = False) -> None:
        self.cursor.clamp(
            self.document.line_count,
            self.document.line_length(self.cursor.y),
            insert=insert,
        )

    # -- history -------------------------------------------------------------

    def checkpoint(self, label: str = "") -> UndoEntry:
        return UndoEntry(
            lines=self.document.snapshot(),
            tags=self.document.tag_snapshot(),
            cursor=self.cursor.position,
            label=label,
        )

    def changed_since(self, entry: UndoEntry) -> bool:
        return (
            self.document.snapshot() != entry.lines
            or self.document.tag_snapshot() != entry.tags
        )

    def restore(self, entry: UndoEntry) -> None:
        self.document.restore(entry.lines, entry.tags)
        self.cursor.move_to(*entry.cursor)
        self.clamp_cursor()

    def transaction(self, label: str, *, before: Optional[UndoEntry] = None) -> "Transaction":
        return Transaction(self, label, before=before)

    def undo(self) -> bool:
        entry = self.history.undo(self.checkpoint("tip"))
        if entry is None:
            return False
        self.restore(entry)
        return True

    def redo(self) -> bool:
        entry = self.history.redo()
        if entry is None:
            return False
        self.restore(entry)
        return True


class Transaction(AbstractContextManager["Transaction"]):
    """Profiled edit scope that records the pre-edit snapshot on commit."""

    def __init__(self, buffer: Buffer, label: str, *, before: Optional[UndoEntry] = None) -> None:
        self.buffer = buffer
        self.label = label
        self.before = before
        self.committed = False
        self._span_cm: Optional[ContextManager[object]] = None

    def __enter__(self) -> "Transaction":
        if self.before is None:
            self.before = self.buffer.checkpoint(self.label)
        self._span_cm = telemetry.span(
            name=f"buffer::{self.label}",
            component=True,
            metadata={"buffer": self.buffer.name},
        )
        self._span_cm.__enter__()
        return self

    def commit(self) -> bool:
        """Push the pre-edit snapshot if the buffer changed since it was taken."""

        if self.before is None or not self.buffer.changed_since(self.before):
            return False
        self.buffer.history.push(self.before)
        self.committed = True
        return True

    def __exit__(self, exc_type, exc, tb) -> bool:
        if self._span_cm is not None:
            self._span_cm.__exit__(exc_type, exc, tb)
        return False


__all__ = ["Buffer", "Transaction"]
