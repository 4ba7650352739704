"""Text edits: character deletes, line operations, paste, undo and insert typing."""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Tuple

from vim_fm.buffer import Buffer, YankBuffer, YankKind, motions
from vim_fm.modes.base_mode import Mode, ModeContext, ModeResult

if TYPE_CHECKING:
    from vim_fm.keymaps.resolver import ResolutionMatch


# -- helpers shared with compound and visual actions -------------------------


def delete_lines(
    buffer: Buffer, yank: YankBuffer, first: int, last: int, *, carry_tags: bool = True
) -> List[str]:
    """Remove rows ``first..last`` and yank them linewise.

    With ``carry_tags`` the removed lines keep their entry bindings in the
    yank buffer, so pasting them elsewhere moves the entries.
    """

    document = buffer.document
    first, last = sorted((first, last))
    first = max(1, first)
    last = min(last, document.line_count)
    removed: List[Tuple[str, object]] = []
    for _ in range(first, last + 1):
        removed.append(document.delete_line_full(first))
    texts = [text for text, _ in removed]
    tags = tuple(tag for _, tag in removed) if carry_tags else ()
    yank.yank(tuple(texts), YankKind.LINE, tags=tags)
    buffer.cursor.set_y(min(first, document.line_count))
    buffer.cursor.set_x(motions.first_non_blank(buffer.current_line) + 1)
    buffer.clamp_cursor()
    return texts


def yank_lines(buffer: Buffer, yank: YankBuffer, first: int, last: int) -> List[str]:
    document = buffer.document
    first, last = sorted((first, last))
    last = min(last, document.line_count)
    texts = [document.get_line(row) for row in range(max(1, first), last + 1)]
    yank.yank(tuple(texts), YankKind.LINE)
    return texts


def change_lines(buffer: Buffer, yank: YankBuffer, first: int, last: int) -> None:
    """Clear ``first`` (keeping its binding) and drop the rows after it."""

    document = buffer.document
    first, last = sorted((first, last))
    last = min(last, document.line_count)
    texts = [document.get_line(row) for row in range(first, last + 1)]
    for _ in range(first + 1, last + 1):
        document.delete_line_full(first + 1)
    document.delete_line(first)
    yank.yank(tuple(texts), YankKind.LINE)
    buffer.cursor.move_to(1, first)


def delete_chars(buffer: Buffer, yank: YankBuffer, count: int = 1) -> str:
    removed = buffer.document.delete_range(buffer.cursor.x, buffer.cursor.y, count)
    if removed:
        yank.yank(removed, YankKind.CHAR)
    buffer.clamp_cursor()
    return removed


def paste(buffer: Buffer, yank: YankBuffer, *, after: bool) -> bool:
    if yank.empty:
        return False
    document = buffer.document
    cursor = buffer.cursor
    if yank.kind is YankKind.LINE:
        tags = yank.consume_tags()
        row = cursor.y + 1 if after else cursor.y
        for index, text in enumerate(yank.text):
            document.insert_line(row + index, text, tags[index])
        cursor.move_to(1, row)
        cursor.set_x(motions.first_non_blank(buffer.current_line) + 1)
        buffer.clamp_cursor()
        return True

    text = yank.text[0]
    column = cursor.x + 1 if after and buffer.current_line else cursor.x
    document.insert(column, cursor.y, text)
    if "\n" in text:
        cursor.move_to(column, cursor.y)
    else:
        cursor.set_x(column + len(text) - 1)
    buffer.clamp_cursor()
    return True


# -- normal mode -------------------------------------------------------------


def delete_char(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    removed = delete_chars(context.buffer, context.yank)
    return ModeResult(consumed=True, status="edit" if removed else "noop", message="delete_char")


def substitute_char(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    buffer = context.buffer
    removed = buffer.document.delete_at(buffer.cursor.x, buffer.cursor.y)
    if removed:
        context.yank.yank(removed, YankKind.CHAR)
    return ModeResult(consumed=True, switch_to=Mode.INSERT, message="substitute")


def paste_after(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    pasted = paste(context.buffer, context.yank, after=True)
    return ModeResult(consumed=True, status="edit" if pasted else "noop", message="paste_after")


def paste_before(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    pasted = paste(context.buffer, context.yank, after=False)
    return ModeResult(consumed=True, status="edit" if pasted else "noop", message="paste_before")


def open_line_below(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    buffer = context.buffer
    row = buffer.document.insert_line(buffer.cursor.y + 1)
    buffer.cursor.move_to(1, row)
    return ModeResult(consumed=True, switch_to=Mode.INSERT, message="open_below")


def open_line_above(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    buffer = context.buffer
    row = buffer.document.insert_line(buffer.cursor.y)
    buffer.cursor.move_to(1, row)
    return ModeResult(consumed=True, switch_to=Mode.INSERT, message="open_above")


def undo(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    if not context.buffer.undo():
        context.session.status = "Already at oldest change"
        return ModeResult(consumed=True, status="noop", message="undo")
    return ModeResult(consumed=True, status="undo", message="undo")


def redo(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    if not context.buffer.redo():
        context.session.status = "Already at newest change"
        return ModeResult(consumed=True, status="noop", message="redo")
    return ModeResult(consumed=True, status="redo", message="redo")


# -- insert mode ---------------------------------------------------------------


def insert_text(context: ModeContext, text: str) -> ModeResult:
    buffer = context.buffer
    buffer.document.insert(buffer.cursor.x, buffer.cursor.y, text)
    buffer.cursor.set_x(buffer.cursor.x + len(text))
    return ModeResult(consumed=True, status="edit", message="insert_text")


def insert_newline(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    buffer = context.buffer
    buffer.document.split_line(buffer.cursor.x, buffer.cursor.y)
    buffer.cursor.move_to(1, buffer.cursor.y + 1)
    return ModeResult(consumed=True, status="edit", message="newline")


def insert_backspace(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    """Delete before the cursor; at column 1 join with the line above."""

    del match
    buffer = context.buffer
    cursor = buffer.cursor
    if cursor.x > 1:
        buffer.document.delete_at(cursor.x - 1, cursor.y)
        cursor.left()
        return ModeResult(consumed=True, status="edit", message="backspace")
    if cursor.y == 1:
        return ModeResult(consumed=True, status="noop", message="backspace")
    join = buffer.document.merge_lines(cursor.y - 1)
    cursor.move_to(join + 1, cursor.y - 1)
    return ModeResult(consumed=True, status="edit", message="join_lines")


def insert_delete(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    buffer = context.buffer
    cursor = buffer.cursor
    if cursor.x <= buffer.document.line_length(cursor.y):
        buffer.document.delete_at(cursor.x, cursor.y)
    else:
        buffer.document.merge_lines(cursor.y)
    return ModeResult(consumed=True, status="edit", message="delete_forward")


__all__ = [
    "change_lines",
    "delete_char",
    "delete_chars",
    "delete_lines",
    "insert_backspace",
    "insert_delete",
    "insert_newline",
    "insert_text",
    "open_line_above",
    "open_line_below",
    "paste",
    "paste_after",
    "paste_before",
    "redo",
    "substitute_char",
    "undo",
    "yank_lines",
]
