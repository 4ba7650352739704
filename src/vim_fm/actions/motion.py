"""Cursor motions shared by keymap actions, counts and visual selections."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from vim_fm.buffer import Buffer, motions
from vim_fm.modes.base_mode import Mode, ModeContext, ModeResult

if TYPE_CHECKING:
    from vim_fm.keymaps.resolver import ResolutionMatch


def apply_motion(
    buffer: Buffer,
    motion: str,
    count: Optional[int] = None,
    argument: Optional[str] = None,
    *,
    insert: bool = False,
) -> bool:
    """Move the cursor of ``buffer``; returns whether it moved.

    ``count`` repeats the motion, except for ``G``/``gg`` where it names the
    target line.
    """

    before = buffer.cursor.position
    document = buffer.document
    cursor = buffer.cursor

    if motion in {"G", "gg"}:
        default = document.line_count if motion == "G" else 1
        cursor.set_y(min(count or default, document.line_count))
        cursor.set_x(motions.first_non_blank(buffer.current_line) + 1)
    elif motion == "0":
        cursor.reset_x()
    elif motion == "$":
        length = document.line_length(cursor.y)
        cursor.set_x(length + 1 if insert else max(1, length))
    else:
        for _ in range(max(1, count or 1)):
            _step(buffer, motion, argument, insert)

    buffer.clamp_cursor(insert=insert)
    return buffer.cursor.position != before


def _step(buffer: Buffer, motion: str, argument: Optional[str], insert: bool) -> None:
    document = buffer.document
    cursor = buffer.cursor
    line = buffer.current_line
    offset = cursor.x - 1

    if motion == "h":
        cursor.left()
    elif motion == "l":
        limit = len(line) + 1 if insert else len(line)
        cursor.right(max(1, limit))
    elif motion == "j":
        cursor.down(document.line_count)
    elif motion == "k":
        cursor.up()
    elif motion in {"w", "W"}:
        target = motions.next_word_start(line, offset, big=motion == "W")
        if target < len(line):
            cursor.set_x(target + 1)
        elif cursor.y < document.line_count:
            cursor.move_to(1, cursor.y + 1)
    elif motion in {"b", "B"}:
        if cursor.x > 1:
            cursor.set_x(motions.word_start(line, offset, big=motion == "B") + 1)
        elif cursor.y > 1:
            cursor.up()
            cursor.set_x(max(1, len(buffer.current_line)))
    elif motion in {"e", "E"}:
        big = motion == "E"
        target = motions.next_word_end(line, offset, big=big)
        if target > offset:
            cursor.set_x(target + 1)
        elif cursor.y < document.line_count:
            cursor.down(document.line_count)
            cursor.set_x(motions.next_word_end(buffer.current_line, -1, big=big) + 1)
    elif motion in {"f", "F", "t", "T"} and argument:
        target = motions.find_char(
            line,
            offset,
            argument,
            forward=motion in {"f", "t"},
            till=motion in {"t", "T"},
        )
        if target is not None:
            cursor.set_x(target + 1)


def move(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    motion = str(match.action.metadata["motion"])
    insert = context.mode is Mode.INSERT
    moved = apply_motion(context.buffer, motion, insert=insert)
    if context.mode.is_visual:
        context.bus.emit("visual.selection", context.buffer.selection.selection(context.buffer.cursor.position))
    return ModeResult(consumed=True, status="motion" if moved else "noop", message=motion)


__all__ = ["apply_motion", "move"]
