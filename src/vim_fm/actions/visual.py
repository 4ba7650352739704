"""Actions operating on the Visual, Visual-line and Visual-block selections."""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Tuple

from vim_fm.buffer import Buffer, Position, YankKind
from vim_fm.modes.base_mode import Mode, ModeContext, ModeResult

from .edit import change_lines, delete_lines, yank_lines

if TYPE_CHECKING:
    from vim_fm.keymaps.resolver import ResolutionMatch


def _ordered(buffer: Buffer) -> Tuple[Position, Position]:
    anchor = buffer.selection.anchor or buffer.cursor.position
    cursor = buffer.cursor.position
    first, second = sorted((anchor, cursor), key=lambda pos: (pos[1], pos[0]))
    return first, second


def _block_bounds(buffer: Buffer) -> Tuple[int, int, int, int]:
    anchor = buffer.selection.anchor or buffer.cursor.position
    cursor = buffer.cursor.position
    left, right = sorted((anchor[0], cursor[0]))
    top, bottom = sorted((anchor[1], cursor[1]))
    return left, right, top, bottom


def selected_text(buffer: Buffer, mode: Mode) -> List[str]:
    """Text under the selection, one string per covered row."""

    document = buffer.document
    if mode is Mode.VISUAL_LINE:
        (_, top), (_, bottom) = _ordered(buffer)
        return [document.get_line(row) for row in range(top, bottom + 1)]
    if mode is Mode.VISUAL_BLOCK:
        left, right, top, bottom = _block_bounds(buffer)
        return [document.get_line(row)[left - 1 : right] for row in range(top, bottom + 1)]
    (c1, r1), (c2, r2) = _ordered(buffer)
    text = document.text_between((c1, r1), (c2 + 1, r2))
    return text.split("\n")


def swap_anchor(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    buffer = context.buffer
    anchor = buffer.selection.anchor
    if anchor is None:
        return ModeResult(consumed=True, status="noop")
    buffer.selection.start(buffer.cursor.position)
    buffer.cursor.move_to(*anchor)
    buffer.clamp_cursor()
    context.bus.emit("visual.selection", buffer.selection.selection(buffer.cursor.position))
    return ModeResult(consumed=True, status="visual_swap")


def yank_selection(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    buffer = context.buffer
    mode = context.mode
    if mode is Mode.VISUAL_LINE:
        (_, top), (_, bottom) = _ordered(buffer)
        yank_lines(buffer, context.yank, top, bottom)
        buffer.cursor.set_y(top)
    else:
        first, _ = _ordered(buffer)
        if mode is Mode.VISUAL_BLOCK:
            left, _, top, _ = _block_bounds(buffer)
            first = (left, top)
        context.yank.yank("\n".join(selected_text(buffer, mode)), YankKind.CHAR)
        buffer.cursor.move_to(*first)
    buffer.clamp_cursor()
    return ModeResult(consumed=True, switch_to=Mode.NORMAL, status="visual_yank")


def _delete(context: ModeContext) -> None:
    buffer = context.buffer
    document = buffer.document
    mode = context.mode
    if mode is Mode.VISUAL_LINE:
        (_, top), (_, bottom) = _ordered(buffer)
        delete_lines(buffer, context.yank, top, bottom)
        return
    if mode is Mode.VISUAL_BLOCK:
        left, right, top, bottom = _block_bounds(buffer)
        context.yank.yank("\n".join(selected_text(buffer, mode)), YankKind.CHAR)
        for row in range(top, bottom + 1):
            document.delete_range(left, row, right - left + 1)
        buffer.cursor.move_to(left, top)
        return
    (c1, r1), (c2, r2) = _ordered(buffer)
    removed = document.delete_between((c1, r1), (c2 + 1, r2))
    context.yank.yank(removed, YankKind.CHAR)
    buffer.cursor.move_to(c1, r1)


def delete_selection(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    _delete(context)
    context.buffer.clamp_cursor()
    return ModeResult(consumed=True, switch_to=Mode.NORMAL, status="visual_delete")


def change_selection(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    buffer = context.buffer
    if context.mode is Mode.VISUAL_LINE:
        (_, top), (_, bottom) = _ordered(buffer)
        change_lines(buffer, context.yank, top, bottom)
    else:
        _delete(context)
    buffer.clamp_cursor(insert=True)
    return ModeResult(consumed=True, switch_to=Mode.INSERT, status="visual_change")


__all__ = [
    "change_selection",
    "delete_selection",
    "selected_text",
    "swap_anchor",
    "yank_selection",
]
