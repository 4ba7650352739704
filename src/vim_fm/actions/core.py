"""Mode-switching actions shared across modes."""

from __future__ import annotations

from typing import TYPE_CHECKING

from vim_fm.buffer import motions
from vim_fm.modes.base_mode import Mode, ModeContext, ModeResult

if TYPE_CHECKING:
    from vim_fm.keymaps.resolver import ResolutionMatch


def enter_insert_mode(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    return ModeResult(consumed=True, switch_to=Mode.INSERT, message="enter_insert")


def insert_at_line_start(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    buffer = context.buffer
    buffer.cursor.set_x(motions.first_non_blank(buffer.current_line) + 1)
    return ModeResult(consumed=True, switch_to=Mode.INSERT, message="insert_line_start")


def append_after_cursor(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    buffer = context.buffer
    if buffer.current_line:
        buffer.cursor.right(len(buffer.current_line) + 1)
    return ModeResult(consumed=True, switch_to=Mode.INSERT, message="append")


def append_at_line_end(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    buffer = context.buffer
    buffer.cursor.set_x(len(buffer.current_line) + 1)
    return ModeResult(consumed=True, switch_to=Mode.INSERT, message="append_line_end")


def exit_to_normal_mode(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    """Leave any mode for normal; the cursor steps one column left."""

    del match
    context.buffer.cursor.left()
    return ModeResult(consumed=True, switch_to=Mode.NORMAL, message=f"exit_{context.mode.value}")


def enter_visual_mode(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    return ModeResult(consumed=True, switch_to=Mode.VISUAL, message="enter_visual")


def enter_visual_line_mode(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    return ModeResult(consumed=True, switch_to=Mode.VISUAL_LINE, message="enter_visual_line")


def enter_visual_block_mode(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    return ModeResult(consumed=True, switch_to=Mode.VISUAL_BLOCK, message="enter_visual_block")


def enter_command_mode(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    return ModeResult(consumed=True, switch_to=Mode.COMMAND, message="enter_command")


__all__ = [
    "append_after_cursor",
    "append_at_line_end",
    "enter_command_mode",
    "enter_insert_mode",
    "enter_visual_block_mode",
    "enter_visual_line_mode",
    "enter_visual_mode",
    "exit_to_normal_mode",
    "insert_at_line_start",
]
