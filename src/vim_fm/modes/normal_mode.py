"""Normal mode: single-key bindings, and the doorway into pending mode."""

from __future__ import annotations

from .base_mode import KeyInput, Mode, ModeContext, ModeResult
from .command_buffer import CommandBuffer
from .keymap_helpers import dispatch


def handle_normal(context: ModeContext, key: KeyInput) -> ModeResult:
    if key.is_escape:
        context.commands.clear()
        context.buffer.cursor.left()
        return ModeResult(consumed=True, status="cancel")

    char = key.char
    if char is not None and context.commands.is_empty and CommandBuffer.is_initializer(char):
        context.commands.push(char)
        return ModeResult(
            consumed=True, switch_to=Mode.PENDING, status="pending", message=char
        )

    result = dispatch(context, Mode.NORMAL.value, key)
    if result is None:
        return ModeResult(consumed=False, status="noop")
    return result


__all__ = ["handle_normal"]
