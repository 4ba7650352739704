"""Pending mode: collects the rest of a compound command such as ``diw``."""

from __future__ import annotations

from vim_fm.actions.compound import execute_compound

from .base_mode import KeyInput, Mode, ModeContext, ModeResult
from .command_buffer import BufferStatus


def handle_pending(context: ModeContext, key: KeyInput) -> ModeResult:
    commands = context.commands
    if key.is_escape:
        commands.clear()
        context.buffer.cursor.left()
        return ModeResult(consumed=True, switch_to=Mode.NORMAL, status="cancel")

    char = key.char
    if char is None:
        commands.clear()
        return ModeResult(consumed=True, switch_to=Mode.NORMAL, status="discarded")

    status = commands.push(char)
    if status is BufferStatus.COMPLETE:
        return execute_compound(context, commands.take())
    if status is BufferStatus.DISCARDED:
        return ModeResult(consumed=True, switch_to=Mode.NORMAL, status="discarded")
    return ModeResult(consumed=True, status="pending", message=commands.text)


__all__ = ["handle_pending"]
