"""Command-line mode: edits and submits the ``:`` line."""

from __future__ import annotations

from vim_fm.actions.command import append_to_command_line

from .base_mode import KeyInput, Mode, ModeContext, ModeResult
from .keymap_helpers import dispatch


def handle_command(context: ModeContext, key: KeyInput) -> ModeResult:
    result = dispatch(context, Mode.COMMAND.value, key)
    if result is not None:
        return result
    char = key.char
    if char is None:
        return ModeResult(consumed=False, status="noop")
    return append_to_command_line(context, char)


__all__ = ["handle_command"]
