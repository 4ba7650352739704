"""Insert mode: bound keys first, everything printable is typed literally."""

from __future__ import annotations

from vim_fm.actions.edit import insert_text

from .base_mode import KeyInput, Mode, ModeContext, ModeResult
from .keymap_helpers import dispatch


def handle_insert(context: ModeContext, key: KeyInput) -> ModeResult:
    result = dispatch(context, Mode.INSERT.value, key)
    if result is not None:
        return result
    char = key.char
    if char is None:
        return ModeResult(consumed=False, status="noop")
    return insert_text(context, char)


__all__ = ["handle_insert"]
