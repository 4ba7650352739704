"""Visual, visual-line and visual-block modes share one handler."""

from __future__ import annotations

from .base_mode import KeyInput, ModeContext, ModeResult
from .keymap_helpers import dispatch


def handle_visual(context: ModeContext, key: KeyInput) -> ModeResult:
    result = dispatch(context, context.mode.value, key)
    if result is None:
        return ModeResult(consumed=False, status="noop")
    return result


__all__ = ["handle_visual"]
