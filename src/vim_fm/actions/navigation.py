"""Directory navigation from normal mode."""

from __future__ import annotations

from typing import TYPE_CHECKING

from vim_fm.modes.base_mode import ModeContext, ModeResult

if TYPE_CHECKING:
    from vim_fm.keymaps.resolver import ResolutionMatch


def enter_directory(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    opened = context.session.enter_hovered()
    return ModeResult(consumed=True, status="navigate" if opened else "noop")


def parent_directory(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    opened = context.session.parent()
    return ModeResult(consumed=True, status="navigate" if opened else "noop")


__all__ = ["enter_directory", "parent_directory"]
