"""Mode tags, key events and the context every handler receives."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Callable, Dict, List, Optional, Tuple

from .command_buffer import CommandBuffer

if TYPE_CHECKING:
    from vim_fm.buffer import Buffer, YankBuffer
    from vim_fm.session import Session


class Mode(str, Enum):
    NORMAL = "normal"
    INSERT = "insert"
    COMMAND = "command"
    VISUAL = "visual"
    VISUAL_LINE = "visual_line"
    VISUAL_BLOCK = "visual_block"
    PENDING = "pending"

    @property
    def is_visual(self) -> bool:
        return self in VISUAL_MODES


VISUAL_MODES = frozenset({Mode.VISUAL, Mode.VISUAL_LINE, Mode.VISUAL_BLOCK})


class CursorShape(str, Enum):
    BLOCK = "block"
    BAR = "bar"
    UNDERLINE = "underline"


CURSOR_SHAPES: Dict[Mode, CursorShape] = {
    Mode.NORMAL: CursorShape.BLOCK,
    Mode.INSERT: CursorShape.BAR,
    Mode.COMMAND: CursorShape.BAR,
    Mode.VISUAL: CursorShape.BLOCK,
    Mode.VISUAL_LINE: CursorShape.BLOCK,
    Mode.VISUAL_BLOCK: CursorShape.BLOCK,
    Mode.PENDING: CursorShape.UNDERLINE,
}

ESCAPE_KEYS = frozenset({"ESC", "<Esc>", "escape"})


@dataclass(slots=True)
class KeyInput:
    """Normalized key event passed to mode handlers."""

    key: str
    modifiers: Tuple[str, ...] = ()
    text: Optional[str] = None

    @property
    def is_escape(self) -> bool:
        return self.key in ESCAPE_KEYS and not self.modifiers

    @property
    def char(self) -> Optional[str]:
        """The single printable character this key produces, if any."""

        if self.modifiers:
            return None
        if self.text is not None:
            return self.text if len(self.text) == 1 else None
        return self.key if len(self.key) == 1 else None


@dataclass(slots=True)
class ModeResult:
    """Outcome of one handled key."""

    consumed: bool
    switch_to: Optional[Mode] = None
    status: str = "ok"
    message: Optional[str] = None


class ModeBus:
    """Minimal event bus letting modes exchange structured signals."""

    def __init__(self) -> None:
        self._subscribers: Dict[str, list[Callable[[object], None]]] = {}

    def subscribe(self, event: str, callback: Callable[[object], None]) -> None:
        self._subscribers.setdefault(event, []).append(callback)

    def emit(self, event: str, payload: object | None = None) -> None:
        for callback in self._subscribers.get(event, []):
            callback(payload)


@dataclass(slots=True)
class ModeContext:
    """Shared services every handler can access."""

    session: "Session"
    bus: ModeBus = field(default_factory=ModeBus)
    commands: CommandBuffer = field(default_factory=CommandBuffer)
    mode: Mode = Mode.NORMAL
    command_line: str = ""
    command_history: List[str] = field(default_factory=list)
    extras: Dict[str, object] = field(default_factory=dict)

    @property
    def buffer(self) -> "Buffer":
        return self.session.buffer

    @property
    def yank(self) -> "YankBuffer":
        return self.session.yank


ModeHandler = Callable[[ModeContext, KeyInput], ModeResult]


__all__ = [
    "CURSOR_SHAPES",
    "CursorShape",
    "KeyInput",
    "Mode",
    "ModeBus",
    "ModeContext",
    "ModeHandler",
    "ModeResult",
    "VISUAL_MODES",
]
