"""Mode manager: owns the active mode and routes every key event."""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Optional

from vim_fm.buffer import Buffer, UndoEntry
from vim_fm.keymaps import KeymapRegistry, KeymapResolver, load_default_keymaps
from vim_fm.render import RenderState, build_render_state
from vim_fm.runtime import telemetry

from .base_mode import CURSOR_SHAPES, KeyInput, Mode, ModeContext, ModeHandler, ModeResult
from .command_mode import handle_command
from .insert_mode import handle_insert
from .normal_mode import handle_normal
from .pending_mode import handle_pending
from .visual_mode import handle_visual

if TYPE_CHECKING:
    from vim_fm.session import Session

MODE_HANDLERS: Dict[Mode, ModeHandler] = {
    Mode.NORMAL: handle_normal,
    Mode.INSERT: handle_insert,
    Mode.COMMAND: handle_command,
    Mode.VISUAL: handle_visual,
    Mode.VISUAL_LINE: handle_visual,
    Mode.VISUAL_BLOCK: handle_visual,
    Mode.PENDING: handle_pending,
}

_unhandled = set(Mode) - set(MODE_HANDLERS)
if _unhandled:  # pragma: no cover - import-time exhaustiveness check
    raise RuntimeError(f"Modes without a handler: {sorted(m.value for m in _unhandled)}")

# statuses whose edits must not be recorded as new history
_HISTORY_STATUSES = frozenset({"undo", "redo"})


class ModeManager:
    """Owns active mode, handles transitions, and dispatches key events."""

    def __init__(
        self,
        context: ModeContext,
        *,
        keymap_registry: KeymapRegistry | None = None,
        keymap_resolver: KeymapResolver | None = None,
        load_defaults: bool = True,
    ) -> None:
        self.context = context
        self.logger = telemetry.get_logger("vim_fm.modes")
        self.keymap_registry = keymap_registry or KeymapRegistry(
            logger_name="vim_fm.keymaps"
        )
        if load_defaults and keymap_registry is None:
            load_default_keymaps(self.keymap_registry)
        self.keymap_resolver = keymap_resolver or KeymapResolver(
            self.keymap_registry, logger_name="vim_fm.keymaps"
        )
        self.context.extras.setdefault("keymap_registry", self.keymap_registry)
        self.context.extras.setdefault("keymap_resolver", self.keymap_resolver)
        self.context.extras.setdefault("mode_manager", self)
        # snapshot taken before the command that entered insert mode
        self._insert_hold: Optional[UndoEntry] = None

    @property
    def active(self) -> Mode:
        return self.context.mode

    @property
    def session(self) -> "Session":
        return self.context.session

    def switch_mode(self, mode: Mode) -> None:
        previous = self.context.mode
        if previous is mode:
            return
        buffer = self.context.buffer

        if previous is Mode.INSERT:
            self._commit_insert(buffer)
        if previous is Mode.PENDING:
            self.context.commands.clear()
        if previous is Mode.COMMAND or mode is Mode.COMMAND:
            self.context.command_line = ""
        if previous.is_visual and not mode.is_visual:
            buffer.selection.clear()
        if mode.is_visual and not previous.is_visual:
            buffer.selection.start(buffer.cursor.position)

        self.context.mode = mode
        if mode is Mode.NORMAL:
            buffer.clamp_cursor()

        bus = self.context.bus
        bus.emit("mode.changed", mode)
        bus.emit("cursor.shape", CURSOR_SHAPES[mode])
        telemetry.record_event(
            "mode.switch", data={"from": previous.value, "mode": mode.value}
        )

    def handle_key(self, key: KeyInput) -> ModeResult:
        if self.session.need_confirmation:
            return self._handle_confirmation(key)

        mode = self.context.mode
        buffer = self.context.buffer
        before = buffer.checkpoint(mode.value)
        with telemetry.span(
            name=f"mode::{mode.value}",
            component="modes",
            metadata={"key": key.key, "mode": mode.value},
        ):
            result = MODE_HANDLERS[mode](self.context, key)
        self._record(mode, buffer, before, result)
        if result.switch_to is not None:
            self.switch_mode(result.switch_to)
        return result

    def render_state(self) -> RenderState:
        return build_render_state(
            self.session,
            mode=self.context.mode,
            pending=self.context.commands.text,
            command_line=self.context.command_line,
        )

    # -- history -------------------------------------------------------------

    def _record(self, mode: Mode, buffer: Buffer, before: UndoEntry, result: ModeResult) -> None:
        if self.context.buffer is not buffer:
            # navigation swapped the buffer; nothing was edited here
            self._insert_hold = None
            return
        if not buffer.changed_since(before):
            if result.switch_to is Mode.INSERT and mode is not Mode.INSERT:
                self._insert_hold = before
            return

        self.session.reflect()
        if result.status in _HISTORY_STATUSES:
            return
        if mode is Mode.INSERT or result.switch_to is Mode.INSERT:
            if self._insert_hold is None:
                self._insert_hold = before
            return
        with buffer.transaction(result.message or mode.value, before=before) as txn:
            txn.commit()

    def _commit_insert(self, buffer: Buffer) -> None:
        hold, self._insert_hold = self._insert_hold, None
        if hold is None:
            return
        with buffer.transaction("insert", before=hold) as txn:
            txn.commit()

    # -- confirmation prompt -------------------------------------------------

    def _handle_confirmation(self, key: KeyInput) -> ModeResult:
        session = self.session
        char = key.char
        if char in {"y", "Y"}:
            report = session.confirm()
            self._reset_after_rebuild()
            status = "confirmed" if report.ok else "confirmed_with_errors"
            return ModeResult(consumed=True, status=status, message=report.summary())
        if char in {"n", "N"}:
            session.decline()
            self._reset_after_rebuild()
            return ModeResult(consumed=True, status="declined")
        if key.is_escape:
            session.dismiss_prompt()
            return ModeResult(consumed=True, status="dismissed")
        return ModeResult(consumed=True, status="noop")

    def _reset_after_rebuild(self) -> None:
        self._insert_hold = None
        self.context.commands.clear()
        if self.context.mode is not Mode.NORMAL:
            self.switch_mode(Mode.NORMAL)


__all__ = ["MODE_HANDLERS", "ModeManager"]
