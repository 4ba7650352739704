"""Minimal Textual adapter that wires ModeManager events into UI callbacks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Optional

from vim_fm.modes.base_mode import KeyInput, ModeResult
from vim_fm.modes.mode_manager import ModeManager
from vim_fm.render import RenderState


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(slots=True)
class TextualUIHooks:
    """Callbacks invoked by the adapter to update Textual widgets."""

    render: Callable[[RenderState], None]
    update_status: Callable[[str], None] = _noop
    handle_event: Callable[[str, object | None], None] = _noop
    exit: Callable[[], None] = _noop
    # Optional debug line sink
    log: Callable[[str], None] = _noop


_FORWARDED_EVENTS = (
    "mode.changed",
    "cursor.shape",
    "visual.selection",
    "command.submit",
    "command.write",
    "command.quit",
    "command.edit",
    "command.echo",
    "command.error",
)


class TextualFileManagerAdapter:
    """Bridges ModeManager + bus events to a Textual-friendly surface."""

    def __init__(self, manager: ModeManager, hooks: TextualUIHooks) -> None:
        self.manager = manager
        self.hooks = hooks
        self._subscribe_events()
        self.refresh()

    @property
    def session(self):
        return self.manager.session

    def handle_textual_key(
        self,
        key: str,
        *,
        text: Optional[str] = None,
        modifiers: Iterable[str] = (),
    ) -> ModeResult:
        """Translate a Textual key event into a KeyInput and dispatch it."""

        normalized_modifiers = tuple(str(mod).upper() for mod in modifiers)
        self._log_state("key ->", key=key, text=text, mods=normalized_modifiers)
        result = self.manager.handle_key(
            KeyInput(key=key, text=text, modifiers=normalized_modifiers)
        )
        self._log_state(
            "result <-",
            consumed=result.consumed,
            status=result.status,
            message=result.message,
            switch_to=result.switch_to,
        )
        self._after_mode_result(result)
        return result

    def refresh(self) -> RenderState:
        state = self.manager.render_state()
        self.hooks.render(state)
        return state

    def _after_mode_result(self, result: ModeResult) -> None:
        status = self.session.status
        if status:
            self.hooks.update_status(status)
        self.refresh()
        if not self.session.running:
            self.hooks.exit()

    def _subscribe_events(self) -> None:
        bus = self.manager.context.bus
        for event in _FORWARDED_EVENTS:
            bus.subscribe(
                event, lambda payload, name=event: self._handle_event(name, payload)
            )

    def _handle_event(self, name: str, payload: object | None) -> None:
        self._log_state("event ->", event=name, payload=payload)
        self.hooks.handle_event(name, payload)

    def _log_state(self, prefix: str, **fields: object) -> None:
        snapshot = self._state_metadata()
        snapshot.update({k: v for k, v in fields.items() if v is not None})
        parts = [prefix]
        for key, value in snapshot.items():
            parts.append(f"{key}={value!r}")
        self.hooks.log(" ".join(parts))

    def _state_metadata(self) -> Dict[str, object]:
        context = self.manager.context
        buffer = context.buffer
        return {
            "mode": context.mode.value,
            "cursor": buffer.cursor.position,
            "pending": context.commands.text,
            "command": context.command_line,
            "path": self.session.path,
            "buffer_version": buffer.document.version,
        }


__all__ = ["TextualFileManagerAdapter", "TextualUIHooks"]
