"""Executable Textual app that hosts the file manager."""

from __future__ import annotations

import argparse
from typing import Any, Optional, Sequence, Tuple

from rich.text import Text
from textual import events
from textual.app import App, ComposeResult
from textual.containers import Horizontal
from textual.widgets import Static

from vim_fm.filesystem import LifecycleState
from vim_fm.keymaps import KeymapRegistry, KeymapResolver, load_default_keymaps
from vim_fm.modes.base_mode import Mode, ModeBus, ModeContext
from vim_fm.modes.mode_manager import ModeManager
from vim_fm.render import RenderState
from vim_fm.runtime import telemetry
from vim_fm.runtime.config import EngineConfig
from vim_fm.session import Session

from .controller import TextualFileManagerAdapter, TextualUIHooks

STATE_STYLES = {
    LifecycleState.CREATED.value: "green",
    LifecycleState.MODIFIED.value: "yellow",
    LifecycleState.MOVED.value: "cyan",
    LifecycleState.DELETED.value: "red strike",
}

# Textual key names -> engine key names
_NAMED_KEYS = {
    "escape": "ESC",
    "enter": "ENTER",
    "backspace": "BACKSPACE",
    "delete": "DELETE",
    "left": "LEFT",
    "right": "RIGHT",
    "up": "UP",
    "down": "DOWN",
}


def create_default_manager(config: Optional[EngineConfig] = None) -> ModeManager:
    """Build a session plus a ModeManager with the default keymaps."""

    registry = KeymapRegistry()
    load_default_keymaps(registry)
    resolver = KeymapResolver(registry)
    session = Session(config or EngineConfig.from_env())
    context = ModeContext(session=session, bus=ModeBus())
    return ModeManager(
        context,
        keymap_registry=registry,
        keymap_resolver=resolver,
        load_defaults=False,
    )


def _in_selection(state: RenderState, row: int, col: int) -> bool:
    if state.selection is None:
        return False
    (ax, ay), (cx, cy) = state.selection
    top, bottom = min(ay, cy), max(ay, cy)
    if not top <= row <= bottom:
        return False
    if state.mode is Mode.VISUAL_LINE:
        return True
    if state.mode is Mode.VISUAL_BLOCK:
        return min(ax, cx) <= col <= max(ax, cx)
    start, end = sorted(((ay, ax), (cy, cx)))
    return start <= (row, col) <= end


def render_listing(state: RenderState) -> Text:
    text = Text()
    cursor_x, cursor_y = state.cursor
    for row, line in enumerate(state.lines, start=1):
        base = STATE_STYLES.get(state.line_states[row - 1] or "", "")
        if state.line_kinds[row - 1] == "directory":
            base = f"bold blue {base}".strip()
        # one trailing cell so the cursor can sit past the last character
        cells = line + " " if row == cursor_y else line
        for col, ch in enumerate(cells, start=1):
            style = base
            if _in_selection(state, row, col):
                style = f"{style} on grey37".strip()
            if row == cursor_y and col == cursor_x:
                style = f"{style} reverse".strip()
            text.append(ch, style=style or None)
        if row < len(state.lines):
            text.append("\n")
    return text


def render_parent(state: RenderState) -> Text:
    text = Text()
    for index, name in enumerate(state.parent_lines):
        style = "reverse" if index == state.parent_highlight else None
        text.append(name, style=style)
        text.append("\n")
    return text


def render_confirmation(state: RenderState) -> Text:
    text = Text("Apply these changes? [y/n]\n\n", style="bold")
    for line in state.confirmation:
        text.append(f"{line}\n")
    return text


def status_line(state: RenderState) -> str:
    parts = [f"-- {state.mode.value.upper()} --"]
    if state.pending:
        parts.append(state.pending)
    if state.permissions:
        parts.append(state.permissions)
    if state.size:
        parts.append(state.size)
    if state.status:
        parts.append(state.status)
    return "  ".join(parts)


class FileManagerApp(App[None]):
    """Three-pane file manager: parent, current directory, preview."""

    CSS = """
	Screen {
		layout: vertical;
	}

	#header-line {
		height: 1;
		padding: 0 1;
		color: $accent;
	}

	#panes {
		height: 1fr;
	}

	#parent-view {
		width: 1fr;
		border: round $surface-lighten-1;
		overflow: hidden;
	}

	#listing-view {
		width: 2fr;
		border: round $accent;
		overflow: auto;
	}

	#preview-view {
		width: 2fr;
		border: round $surface-lighten-1;
		overflow: hidden;
	}

	#status-line {
		height: 1;
		background: $surface-darken-1;
		padding: 0 1;
	}

	#command-line {
		height: 1;
		background: $surface-darken-2;
		padding: 0 1;
	}
	"""

    BINDINGS = [
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, config: Optional[EngineConfig] = None) -> None:
        super().__init__()
        self.config = config or EngineConfig.from_env()
        self.manager: ModeManager | None = None
        self.adapter: TextualFileManagerAdapter | None = None

    def compose(self) -> ComposeResult:
        yield Static("", id="header-line")
        with Horizontal(id="panes"):
            yield Static("", id="parent-view")
            yield Static("", id="listing-view")
            yield Static("", id="preview-view")
        yield Static("", id="status-line")
        yield Static("", id="command-line")

    def on_mount(self) -> None:
        self.manager = create_default_manager(self.config)
        hooks = TextualUIHooks(
            render=self._render_state,
            handle_event=self._handle_event,
            exit=self.exit,
            log=self._log_line,
        )
        self.adapter = TextualFileManagerAdapter(self.manager, hooks)

    def on_key(self, event: events.Key) -> None:
        if not self.adapter:
            return
        normalized = self._normalize_key(event)
        if normalized is None:
            return
        key, text, modifiers = normalized
        self.adapter.handle_textual_key(key, text=text, modifiers=modifiers)
        event.stop()

    def _render_state(self, state: RenderState) -> None:
        self.query_one("#header-line", Static).update(Text(f"{state.header} {state.path}"))
        self.query_one("#parent-view", Static).update(render_parent(state))
        self.query_one("#listing-view", Static).update(render_listing(state))
        preview = render_confirmation(state) if state.confirming else Text(state.preview)
        self.query_one("#preview-view", Static).update(preview)
        self.query_one("#status-line", Static).update(Text(status_line(state)))
        command = f":{state.command_line}" if state.mode is Mode.COMMAND else ""
        self.query_one("#command-line", Static).update(Text(command))

    def _handle_event(self, name: str, payload: Any | None) -> None:
        if name == "command.error" and isinstance(payload, str):
            self.bell()

    def _log_line(self, line: str) -> None:
        telemetry.get_logger("vim_fm.adapters.textual").debug(line)

    @staticmethod
    def _normalize_key(
        event: events.Key,
    ) -> Optional[Tuple[str, Optional[str], Tuple[str, ...]]]:
        key = event.key
        if key == "ctrl+q":
            return None
        if key.startswith("ctrl+"):
            return (key.split("+", 1)[1], None, ("CTRL",))
        if key in _NAMED_KEYS:
            return (_NAMED_KEYS[key], None, ())
        if event.character and event.is_printable:
            return (event.character, event.character, ())
        return (key.upper(), None, ())


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="vim-fm", description="Edit directories as text, vim style."
    )
    parser.add_argument("path", nargs="?", default=None, help="Directory to open")
    parser.add_argument(
        "--preview-lines",
        type=int,
        default=None,
        help="Lines of file content shown in the preview pane",
    )
    parser.add_argument(
        "--show-hidden",
        dest="show_hidden",
        action="store_true",
        help="List dot files (default)",
    )
    parser.add_argument(
        "--hide-hidden",
        dest="show_hidden",
        action="store_false",
        help="Do not list dot files",
    )
    parser.add_argument(
        "--log-preset",
        choices=sorted(telemetry.PRESETS),
        default=None,
        help="telelog preset used for the session log",
    )
    parser.set_defaults(show_hidden=None)
    return parser.parse_args(argv)


def build_config(argv: Optional[Sequence[str]] = None) -> EngineConfig:
    args = _parse_args(argv)
    return EngineConfig.from_env().with_overrides(
        start_dir=args.path,
        preview_lines=args.preview_lines,
        show_hidden=args.show_hidden,
        log_preset=args.log_preset,
    )


def main(argv: Optional[Sequence[str]] = None) -> None:
    config = build_config(argv)
    if config.log_preset:
        telemetry.configure(preset=config.log_preset)
    FileManagerApp(config).run()


if __name__ == "__main__":  # pragma: no cover - manual run
    main()
