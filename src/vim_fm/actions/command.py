"""Actions that edit and evaluate the ``:`` command line."""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Dict, List

from vim_fm.modes.base_mode import Mode, ModeContext, ModeResult

if TYPE_CHECKING:
    from vim_fm.keymaps.resolver import ResolutionMatch

CommandHandler = Callable[[ModeContext, List[str]], ModeResult]


def submit_command_line(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    text = context.command_line.strip()
    context.bus.emit("command.submit", text)
    context.command_line = ""
    if not text:
        return ModeResult(consumed=True, switch_to=Mode.NORMAL, status="command_empty")
    context.command_history.append(text)
    return run_command(context, text)


def run_command(context: ModeContext, text: str) -> ModeResult:
    parts = text.split()
    command, args = parts[0], parts[1:]
    handler = _COMMAND_HANDLERS.get(command)
    if handler is None:
        return _unknown_command(context, command)
    return handler(context, args)


def command_backspace(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    """Erase one character; on an empty line leave command mode."""

    del match
    if not context.command_line:
        return ModeResult(consumed=True, switch_to=Mode.NORMAL, status="command_cancel")
    context.command_line = context.command_line[:-1]
    return ModeResult(consumed=True, status="editing")


def append_to_command_line(context: ModeContext, text: str) -> ModeResult:
    context.command_line += text
    return ModeResult(consumed=True, status="editing")


def _unknown_command(context: ModeContext, command: str) -> ModeResult:
    context.session.status = f"Not an editor command: {command}"
    context.bus.emit("command.error", command)
    return ModeResult(
        consumed=True,
        switch_to=Mode.NORMAL,
        status="command_error",
        message=command,
    )


def _handle_echo(context: ModeContext, args: List[str]) -> ModeResult:
    message = " ".join(args)
    context.session.status = message
    context.bus.emit("command.echo", message)
    return ModeResult(
        consumed=True,
        switch_to=Mode.NORMAL,
        status="command_echo",
        message=message,
    )


def _handle_write(context: ModeContext, args: List[str]) -> ModeResult:
    del args
    prompted = context.session.request_write()
    context.bus.emit("command.write", {"prompt": prompted})
    return ModeResult(consumed=True, switch_to=Mode.NORMAL, status="command_write")


def _handle_write_quit(context: ModeContext, args: List[str]) -> ModeResult:
    del args
    session = context.session
    prompted = session.request_write(quit_after=True)
    if not prompted and not session.conflicts:
        session.quit(force=True)
    context.bus.emit("command.write", {"prompt": prompted})
    context.bus.emit("command.quit", {"force": False, "deferred": prompted})
    return ModeResult(consumed=True, switch_to=Mode.NORMAL, status="command_write_quit")


def _handle_quit(context: ModeContext, args: List[str], *, force: bool) -> ModeResult:
    del args
    quitting = context.session.quit(force=force)
    if quitting:
        context.bus.emit("command.quit", {"force": force, "deferred": False})
    return ModeResult(
        consumed=True,
        switch_to=Mode.NORMAL,
        status="command_quit" if quitting else "command_error",
    )


def _handle_edit(context: ModeContext, args: List[str], *, force: bool) -> ModeResult:
    del args
    session = context.session
    if force:
        session.discard_changes()
    else:
        session.status = "Use :e! to discard pending changes"
    context.bus.emit("command.edit", {"force": force})
    return ModeResult(consumed=True, switch_to=Mode.NORMAL, status="command_edit")


def _handle_cd(context: ModeContext, args: List[str]) -> ModeResult:
    session = context.session
    target = " ".join(args) if args else "~"
    opened = session.open(target)
    return ModeResult(
        consumed=True,
        switch_to=Mode.NORMAL,
        status="navigate" if opened else "command_error",
        message=target,
    )


def _quit(force: bool) -> CommandHandler:
    return lambda context, args: _handle_quit(context, args, force=force)


def _edit(force: bool) -> CommandHandler:
    return lambda context, args: _handle_edit(context, args, force=force)


_COMMAND_HANDLERS: Dict[str, CommandHandler] = {
    "w": _handle_write,
    "write": _handle_write,
    "wq": _handle_write_quit,
    "x": _handle_write_quit,
    "exit": _handle_write_quit,
    "q": _quit(False),
    "quit": _quit(False),
    "q!": _quit(True),
    "quit!": _quit(True),
    "e": _edit(False),
    "edit": _edit(False),
    "e!": _edit(True),
    "edit!": _edit(True),
    "cd": _handle_cd,
    "echo": _handle_echo,
}


def registered_commands() -> List[str]:
    return sorted(_COMMAND_HANDLERS)


__all__ = [
    "append_to_command_line",
    "command_backspace",
    "registered_commands",
    "run_command",
    "submit_command_line",
]
