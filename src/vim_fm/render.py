"""Read-only snapshot of everything a host UI needs to draw one frame."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple

from vim_fm.buffer import Position, Selection
from vim_fm.filesystem import FileEntry, LifecycleState, system
from vim_fm.modes.base_mode import CURSOR_SHAPES, CursorShape, Mode
from vim_fm.session import Session, listing_order


@dataclass(frozen=True, slots=True)
class RenderState:
    lines: Tuple[str, ...]
    cursor: Position
    mode: Mode
    cursor_shape: CursorShape
    path: str
    header: str
    line_states: Tuple[Optional[str], ...] = ()
    line_kinds: Tuple[Optional[str], ...] = ()
    selection: Optional[Selection] = None
    pending: str = ""
    command_line: str = ""
    confirmation: Tuple[str, ...] = ()
    status: str = ""
    parent_lines: Tuple[str, ...] = ()
    parent_highlight: Optional[int] = None
    preview: str = ""
    permissions: str = ""
    size: str = ""
    attributes: dict[str, str] = field(default_factory=dict)

    @property
    def confirming(self) -> bool:
        return bool(self.confirmation)


def _tag_field(tag: object, attribute: str) -> Optional[str]:
    if not isinstance(tag, FileEntry):
        return None
    return getattr(tag, attribute).value


def _parent_listing(session: Session) -> Tuple[Tuple[str, ...], Optional[int]]:
    if session.navigator.at_root:
        return (), None
    view = session.storage.get_view(session.navigator.parent)
    if view is None:
        return (), None
    entries = sorted(
        (entry for entry in view if entry.state is not LifecycleState.DELETED),
        key=listing_order,
    )
    names = tuple(entry.current_name for entry in entries)
    highlight = None
    for index, entry in enumerate(entries):
        if entry.original_path == session.path:
            highlight = index
            break
    return names, highlight


def build_render_state(
    session: Session,
    *,
    mode: Mode = Mode.NORMAL,
    pending: str = "",
    command_line: str = "",
) -> RenderState:
    buffer = session.buffer
    document = buffer.document
    tags = document.tag_snapshot()

    hovered = session.hovered_entry()
    preview = ""
    permissions = ""
    size = ""
    if hovered is not None and hovered.state is not LifecycleState.CREATED:
        target = hovered.original_path
        preview = system.preview(
            target, session.config.preview_lines, show_hidden=session.config.show_hidden
        )
        permissions, size = session.metadata(target)

    parent_lines, parent_highlight = _parent_listing(session)
    return RenderState(
        lines=document.snapshot(),
        cursor=buffer.cursor.position,
        mode=mode,
        cursor_shape=CURSOR_SHAPES[mode],
        path=session.path,
        header=system.user_at_host(),
        line_states=tuple(_tag_field(tag, "state") for tag in tags),
        line_kinds=tuple(_tag_field(tag, "kind") for tag in tags),
        selection=buffer.selection.selection(buffer.cursor.position) if mode.is_visual else None,
        pending=pending,
        command_line=command_line,
        confirmation=tuple(session.confirmation_lines()) if session.need_confirmation else (),
        status=session.status,
        parent_lines=parent_lines,
        parent_highlight=parent_highlight,
        preview=preview,
        permissions=permissions,
        size=size,
    )


__all__ = ["RenderState", "build_render_state"]
