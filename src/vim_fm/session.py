"""Explicit application state shared by every mode handler.

One :class:`Session` lives for the whole run of the program. It owns the
buffer storage, one text buffer per visited directory, the yank register,
navigation and the confirmation prompt that gates every filesystem write.
"""

from __future__ import annotations

import os
from typing import Dict, List, Optional, Tuple

from vim_fm.buffer import Buffer, YankBuffer
from vim_fm.filesystem import (
    BufferStorage,
    DirectoryListingError,
    FileEntry,
    FileKind,
    FilesystemBackend,
    LifecycleState,
    LocalFilesystem,
    PathNavigator,
    ReconciliationExecutor,
    ReconciliationReport,
    Reflection,
    reflect_lines,
    summarize,
)
from vim_fm.filesystem import system
from vim_fm.runtime import telemetry
from vim_fm.runtime.config import EngineConfig


def listing_order(entry: FileEntry) -> Tuple[int, str]:
    return (0 if entry.kind is FileKind.DIRECTORY else 1, entry.current_name)


class Session:
    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        *,
        backend: Optional[FilesystemBackend] = None,
        open_start: bool = True,
    ) -> None:
        self.config = config or EngineConfig()
        self.backend = backend or LocalFilesystem(show_hidden=self.config.show_hidden)
        self.storage = BufferStorage(self.backend)
        self.executor = ReconciliationExecutor(self.storage, self.backend)
        self.navigator = PathNavigator(self.config.start_dir)
        self.yank = YankBuffer()
        self.buffer = Buffer(name=self.navigator.current, path=self.navigator.current)
        self.need_confirmation = False
        self.quit_after_confirmation = False
        self.running = True
        self.status = ""
        self.last_report: Optional[ReconciliationReport] = None
        self.logger = telemetry.get_logger("vim_fm.session")
        self._buffers: Dict[str, Buffer] = {}
        self._metadata: Dict[str, Tuple[str, str]] = {}
        # path -> name conflicts left by the last reflect of that buffer
        self._conflicts: Dict[str, List[str]] = {}
        if open_start:
            self.open(self.navigator.current)

    @property
    def path(self) -> str:
        return self.navigator.current

    # -- navigation ----------------------------------------------------------

    def open(self, path: str) -> bool:
        """Make ``path`` the current directory; ``False`` if it cannot be listed."""

        target = self.navigator.resolve(path)
        with telemetry.span("session::open", component="session", metadata={"path": target}) as handle:
            try:
                self.storage.add_view(target)
            except DirectoryListingError as exc:
                handle.fail(exc.reason)
                self.status = str(exc)
                return False
            self.navigator.change_to(target)
            buffer = self._buffers.get(target)
            if buffer is None:
                buffer = self._build_buffer(target)
                self._buffers[target] = buffer
            self.buffer = buffer
            self._load_parent()
        telemetry.record_event("session.navigate", data={"path": target})
        return True

    def enter_hovered(self) -> bool:
        entry = self.hovered_entry()
        if entry is None:
            self.status = "No entry under cursor"
            return False
        if not entry.is_directory:
            self.status = f"{entry.current_name} is not a directory"
            return False
        if entry.state is LifecycleState.CREATED:
            self.status = f"{entry.current_name} does not exist yet"
            return False
        return self.open(entry.original_path)

    def parent(self) -> bool:
        if self.navigator.at_root:
            self.status = "Already at the root directory"
            return False
        child = os.path.basename(self.navigator.current)
        if not self.open(self.navigator.parent):
            return False
        for row, line in enumerate(self.buffer.lines, start=1):
            if line.strip() == child:
                self.buffer.cursor.move_to(1, row)
                break
        return True

    def _load_parent(self) -> None:
        if self.navigator.at_root:
            return
        try:
            self.storage.add_view(self.navigator.parent)
        except DirectoryListingError:
            pass

    def _build_buffer(self, path: str) -> Buffer:
        entries = sorted(
            (
                entry
                for entry in self.storage.entries_located_in(path)
                if entry.state is not LifecycleState.DELETED
            ),
            key=listing_order,
        )
        return Buffer.from_lines(
            [entry.current_name for entry in entries],
            tags=entries,
            name=path,
            path=path,
        )

    def rebuild_buffers(self) -> None:
        """Re-derive every text buffer from storage, dropping undo history."""

        position = self.buffer.cursor.position
        self._buffers.clear()
        self._metadata.clear()
        self._conflicts.clear()
        self.yank.tags = ()
        buffer = self._build_buffer(self.path)
        self._buffers[self.path] = buffer
        self.buffer = buffer
        buffer.cursor.move_to(*position)
        buffer.clamp_cursor()

    # -- staging -------------------------------------------------------------

    def reflect(self) -> Reflection:
        result = reflect_lines(self.storage, self.path, self.buffer.document)
        if result.conflicts:
            self._conflicts[self.path] = list(result.conflicts)
            self.status = result.conflicts[-1]
        else:
            self._conflicts.pop(self.path, None)
        return result

    @property
    def conflicts(self) -> List[str]:
        return [message for path in sorted(self._conflicts) for message in self._conflicts[path]]

    def hovered_entry(self) -> Optional[FileEntry]:
        tag = self.buffer.document.get_tag(self.buffer.cursor.y)
        return tag if isinstance(tag, FileEntry) else None

    def has_pending_changes(self) -> bool:
        return self.storage.has_pending_changes()

    def confirmation_lines(self) -> List[str]:
        return summarize(self.storage)

    def request_write(self, *, quit_after: bool = False) -> bool:
        """Open the confirmation prompt when something is staged."""

        conflicts = self.conflicts
        if conflicts:
            self.status = f"Cannot write while names conflict: {conflicts[0]}"
            return False
        if not self.storage.has_pending_changes():
            self.status = "No changes"
            return False
        self.need_confirmation = True
        self.quit_after_confirmation = quit_after
        self.status = ""
        return True

    def confirm(self) -> ReconciliationReport:
        report = self.executor.execute()
        self.last_report = report
        self.need_confirmation = False
        self.status = report.summary()
        if not report.ok:
            self.status += f": {report.failures[0]}"
        self.rebuild_buffers()
        if self.quit_after_confirmation:
            self.running = False
        return report

    def decline(self) -> None:
        self.storage.discard_changes()
        self.need_confirmation = False
        self.status = "Changes discarded"
        self.rebuild_buffers()
        if self.quit_after_confirmation:
            self.running = False

    def dismiss_prompt(self) -> None:
        self.need_confirmation = False
        self.quit_after_confirmation = False

    def discard_changes(self) -> None:
        self.storage.discard_changes()
        self.rebuild_buffers()
        self.status = "Changes discarded"

    def quit(self, *, force: bool = False) -> bool:
        if not force and self.storage.has_pending_changes():
            self.status = "No write since last change (add ! to override)"
            return False
        self.running = False
        return True

    # -- metadata ------------------------------------------------------------

    def metadata(self, path: str) -> Tuple[str, str]:
        """Permissions and size of ``path``, cached until the next rebuild."""

        cached = self._metadata.get(path)
        if cached is None:
            cached = (system.permissions(path), system.disk_usage(path))
            self._metadata[path] = cached
        return cached


__all__ = ["Session", "listing_order"]
