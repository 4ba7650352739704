"""Keeps buffer lines and directory entries in step.

After every edit the lines of a directory's text buffer are reflected into
:class:`BufferStorage`. Line tags carry the entry a line was bound to, so a
renamed line is recognised as the same file rather than a delete plus a
create.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Set, Tuple

from vim_fm.buffer import TextDocument
from vim_fm.runtime import telemetry

from .directory import BufferStorage, DirectoryBuffer, NameConflictError
from .entries import FileEntry, LifecycleState


@dataclass(slots=True)
class Reflection:
    conflicts: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.conflicts


def line_name(text: str) -> str:
    return text.strip()


def reflect_lines(storage: BufferStorage, path: str, document: TextDocument) -> Reflection:
    """Stage the differences between ``document`` and the entries of ``path``."""

    result = Reflection()
    with telemetry.span("filesystem::reflect", metadata={"path": path}) as span:
        view = storage.add_view(path)
        seen: Set[int] = set()
        untagged: List[int] = []
        tagged: List[Tuple[FileEntry, str]] = []

        for row in range(1, document.line_count + 1):
            name = line_name(document.get_line(row))
            entry = _claimable(document.get_tag(row), seen)
            if entry is None:
                if name:
                    untagged.append(row)
                continue
            if not name:
                # an emptied line names nothing until it is typed again
                continue
            seen.add(id(entry))
            tagged.append((entry, name))

        # unclaimed entries go first so their names are free to reuse
        for entry in storage.entries_located_in(path):
            if id(entry) in seen or entry.state is LifecycleState.DELETED:
                continue
            owner = storage.owner_of(entry)
            if owner is not None:
                owner.delete_entry(entry.current_name)

        # a rename may wait on another line releasing its name
        while tagged:
            blocked: List[Tuple[FileEntry, str]] = []
            errors: List[str] = []
            for entry, name in tagged:
                try:
                    _apply_tagged(storage, view, path, entry, name)
                except NameConflictError as exc:
                    blocked.append((entry, name))
                    errors.append(str(exc))
            if len(blocked) == len(tagged):
                result.conflicts.extend(errors)
                break
            tagged = blocked

        for row in untagged:
            name = line_name(document.get_line(row))
            existing = view.get(name)
            if (
                existing is not None
                and id(existing) not in seen
                and existing.state is LifecycleState.DELETED
                and existing.current_directory == path
                and name not in view
            ):
                view.restore_entry(existing)
                document.set_tag(row, existing)
                seen.add(id(existing))
                continue
            try:
                created = view.add_entry(name)
            except NameConflictError as exc:
                result.conflicts.append(str(exc))
                continue
            document.set_tag(row, created)
            seen.add(id(created))

        if result.conflicts:
            span.warn("; ".join(result.conflicts))
    return result


def _claimable(tag: object, seen: Set[int]) -> FileEntry | None:
    if not isinstance(tag, FileEntry) or id(tag) in seen:
        return None
    return tag


def _apply_tagged(
    storage: BufferStorage,
    view: DirectoryBuffer,
    path: str,
    entry: FileEntry,
    name: str,
) -> None:
    owner = storage.owner_of(entry)
    if owner is None:
        if entry.state is not LifecycleState.CREATED:
            # committed or discarded since the tag was taken; bind afresh
            entry.state = LifecycleState.CREATED
            entry.original_name = entry.current_name
        # a pending creation brought back by undo
        entry.original_directory = path
        entry.current_directory = path
        owner = view.adopt(entry)

    if entry.state is LifecycleState.DELETED:
        owner.restore_entry(entry)
    if entry.current_name != name:
        owner.set_name(entry.current_name, name)
    if entry.current_directory != path:
        owner.set_directory(entry.current_name, path)


__all__ = ["Reflection", "line_name", "reflect_lines"]
