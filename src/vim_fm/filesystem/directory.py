"""Per-directory staged change log and the storage that owns them."""

from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Optional

from vim_fm.runtime import telemetry

from .backend import FilesystemBackend
from .entries import FileEntry, FileKind, LifecycleState, kind_for_name


class DirectoryListingError(OSError):
    """Raised when a directory cannot be listed."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"cannot read {path}: {reason}")
        self.path = path
        self.reason = reason


class NameConflictError(KeyError):
    """Raised when a name is already taken inside a directory buffer."""

    def __init__(self, name: str, directory: str) -> None:
        super().__init__(name)
        self.name = name
        self.directory = directory

    def __str__(self) -> str:
        return f"{self.name} already exists in {self.directory}"


class DirectoryBuffer:
    """Entries of one directory keyed by their current name.

    An entry stays in the buffer of the directory it was listed (or created)
    in even after it has been moved elsewhere; that buffer is its owner until
    the move is committed. Deleted entries are kept apart from the name index
    so a staged deletion never holds on to its name.
    """

    def __init__(self, path: str, entries: Iterable[FileEntry] = ()) -> None:
        self.path = path
        self._entries: Dict[str, FileEntry] = {}
        self._deleted: List[FileEntry] = []
        for entry in entries:
            self._entries[entry.current_name] = entry

    @classmethod
    def from_listing(cls, path: str, backend: FilesystemBackend) -> "DirectoryBuffer":
        try:
            listing = backend.list_directory(path)
        except OSError as exc:
            raise DirectoryListingError(path, exc.strerror or str(exc)) from exc
        return cls(path, (FileEntry.listed(name, path, kind) for name, kind in listing))

    def __len__(self) -> int:
        return len(self._entries) + len(self._deleted)

    def __iter__(self) -> Iterator[FileEntry]:
        return iter(self.entries)

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    @property
    def entries(self) -> List[FileEntry]:
        return [*self._entries.values(), *self._deleted]

    def get(self, name: str) -> Optional[FileEntry]:
        """The live entry called ``name``, else a deleted one of that name."""

        entry = self._entries.get(name)
        if entry is not None:
            return entry
        return next((d for d in self._deleted if d.current_name == name), None)

    def owns(self, entry: FileEntry) -> bool:
        if entry.state is LifecycleState.DELETED:
            return any(deleted is entry for deleted in self._deleted)
        return self._entries.get(entry.current_name) is entry

    def set_name(self, name: str, new_name: str) -> Optional[FileEntry]:
        entry = self._entries.get(name)
        if entry is None or name == new_name:
            return entry
        if new_name in self._entries:
            raise NameConflictError(new_name, self.path)
        del self._entries[name]
        entry.current_name = new_name
        self._entries[new_name] = entry
        if entry.state is LifecycleState.CREATED:
            entry.kind = kind_for_name(new_name)
            return entry
        if entry.state is LifecycleState.MOVED:
            return entry
        if new_name == entry.original_name:
            entry.state = LifecycleState.UNMODIFIED
        else:
            entry.state = LifecycleState.MODIFIED
        return entry

    def set_directory(self, name: str, new_directory: str) -> Optional[FileEntry]:
        entry = self._entries.get(name)
        if entry is None:
            return None
        entry.current_directory = new_directory
        if entry.state is LifecycleState.CREATED:
            return entry
        entry.state = entry.derive_state()
        return entry

    def delete_entry(self, name: str) -> Optional[FileEntry]:
        """Stage a deletion; a pending creation is simply forgotten."""

        entry = self._entries.pop(name, None)
        if entry is None or entry.state is LifecycleState.CREATED:
            return entry
        entry.state = LifecycleState.DELETED
        self._deleted.append(entry)
        return entry

    def restore_entry(self, entry: FileEntry) -> FileEntry:
        """Bring a deleted entry back under its current name."""

        if not any(deleted is entry for deleted in self._deleted):
            return entry
        if entry.current_name in self._entries:
            raise NameConflictError(entry.current_name, self.path)
        self._deleted = [deleted for deleted in self._deleted if deleted is not entry]
        entry.state = entry.derive_state()
        self._entries[entry.current_name] = entry
        return entry

    def add_entry(self, name: str, kind: FileKind | None = None) -> FileEntry:
        if name in self._entries:
            raise NameConflictError(name, self.path)
        entry = FileEntry.created(name, self.path, kind or kind_for_name(name))
        self._entries[name] = entry
        return entry

    def adopt(self, entry: FileEntry) -> FileEntry:
        if self._entries.get(entry.current_name, entry) is not entry:
            raise NameConflictError(entry.current_name, self.path)
        self._entries[entry.current_name] = entry
        return entry

    def remove_entry(self, entry: FileEntry) -> None:
        """Forget ``entry`` entirely, once its change has been written."""

        if self._entries.get(entry.current_name) is entry:
            del self._entries[entry.current_name]
        self._deleted = [deleted for deleted in self._deleted if deleted is not entry]

    def entries_by_state(self, state: LifecycleState) -> List[FileEntry]:
        return sorted(
            (entry for entry in self.entries if entry.state is state),
            key=lambda entry: entry.current_name,
        )

    def has_changes(self) -> bool:
        return bool(self._deleted) or any(entry.pending for entry in self._entries.values())

    def discard_changes(self) -> None:
        kept: Dict[str, FileEntry] = {}
        for entry in self.entries:
            if entry.state is LifecycleState.CREATED:
                continue
            entry.revert()
            kept[entry.current_name] = entry
        self._entries = kept
        self._deleted = []


class BufferStorage:
    """Every directory buffer of the session, keyed by absolute path."""

    def __init__(self, backend: FilesystemBackend) -> None:
        self.backend = backend
        self._views: Dict[str, DirectoryBuffer] = {}

    @property
    def views(self) -> List[DirectoryBuffer]:
        return [self._views[path] for path in sorted(self._views)]

    def add_view(self, path: str) -> DirectoryBuffer:
        """Return the buffer for ``path``, listing the directory on first use."""

        view = self._views.get(path)
        if view is not None:
            return view
        with telemetry.span("filesystem::add_view", metadata={"path": path}) as span:
            try:
                view = DirectoryBuffer.from_listing(path, self.backend)
            except DirectoryListingError as exc:
                span.fail(exc.reason)
                raise
            span.add_metadata("entries", len(view))
        self._views[path] = view
        return view

    def get_view(self, path: str) -> Optional[DirectoryBuffer]:
        return self._views.get(path)

    def update_view(self, path: str, view: DirectoryBuffer) -> None:
        self._views[path] = view

    def owner_of(self, entry: FileEntry) -> Optional[DirectoryBuffer]:
        view = self._views.get(entry.original_directory)
        if view is not None and view.owns(entry):
            return view
        for candidate in self._views.values():
            if candidate.owns(entry):
                return candidate
        return None

    def owns(self, entry: FileEntry) -> bool:
        return self.owner_of(entry) is not None

    def entries_located_in(self, path: str) -> List[FileEntry]:
        """Entries whose current directory is ``path``, whatever their owner."""

        return [
            entry
            for view in self._views.values()
            for entry in view
            if entry.current_directory == path
        ]

    def has_pending_changes(self) -> bool:
        return any(view.has_changes() for view in self._views.values())

    def discard_changes(self) -> None:
        for view in self._views.values():
            view.discard_changes()


__all__ = [
    "BufferStorage",
    "DirectoryBuffer",
    "DirectoryListingError",
    "NameConflictError",
]
