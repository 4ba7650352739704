"""File entries and their pending-change lifecycle."""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum


class LifecycleState(str, Enum):
    UNMODIFIED = "unmodified"
    CREATED = "created"
    MODIFIED = "modified"
    DELETED = "deleted"
    MOVED = "moved"


class FileKind(str, Enum):
    FILE = "file"
    DIRECTORY = "directory"
    UNKNOWN = "unknown"


DIRECTORY_SUFFIX = "/"


def kind_for_name(name: str) -> FileKind:
    return FileKind.DIRECTORY if name.endswith(DIRECTORY_SUFFIX) else FileKind.FILE


@dataclass(slots=True, eq=False)
class FileEntry:
    """One filesystem object bound to a buffer line.

    Entries compare by identity: the same object is used as the line tag in
    every text snapshot, so two entries with equal names are still distinct.
    """

    original_name: str
    current_name: str
    original_directory: str
    current_directory: str
    state: LifecycleState = LifecycleState.UNMODIFIED
    kind: FileKind = FileKind.UNKNOWN

    @classmethod
    def listed(cls, name: str, directory: str, kind: FileKind) -> "FileEntry":
        return cls(name, name, directory, directory, LifecycleState.UNMODIFIED, kind)

    @classmethod
    def created(cls, name: str, directory: str, kind: FileKind | None = None) -> "FileEntry":
        return cls(
            name,
            name,
            directory,
            directory,
            LifecycleState.CREATED,
            kind or kind_for_name(name),
        )

    @property
    def original_path(self) -> str:
        return os.path.join(self.original_directory, self.original_name)

    @property
    def current_path(self) -> str:
        return os.path.join(self.current_directory, self.current_name.rstrip(DIRECTORY_SUFFIX))

    @property
    def is_directory(self) -> bool:
        return self.kind is FileKind.DIRECTORY

    @property
    def pending(self) -> bool:
        return self.state is not LifecycleState.UNMODIFIED

    def derive_state(self) -> LifecycleState:
        """State implied by name and directory alone (for non-created entries)."""

        if self.current_directory != self.original_directory:
            return LifecycleState.MOVED
        if self.current_name != self.original_name:
            return LifecycleState.MODIFIED
        return LifecycleState.UNMODIFIED

    def commit(self) -> None:
        """Adopt the current name and directory as the on-disk baseline."""

        self.current_name = self.current_name.rstrip(DIRECTORY_SUFFIX) or self.current_name
        self.original_name = self.current_name
        self.original_directory = self.current_directory
        self.state = LifecycleState.UNMODIFIED

    def revert(self) -> None:
        self.current_name = self.original_name
        self.current_directory = self.original_directory
        self.state = LifecycleState.UNMODIFIED

    def __repr__(self) -> str:
        return (
            f"FileEntry({self.original_name!r} -> {self.current_name!r}, "
            f"{self.state.value}, {self.kind.value})"
        )


__all__ = [
    "DIRECTORY_SUFFIX",
    "FileEntry",
    "FileKind",
    "LifecycleState",
    "kind_for_name",
]
