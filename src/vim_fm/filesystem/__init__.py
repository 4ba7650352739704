"""Directory entries, staged changes and the filesystem collaborators."""

from .backend import FilesystemBackend, Listing, LocalFilesystem
from .binding import Reflection, reflect_lines
from .directory import (
    BufferStorage,
    DirectoryBuffer,
    DirectoryListingError,
    NameConflictError,
)
from .entries import FileEntry, FileKind, LifecycleState
from .navigation import PathNavigator
from .reconcile import (
    ReconciliationExecutor,
    ReconciliationFailure,
    ReconciliationReport,
    summarize,
)

__all__ = [
    "BufferStorage",
    "DirectoryBuffer",
    "DirectoryListingError",
    "FileEntry",
    "FileKind",
    "FilesystemBackend",
    "LifecycleState",
    "Listing",
    "LocalFilesystem",
    "NameConflictError",
    "PathNavigator",
    "ReconciliationExecutor",
    "ReconciliationFailure",
    "ReconciliationReport",
    "Reflection",
    "reflect_lines",
    "summarize",
]
