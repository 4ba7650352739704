"""Filesystem collaborators: listing and the mutation primitives."""

from __future__ import annotations

import os
import shutil
from typing import List, Protocol, Tuple

from vim_fm.runtime import telemetry

from .entries import FileKind

Listing = List[Tuple[str, FileKind]]


class FilesystemBackend(Protocol):
    """Narrow interface the directory model and executor depend on.

    Every method raises ``OSError`` on failure.
    """

    def list_directory(self, path: str) -> Listing:
        ...

    def delete(self, path: str) -> None:
        ...

    def rename(self, old_path: str, new_path: str) -> None:
        ...

    def create_file(self, path: str) -> None:
        ...

    def create_directory(self, path: str) -> None:
        ...

    def move(self, path: str, new_directory: str) -> None:
        ...


class LocalFilesystem:
    """Backend operating on the real filesystem."""

    def __init__(self, *, show_hidden: bool = True) -> None:
        self.show_hidden = show_hidden

    def list_directory(self, path: str) -> Listing:
        listing: Listing = []
        with os.scandir(path) as iterator:
            for item in iterator:
                if not self.show_hidden and item.name.startswith("."):
                    continue
                listing.append((item.name, _kind_of(item)))
        return listing

    def delete(self, path: str) -> None:
        with telemetry.span("filesystem::delete", metadata={"path": path}):
            if os.path.isdir(path) and not os.path.islink(path):
                shutil.rmtree(path)
            else:
                os.remove(path)

    def rename(self, old_path: str, new_path: str) -> None:
        with telemetry.span("filesystem::rename", metadata={"path": old_path, "target": new_path}):
            if os.path.lexists(new_path):
                raise FileExistsError(f"{new_path} already exists")
            os.rename(old_path, new_path)

    def create_file(self, path: str) -> None:
        with telemetry.span("filesystem::create_file", metadata={"path": path}):
            with open(path, "x", encoding="utf-8"):
                pass

    def create_directory(self, path: str) -> None:
        with telemetry.span("filesystem::create_directory", metadata={"path": path}):
            os.mkdir(path)

    def move(self, path: str, new_directory: str) -> None:
        with telemetry.span("filesystem::move", metadata={"path": path, "target": new_directory}):
            if not os.path.isdir(new_directory):
                raise NotADirectoryError(f"{new_directory} is not a directory")
            target = os.path.join(new_directory, os.path.basename(path))
            if os.path.lexists(target):
                raise FileExistsError(f"{target} already exists")
            shutil.move(path, new_directory)


def _kind_of(item: os.DirEntry) -> FileKind:
    try:
        if item.is_dir():
            return FileKind.DIRECTORY
        if item.is_file():
            return FileKind.FILE
    except OSError:
        pass
    return FileKind.UNKNOWN


__all__ = ["FilesystemBackend", "Listing", "LocalFilesystem"]
