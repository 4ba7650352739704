"""Absolute path bookkeeping for directory navigation."""

from __future__ import annotations

import os


def normalize(path: str, base: str | None = None) -> str:
    expanded = os.path.expanduser(path)
    if base is not None and not os.path.isabs(expanded):
        expanded = os.path.join(base, expanded)
    return os.path.normpath(os.path.abspath(expanded))


def parent_of(path: str) -> str:
    return os.path.dirname(path.rstrip(os.sep)) or os.sep


class PathNavigator:
    """Tracks the current directory; every path it hands out is absolute."""

    def __init__(self, start: str = ".") -> None:
        self.current = normalize(start)

    @property
    def parent(self) -> str:
        return parent_of(self.current)

    @property
    def at_root(self) -> bool:
        return self.parent == self.current

    def resolve(self, target: str) -> str:
        return normalize(target, self.current)

    def change_to(self, path: str) -> str:
        self.current = normalize(path, self.current)
        return self.current


__all__ = ["PathNavigator", "normalize", "parent_of"]
