from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Set, Tuple

import pytest

from vim_fm.filesystem import FileKind
from vim_fm.keymaps import KeymapRegistry, KeymapResolver, load_default_keymaps
from vim_fm.modes.base_mode import KeyInput, ModeBus, ModeContext
from vim_fm.modes.mode_manager import ModeManager
from vim_fm.runtime.config import EngineConfig
from vim_fm.session import Session

ROOT = "/work"
PROJECT = "/work/project"


class FakeBackend:
    """In-memory listing plus a record of every mutation call."""

    def __init__(self, tree: Dict[str, List[Tuple[str, FileKind]]]) -> None:
        self.tree = {path: list(items) for path, items in tree.items()}
        self.calls: List[Tuple[str, ...]] = []
        self.fail_on: Set[str] = set()

    def list_directory(self, path: str) -> List[Tuple[str, FileKind]]:
        if path not in self.tree:
            raise FileNotFoundError(2, "No such file or directory", path)
        return list(self.tree[path])

    def _record(self, *call: str) -> None:
        self.calls.append(call)
        if call[1] in self.fail_on:
            raise PermissionError(13, "Permission denied", call[1])

    def delete(self, path: str) -> None:
        self._record("delete", path)

    def rename(self, old_path: str, new_path: str) -> None:
        self._record("rename", old_path, new_path)

    def create_file(self, path: str) -> None:
        self._record("create_file", path)

    def create_directory(self, path: str) -> None:
        self._record("create_directory", path)

    def move(self, path: str, new_directory: str) -> None:
        self._record("move", path, new_directory)


def make_tree() -> Dict[str, List[Tuple[str, FileKind]]]:
    return {
        ROOT: [("project", FileKind.DIRECTORY), ("other", FileKind.DIRECTORY)],
        PROJECT: [
            ("a.txt", FileKind.FILE),
            ("b.txt", FileKind.FILE),
            ("docs", FileKind.DIRECTORY),
        ],
        f"{PROJECT}/docs": [("guide.md", FileKind.FILE)],
        f"{ROOT}/other": [],
    }


def make_session(backend: Optional[FakeBackend] = None, start: str = PROJECT) -> Session:
    return Session(EngineConfig(start_dir=start), backend=backend or FakeBackend(make_tree()))


def make_manager(session: Optional[Session] = None) -> ModeManager:
    registry = KeymapRegistry()
    load_default_keymaps(registry)
    resolver = KeymapResolver(registry)
    context = ModeContext(session=session or make_session(), bus=ModeBus())
    return ModeManager(
        context, keymap_registry=registry, keymap_resolver=resolver, load_defaults=False
    )


def key(name: str, *modifiers: str) -> KeyInput:
    return KeyInput(key=name, modifiers=tuple(modifiers))


def feed(manager: ModeManager, keys: Iterable[str]) -> None:
    """Send printable characters; ``<ESC>``-style names are sent as named keys."""

    for item in keys:
        if item.startswith("<") and item.endswith(">") and len(item) > 2:
            manager.handle_key(key(item[1:-1]))
        else:
            manager.handle_key(KeyInput(key=item, text=item))


def type_text(manager: ModeManager, text: str) -> None:
    feed(manager, list(text))


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend(make_tree())


@pytest.fixture
def session(backend: FakeBackend) -> Session:
    return make_session(backend)


@pytest.fixture
def manager(session: Session) -> ModeManager:
    return make_manager(session)
