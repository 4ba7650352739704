from __future__ import annotations

from typing import List

from conftest import PROJECT, feed, key, type_text

from vim_fm.filesystem import FileKind, LifecycleState
from vim_fm.modes import CursorShape, Mode


def entry_state(manager, name: str, directory: str = PROJECT) -> LifecycleState:
    view = manager.session.storage.get_view(directory)
    entry = view.get(name)
    assert entry is not None, name
    return entry.state


def test_insert_and_escape_switch_modes(manager) -> None:
    modes: List[Mode] = []
    shapes: List[CursorShape] = []
    manager.context.bus.subscribe("mode.changed", modes.append)
    manager.context.bus.subscribe("cursor.shape", shapes.append)

    feed(manager, ["i"])
    assert manager.active is Mode.INSERT

    feed(manager, ["<ESC>"])
    assert manager.active is Mode.NORMAL
    assert modes == [Mode.INSERT, Mode.NORMAL]
    assert shapes == [CursorShape.BAR, CursorShape.BLOCK]


def test_dd_stages_deletion(manager) -> None:
    feed(manager, ["j", "d", "d"])

    assert manager.session.buffer.lines == ("docs", "b.txt")
    assert manager.session.buffer.cursor.y == 2
    assert entry_state(manager, "a.txt") is LifecycleState.DELETED
    assert manager.active is Mode.NORMAL


def test_undo_and_redo_restore_staged_state(manager) -> None:
    feed(manager, ["j", "d", "d"])

    feed(manager, ["u"])
    assert manager.session.buffer.lines == ("docs", "a.txt", "b.txt")
    assert entry_state(manager, "a.txt") is LifecycleState.UNMODIFIED
    assert not manager.session.has_pending_changes()

    result = manager.handle_key(key("r", "CTRL"))
    assert result.status == "redo"
    assert manager.session.buffer.lines == ("docs", "b.txt")
    assert entry_state(manager, "a.txt") is LifecycleState.DELETED


def test_undo_at_oldest_change_sets_status(manager) -> None:
    result = manager.handle_key(key("u"))

    assert result.status == "noop"
    assert manager.session.status == "Already at oldest change"


def test_change_word_renames_entry_as_one_undo_step(manager) -> None:
    feed(manager, ["j", "c", "w"])
    assert manager.active is Mode.INSERT
    assert manager.session.buffer.current_line == ".txt"

    feed(manager, ["c", "<ESC>"])
    assert manager.session.buffer.lines[1] == "c.txt"
    assert entry_state(manager, "c.txt") is LifecycleState.MODIFIED

    feed(manager, ["u"])
    assert manager.session.buffer.lines[1] == "a.txt"
    assert entry_state(manager, "a.txt") is LifecycleState.UNMODIFIED
    assert manager.session.buffer.undo() is False


def test_escape_in_pending_mode_cancels_command(manager) -> None:
    feed(manager, ["j", "d"])
    assert manager.active is Mode.PENDING

    feed(manager, ["<ESC>"])

    assert manager.active is Mode.NORMAL
    assert manager.context.commands.is_empty
    assert manager.session.buffer.lines == ("docs", "a.txt", "b.txt")


def test_invalid_compound_command_is_discarded(manager) -> None:
    feed(manager, ["d", "x"])
    assert manager.active is Mode.PENDING

    feed(manager, ["z"])
    assert manager.active is Mode.NORMAL
    assert manager.context.commands.is_empty
    assert manager.session.buffer.lines == ("docs", "a.txt", "b.txt")


def test_counted_delete_removes_several_lines(manager) -> None:
    feed(manager, ["j", "2", "d", "d"])

    assert manager.session.buffer.lines == ("docs",)
    assert entry_state(manager, "a.txt") is LifecycleState.DELETED
    assert entry_state(manager, "b.txt") is LifecycleState.DELETED


def test_gg_and_G_jump_between_first_and_last_line(manager) -> None:
    feed(manager, ["G"])
    assert manager.session.buffer.cursor.y == 3

    feed(manager, ["g", "g"])
    assert manager.session.buffer.cursor.y == 1
    assert manager.active is Mode.NORMAL


def test_visual_line_delete(manager) -> None:
    feed(manager, ["V", "j", "d"])

    assert manager.active is Mode.NORMAL
    assert manager.session.buffer.lines == ("b.txt",)
    assert entry_state(manager, "docs") is LifecycleState.DELETED
    assert entry_state(manager, "a.txt") is LifecycleState.DELETED
    assert manager.session.buffer.selection.anchor is None


def test_open_line_below_creates_entry(manager) -> None:
    feed(manager, ["j", "o"])
    type_text(manager, "new.txt")
    feed(manager, ["<ESC>"])

    assert manager.session.buffer.lines == ("docs", "a.txt", "new.txt", "b.txt")
    view = manager.session.storage.get_view(PROJECT)
    created = view.entries_by_state(LifecycleState.CREATED)
    assert [entry.current_name for entry in created] == ["new.txt"]
    assert created[0].kind is FileKind.FILE


def test_trailing_slash_creates_directory_entry(manager) -> None:
    feed(manager, ["o"])
    type_text(manager, "build/")
    feed(manager, ["<ESC>"])

    entry = manager.session.storage.get_view(PROJECT).get("build/")
    assert entry is not None
    assert entry.state is LifecycleState.CREATED
    assert entry.kind is FileKind.DIRECTORY


def test_undo_of_created_line_forgets_entry(manager) -> None:
    feed(manager, ["o"])
    type_text(manager, "new.txt")
    feed(manager, ["<ESC>", "u"])

    assert manager.session.buffer.lines == ("docs", "a.txt", "b.txt")
    assert not manager.session.has_pending_changes()


def test_cut_and_paste_into_other_directory_moves_entry(manager, backend) -> None:
    feed(manager, ["j", "d", "d", "k", "<ENTER>"])
    assert manager.session.path == f"{PROJECT}/docs"

    feed(manager, ["p"])
    assert manager.session.buffer.lines == ("guide.md", "a.txt")
    assert entry_state(manager, "a.txt") is LifecycleState.MOVED

    feed(manager, [":", "w", "<ENTER>"])
    assert manager.session.need_confirmation
    feed(manager, ["y"])

    assert backend.calls == [("move", f"{PROJECT}/a.txt", f"{PROJECT}/docs")]
    assert not manager.session.has_pending_changes()
    assert manager.session.status == "1 change(s) written"


def test_copy_paste_in_same_directory_reports_conflict(manager) -> None:
    feed(manager, ["j", "y", "y", "p"])

    assert manager.session.buffer.lines == ("docs", "a.txt", "a.txt", "b.txt")
    assert "already exists" in manager.session.status
    created = manager.session.storage.get_view(PROJECT).entries_by_state(
        LifecycleState.CREATED
    )
    assert created == []


def test_unbound_normal_key_is_not_consumed(manager) -> None:
    result = manager.handle_key(key("z"))

    assert result.consumed is False
    assert manager.active is Mode.NORMAL


def test_insert_backspace_joins_lines(manager) -> None:
    feed(manager, ["j", "i", "<BACKSPACE>"])

    assert manager.session.buffer.lines == ("docsa.txt", "b.txt")

    feed(manager, ["<ESC>", "u"])
    assert manager.session.buffer.lines == ("docs", "a.txt", "b.txt")


def test_escape_in_normal_mode_steps_cursor_left(manager) -> None:
    feed(manager, ["j", "l", "l"])
    assert manager.session.buffer.cursor.x == 3

    feed(manager, ["<ESC>"])

    assert manager.active is Mode.NORMAL
    assert manager.session.buffer.cursor.x == 2
