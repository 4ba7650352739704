from conftest import PROJECT, FakeBackend, make_tree

from vim_fm.filesystem import (
    BufferStorage,
    LifecycleState,
    LocalFilesystem,
    ReconciliationExecutor,
    summarize,
)


def make_storage(backend: FakeBackend) -> BufferStorage:
    storage = BufferStorage(backend)
    storage.add_view(PROJECT)
    return storage


def test_rename_issues_one_rename_and_resets_state() -> None:
    backend = FakeBackend(make_tree())
    storage = make_storage(backend)
    view = storage.get_view(PROJECT)
    view.set_name("a.txt", "c.txt")

    report = ReconciliationExecutor(storage, backend).execute()

    assert backend.calls == [("rename", f"{PROJECT}/a.txt", f"{PROJECT}/c.txt")]
    assert report.ok
    entry = view.get("c.txt")
    assert entry.state is LifecycleState.UNMODIFIED
    assert entry.original_name == "c.txt"


def test_create_picks_file_or_directory_by_suffix() -> None:
    backend = FakeBackend(make_tree())
    storage = make_storage(backend)
    view = storage.get_view(PROJECT)
    view.add_entry("new.txt")
    view.add_entry("build/")

    ReconciliationExecutor(storage, backend).execute()

    assert sorted(backend.calls) == [
        ("create_directory", f"{PROJECT}/build"),
        ("create_file", f"{PROJECT}/new.txt"),
    ]
    assert view.get("build").state is LifecycleState.UNMODIFIED
    assert not storage.has_pending_changes()


def test_delete_removes_entry_after_success() -> None:
    backend = FakeBackend(make_tree())
    storage = make_storage(backend)
    view = storage.get_view(PROJECT)
    view.delete_entry("b.txt")

    ReconciliationExecutor(storage, backend).execute()

    assert backend.calls == [("delete", f"{PROJECT}/b.txt")]
    assert "b.txt" not in view


def test_move_lands_in_loaded_destination() -> None:
    backend = FakeBackend(make_tree())
    storage = make_storage(backend)
    docs = storage.add_view(f"{PROJECT}/docs")
    view = storage.get_view(PROJECT)
    view.set_directory("a.txt", f"{PROJECT}/docs")

    ReconciliationExecutor(storage, backend).execute()

    assert backend.calls == [("move", f"{PROJECT}/a.txt", f"{PROJECT}/docs")]
    assert "a.txt" not in view
    assert docs.get("a.txt").state is LifecycleState.UNMODIFIED


def test_failure_does_not_block_other_operations() -> None:
    backend = FakeBackend(make_tree())
    backend.fail_on.add(f"{PROJECT}/a.txt")
    storage = make_storage(backend)
    view = storage.get_view(PROJECT)
    view.delete_entry("a.txt")
    view.set_name("b.txt", "c.txt")

    report = ReconciliationExecutor(storage, backend).execute()

    assert len(backend.calls) == 2
    assert not report.ok
    assert report.failures[0].operation == "delete"
    assert report.applied == ["RENAME b.txt -> c.txt"]
    assert view.get("a.txt").state is LifecycleState.DELETED
    assert "failed" in report.summary()


def test_summary_groups_lines_by_operation() -> None:
    backend = FakeBackend(make_tree())
    storage = make_storage(backend)
    view = storage.get_view(PROJECT)
    view.delete_entry("b.txt")
    view.add_entry("new.txt")
    view.set_name("a.txt", "c.txt")
    view.set_directory("docs", "/work/other")

    assert summarize(storage) == [
        "RENAME a.txt -> c.txt",
        "CREATE new.txt",
        "DELETE b.txt",
        "MOVE docs -> /work/other",
    ]


def test_local_filesystem_round_trip(tmp_path) -> None:
    (tmp_path / "a.txt").write_text("hello")
    (tmp_path / "old").mkdir()
    (tmp_path / "sub").mkdir()
    backend = LocalFilesystem()
    storage = BufferStorage(backend)
    view = storage.add_view(str(tmp_path))
    view.set_name("a.txt", "b.txt")
    view.add_entry("new/")
    view.add_entry("note.md")
    view.delete_entry("old")

    report = ReconciliationExecutor(storage, backend).execute()

    assert report.ok
    assert (tmp_path / "b.txt").read_text() == "hello"
    assert (tmp_path / "new").is_dir()
    assert (tmp_path / "note.md").is_file()
    assert not (tmp_path / "old").exists()


def test_local_filesystem_rename_refuses_to_overwrite(tmp_path) -> None:
    (tmp_path / "a.txt").write_text("a")
    (tmp_path / "b.txt").write_text("b")
    backend = LocalFilesystem()
    storage = BufferStorage(backend)
    view = storage.add_view(str(tmp_path))
    # b.txt was removed from the listing outside the buffer
    view.remove_entry(view.get("b.txt"))
    view.set_name("a.txt", "b.txt")

    report = ReconciliationExecutor(storage, backend).execute()

    assert not report.ok
    assert (tmp_path / "b.txt").read_text() == "b"
