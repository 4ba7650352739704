import pytest

from conftest import PROJECT, FakeBackend, make_tree

from vim_fm.filesystem import (
    BufferStorage,
    DirectoryBuffer,
    DirectoryListingError,
    FileKind,
    LifecycleState,
    NameConflictError,
)


def make_view() -> DirectoryBuffer:
    return DirectoryBuffer.from_listing(PROJECT, FakeBackend(make_tree()))


def test_listing_seeds_unmodified_entries() -> None:
    view = make_view()

    assert sorted(entry.current_name for entry in view) == ["a.txt", "b.txt", "docs"]
    assert all(entry.state is LifecycleState.UNMODIFIED for entry in view)
    assert view.get("docs").kind is FileKind.DIRECTORY


def test_set_name_marks_modified_and_round_trip_restores() -> None:
    view = make_view()

    view.set_name("a.txt", "c.txt")
    modified = view.entries_by_state(LifecycleState.MODIFIED)
    assert [(e.original_name, e.current_name) for e in modified] == [("a.txt", "c.txt")]

    view.set_name("c.txt", "a.txt")
    assert view.get("a.txt").state is LifecycleState.UNMODIFIED
    assert not view.has_changes()


def test_created_entry_never_regresses() -> None:
    view = make_view()
    view.add_entry("new.txt")

    view.set_name("new.txt", "a2.txt")
    view.set_name("a2.txt", "new.txt")

    assert view.get("new.txt").state is LifecycleState.CREATED


def test_set_name_conflict_raises() -> None:
    view = make_view()

    with pytest.raises(NameConflictError) as info:
        view.set_name("a.txt", "b.txt")

    assert "b.txt already exists" in str(info.value)
    assert view.get("a.txt").state is LifecycleState.UNMODIFIED


def test_set_directory_moves_and_back_restores() -> None:
    view = make_view()

    entry = view.set_directory("a.txt", "/work/other")
    assert entry.state is LifecycleState.MOVED

    view.set_directory("a.txt", PROJECT)
    assert entry.state is LifecycleState.UNMODIFIED


def test_delete_entry_retains_entry_but_drops_created() -> None:
    view = make_view()
    view.add_entry("tmp/")

    view.delete_entry("a.txt")
    view.delete_entry("tmp/")

    assert view.get("a.txt").state is LifecycleState.DELETED
    assert "tmp/" not in view
    assert [e.current_name for e in view.entries_by_state(LifecycleState.DELETED)] == ["a.txt"]


def test_add_entry_infers_directory_from_suffix() -> None:
    view = make_view()

    entry = view.add_entry("build/")

    assert entry.kind is FileKind.DIRECTORY
    assert entry.state is LifecycleState.CREATED


def test_discard_changes_reverts_everything() -> None:
    view = make_view()
    view.set_name("a.txt", "z.txt")
    view.delete_entry("b.txt")
    view.add_entry("new.txt")

    view.discard_changes()

    assert sorted(view.entries, key=lambda e: e.current_name)[0].current_name == "a.txt"
    assert "new.txt" not in view
    assert not view.has_changes()


def test_storage_add_view_is_idempotent() -> None:
    storage = BufferStorage(FakeBackend(make_tree()))

    first = storage.add_view(PROJECT)
    second = storage.add_view(PROJECT)

    assert first is second
    assert [view.path for view in storage.views] == [PROJECT]


def test_storage_listing_failure_raises_listing_error() -> None:
    storage = BufferStorage(FakeBackend(make_tree()))

    with pytest.raises(DirectoryListingError):
        storage.add_view("/missing")

    assert storage.get_view("/missing") is None


def test_storage_pending_changes_span_all_views() -> None:
    storage = BufferStorage(FakeBackend(make_tree()))
    storage.add_view(PROJECT)
    docs = storage.add_view(f"{PROJECT}/docs")

    assert not storage.has_pending_changes()
    docs.delete_entry("guide.md")
    assert storage.has_pending_changes()

    storage.discard_changes()
    assert not storage.has_pending_changes()


def test_created_entry_kind_follows_its_name() -> None:
    view = make_view()
    view.add_entry("build")

    view.set_name("build", "build/")

    assert view.get("build/").kind is FileKind.DIRECTORY


def test_storage_update_view_replaces_buffer() -> None:
    storage = BufferStorage(FakeBackend(make_tree()))
    storage.add_view(PROJECT)
    fresh = DirectoryBuffer(PROJECT)

    storage.update_view(PROJECT, fresh)

    assert storage.get_view(PROJECT) is fresh
    assert storage.add_view(PROJECT) is fresh


def test_deleted_entry_releases_its_name() -> None:
    view = make_view()
    deleted = view.delete_entry("a.txt")

    renamed = view.set_name("b.txt", "a.txt")

    assert renamed.state is LifecycleState.MODIFIED
    assert view.get("a.txt") is renamed
    assert view.entries_by_state(LifecycleState.DELETED) == [deleted]
    assert view.owns(deleted)
    with pytest.raises(NameConflictError):
        view.restore_entry(deleted)


def test_discard_changes_brings_back_deleted_entries() -> None:
    view = make_view()
    view.delete_entry("a.txt")
    view.set_name("b.txt", "a.txt")

    view.discard_changes()

    assert sorted(entry.current_name for entry in view) == ["a.txt", "b.txt", "docs"]
    assert not view.has_changes()
