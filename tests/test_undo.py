from vim_fm.buffer import Buffer, UndoEntry, UndoStack


def make_entry(*lines: str, cursor=(1, 1)) -> UndoEntry:
    return UndoEntry(lines=lines, tags=tuple(None for _ in lines), cursor=cursor)


def test_undo_returns_pushed_snapshot_and_cursor() -> None:
    buffer = Buffer.from_lines(["one", "two"])
    buffer.cursor.move_to(2, 2)

    with buffer.transaction("edit") as txn:
        buffer.document.delete_line_full(1)
        buffer.cursor.move_to(1, 1)
        txn.commit()

    assert buffer.undo() is True
    assert buffer.lines == ("one", "two")
    assert buffer.cursor.position == (2, 2)


def test_redo_restores_state_before_undo() -> None:
    buffer = Buffer.from_lines(["one"])
    with buffer.transaction("edit") as txn:
        buffer.document.insert(4, 1, "!")
        txn.commit()

    buffer.undo()
    assert buffer.lines == ("one",)

    assert buffer.redo() is True
    assert buffer.lines == ("one!",)


def test_undo_at_bottom_and_redo_at_top_are_noops() -> None:
    stack = UndoStack()

    assert stack.undo() is None
    stack.push(make_entry("a"))
    assert stack.redo() is None


def test_push_resets_index_to_top() -> None:
    stack = UndoStack()
    stack.push(make_entry("a"))
    stack.push(make_entry("b"))
    stack.undo(make_entry("c"))

    stack.push(make_entry("d"))

    assert stack.index == len(stack)
    assert not stack.can_redo()


def test_transaction_without_change_records_nothing() -> None:
    buffer = Buffer.from_lines(["one"])

    with buffer.transaction("noop") as txn:
        committed = txn.commit()

    assert committed is False
    assert len(buffer.history) == 0


def test_multiple_undo_steps_walk_back_in_order() -> None:
    buffer = Buffer.from_lines(["a"])
    for column, text in ((2, "b"), (3, "c")):
        with buffer.transaction("edit") as txn:
            buffer.document.insert(column, 1, text)
            txn.commit()

    buffer.undo()
    assert buffer.lines == ("ab",)
    buffer.undo()
    assert buffer.lines == ("a",)
    assert buffer.undo() is False
    buffer.redo()
    buffer.redo()
    assert buffer.lines == ("abc",)
