from vim_fm.actions import apply_motion
from vim_fm.buffer import Buffer, motions


def make_buffer(*lines: str, x: int = 1, y: int = 1) -> Buffer:
    buffer = Buffer.from_lines(lines)
    buffer.cursor.move_to(x, y)
    return buffer


def test_word_forward_and_back_on_foo_bar() -> None:
    buffer = make_buffer("foo bar")

    apply_motion(buffer, "w")
    assert buffer.cursor.position == (5, 1)

    apply_motion(buffer, "b")
    assert buffer.cursor.position == (1, 1)


def test_word_forward_crosses_to_next_line() -> None:
    buffer = make_buffer("foo bar", "baz", x=5)

    apply_motion(buffer, "w")

    assert buffer.cursor.position == (1, 2)


def test_word_back_at_column_one_goes_to_previous_line_end() -> None:
    buffer = make_buffer("foo bar", "baz", x=1, y=2)

    apply_motion(buffer, "b")

    assert buffer.cursor.position == (7, 1)


def test_vertical_motion_clamps_column() -> None:
    buffer = make_buffer("a long line", "ab", x=9)

    apply_motion(buffer, "j")

    assert buffer.cursor.position == (2, 2)


def test_down_on_last_line_is_noop() -> None:
    buffer = make_buffer("one", "two", y=2)

    assert apply_motion(buffer, "j") is False
    assert buffer.cursor.position == (1, 2)


def test_right_stops_at_line_end() -> None:
    buffer = make_buffer("ab", x=2)

    apply_motion(buffer, "l")

    assert buffer.cursor.position == (2, 1)


def test_line_jumps_with_count() -> None:
    buffer = make_buffer("a", "b", "c", "d")

    apply_motion(buffer, "G")
    assert buffer.cursor.y == 4

    apply_motion(buffer, "gg")
    assert buffer.cursor.y == 1

    apply_motion(buffer, "G", 3)
    assert buffer.cursor.y == 3


def test_dollar_and_zero() -> None:
    buffer = make_buffer("hello", x=2)

    apply_motion(buffer, "$")
    assert buffer.cursor.x == 5

    apply_motion(buffer, "0")
    assert buffer.cursor.x == 1


def test_find_char_motions() -> None:
    buffer = make_buffer("a.b.c")

    apply_motion(buffer, "f", argument=".")
    assert buffer.cursor.x == 2

    apply_motion(buffer, "t", argument="c")
    assert buffer.cursor.x == 4

    apply_motion(buffer, "F", argument="a")
    assert buffer.cursor.x == 1


def test_word_end_inclusive_swallows_trailing_space() -> None:
    assert motions.word_end("foo bar", 0) == 4
    assert motions.word_end("foo bar", 0, inclusive=False) == 3
    assert motions.word_end("foo.bar", 3) == 4


def test_word_start_scans_back() -> None:
    assert motions.word_start("foo bar", 6) == 4
    assert motions.word_start("foo bar", 4) == 0


def test_out_of_range_reads_are_blank() -> None:
    assert motions.char_at("abc", -1) == " "
    assert motions.char_at("abc", 3) == " "
    assert motions.word_end("", 5) == 6


def test_next_word_end() -> None:
    assert motions.next_word_end("foo bar", 0) == 2
    assert motions.next_word_end("foo bar", 2) == 6


def test_text_objects() -> None:
    line = 'call(x, "y z") end'

    assert motions.text_object(line, 5, "(", around=False) == (5, 13)
    assert motions.text_object(line, 5, "b", around=True) == (4, 14)
    assert motions.text_object(line, 10, '"', around=False) == (9, 12)
    assert motions.text_object(line, 0, "w", around=False) == (0, 4)
    assert motions.text_object("foo bar", 1, "w", around=True) == (0, 4)
