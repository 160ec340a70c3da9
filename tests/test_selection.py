import pytest

from orchestraterm.selection import (
    MAX_COORD,
    CopyCursor,
    extract_selection,
    find_in_lines,
)

LINES = ["hello world", "second line", "", "last row"]


def test_cursor_starts_at_origin():
    cursor = CopyCursor()
    assert cursor.position == (0, 0)
    assert cursor.anchor is None


def test_move_up_and_left_stop_at_zero():
    cursor = CopyCursor()
    cursor.move_up()
    cursor.move_left()
    assert cursor.position == (0, 0)


def test_moves_change_position():
    cursor = CopyCursor()
    cursor.move_right()
    cursor.move_right()
    cursor.move_down()
    assert cursor.position == (2, 1)
    cursor.move_left()
    cursor.move_up()
    assert cursor.position == (1, 0)


def test_moves_saturate_at_max():
    cursor = CopyCursor(x=MAX_COORD, y=MAX_COORD)
    cursor.move_right()
    cursor.move_down()
    assert cursor.position == (MAX_COORD, MAX_COORD)


def test_start_selection_and_reset():
    cursor = CopyCursor(x=3, y=2)
    cursor.start_selection()
    assert cursor.anchor == (3, 2)
    cursor.reset()
    assert cursor.position == (0, 0)
    assert cursor.anchor is None


def test_find_first_match():
    assert find_in_lines(LINES, "line") == (LINES[1].index("line"), 1)


def test_find_trims_query():
    assert find_in_lines(LINES, "  hello  ") == (0, 0)


@pytest.mark.parametrize("query", ["", "   ", "missing"])
def test_find_without_match(query):
    assert find_in_lines(LINES, query) is None


def test_find_accepts_screen_text():
    assert find_in_lines("\n".join(LINES), "row") == (LINES[3].index("row"), 3)


def test_extract_needs_anchor():
    assert extract_selection(LINES, None, (3, 0)) is None


def test_extract_needs_lines():
    assert extract_selection([], (0, 0), (1, 0)) is None


def test_extract_single_line_is_inclusive():
    assert extract_selection(LINES, (0, 0), (4, 0)) == "hello"


def test_extract_single_line_order_does_not_matter():
    forward = extract_selection(LINES, (6, 0), (10, 0))
    backward = extract_selection(LINES, (10, 0), (6, 0))
    assert forward == backward == "world"


def test_extract_across_lines():
    assert extract_selection(LINES, (6, 0), (5, 1)) == "world\nsecond"


def test_extract_includes_empty_and_full_middle_lines():
    text = extract_selection(LINES, (0, 1), (3, 3))
    assert text == "second line\n\nlast"


def test_extract_clamps_columns_to_line_length():
    assert extract_selection(LINES, (0, 0), (500, 0)) == LINES[0]


def test_extract_clamps_rows_to_screen():
    text = extract_selection(LINES, (0, 3), (2, 50))
    assert text == LINES[3]


def test_extract_from_screen_text():
    assert extract_selection("\n".join(LINES), (0, 0), (4, 0)) == "hello"