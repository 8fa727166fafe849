"""Tests for utility functions."""

from edge_analyzer.utils import LineIndex, line_starts


class TestLineStarts:
    """Tests for line_starts function."""

    def test_single_line(self):
        assert line_starts("hello") == [0]

    def test_multiple_lines(self):
        assert line_starts("ab\ncd\n") == [0, 3, 6]

    def test_empty_text(self):
        assert line_starts("") == [0]


class TestLineIndex:
    """Tests for LineIndex offset/position conversion."""

    def test_position_at_start(self):
        assert LineIndex("ab\ncd").position_at(0) == (0, 0)

    def test_position_at_second_line(self):
        assert LineIndex("ab\ncd").position_at(4) == (1, 1)

    def test_position_of_newline_belongs_to_its_line(self):
        assert LineIndex("ab\ncd").position_at(2) == (0, 2)

    def test_position_at_end(self):
        assert LineIndex("ab\ncd").position_at(5) == (1, 2)

    def test_position_is_clamped(self):
        index = LineIndex("ab")
        assert index.position_at(-3) == (0, 0)
        assert index.position_at(99) == (0, 2)

    def test_offset_at(self):
        index = LineIndex("ab\ncd")
        assert index.offset_at(0, 1) == 1
        assert index.offset_at(1, 0) == 3

    def test_offset_at_end_of_line(self):
        """The column just past the last character is still on the line."""
        index = LineIndex("ab\ncd")
        assert index.offset_at(0, 2) == 2
        assert index.offset_at(1, 2) == 5

    def test_offset_past_end_of_line(self):
        assert LineIndex("ab\ncd").offset_at(0, 3) is None

    def test_offset_on_missing_line(self):
        index = LineIndex("ab")
        assert index.offset_at(1, 0) is None
        assert index.offset_at(-1, 0) is None

    def test_negative_column(self):
        assert LineIndex("ab").offset_at(0, -1) is None

    def test_columns_count_code_points(self):
        index = LineIndex("héllo")
        assert index.offset_at(0, 2) == 2
        assert index.position_at(5) == (0, 5)

    def test_line_count(self):
        assert LineIndex("a\nb\nc").line_count == 3
        assert LineIndex("").line_count == 1
