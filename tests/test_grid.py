"""Tests for the grid loader, settings and coordinate helpers."""

import dataclasses

import pytest

from asciisvg import (
    ALL_DIRECTIONS,
    Down,
    Loc,
    LowerRight,
    Middle,
    Point,
    Settings,
    Up,
    UpperLeft,
    cell_point,
    grid_get,
    load,
    loc_neighbor,
    loc_neighbors,
)


class TestLoad:
    def test_empty_input_is_zero_by_zero(self):
        grid = load("")
        assert grid.rowCount == 0
        assert grid.columnCount == 0
        assert grid.rows == ()

    def test_trailing_newline_adds_no_row(self):
        grid = load("|-\n")
        assert grid.rowCount == 1
        assert grid.columnCount == 2

    def test_trailing_whitespace_is_stripped(self):
        grid = load("ab   \ncde\t")
        assert grid.rows == (("a", "b"), ("c", "d", "e"))
        assert grid.columnCount == 3

    def test_leading_and_interior_spaces_are_kept(self):
        grid = load("  x y")
        assert grid.rows[0] == (" ", " ", "x", " ", "y")

    def test_column_count_is_longest_row(self):
        grid = load("a\n\nabcd\nab")
        assert grid.rowCount == 4
        assert grid.columnCount == 4
        assert grid.rows[1] == ()

    def test_carriage_returns_are_line_breaks(self):
        grid = load("|\r\n-\r\n")
        assert grid.rows == (("|",), ("-",))


class TestGridGet:
    def test_inside(self):
        grid = load("ab\ncd")
        assert grid_get(grid, Loc(1, 1)) == "d"

    @pytest.mark.parametrize("loc", [Loc(-1, 0), Loc(0, -1), Loc(5, 0), Loc(0, 9)])
    def test_outside_is_absent(self, loc):
        assert grid_get(load("ab\ncd"), loc) is None

    def test_past_end_of_short_row_is_absent(self):
        grid = load("abc\na")
        assert grid.columnCount == 3
        assert grid_get(grid, Loc(2, 1)) is None

    def test_empty_row_is_absent(self):
        assert grid_get(load("a\n\na"), Loc(0, 1)) is None


class TestNeighbors:
    def test_offsets(self):
        loc = Loc(3, 3)
        assert loc_neighbor(loc, Up) == Loc(3, 2)
        assert loc_neighbor(loc, Down) == Loc(3, 4)
        assert loc_neighbor(loc, UpperLeft) == Loc(2, 2)
        assert loc_neighbor(loc, LowerRight) == Loc(4, 4)
        assert loc_neighbor(loc, Middle) == loc

    def test_no_bounds_checking(self):
        assert loc_neighbor(Loc(0, 0), UpperLeft) == Loc(-1, -1)

    def test_eight_neighbors(self):
        neighbors = loc_neighbors(Loc(0, 0))
        assert len(neighbors) == 8
        assert Middle not in neighbors
        assert set(neighbors) == set(ALL_DIRECTIONS) - {Middle}


class TestCellPoint:
    def test_quarter_fractions(self):
        s = Settings(cellWidth=8, cellHeight=16)
        assert cell_point(Loc(0, 0), s, 1, 3) == Point(2, 12)
        assert cell_point(Loc(2, 1), s, 4, 0) == Point(24, 16)


class TestSettings:
    def test_defaults(self):
        s = Settings()
        assert (s.fontSize, s.cellWidth, s.cellHeight) == (14, 8, 16)
        assert s.optimize is True
        assert s.compactPath is True

    def test_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            Settings().cellWidth = 10

    @pytest.mark.parametrize("field", ["fontSize", "cellWidth", "cellHeight"])
    def test_non_positive_sizes_rejected(self, field):
        with pytest.raises(ValueError, match=field):
            Settings(**{field: 0})

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_sizes_rejected(self, value):
        with pytest.raises(ValueError, match="cellWidth must be a positive finite number"):
            Settings(cellWidth=value)
