"""Tests for the pitch grid."""

import logging
import math

import pytest

from pongcore import constants
from pongcore.errors import InvalidDimension, OutOfBounds
from pongcore.pitch import PitchGrid, paddle_layout
from pongcore.types import (
    BOTTOM_WALL,
    OPEN,
    PADDLE_MIDDLE,
    TOP_WALL,
    PaddleAngled,
    Vec2,
    cell_from_code,
)


def test_grid_dimensions_from_screen():
    """1280x720 screen at discretisation 10 → 128x72 cells, margin = radius in cells."""
    grid = PitchGrid(720, 1280)
    assert grid.width == 128
    assert grid.height == 72
    assert grid.wall_margin == constants.BALL_RADIUS // constants.DISCRETISATION


def test_grid_dimensions_are_floored():
    """Partial cells are dropped."""
    grid = PitchGrid(619, 1019, discretisation=10)
    assert grid.width == 101
    assert grid.height == 61


def test_centre_spot_uses_floor_division():
    """101x61 grid → centre spot (50, 30)."""
    grid = PitchGrid(61, 101, discretisation=1, wall_margin=1)
    assert grid.centre_spot() == Vec2(50, 30)


@pytest.mark.parametrize("height, width, discretisation", [
    (0, 100, 1),
    (100, 0, 1),
    (5, 100, 10),     # height floors to 0
    (-50, 100, 1),
    (100, 100, 0),
    (100, 100, -2),
])
def test_invalid_dimensions(height, width, discretisation):
    """Zero or negative grid sizes are rejected."""
    with pytest.raises(InvalidDimension):
        PitchGrid(height, width, discretisation=discretisation)


def test_invalid_dimension_is_value_error():
    with pytest.raises(ValueError):
        PitchGrid(0, 0)


def test_negative_wall_margin_rejected():
    with pytest.raises(InvalidDimension):
        PitchGrid(100, 100, discretisation=1, wall_margin=-1)


def test_wall_bands():
    """Rows [0, margin] are top wall, the last margin+1 rows bottom wall, the rest open."""
    grid = PitchGrid(20, 30, discretisation=1, wall_margin=2)
    for x in range(grid.width):
        for y in range(0, 3):
            assert grid.classify(x, y) == TOP_WALL
        for y in range(3, 17):
            assert grid.classify(x, y) == OPEN
        for y in range(17, 20):
            assert grid.classify(x, y) == BOTTOM_WALL


def test_left_and_right_edges_open():
    """No walls on the goal lines."""
    grid = PitchGrid(20, 30, discretisation=1, wall_margin=2)
    assert grid.classify(0, 10) == OPEN
    assert grid.classify(grid.width - 1, 10) == OPEN


def test_zero_margin_single_wall_rows():
    grid = PitchGrid(10, 10, discretisation=1, wall_margin=0)
    assert grid.classify(4, 0) == TOP_WALL
    assert grid.classify(4, 1) == OPEN
    assert grid.classify(4, 9) == BOTTOM_WALL
    assert grid.classify(4, 8) == OPEN


@pytest.mark.parametrize("x, y", [(-1, 5), (30, 5), (5, -1), (5, 20), (-100, -100), (10_000, 3)])
def test_classify_out_of_bounds(x, y):
    """Coordinates outside the grid raise, and negative indices never wrap."""
    grid = PitchGrid(20, 30, discretisation=1, wall_margin=2)
    with pytest.raises(OutOfBounds):
        grid.classify(x, y)
    assert grid.cell_at(x, y) is None
    assert grid.in_bounds(x, y) is False


def test_out_of_bounds_is_index_error():
    grid = PitchGrid(20, 30, discretisation=1)
    with pytest.raises(IndexError):
        grid.classify(-1, 0)


def test_reflection_normals_per_surface():
    """Open → 0, walls vertical, paddle middle horizontal."""
    grid = PitchGrid(20, 30, discretisation=1, wall_margin=2)
    grid = grid.with_cells({(10, 10): PADDLE_MIDDLE})
    assert grid.reflection_normal(5, 10) == Vec2(0.0, 0.0)
    assert grid.reflection_normal(5, 0) == Vec2(0.0, -1.0)
    assert grid.reflection_normal(5, 19) == Vec2(0.0, 1.0)
    assert grid.reflection_normal(10, 10) == Vec2(1.0, 0.0)


def test_paddle_angle_encoding():
    """Each angled paddle cell gives a distinct unit normal with ratio v:5."""
    grid = PitchGrid(20, 30, discretisation=1, wall_margin=2)
    angles = [1, 2, 3, -1, -2, -3]
    grid = grid.with_cells({(10, 4 + i): PaddleAngled(v) for i, v in enumerate(angles)})

    normals = []
    for i, v in enumerate(angles):
        n = grid.reflection_normal(10, 4 + i)
        assert n.magnitude() == pytest.approx(1.0, abs=1e-9)
        assert n.y / n.x == pytest.approx(v / 5.0, abs=1e-9)
        assert n.x == pytest.approx(5.0 / math.sqrt(25 + v * v), abs=1e-9)
        normals.append(n.as_tuple())

    assert len(set(normals)) == len(angles)


@pytest.mark.parametrize("x, y", [(-1, 5), (30, 5), (5, -3), (5, 25), (-500, 900)])
def test_reflection_normal_out_of_bounds_is_open(x, y):
    """Overshooting the grid is treated as open space, never an error."""
    grid = PitchGrid(20, 30, discretisation=1, wall_margin=2)
    assert grid.reflection_normal(x, y) == Vec2(0.0, 0.0)


def test_reflection_normal_out_of_bounds_is_logged(caplog):
    grid = PitchGrid(20, 30, discretisation=1, wall_margin=2)
    caplog.set_level(logging.DEBUG)
    grid.reflection_normal(-4, 7)
    assert "outside pitch" in caplog.text


def test_with_cells_returns_new_grid():
    """Placing cells never changes the original grid."""
    grid = PitchGrid(20, 30, discretisation=1, wall_margin=2)
    placed = grid.with_cells({(3, 8): PaddleAngled(2)})
    assert placed is not grid
    assert placed.classify(3, 8) == PaddleAngled(2)
    assert grid.classify(3, 8) == OPEN
    assert placed.width == grid.width
    assert placed.height == grid.height


def test_with_cells_out_of_bounds():
    grid = PitchGrid(20, 30, discretisation=1, wall_margin=2)
    with pytest.raises(OutOfBounds):
        grid.with_cells({(30, 8): PADDLE_MIDDLE})


def test_rebuild_keeps_settings():
    """Rebuilding for a new screen keeps discretisation and wall margin."""
    grid = PitchGrid(720, 1280, discretisation=20, wall_margin=3)
    rebuilt = grid.rebuild(400, 600)
    assert rebuilt is not grid
    assert rebuilt.width == 30
    assert rebuilt.height == 20
    assert rebuilt.discretisation == 20
    assert rebuilt.wall_margin == 3
    assert grid.width == 64


def test_rebuild_invalid_geometry():
    grid = PitchGrid(720, 1280)
    with pytest.raises(InvalidDimension):
        grid.rebuild(0, 0)


def test_codes_row_major():
    """codes() is indexed [y][x] with the original integer encoding."""
    grid = PitchGrid(10, 12, discretisation=1, wall_margin=0)
    grid = grid.with_cells({(4, 5): PaddleAngled(-2), (5, 5): PADDLE_MIDDLE})
    codes = grid.codes()
    assert len(codes) == 10
    assert len(codes[0]) == 12
    assert codes[0] == [constants.CODE_TOP_WALL] * 12
    assert codes[9] == [constants.CODE_BOTTOM_WALL] * 12
    assert codes[5][4] == -2
    assert codes[5][5] == constants.CODE_PADDLE_MIDDLE
    assert codes[5][0] == constants.CODE_OPEN


def test_cell_from_code():
    assert cell_from_code(constants.CODE_OPEN) is OPEN
    assert cell_from_code(constants.CODE_TOP_WALL) is TOP_WALL
    assert cell_from_code(constants.CODE_BOTTOM_WALL) is BOTTOM_WALL
    assert cell_from_code(constants.CODE_PADDLE_MIDDLE) is PADDLE_MIDDLE
    assert cell_from_code(-3) == PaddleAngled(-3)


@pytest.mark.parametrize("vertical", [0, 4, -4, 100])
def test_paddle_angle_range(vertical):
    with pytest.raises(ValueError):
        PaddleAngled(vertical)


def test_paddle_layout_left():
    """Left paddle: steepest at the tips, top tip sends the ball upward."""
    placements = paddle_layout(2, 10, 7, side="left")
    column = [placements[(2, 10 + i)].code for i in range(7)]
    assert column == [-3, -2, -1, constants.CODE_PADDLE_MIDDLE, 1, 2, 3]


def test_paddle_layout_right_mirrors_left():
    placements = paddle_layout(20, 10, 7, side="right")
    column = [placements[(20, 10 + i)].code for i in range(7)]
    assert column == [3, 2, 1, constants.CODE_PADDLE_MIDDLE, -1, -2, -3]


def test_paddle_layout_long_paddle_has_flat_middle():
    placements = paddle_layout(0, 0, 10)
    column = [placements[(0, i)] for i in range(10)]
    assert column[3:7] == [PADDLE_MIDDLE] * 4


def test_paddle_layout_short_paddle_keeps_tips():
    placements = paddle_layout(0, 0, 2, side="left")
    assert placements[(0, 0)] == PaddleAngled(-3)
    assert placements[(0, 1)] == PaddleAngled(3)


def test_paddle_layout_thickness():
    """Thick paddles grow away from their goal line."""
    left = paddle_layout(1, 5, 3, side="left", thickness=3)
    assert {x for x, _ in left} == {1, 2, 3}
    right = paddle_layout(20, 5, 3, side="right", thickness=3)
    assert {x for x, _ in right} == {18, 19, 20}
    assert len(right) == 9


@pytest.mark.parametrize("kwargs", [
    {"length": 0},
    {"length": 5, "thickness": 0},
    {"length": 5, "side": "top"},
])
def test_paddle_layout_invalid(kwargs):
    with pytest.raises(ValueError):
        paddle_layout(0, 0, **kwargs)
