"""Discretized pitch — surface cells and reflection normals.

The pitch is a width x height grid of SurfaceCell, indexed [x][y] with row 0
at the top. Top and bottom bands of wall cells are laid down at construction;
the left and right edges are open so the ball can leave for a goal.
"""

import copy
import logging
from typing import Mapping, Optional

from pongcore import constants
from pongcore.errors import InvalidDimension, OutOfBounds
from pongcore.types import (
    BOTTOM_WALL,
    OPEN,
    PADDLE_MIDDLE,
    TOP_WALL,
    PaddleAngled,
    SurfaceCell,
    Vec2,
)

_ZERO_NORMAL = Vec2(0.0, 0.0)


class PitchGrid:
    """Immutable grid of surface cells built from the screen geometry."""

    def __init__(
        self,
        physical_height: float,
        physical_width: float,
        discretisation: float = constants.DISCRETISATION,
        wall_margin: Optional[int] = None,
    ):
        if discretisation <= 0:
            raise InvalidDimension(f"discretisation must be positive, got {discretisation}")
        self.discretisation = discretisation
        self.physical_height = physical_height
        self.physical_width = physical_width
        self.width = int(physical_width // discretisation)
        self.height = int(physical_height // discretisation)
        if self.width <= 0 or self.height <= 0:
            raise InvalidDimension(
                f"pitch of {physical_width}x{physical_height} at discretisation "
                f"{discretisation} gives a {self.width}x{self.height} grid"
            )

        if wall_margin is None:
            wall_margin = int(constants.BALL_RADIUS // discretisation)
        if wall_margin < 0:
            raise InvalidDimension(f"wall margin must not be negative, got {wall_margin}")
        self.wall_margin = wall_margin

        column = [self._wall_for_row(y) for y in range(self.height)]
        self._cells = [list(column) for _ in range(self.width)]

        logging.info(
            f"Pitch grid built: {self.width}x{self.height} cells "
            f"(discretisation {discretisation}, wall margin {wall_margin})."
        )

    def _wall_for_row(self, y: int) -> SurfaceCell:
        if y <= self.wall_margin:
            return TOP_WALL
        if y >= self.height - 1 - self.wall_margin:
            return BOTTOM_WALL
        return OPEN

    # ── Queries ──────────────────────────────────────────

    def centre_spot(self) -> Vec2:
        return Vec2(self.width // 2, self.height // 2)

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def cell_at(self, x: int, y: int) -> Optional[SurfaceCell]:
        """Bounds-checked lookup. Returns None outside the grid."""
        if not self.in_bounds(x, y):
            return None
        return self._cells[x][y]

    def classify(self, x: int, y: int) -> SurfaceCell:
        """Return the cell at (x, y), raising OutOfBounds outside the grid."""
        cell = self.cell_at(x, y)
        if cell is None:
            raise OutOfBounds(x, y, self.width, self.height)
        return cell

    def reflection_normal(self, x: int, y: int) -> Vec2:
        """Unit normal of the surface at (x, y), or the zero vector.

        A ball that has overshot the grid is treated as being in open space.
        """
        cell = self.cell_at(x, y)
        if cell is None:
            logging.debug(f"Reflection normal requested outside pitch at ({x}, {y}); using open surface.")
            return _ZERO_NORMAL
        return cell.raw_normal.normalized()

    def codes(self) -> list:
        """Integer surface codes, one list per row (indexed [y][x])."""
        return [[self._cells[x][y].code for x in range(self.width)] for y in range(self.height)]

    # ── Derived grids ────────────────────────────────────

    def with_cells(self, placements: Mapping[tuple, SurfaceCell]) -> "PitchGrid":
        """Return a copy of this grid with the given cells overridden."""
        clone = copy.copy(self)
        clone._cells = [list(column) for column in self._cells]
        for (x, y), cell in placements.items():
            if not self.in_bounds(x, y):
                raise OutOfBounds(x, y, self.width, self.height)
            clone._cells[x][y] = cell
        return clone

    def rebuild(self, physical_height: float, physical_width: float) -> "PitchGrid":
        """Fresh grid for new screen geometry, same discretisation and margin."""
        return PitchGrid(
            physical_height,
            physical_width,
            discretisation=self.discretisation,
            wall_margin=self.wall_margin,
        )

    def __repr__(self) -> str:
        return f"PitchGrid(width={self.width}, height={self.height}, wall_margin={self.wall_margin})"


def paddle_layout(
    x: int,
    top_y: int,
    length: int,
    side: str = "left",
    thickness: int = 1,
) -> dict:
    """Cell placements for a paddle occupying rows top_y .. top_y+length-1.

    The three cells at each tip are angled, steepest at the tips, with flat
    PaddleMiddle cells between. Signs are chosen so that the top of either
    paddle sends the ball upward (toward row 0).
    """
    if length < 1:
        raise ValueError(f"paddle length must be at least 1, got {length}")
    if thickness < 1:
        raise ValueError(f"paddle thickness must be at least 1, got {thickness}")
    if side not in ("left", "right"):
        raise ValueError(f"side must be 'left' or 'right', got {side!r}")

    # Left paddle normals point right, so upward deflection needs a negative
    # vertical component. The right paddle mirrors it.
    sign = -1 if side == "left" else 1
    max_angle = constants.PADDLE_MAX_ANGLE

    column = []
    for i in range(length):
        from_top = i
        from_bottom = length - 1 - i
        if from_top < max_angle and from_top <= from_bottom:
            column.append(PaddleAngled(sign * (max_angle - from_top)))
        elif from_bottom < max_angle:
            column.append(PaddleAngled(-sign * (max_angle - from_bottom)))
        else:
            column.append(PADDLE_MIDDLE)

    # Columns grow away from the goal line
    step = 1 if side == "left" else -1
    placements = {}
    for t in range(thickness):
        for i, cell in enumerate(column):
            placements[(x + step * t, top_y + i)] = cell
    return placements
