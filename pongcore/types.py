"""Core data types for the pitch simulation."""

from dataclasses import dataclass, field
from typing import Optional

from pongcore import constants


@dataclass(frozen=True)
class Vec2:
    """2D vector for grid positions, velocities and surface normals."""
    x: float = 0
    y: float = 0

    def __add__(self, other: "Vec2") -> "Vec2":
        return Vec2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Vec2") -> "Vec2":
        return Vec2(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> "Vec2":
        return Vec2(self.x * scalar, self.y * scalar)

    def __rmul__(self, scalar: float) -> "Vec2":
        return self.__mul__(scalar)

    def dot(self, other: "Vec2") -> float:
        return self.x * other.x + self.y * other.y

    def magnitude(self) -> float:
        return (self.x**2 + self.y**2) ** 0.5

    def normalized(self) -> "Vec2":
        """Unit vector in the same direction. The zero vector stays zero."""
        mag = self.magnitude()
        if mag == 0:
            return Vec2(0.0, 0.0)
        factor = 1 / mag
        return Vec2(self.x * factor, self.y * factor)

    def truncated(self) -> "Vec2":
        """Integer components, truncated toward zero like an int cast."""
        return Vec2(int(self.x), int(self.y))

    def as_tuple(self) -> tuple:
        return (self.x, self.y)


# ── Surface cells ────────────────────────────────────────

@dataclass(frozen=True)
class SurfaceCell:
    """What occupies one grid cell. Subclasses fix the reflection normal."""

    @property
    def code(self) -> int:
        raise NotImplementedError

    @property
    def raw_normal(self) -> Vec2:
        """Normal before normalization."""
        raise NotImplementedError


@dataclass(frozen=True)
class Open(SurfaceCell):
    """Free pitch surface, no reflection."""

    @property
    def code(self) -> int:
        return constants.CODE_OPEN

    @property
    def raw_normal(self) -> Vec2:
        return Vec2(0.0, 0.0)


@dataclass(frozen=True)
class TopWall(SurfaceCell):

    @property
    def code(self) -> int:
        return constants.CODE_TOP_WALL

    @property
    def raw_normal(self) -> Vec2:
        return Vec2(0.0, -1.0)


@dataclass(frozen=True)
class BottomWall(SurfaceCell):

    @property
    def code(self) -> int:
        return constants.CODE_BOTTOM_WALL

    @property
    def raw_normal(self) -> Vec2:
        return Vec2(0.0, 1.0)


@dataclass(frozen=True)
class PaddleMiddle(SurfaceCell):
    """Flat paddle face, pure horizontal reflection."""

    @property
    def code(self) -> int:
        return constants.CODE_PADDLE_MIDDLE

    @property
    def raw_normal(self) -> Vec2:
        return Vec2(1.0, 0.0)


@dataclass(frozen=True)
class PaddleAngled(SurfaceCell):
    """Angled paddle segment.

    `vertical` is the vertical component of the normal against a horizontal
    component of PADDLE_HORIZONTAL_COMPONENT, and doubles as the cell code.
    """
    vertical: int = 1

    def __post_init__(self):
        if (
            not isinstance(self.vertical, int)
            or self.vertical == 0
            or abs(self.vertical) > constants.PADDLE_MAX_ANGLE
        ):
            raise ValueError(
                f"paddle angle must be a non-zero int in "
                f"[-{constants.PADDLE_MAX_ANGLE}, {constants.PADDLE_MAX_ANGLE}], got {self.vertical!r}"
            )

    @property
    def code(self) -> int:
        return self.vertical

    @property
    def raw_normal(self) -> Vec2:
        return Vec2(constants.PADDLE_HORIZONTAL_COMPONENT, float(self.vertical))


OPEN = Open()
TOP_WALL = TopWall()
BOTTOM_WALL = BottomWall()
PADDLE_MIDDLE = PaddleMiddle()

_FIXED_CELLS = {cell.code: cell for cell in (OPEN, TOP_WALL, BOTTOM_WALL, PADDLE_MIDDLE)}


def cell_from_code(code: int) -> SurfaceCell:
    """Decode an integer surface code back into its cell."""
    if code in _FIXED_CELLS:
        return _FIXED_CELLS[code]
    return PaddleAngled(code)


# ── Ball and events ──────────────────────────────────────

@dataclass(frozen=True)
class BallState:
    """Ball kinematics at one timestep. Units are grid cells and cells/step."""
    position: Vec2 = field(default_factory=Vec2)
    velocity: Vec2 = field(default_factory=Vec2)
    tick: int = 0


@dataclass
class BounceEvent:
    """The ball was reflected by a non-open cell."""
    pos: Vec2
    tick: int
    surface: SurfaceCell


@dataclass
class GoalEvent:
    """Ball left the pitch through the left or right edge."""
    pos: Vec2
    tick: int
    side: str  # "left" or "right"

    @property
    def scorer(self) -> int:
        # Player 1 defends the left edge
        return 2 if self.side == "left" else 1


@dataclass
class OutEvent:
    """Ball escaped through the top or bottom. Should not happen."""
    pos: Vec2
    tick: int


@dataclass
class Match:
    """Current match state."""
    p1_score: int = 0
    p2_score: int = 0
    target: int = constants.TARGET_SCORE
    history: list = field(default_factory=list)
    winner: Optional[int] = None
