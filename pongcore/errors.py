"""Error kinds raised by the pitch simulator."""


class PitchError(Exception):
    """Base class for pitch and ball errors."""


class InvalidDimension(PitchError, ValueError):
    """Pitch geometry does not give a usable grid (zero or negative size)."""


class OutOfBounds(PitchError, IndexError):
    """A cell query fell outside the grid."""

    def __init__(self, x: int, y: int, width: int, height: int):
        super().__init__(f"cell ({x}, {y}) outside {width}x{height} pitch")
        self.x = x
        self.y = y


class DegenerateVelocitySample(PitchError):
    """Velocity sampling kept producing a zero horizontal component."""
