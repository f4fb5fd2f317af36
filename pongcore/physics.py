"""Ball physics — random serve, specular reflection, Euler integration.

The ball lives on the pitch grid: positions are integer cells and velocities
integer cells per timestep. Each step reflects the velocity off whatever
surface the ball currently sits on, then moves the ball by the new velocity.
"""

import logging
import random
from typing import Optional

from pongcore import constants
from pongcore.errors import DegenerateVelocitySample
from pongcore.pitch import PitchGrid
from pongcore.types import BallState, Vec2


def reflect(velocity: Vec2, normal: Vec2) -> Vec2:
    """v1 = v0 - 2 (v0 . n) n, truncated back to whole cells per step.

    A zero normal leaves the velocity untouched.
    """
    n_factor = -2.0 * velocity.dot(normal)
    return (velocity + n_factor * normal).truncated()


def sample_velocity(
    speed: float,
    rng: random.Random,
    max_attempts: int = constants.MAX_VELOCITY_SAMPLES,
    fallback: Optional[Vec2] = None,
) -> Vec2:
    """Random velocity of magnitude `speed` with a non-zero horizontal component.

    Components are drawn from [0, VELOCITY_SAMPLE_RANGE), scaled to `speed`
    and truncated. Draws that truncate to zero horizontal motion are redrawn,
    up to `max_attempts` times, after which `fallback` is returned. Without a
    fallback, DegenerateVelocitySample is raised instead.
    """
    for attempt in range(max_attempts):
        x_component = rng.randrange(constants.VELOCITY_SAMPLE_RANGE)
        y_component = rng.randrange(constants.VELOCITY_SAMPLE_RANGE)
        raw = Vec2(x_component, y_component)
        magnitude = raw.magnitude()
        if magnitude == 0:
            logging.debug("Caught zero-length velocity sample, drawing again.")
            continue
        velocity = (raw * (speed / magnitude)).truncated()
        if velocity.x != 0:
            return velocity
        logging.debug(
            f"Caught zero x component for velocity (xC={x_component}, yC={y_component}), "
            f"attempt {attempt + 1}/{max_attempts}."
        )

    if fallback is None:
        raise DegenerateVelocitySample(
            f"no velocity with horizontal motion after {max_attempts} samples at speed {speed}"
        )
    logging.warning(f"Velocity sampling gave up after {max_attempts} attempts; using fallback {fallback}.")
    return fallback


class BallSimulator:
    """Owns the ball's position and velocity and advances them one step at a time."""

    def __init__(
        self,
        radius: int = constants.BALL_RADIUS,
        speed: int = constants.BALL_SPEED,
        rng: Optional[random.Random] = None,
        max_samples: int = constants.MAX_VELOCITY_SAMPLES,
    ):
        if speed < 1:
            raise ValueError(f"ball speed must be at least 1 unit per step, got {speed}")
        self.radius = radius
        self.speed = speed
        self.rng = rng if rng is not None else random.Random()
        self.max_samples = max_samples
        self.state: Optional[BallState] = None
        self.last_normal = Vec2(0.0, 0.0)

    @property
    def position(self) -> Vec2:
        return self._require_state().position

    @property
    def velocity(self) -> Vec2:
        return self._require_state().velocity

    def _require_state(self) -> BallState:
        if self.state is None:
            raise RuntimeError("ball has not been reset onto a pitch")
        return self.state

    def reset(self, grid: PitchGrid) -> BallState:
        """Place the ball on the centre spot with a fresh random velocity."""
        velocity = sample_velocity(
            self.speed,
            self.rng,
            max_attempts=self.max_samples,
            fallback=Vec2(int(self.speed), 0),
        )
        self.state = BallState(position=grid.centre_spot(), velocity=velocity, tick=0)
        self.last_normal = Vec2(0.0, 0.0)
        logging.debug(f"Ball reset to {self.state.position} with velocity {velocity}.")
        return self.state

    def place(self, position: Vec2, velocity: Vec2) -> BallState:
        """Put the ball at an explicit position and velocity."""
        self.state = BallState(position=position.truncated(), velocity=velocity.truncated(), tick=0)
        self.last_normal = Vec2(0.0, 0.0)
        return self.state

    def step(self, grid: PitchGrid) -> BallState:
        """Advance one timestep: reflect, then integrate."""
        current = self._require_state()
        pos = current.position

        normal = grid.reflection_normal(pos.x, pos.y)
        velocity = reflect(current.velocity, normal)
        position = pos + velocity

        self.state = BallState(position=position, velocity=velocity, tick=current.tick + 1)
        self.last_normal = normal
        return self.state
