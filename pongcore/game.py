"""Game simulation — rounds, matches, and the frame-by-frame pitch driver.

A round starts with the ball on the centre spot and ends when the ball
leaves the pitch. Goals through the left edge go to Player 2, through the
right edge to Player 1. The simulator itself never looks at the bounds; all
exit handling lives here and in the referee.
"""

import logging
import random
from dataclasses import dataclass, field
from typing import Optional

from pongcore import constants
from pongcore.config import PitchConfig
from pongcore.errors import InvalidDimension
from pongcore.physics import BallSimulator
from pongcore.pitch import PitchGrid, paddle_layout
from pongcore.referee import check_exit, create_match, score_point
from pongcore.types import BallState, BounceEvent, GoalEvent, Match, OutEvent, Vec2


@dataclass
class RoundResult:
    """The outcome of one round (reset until the ball leaves the pitch)."""
    states: list   # list[BallState], including the starting state
    events: list   # BounceEvent / GoalEvent / OutEvent
    winner: Optional[int]  # 1 or 2, None unless reason == "goal"
    reason: str    # see VALID_REASONS below
    ticks: int


VALID_REASONS = [
    "goal",     # ball left through the left or right edge
    "out",      # ball escaped through the top or bottom (error)
    "timeout",  # safety: round too long
]


@dataclass
class MatchResult:
    """Full match result with all rounds."""
    match: Match
    rounds: list          # list[RoundResult]
    stats: dict = field(default_factory=dict)


def _bounce_event(grid: PitchGrid, before: BallState, ball: BallSimulator) -> Optional[BounceEvent]:
    """Report a reflection applied during the step that started at `before`."""
    if ball.last_normal == Vec2(0.0, 0.0):
        return None
    surface = grid.classify(before.position.x, before.position.y)
    return BounceEvent(pos=before.position, tick=before.tick, surface=surface)


def build_pitch(config: PitchConfig, physical_height: float, physical_width: float) -> PitchGrid:
    """Grid for the given geometry, with static paddles when configured.

    Paddles are as thick as the ball speed so a ball cannot step over them.
    Their length is clipped to the open rows between the walls.
    """
    grid = PitchGrid(
        physical_height,
        physical_width,
        discretisation=config.discretisation,
        wall_margin=config.resolved_wall_margin(),
    )
    if config.paddle_length <= 0:
        return grid

    open_top = grid.wall_margin + 1
    open_rows = grid.height - 2 * open_top
    length = min(config.paddle_length, open_rows)
    thickness = max(1, abs(config.ball_speed))
    if length < 1 or grid.width < 2 * (thickness + 1):
        logging.warning(f"Pitch {grid.width}x{grid.height} too small for paddles; playing without them.")
        return grid

    top_y = open_top + (open_rows - length) // 2
    placements = paddle_layout(1, top_y, length, side="left", thickness=thickness)
    placements.update(paddle_layout(grid.width - 2, top_y, length, side="right", thickness=thickness))
    return grid.with_cells(placements)


def simulate_round(
    grid: PitchGrid,
    ball: BallSimulator,
    max_steps: int = constants.MAX_ROUND_STEPS,
) -> RoundResult:
    """Reset the ball and step it until it leaves the pitch.

    Returns RoundResult with every state, the bounces and the exit event.
    """
    state = ball.reset(grid)
    states = [state]
    events: list = []

    for _ in range(max_steps):
        before = state
        state = ball.step(grid)
        states.append(state)

        bounce = _bounce_event(grid, before, ball)
        if bounce is not None:
            events.append(bounce)

        exit_event = check_exit(grid, state)
        if isinstance(exit_event, GoalEvent):
            events.append(exit_event)
            return RoundResult(
                states=states,
                events=events,
                winner=exit_event.scorer,
                reason="goal",
                ticks=state.tick,
            )
        if isinstance(exit_event, OutEvent):
            events.append(exit_event)
            return RoundResult(
                states=states,
                events=events,
                winner=None,
                reason="out",
                ticks=state.tick,
            )

    logging.warning(f"Round stopped after {max_steps} steps without a goal.")
    return RoundResult(
        states=states,
        events=events,
        winner=None,
        reason="timeout",
        ticks=state.tick,
    )


def simulate_match(
    grid: PitchGrid,
    ball: BallSimulator,
    target: int = constants.TARGET_SCORE,
    max_rounds: int = constants.MAX_MATCH_ROUNDS,
    max_steps: int = constants.MAX_ROUND_STEPS,
) -> MatchResult:
    """Play rounds until one player reaches `target` goals.

    Rounds that time out score nothing. An "out" round ends the match early,
    since it means the pitch failed to contain the ball.
    """
    match = create_match(target)
    rounds: list[RoundResult] = []

    while match.winner is None and len(rounds) < max_rounds:
        result = simulate_round(grid, ball, max_steps=max_steps)
        rounds.append(result)

        if result.reason == "goal":
            goal = result.events[-1]
            match = score_point(match, goal.side)
        elif result.reason == "out":
            logging.error("Ball escaped the pitch; abandoning match.")
            break

    return MatchResult(match=match, rounds=rounds, stats=_compute_match_stats(rounds))


def _compute_match_stats(rounds: list[RoundResult]) -> dict:
    """Compute match statistics."""
    ticks = [r.ticks for r in rounds]
    avg_ticks = sum(ticks) / max(len(ticks), 1)

    reasons = {}
    for r in rounds:
        reasons[r.reason] = reasons.get(r.reason, 0) + 1

    bounces = [e for r in rounds for e in r.events if isinstance(e, BounceEvent)]
    surfaces = {}
    for b in bounces:
        name = type(b.surface).__name__
        surfaces[name] = surfaces.get(name, 0) + 1

    return {
        "total_rounds": len(rounds),
        "avg_round_ticks": round(avg_ticks, 1),
        "max_round_ticks": max(ticks) if ticks else 0,
        "reasons": reasons,
        "p1_goals": sum(1 for r in rounds if r.winner == 1),
        "p2_goals": sum(1 for r in rounds if r.winner == 2),
        "bounces": len(bounces),
        "bounces_by_surface": surfaces,
    }


class PitchDriver:
    """Frame-by-frame owner of the pitch, the ball and the score.

    Geometry changes arrive through resize(), which builds a new grid and
    swaps it in between steps. Until a usable geometry has been seen the
    driver does nothing on tick().
    """

    def __init__(self, config: Optional[PitchConfig] = None, rng: Optional[random.Random] = None):
        self.config = config if config is not None else PitchConfig()
        if rng is None:
            rng = random.Random(self.config.seed)
        self.ball = BallSimulator(
            radius=self.config.ball_radius,
            speed=self.config.ball_speed,
            rng=rng,
        )
        self.grid: Optional[PitchGrid] = None
        self.match = create_match(self.config.target_score)
        self.running = False
        self.round_ticks = 0

    def resize(self, physical_height: float, physical_width: float) -> bool:
        """Rebuild the pitch for new surface geometry and restart the round.

        Returns False, leaving the driver idle, if the geometry is unusable.
        """
        try:
            grid = build_pitch(self.config, physical_height, physical_width)
        except InvalidDimension as e:
            logging.warning(f"Deferring simulation, unusable pitch geometry: {e}")
            self.grid = None
            self.running = False
            return False

        self.grid = grid
        self._new_round()
        self.running = self.match.winner is None
        return True

    def restart(self) -> None:
        """Start a fresh match on the current pitch."""
        self.match = create_match(self.config.target_score)
        if self.grid is not None:
            self._new_round()
            self.running = True

    def _new_round(self) -> None:
        self.ball.reset(self.grid)
        self.round_ticks = 0

    def tick(self) -> list:
        """Advance one frame. Returns the events raised during it."""
        if not self.running or self.grid is None:
            return []

        grid = self.grid
        before = self.ball.state
        state = self.ball.step(grid)
        self.round_ticks += 1
        events: list = []

        bounce = _bounce_event(grid, before, self.ball)
        if bounce is not None:
            events.append(bounce)

        exit_event = check_exit(grid, state)
        if isinstance(exit_event, GoalEvent):
            events.append(exit_event)
            self.match = score_point(self.match, exit_event.side)
            if self.match.winner is not None:
                logging.info(f"Player {self.match.winner} wins {self.match.p1_score}-{self.match.p2_score}.")
                self.running = False
            else:
                self._new_round()
        elif isinstance(exit_event, OutEvent):
            events.append(exit_event)
            self.running = False
        elif self.round_ticks >= self.config.max_round_steps:
            logging.warning(f"Round stopped after {self.round_ticks} steps without a goal; re-serving.")
            self._new_round()

        return events

    def ball_pixel_position(self) -> Optional[tuple]:
        """Ball position in screen units (grid cell times discretisation), or None while idle."""
        if self.grid is None or self.ball.state is None:
            return None
        pos = self.ball.position
        scale = self.grid.discretisation
        return (pos.x * scale, pos.y * scale)
