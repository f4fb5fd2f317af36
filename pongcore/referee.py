"""Referee — boundary exits and score keeping."""

import logging
from typing import Optional, Union

from pongcore import constants
from pongcore.pitch import PitchGrid
from pongcore.types import BallState, GoalEvent, Match, OutEvent


def check_exit(grid: PitchGrid, state: BallState) -> Optional[Union[GoalEvent, OutEvent]]:
    """Check whether the ball has left the pitch.

    Leaving through the left or right edge is a goal. Leaving through the top
    or bottom means the walls failed to catch the ball and is reported as an
    OutEvent. Horizontal exits are checked first.
    """
    pos = state.position
    if pos.x < 0:
        return GoalEvent(pos=pos, tick=state.tick, side="left")
    if pos.x >= grid.width:
        return GoalEvent(pos=pos, tick=state.tick, side="right")
    if pos.y < 0 or pos.y >= grid.height:
        logging.error(f"Error: ball y={pos.y} out of bounds (pitch height {grid.height}) at tick {state.tick}.")
        return OutEvent(pos=pos, tick=state.tick)
    return None


def score_point(match: Match, side: str) -> Match:
    """Score a goal. Side is the edge the ball left through.

    Ball out on the 'left' edge scores for Player 2, on the 'right' edge for
    Player 1. First to match.target wins; further goals are ignored.
    """
    m = Match(
        p1_score=match.p1_score,
        p2_score=match.p2_score,
        target=match.target,
        history=list(match.history),
        winner=match.winner,
    )

    if m.winner is not None:
        return m  # Match already over

    if side == "left":
        m.p2_score += 1
    elif side == "right":
        m.p1_score += 1
    else:
        raise ValueError(f"side must be 'left' or 'right', got {side!r}")

    m.history.append({
        "p1": m.p1_score,
        "p2": m.p2_score,
        "side": side,
    })

    if m.p1_score >= m.target:
        m.winner = 1
    elif m.p2_score >= m.target:
        m.winner = 2

    logging.info(f"Goal on the {side} edge. Score {m.p1_score} - {m.p2_score}.")
    return m


def create_match(target: int = constants.TARGET_SCORE) -> Match:
    """Create a new match with default state."""
    if target < 1:
        raise ValueError(f"target score must be at least 1, got {target}")
    return Match(target=target)
