#!/usr/bin/env python3
"""CLI entry point for the SingPong pitch simulator.

Usage:
    python main.py play              Launch Pygame visualizer
    python main.py round             Simulate one round (text mode)
    python main.py match [target]    Simulate a full match and print stats
    python main.py analyze           Generate analysis charts
    python main.py test              Run all tests

Settings are read from config.json next to this file when it exists.
"""

import os
import sys

from pongcore.config import PitchConfig, load_config, pitch_config, setup_logging

PROJECT_DIR = os.path.dirname(os.path.abspath(__file__))
CONFIG_PATH = os.path.join(PROJECT_DIR, "config.json")


def _load_settings() -> PitchConfig:
    config = load_config(CONFIG_PATH) if os.path.exists(CONFIG_PATH) else {}
    setup_logging(config)
    return pitch_config(config)


def _build(config: PitchConfig):
    import random
    from pongcore.game import build_pitch
    from pongcore.physics import BallSimulator

    grid = build_pitch(config, config.screen_height, config.screen_width)
    ball = BallSimulator(radius=config.ball_radius, speed=config.ball_speed, rng=random.Random(config.seed))
    return grid, ball


def cmd_play():
    """Launch the Pygame visualizer."""
    config = _load_settings()
    print("Launching SingPong...")
    print("Controls: SPACE=pause  R=restart  Q=quit")
    print("-" * 60)
    from pongview.visualizer import run_visualizer
    run_visualizer(config)


def cmd_round():
    """Simulate one round and print the bounces and the exit."""
    from pongcore.game import simulate_round
    from pongcore.types import BounceEvent

    config = _load_settings()
    grid, ball = _build(config)
    result = simulate_round(grid, ball, max_steps=config.max_round_steps)
    start = result.states[0]

    print("=" * 60)
    print(f"  Pitch: {grid.width}x{grid.height} cells, wall margin {grid.wall_margin}")
    print(f"  Serve: from {start.position.as_tuple()} at {start.velocity.as_tuple()}")
    for e in result.events:
        if isinstance(e, BounceEvent):
            print(f"  tick {e.tick:5d}  bounce on {type(e.surface).__name__:14s} at {e.pos.as_tuple()}")
    last = result.states[-1]
    print(f"  Finished: {result.reason} after {result.ticks} ticks at {last.position.as_tuple()}")
    if result.winner:
        print(f"  Goal for Player {result.winner}")
    print("=" * 60)


def cmd_match():
    """Simulate a full match and print stats."""
    from pongcore.game import simulate_match

    config = _load_settings()
    target = int(sys.argv[2]) if len(sys.argv) > 2 else config.target_score
    grid, ball = _build(config)
    result = simulate_match(grid, ball, target=target, max_steps=config.max_round_steps)
    m = result.match
    s = result.stats

    print("=" * 60)
    print("  SINGPONG MATCH")
    print("=" * 60)
    for i, rnd in enumerate(result.rounds):
        score_after = m.history[i] if i < len(m.history) else {}
        print(f"  Round {i+1:3d}: {rnd.ticks:5d} ticks, {rnd.reason:7s} "
              f"[{score_after.get('p1', '?')}-{score_after.get('p2', '?')}]")
    print()
    print(f"  FINAL SCORE: {m.p1_score} - {m.p2_score}")
    if m.winner:
        print(f"  WINNER: Player {m.winner}")
    print(f"  Avg round length: {s['avg_round_ticks']} ticks (max {s['max_round_ticks']})")
    print(f"  Bounces: {s['bounces']}  {s['bounces_by_surface']}")
    print(f"  Round outcomes: {s['reasons']}")
    print("=" * 60)


def cmd_analyze():
    """Generate all analysis charts."""
    config = _load_settings()
    print("Generating analysis charts...")
    print("-" * 60)
    from pongview.analysis import generate_all_charts
    output_dir = os.path.join(PROJECT_DIR, "output")
    paths = generate_all_charts(output_dir=output_dir, config=config)
    print(f"\nDone! {len(paths)} charts saved to {output_dir}/")


def cmd_test():
    """Run all tests."""
    import subprocess
    print("Running tests...")
    print("-" * 60)
    result = subprocess.run(
        [sys.executable, "-m", "pytest", "tests/", "-v"],
        cwd=PROJECT_DIR,
    )
    sys.exit(result.returncode)


COMMANDS = {
    "play": cmd_play,
    "round": cmd_round,
    "match": cmd_match,
    "analyze": cmd_analyze,
    "test": cmd_test,
}


def main():
    if len(sys.argv) < 2 or sys.argv[1] not in COMMANDS:
        print(__doc__)
        print("Available commands:")
        for name, func in COMMANDS.items():
            print(f"  {name:12s} {func.__doc__}")
        sys.exit(1)

    COMMANDS[sys.argv[1]]()


if __name__ == "__main__":
    main()
