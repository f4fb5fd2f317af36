"""Matplotlib analysis charts — surface map, round trajectory, round lengths."""

import os
import random
from typing import Optional

import matplotlib
matplotlib.use("Agg")  # Non-interactive backend
import matplotlib.pyplot as plt
import numpy as np
from matplotlib.colors import BoundaryNorm, ListedColormap

from pongcore import constants
from pongcore.config import PitchConfig
from pongcore.game import RoundResult, build_pitch, simulate_round
from pongcore.physics import BallSimulator
from pongcore.pitch import PitchGrid
from pongcore.types import BounceEvent, GoalEvent

# Surface codes in ascending order, with the colour used for each
_SURFACE_LEVELS = [
    (constants.CODE_BOTTOM_WALL, "#555577", "Bottom wall"),
    (constants.CODE_TOP_WALL, "#777799", "Top wall"),
    (-3, "#1b7f79", "Paddle -3"),
    (-2, "#2a9d8f", "Paddle -2"),
    (-1, "#4ecdc4", "Paddle -1"),
    (constants.CODE_OPEN, "#0f0f1a", "Open"),
    (1, "#f4a261", "Paddle +1"),
    (2, "#e76f51", "Paddle +2"),
    (3, "#d62828", "Paddle +3"),
    (constants.CODE_PADDLE_MIDDLE, "#e0e0e0", "Paddle middle"),
]


def _style_chart(ax, title):
    """Apply dark theme styling to chart."""
    ax.set_facecolor("#0f0f1a")
    ax.set_title(title, color="#e0e0e0", fontsize=13, fontweight="bold", pad=12)
    ax.tick_params(colors="#888888", labelsize=9)
    ax.spines["top"].set_visible(False)
    ax.spines["right"].set_visible(False)
    ax.spines["bottom"].set_color("#333333")
    ax.spines["left"].set_color("#333333")
    ax.xaxis.label.set_color("#aaaaaa")
    ax.yaxis.label.set_color("#aaaaaa")


def surface_index_map(grid: PitchGrid) -> np.ndarray:
    """Grid as a (height, width) array of indices into _SURFACE_LEVELS."""
    codes = np.array(grid.codes(), dtype=int)
    levels = np.array([code for code, _, _ in _SURFACE_LEVELS])
    return np.searchsorted(levels, codes)


def chart_surface_map(grid: PitchGrid, save_path=None):
    """Chart 1: Surface map of the pitch, row 0 at the top."""
    index_map = surface_index_map(grid)
    cmap = ListedColormap([color for _, color, _ in _SURFACE_LEVELS])
    norm = BoundaryNorm(np.arange(len(_SURFACE_LEVELS) + 1) - 0.5, cmap.N)

    fig, ax = plt.subplots(figsize=(9, 5))
    fig.set_facecolor("#0f0f1a")
    _style_chart(ax, f"Pitch Surface ({grid.width}x{grid.height} cells)")

    image = ax.imshow(index_map, cmap=cmap, norm=norm, interpolation="nearest", origin="upper")
    cbar = fig.colorbar(image, ax=ax, ticks=np.arange(len(_SURFACE_LEVELS)))
    cbar.ax.set_yticklabels([label for _, _, label in _SURFACE_LEVELS], color="#aaaaaa", fontsize=8)

    ax.set_xlabel("x (cells)")
    ax.set_ylabel("y (cells)")

    plt.tight_layout()
    if save_path:
        fig.savefig(save_path, dpi=150, facecolor=fig.get_facecolor())
    return fig


def chart_round_trajectory(grid: PitchGrid, result: RoundResult, save_path=None):
    """Chart 2: Ball path over one round, with bounces and the exit marked."""
    xs = np.array([s.position.x for s in result.states])
    ys = np.array([s.position.y for s in result.states])

    fig, ax = plt.subplots(figsize=(9, 5))
    fig.set_facecolor("#0f0f1a")
    _style_chart(ax, f"Round Trajectory ({result.ticks} ticks, {result.reason})")

    ax.axhspan(-0.5, grid.wall_margin + 0.5, color="#333355", alpha=0.8)
    ax.axhspan(grid.height - 1.5 - grid.wall_margin, grid.height - 0.5, color="#333355", alpha=0.8)
    ax.plot(xs, ys, color="#e94560", linewidth=1.5, label="Ball path")
    ax.scatter([xs[0]], [ys[0]], color="#ffffff", s=40, zorder=3, label="Centre spot")

    bounces = [e for e in result.events if isinstance(e, BounceEvent)]
    if bounces:
        ax.scatter(
            [b.pos.x for b in bounces], [b.pos.y for b in bounces],
            color="#4ecdc4", s=25, zorder=3, label="Bounces",
        )
    goals = [e for e in result.events if isinstance(e, GoalEvent)]
    for g in goals:
        ax.scatter([g.pos.x], [g.pos.y], color="#ffd93d", marker="*", s=160, zorder=4, label=f"Goal ({g.side})")

    ax.set_xlim(-1, grid.width)
    ax.set_ylim(grid.height, -1)  # row 0 at the top
    ax.set_xlabel("x (cells)")
    ax.set_ylabel("y (cells)")
    ax.legend(facecolor="#1a1a2e", edgecolor="#333", labelcolor="#e0e0e0", fontsize=9)
    ax.grid(True, alpha=0.15)

    plt.tight_layout()
    if save_path:
        fig.savefig(save_path, dpi=150, facecolor=fig.get_facecolor())
    return fig


def round_lengths(grid: PitchGrid, ball: BallSimulator, n_rounds: int) -> np.ndarray:
    """Ticks taken by each of n_rounds freshly served rounds."""
    return np.array([simulate_round(grid, ball).ticks for _ in range(n_rounds)])


def chart_round_lengths(grid: PitchGrid, ball: BallSimulator, n_rounds: int = 200, save_path=None):
    """Chart 3: Distribution of round lengths over random serves."""
    ticks = round_lengths(grid, ball, n_rounds)

    fig, ax = plt.subplots(figsize=(8, 5))
    fig.set_facecolor("#0f0f1a")
    _style_chart(ax, f"Round Length over {n_rounds} Serves")

    bins = min(30, max(1, len(np.unique(ticks))))
    ax.hist(ticks, bins=bins, color="#4ecdc4", edgecolor="#0f0f1a")
    ax.axvline(ticks.mean(), color="#e94560", linestyle="--", linewidth=2, label=f"Mean {ticks.mean():.1f}")

    ax.set_xlabel("Ticks per round")
    ax.set_ylabel("Rounds")
    ax.legend(facecolor="#1a1a2e", edgecolor="#333", labelcolor="#e0e0e0", fontsize=9)
    ax.grid(True, alpha=0.15)

    plt.tight_layout()
    if save_path:
        fig.savefig(save_path, dpi=150, facecolor=fig.get_facecolor())
    return fig


def generate_all_charts(output_dir="output", config: Optional[PitchConfig] = None, n_rounds: int = 200):
    """Generate all charts and save to output_dir. Returns the saved paths."""
    config = config if config is not None else PitchConfig()
    os.makedirs(output_dir, exist_ok=True)

    grid = build_pitch(config, config.screen_height, config.screen_width)
    ball = BallSimulator(
        radius=config.ball_radius,
        speed=config.ball_speed,
        rng=random.Random(config.seed),
    )

    paths = []

    path = os.path.join(output_dir, "chart_surface_map.png")
    plt.close(chart_surface_map(grid, save_path=path))
    paths.append(path)
    print(f"  Saved: {path}")

    path = os.path.join(output_dir, "chart_round_trajectory.png")
    plt.close(chart_round_trajectory(grid, simulate_round(grid, ball), save_path=path))
    paths.append(path)
    print(f"  Saved: {path}")

    path = os.path.join(output_dir, "chart_round_lengths.png")
    print(f"  Generating round lengths ({n_rounds} serves)...")
    plt.close(chart_round_lengths(grid, ball, n_rounds=n_rounds, save_path=path))
    paths.append(path)
    print(f"  Saved: {path}")

    return paths
