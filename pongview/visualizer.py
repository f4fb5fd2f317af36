"""Pygame visualizer — renders the pitch driver frame by frame, auto-scoring goals."""

import logging
from typing import Optional

import pygame

from pongcore import constants
from pongcore.config import PitchConfig
from pongcore.game import PitchDriver
from pongcore.pitch import PitchGrid
from pongcore.types import GoalEvent, OutEvent

FPS = 60
HEADER_H = 42

# Colors
BG_COLOR = (0, 0, 0)
BALL_RED = (220, 30, 30)
WALL_GRAY = (70, 70, 90)
PADDLE_WHITE = (230, 230, 230)
PADDLE_ANGLED = (78, 205, 196)
CENTRE_LINE = (40, 40, 60)
CARD_BG = (26, 26, 46)
ACCENT = (233, 69, 96)
TEXT_WHITE = (224, 224, 224)
TEXT_DIM = (136, 136, 136)

_CELL_COLORS = {
    constants.CODE_TOP_WALL: WALL_GRAY,
    constants.CODE_BOTTOM_WALL: WALL_GRAY,
    constants.CODE_PADDLE_MIDDLE: PADDLE_WHITE,
}


def _render_pitch(grid: PitchGrid, size: tuple) -> "pygame.Surface":
    """Pre-render the static cells of a pitch onto a surface."""
    surface = pygame.Surface(size)
    surface.fill(BG_COLOR)
    cell = grid.discretisation

    mid_x = grid.width * cell // 2
    pygame.draw.line(surface, CENTRE_LINE, (mid_x, 0), (mid_x, size[1]), 2)

    for y, row in enumerate(grid.codes()):
        for x, code in enumerate(row):
            if code == constants.CODE_OPEN:
                continue
            color = _CELL_COLORS.get(code, PADDLE_ANGLED)
            pygame.draw.rect(surface, color, (x * cell, y * cell, cell, cell))
    return surface


def run_visualizer(config: Optional[PitchConfig] = None):
    """Launch the Pygame visualizer."""
    config = config if config is not None else PitchConfig()

    pygame.init()
    screen = pygame.display.set_mode(
        (config.screen_width, config.screen_height + HEADER_H), pygame.RESIZABLE
    )
    pygame.display.set_caption("SingPong")
    clock = pygame.time.Clock()

    font_sm = pygame.font.SysFont("monospace", 12)
    font_title = pygame.font.SysFont("monospace", 15, bold=True)
    font_xl = pygame.font.SysFont("monospace", 28, bold=True)

    driver = PitchDriver(config)
    pitch_surface = None
    status = "SPACE: pause  R: restart  Q: quit"

    def apply_geometry(width, height):
        nonlocal pitch_surface, status
        pitch_h = height - HEADER_H
        if driver.resize(pitch_h, width):
            pitch_surface = _render_pitch(driver.grid, (width, pitch_h))
            status = f"Pitch {driver.grid.width}x{driver.grid.height} cells"
        else:
            pitch_surface = None
            status = "Window too small to play"

    apply_geometry(*screen.get_size())
    paused = False
    running = True

    while running:
        clock.tick(FPS)

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.VIDEORESIZE:
                screen = pygame.display.set_mode((event.w, event.h), pygame.RESIZABLE)
                apply_geometry(event.w, event.h)
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_q:
                    running = False
                elif event.key == pygame.K_SPACE:
                    paused = not paused
                elif event.key == pygame.K_r:
                    driver.restart()
                    status = "New match"

        if not paused:
            for e in driver.tick():
                if isinstance(e, GoalEvent):
                    status = f"Goal scored by Player {e.scorer}!"
                elif isinstance(e, OutEvent):
                    status = f"Ball left the pitch at y={e.pos.y}; press R"
            if driver.match.winner is not None:
                status = f"GAME OVER! P{driver.match.winner} wins - press R"

        # ---- DRAW ----
        screen.fill(BG_COLOR)

        pygame.draw.rect(screen, CARD_BG, (0, 0, screen.get_width(), HEADER_H))
        pygame.draw.line(screen, ACCENT, (0, HEADER_H - 1), (screen.get_width(), HEADER_H - 1), 2)
        screen.blit(font_title.render("SINGPONG", True, TEXT_WHITE), (12, 13))
        score = font_xl.render(f"{driver.match.p1_score}  -  {driver.match.p2_score}", True, TEXT_WHITE)
        screen.blit(score, ((screen.get_width() - score.get_width()) // 2, 6))
        msg = font_sm.render(status, True, TEXT_DIM)
        screen.blit(msg, (screen.get_width() - msg.get_width() - 10, 16))

        if pitch_surface is not None:
            screen.blit(pitch_surface, (0, HEADER_H))
            pixel = driver.ball_pixel_position()
            if pixel is not None:
                bx, by = pixel
                pygame.draw.circle(screen, BALL_RED, (int(bx), int(by) + HEADER_H), driver.ball.radius)

        pygame.display.flip()

    logging.info("Visualizer closed.")
    pygame.quit()
