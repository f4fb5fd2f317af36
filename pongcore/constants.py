"""Pitch geometry, ball defaults and surface encodings.

Physical sizes are in screen pixels. Everything the simulator touches is in
grid cells, one cell being DISCRETISATION pixels on a side.
Row 0 of the grid is the top of the pitch.
"""

# Default screen (used when no surface geometry has been reported yet)
SCREEN_WIDTH = 1280
SCREEN_HEIGHT = 720

# Grid
DISCRETISATION = 10  # pixels per grid cell

# Ball
BALL_RADIUS = 50  # pixels, used for drawing and to size the wall margin
BALL_SPEED = 5  # grid cells per timestep

# Velocity sampling on reset
VELOCITY_SAMPLE_RANGE = 1000  # components drawn from [0, VELOCITY_SAMPLE_RANGE)
MAX_VELOCITY_SAMPLES = 1000  # attempts before falling back to (BALL_SPEED, 0)

# Surface codes, as stored by the original int[][] pitch
CODE_OPEN = 0
CODE_TOP_WALL = -100
CODE_BOTTOM_WALL = -200
CODE_PADDLE_MIDDLE = 100
# Angled paddle cells store their own vertical normal component, relative to
# a horizontal component of PADDLE_HORIZONTAL_COMPONENT
PADDLE_HORIZONTAL_COMPONENT = 5.0
PADDLE_MAX_ANGLE = 3

# Rounds and matches
MAX_ROUND_STEPS = 10_000
TARGET_SCORE = 11
MAX_MATCH_ROUNDS = 200
