"""
Game constants - all magic numbers in one place.
NO UI DEPENDENCIES.
"""

# =============================================================================
# GRID
# =============================================================================
DEFAULT_WIDTH = 30    # cells
DEFAULT_HEIGHT = 20   # cells
MIN_GRID_SIZE = 3     # smallest grid with a non-empty interior

# =============================================================================
# TIMING (all in milliseconds of simulation time)
# =============================================================================
DEFAULT_FRAME_RATE_MS = 25    # tick interval
ENEMY_STEP_MS = 1000          # enemies patrol one step per second
BULLET_STEP_MS = 50           # bullets fly one cell per 50ms
BULLET_TTL_MS = 1000
EXPLOSION_TTL_MS = 500
GAME_OVER_GRACE_MS = 1000     # time to read the final score
EXIT_DELAY_MS = 500

# =============================================================================
# SPAWNING
# =============================================================================
DEFAULT_START_NUM_ENEMIES = 15
FORMATION_TOP_ROW = 2         # first row of the enemy formation
FORMATION_ROWS = 3

# =============================================================================
# GLYPHS
# =============================================================================
WALL_GLYPH = '\u2593'          # ▓
ENEMY_GLYPH = '\u25c8'         # ◈
CURSOR_GLYPH = '\U0001f726'    # 🜦
BULLET_GLYPH = '\u2022'        # •
EXPLOSION_GLYPH = '\u273a'     # ✺
EMPTY_GLYPH = ' '

# Enemy patrol: drifts down while weaving left and right.
ENEMY_PATTERN = ((0, 1), (1, 1), (-1, 1), (-1, 1), (1, 1))
BULLET_PATTERN = ((0, -1),)
