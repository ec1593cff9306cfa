"""
Level setup - the starting world for a new game.
NO UI DEPENDENCIES.
"""
import logging
from typing import List, Optional

from .grid import Coord, in_interior
from .entities import new_enemy
from .game import Game, GameConfig
from .constants import FORMATION_TOP_ROW, FORMATION_ROWS

logger = logging.getLogger(__name__)


def formation_positions(count: int, width: int, height: int) -> List[Coord]:
    """
    Lay out up to `count` enemies in a staggered block near the top.

    Enemies fill columns two cells apart, three rows deep, with the
    middle row shifted one cell right:

        ◈ ◈ ◈
         ◈ ◈ ◈
        ◈ ◈ ◈

    The block is centred horizontally. Positions that fall outside the
    wall ring are dropped, so small grids get fewer enemies.
    """
    columns = (count + FORMATION_ROWS - 1) // FORMATION_ROWS
    block_width = 2 * columns
    left = max(1, (width - block_width) // 2)

    positions: List[Coord] = []
    for i in range(count):
        column, row = divmod(i, FORMATION_ROWS)
        x = left + 2 * column + (1 if row == 1 else 0)
        y = FORMATION_TOP_ROW + row
        pos = Coord(x, y)
        if in_interior(pos, width, height):
            positions.append(pos)
    return positions


def populate_enemies(game: Game, count: int) -> int:
    """
    Spawn the starting formation into a game.
    Returns how many enemies were placed.
    """
    placed = 0
    for pos in formation_positions(count, game.config.width, game.config.height):
        if game.spawn(new_enemy(pos, game.clock)):
            placed += 1
    if placed < count:
        logger.warning(f"Only {placed} of {count} enemies fit on a "
                       f"{game.config.width}x{game.config.height} grid")
    return placed


def create_game(config: Optional[GameConfig] = None) -> Game:
    """Create a new game: wall ring, cursor and the starting enemy formation."""
    game = Game(config)
    populate_enemies(game, game.config.start_num_enemies)
    logger.info(
        f"New game: {game.config.width}x{game.config.height} grid, "
        f"{len(game.world)} entities, tick {game.config.frame_rate_ms}ms"
    )
    return game
