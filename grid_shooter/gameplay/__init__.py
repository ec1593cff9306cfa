"""
Gameplay for Grid Shooter. Pure simulation, no terminal dependencies.
"""

from grid_shooter.gameplay.game import Game, GameConfig, GamePhase
from grid_shooter.gameplay.grid import Coord, Direction
from grid_shooter.gameplay.level import create_game
from grid_shooter.gameplay.world import WorldStore

__all__ = ["Coord", "Direction", "Game", "GameConfig", "GamePhase", "WorldStore", "create_game"]
