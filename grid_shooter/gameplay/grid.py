"""
Grid coordinates and directions.
NO UI DEPENDENCIES.
"""
from enum import Enum, auto
from typing import NamedTuple


class Coord(NamedTuple):
    """
    A position on the grid.

    Coordinate system:
    - (0, 0) is top-left
    - x increases to the right
    - y increases downward
    """
    x: int
    y: int

    def __add__(self, other: 'Coord') -> 'Coord':  # type: ignore[override]
        return Coord(self.x + other.x, self.y + other.y)

    def __repr__(self) -> str:
        return f"Coord({self.x}, {self.y})"


class Direction(Enum):
    """Cardinal directions."""
    UP = auto()
    DOWN = auto()
    LEFT = auto()
    RIGHT = auto()

    def delta(self) -> Coord:
        """Return the unit step for this direction."""
        deltas = {
            Direction.UP: Coord(0, -1),
            Direction.DOWN: Coord(0, 1),
            Direction.LEFT: Coord(-1, 0),
            Direction.RIGHT: Coord(1, 0),
        }
        return deltas[self]


def perimeter(width: int, height: int) -> list:
    """Every cell on the border of a width x height grid, without duplicates."""
    cells = []
    for x in range(width):
        cells.append(Coord(x, 0))
        cells.append(Coord(x, height - 1))
    for y in range(1, height - 1):
        cells.append(Coord(0, y))
        cells.append(Coord(width - 1, y))
    return list(dict.fromkeys(cells))


def in_interior(pos: Coord, width: int, height: int) -> bool:
    """Check if a position lies strictly inside the wall ring."""
    return 0 < pos.x < width - 1 and 0 < pos.y < height - 1
