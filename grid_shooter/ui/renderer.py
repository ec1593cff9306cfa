"""
Renderer - Draws world snapshots to the terminal.
This is a THIN ADAPTER - no game logic here.
"""
import sys
from typing import Dict, List, Optional, TextIO

from blessed import Terminal

from grid_shooter.gameplay.game import GameConfig
from grid_shooter.gameplay.grid import Coord
from grid_shooter.gameplay.entities import Entity, EntityKind
from grid_shooter.gameplay.constants import EMPTY_GLYPH


# Raw mode has no line discipline, so every line needs its own carriage return
NEWLINE = "\r\n"
PADDING = "  "

INSTRUCTIONS = [
    "Grid Shooter",
    "",
    "w/a/s/d: move    space: fire    q: quit",
    "",
]


def header_lines(score: int) -> List[str]:
    """Instructions plus the live score line."""
    return INSTRUCTIONS + [f"Score: {score}", ""]


def death_message(cause: EntityKind) -> str:
    name = cause.name.lower()
    article = "an" if name[0] in "aeiou" else "a"
    return f"You ran into {article} {name}."


def compose_frame(
    snapshot: Dict[Coord, Entity],
    width: int,
    height: int,
    header: Optional[List[str]] = None,
) -> str:
    """
    Build a full-screen text frame from a world snapshot.

    Each grid row is one line: the occupant's glyph for every column,
    or a blank. Header lines are printed above the grid.
    """
    lines = []
    for text in header or []:
        lines.append(PADDING + text)

    for y in range(height):
        row = []
        for x in range(width):
            entity = snapshot.get(Coord(x, y))
            row.append(entity.glyph if entity is not None else EMPTY_GLYPH)
        lines.append(PADDING + "".join(row))

    return NEWLINE.join(lines) + NEWLINE


class Renderer:
    """
    Writes frames to a terminal.

    This class reads snapshots but never touches the game. Without a
    Terminal it writes plain frames, which is what tests use.
    """

    def __init__(self, config: GameConfig, term: Optional[Terminal] = None, out: Optional[TextIO] = None):
        self.width = config.width
        self.height = config.height
        self.term = term
        self.out = out if out is not None else sys.stdout

    def render(self, snapshot: Dict[Coord, Entity], score: int) -> None:
        """Redraw the whole screen from the top-left corner."""
        frame = compose_frame(snapshot, self.width, self.height, header_lines(score))
        home = self.term.home if self.term is not None else ""
        self._write(home + frame)

    def show_game_over(self, score: int, cause: Optional[EntityKind] = None) -> None:
        text = f"{NEWLINE}\n{PADDING}Game over!"
        if cause is not None:
            text += f" {death_message(cause)}"
        self._write(f"{text}{NEWLINE}\n{PADDING}Score: {score}")

    def show_exit(self) -> None:
        self._write(f"{NEWLINE}\nExiting...")

    def _write(self, text: str) -> None:
        self.out.write(text)
        self.out.flush()
