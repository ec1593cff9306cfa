"""
Pytest fixtures for Grid Shooter tests.
"""
import pytest

from grid_shooter.gameplay.game import Game, GameConfig
from grid_shooter.gameplay.grid import Coord
from grid_shooter.engine.signals import ShutdownToken, SignalQueue


# A 10x10 arena: interior is x, y in 1..8. Cursor starts near the bottom.
SMALL_CURSOR = Coord(5, 7)


@pytest.fixture
def small_config() -> GameConfig:
    """A small arena with no enemies and a 25ms tick."""
    return GameConfig(width=10, height=10, frame_rate_ms=25, cursor_pos=SMALL_CURSOR, start_num_enemies=0)


@pytest.fixture
def game(small_config) -> Game:
    """An empty small game: walls and cursor only."""
    return Game(small_config)


@pytest.fixture
def shutdown() -> ShutdownToken:
    return ShutdownToken()


@pytest.fixture
def signals() -> SignalQueue:
    return SignalQueue()


class RecordingRenderer:
    """Stands in for the terminal renderer and remembers what it was asked to draw."""

    def __init__(self):
        self.calls = []
        self.frames = []

    def render(self, snapshot, score):
        self.calls.append("render")
        self.frames.append((snapshot, score))

    def show_game_over(self, score, cause=None):
        self.calls.append(("game_over", score, cause))

    def show_exit(self):
        self.calls.append("exit")


@pytest.fixture
def recording_renderer() -> RecordingRenderer:
    return RecordingRenderer()
