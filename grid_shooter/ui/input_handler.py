"""
Input Handler - Translates key presses to gameplay commands.
This is a THIN ADAPTER - no game logic here.
"""
import logging
import threading
from typing import Callable, Optional

from grid_shooter.engine.signals import ShutdownToken
from grid_shooter.errors import InputReadError
from grid_shooter.gameplay.game import Game
from grid_shooter.gameplay.grid import Direction

logger = logging.getLogger(__name__)


# Key mappings (matched case-insensitively)
MOVE_KEYS = {
    'w': Direction.UP,
    'a': Direction.LEFT,
    's': Direction.DOWN,
    'd': Direction.RIGHT,
}

# Named keys reported by the terminal for escape sequences
ARROW_KEYS = {
    'KEY_UP': Direction.UP,
    'KEY_LEFT': Direction.LEFT,
    'KEY_DOWN': Direction.DOWN,
    'KEY_RIGHT': Direction.RIGHT,
}

QUIT_KEY = 'q'
FIRE_KEY = ' '


class InputHandler:
    """
    Handles keyboard input and translates to game commands.

    Moves and shots are queued on the game and applied by the next
    tick. Quit broadcasts shutdown directly.
    """

    def __init__(self, game: Game, shutdown: ShutdownToken):
        self.game = game
        self.shutdown = shutdown

    def handle_key(self, key: str) -> bool:
        """
        Handle a single key press.
        Returns True if input reading should stop.
        """
        name = getattr(key, 'name', None)
        if name in ARROW_KEYS:
            self.game.queue_move(ARROW_KEYS[name])
            return False

        char = str(key).lower()

        if char == QUIT_KEY:
            self.shutdown.signal("quit")
            return True

        if char in MOVE_KEYS:
            self.game.queue_move(MOVE_KEYS[char])
        elif char == FIRE_KEY:
            self.game.queue_fire()
        # Anything else is ignored

        return False


class InputReader:
    """
    Reads keys one at a time on a background thread.

    `read_key(timeout)` blocks for the next key and returns an empty
    string if none arrived within `timeout` seconds; the timeout only
    exists so the thread notices shutdown. A read failure is fatal for
    the whole game.
    """

    def __init__(
        self,
        handler: InputHandler,
        read_key: Callable[[float], str],
        shutdown: ShutdownToken,
        poll_timeout: float = 0.1,
    ):
        self.handler = handler
        self._read_key = read_key
        self._shutdown = shutdown
        self._poll_timeout = poll_timeout
        self._thread: Optional[threading.Thread] = None

    def start(self) -> None:
        """Start the input thread."""
        self._thread = threading.Thread(target=self.run, name="input", daemon=True)
        self._thread.start()

    def join(self, timeout: Optional[float] = None) -> None:
        if self._thread:
            self._thread.join(timeout)

    def run(self) -> None:
        while not self._shutdown.is_set():
            try:
                key = self._read_key(self._poll_timeout)
            except Exception as e:
                logger.exception("Error reading input")
                error = InputReadError(f"Error reading input: {e}")
                error.__cause__ = e
                self._shutdown.fail(error)
                return

            if not key:
                continue
            if self.handler.handle_key(key):
                return
