"""
Control loop: the main-thread coordinator between render signals and shutdown.
"""

import logging
import time
from typing import Protocol

from grid_shooter.engine.signals import ShutdownToken, Signal, SignalQueue
from grid_shooter.gameplay.constants import EXIT_DELAY_MS
from grid_shooter.gameplay.entities import EntityKind
from grid_shooter.gameplay.game import Game, PlayerDiedEvent

logger = logging.getLogger(__name__)


class FrameSink(Protocol):
    """What the control loop needs from a renderer."""

    def render(self, snapshot: dict, score: int) -> None: ...

    def show_game_over(self, score: int, cause: EntityKind | None = None) -> None: ...

    def show_exit(self) -> None: ...


class ControlLoop:
    """
    Waits for RENDER / GAME_OVER signals and draws on demand.
    Never polls the world on its own: a frame is drawn only when the
    simulation says something changed.

    Returns from run() once shutdown is broadcast, after printing the
    exit message and pausing briefly.
    """

    def __init__(
        self,
        game: Game,
        renderer: FrameSink,
        signals: SignalQueue,
        shutdown: ShutdownToken,
        exit_delay_ms: int = EXIT_DELAY_MS,
        poll_interval: float = 0.05,
    ) -> None:
        self._game = game
        self._renderer = renderer
        self._signals = signals
        self._shutdown = shutdown
        self._exit_delay_ms = exit_delay_ms
        self._poll_interval = poll_interval
        self.frames_drawn = 0

    def run(self) -> None:
        while not self._shutdown.is_set():
            self.dispatch(self._signals.get(timeout=self._poll_interval))

        # The last frame and game-over text may still be queued
        signal = self._signals.get(timeout=0)
        while signal is not None:
            self.dispatch(signal)
            signal = self._signals.get(timeout=0)

        self._renderer.show_exit()
        time.sleep(self._exit_delay_ms / 1000)

    def dispatch(self, signal: Signal | None) -> None:
        """Handle one signal, plus anything pulled out while coalescing renders."""
        while signal is not None:
            if signal == Signal.RENDER:
                # Renders queued behind this one would draw the same world
                pending = self._signals.drain_renders()
                self.draw()
                signal = pending
            elif signal == Signal.GAME_OVER:
                self._renderer.show_game_over(self._game.score, self.death_cause())
                signal = None

    def draw(self) -> None:
        """Draw one frame from a consistent snapshot of the world."""
        self._renderer.render(self._game.world.snapshot(), self._game.score)
        self.frames_drawn += 1

    def death_cause(self) -> EntityKind | None:
        """What the player ran into, read from the final tick's events."""
        for event in self._game.events:
            if isinstance(event, PlayerDiedEvent):
                return event.cause
        return None
