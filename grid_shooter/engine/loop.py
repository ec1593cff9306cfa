"""
Simulation loop for Grid Shooter.
Drives Game.tick() at a fixed rate on its own thread.
"""

import logging
import threading
import time

from grid_shooter.engine.signals import ShutdownToken, Signal, SignalQueue
from grid_shooter.gameplay.constants import GAME_OVER_GRACE_MS
from grid_shooter.gameplay.game import Game

logger = logging.getLogger(__name__)


class SimulationLoop:
    """
    Runs the game tick loop until shutdown.

    Each iteration processes one tick, posts a RENDER signal if the
    world changed, then sleeps for whatever is left of the tick
    interval. A tick always runs to completion; shutdown is only
    noticed between ticks.

    When the game ends the loop posts a final RENDER and a GAME_OVER
    signal, waits out the grace period so the score can be read, and
    broadcasts shutdown.
    """

    def __init__(
        self,
        game: Game,
        signals: SignalQueue,
        shutdown: ShutdownToken,
        grace_period_ms: int = GAME_OVER_GRACE_MS,
    ) -> None:
        self._game = game
        self._signals = signals
        self._shutdown = shutdown
        self._tick_rate_ms = game.config.frame_rate_ms
        self._grace_period_ms = grace_period_ms

        self._thread: threading.Thread | None = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start the simulation thread."""
        if self._thread is not None:
            return

        self._thread = threading.Thread(target=self.run, name="sim-tick", daemon=True)
        self._thread.start()
        logger.info(f"Simulation loop started (rate: {self._tick_rate_ms}ms)")

    def join(self, timeout: float | None = None) -> None:
        if self._thread is not None:
            self._thread.join(timeout)

    def run(self) -> None:
        """
        Main tick loop.
        Fail-fast: an internal error ends the loop and shuts the game down.
        """
        try:
            while not self._shutdown.is_set():
                tick_start = time.perf_counter()

                self.process_tick()

                if self._game.is_over:
                    self._finish()
                    break

                # Calculate sleep time to maintain tick rate
                tick_duration = (time.perf_counter() - tick_start) * 1000
                sleep_time = max(0, (self._tick_rate_ms - tick_duration) / 1000)

                # Wait for either sleep time or shutdown
                if self._shutdown.wait(sleep_time):
                    break
        except Exception as e:
            logger.exception("Simulation loop crashed")
            self._shutdown.fail(e)
        logger.info(f"Simulation loop stopped at clock {self._game.clock}ms")

    def process_tick(self) -> bool:
        """Process a single tick. Returns True if a render was requested."""
        tick_start = time.perf_counter()
        clock = self._game.clock

        render_needed = self._game.tick()
        if render_needed:
            self._signals.put(Signal.RENDER)

        tick_duration = (time.perf_counter() - tick_start) * 1000
        if tick_duration > self._tick_rate_ms:
            logger.warning(
                f"Tick at {clock}ms took {tick_duration:.1f}ms "
                f"(target: {self._tick_rate_ms}ms)"
            )
        return render_needed

    def _finish(self) -> None:
        """Game-over sequence: last frame, score, grace period, shutdown."""
        logger.info(f"Game over, final score {self._game.score}")
        self._signals.put(Signal.RENDER)
        self._signals.put(Signal.GAME_OVER)
        self._shutdown.wait(self._grace_period_ms / 1000)
        self._shutdown.signal("game over")
