"""
Tests for the threaded engine: shutdown token, signal queue,
simulation loop and control loop.
"""
import logging
import threading
import time

from grid_shooter.engine.control import ControlLoop
from grid_shooter.engine.loop import SimulationLoop
from grid_shooter.engine.signals import ShutdownToken, Signal, SignalQueue
from grid_shooter.errors import InvariantViolation
from grid_shooter.gameplay.game import Game, GameConfig
from grid_shooter.gameplay.grid import Coord, Direction
from grid_shooter.gameplay.entities import EntityKind, new_enemy
from grid_shooter.ui.input_handler import InputHandler, InputReader


def drain(signals: SignalQueue) -> list:
    out = []
    signal = signals.get(timeout=0)
    while signal is not None:
        out.append(signal)
        signal = signals.get(timeout=0)
    return out


def doomed_game(frame_rate_ms: int = 5) -> Game:
    """A game where moving up walks straight into an enemy."""
    game = Game(GameConfig(width=10, height=10, frame_rate_ms=frame_rate_ms, cursor_pos=Coord(5, 7)))
    game.spawn(new_enemy(Coord(5, 6), game.clock))
    return game


class TestShutdownToken:
    """Termination is broadcast exactly once."""

    def test_first_signal_wins(self):
        """Only the first signal reports that it triggered shutdown."""
        token = ShutdownToken()
        assert not token.is_set()
        assert token.signal("quit") is True
        assert token.signal("game over") is False
        assert token.is_set()
        assert token.reason == "quit"

    def test_concurrent_signals(self):
        """Many threads signalling at once: exactly one wins, none fail."""
        token = ShutdownToken()
        results = []
        lock = threading.Lock()

        def fire():
            won = token.signal("race")
            with lock:
                results.append(won)

        threads = [threading.Thread(target=fire) for _ in range(16)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert results.count(True) == 1
        assert len(results) == 16

    def test_fail_records_error(self):
        """fail() keeps the first error and signals shutdown."""
        token = ShutdownToken()
        error = RuntimeError("boom")
        token.fail(error)
        token.fail(ValueError("later"))
        assert token.is_set()
        assert token.error is error

    def test_wait(self):
        """wait() returns once signalled."""
        token = ShutdownToken()
        assert token.wait(0.01) is False
        token.signal()
        assert token.wait(0.01) is True


class TestSignalQueue:
    """Tests for the render signal queue."""

    def test_get_timeout(self):
        assert SignalQueue().get(timeout=0.01) is None

    def test_drain_renders_keeps_game_over(self):
        """Coalescing renders never swallows a GAME_OVER."""
        signals = SignalQueue()
        signals.put(Signal.RENDER)
        signals.put(Signal.RENDER)
        signals.put(Signal.GAME_OVER)
        assert signals.drain_renders() == Signal.GAME_OVER
        assert signals.get(timeout=0) is None


class TestSimulationLoop:
    """Tests for the tick thread."""

    def test_render_signal_when_dirty(self, game, signals, shutdown):
        """A tick that changed the world posts exactly one RENDER."""
        loop = SimulationLoop(game, signals, shutdown)
        game.queue_fire()
        assert loop.process_tick() is True
        assert drain(signals) == [Signal.RENDER]

    def test_no_signal_when_idle(self, game, signals, shutdown):
        """Idle ticks never wake the renderer."""
        loop = SimulationLoop(game, signals, shutdown)
        assert loop.process_tick() is False
        assert drain(signals) == []

    def test_overrun_is_logged(self, game, signals, shutdown, monkeypatch, caplog):
        """A tick slower than the tick interval is reported."""
        def slow_tick():
            time.sleep(0.05)
            return False

        monkeypatch.setattr(game, "tick", slow_tick)
        loop = SimulationLoop(game, signals, shutdown)

        with caplog.at_level(logging.WARNING, logger="grid_shooter.engine.loop"):
            loop.process_tick()

        assert "target: 25ms" in caplog.text

    def test_game_over_sequence(self, signals, shutdown):
        """Game over: final frame, game-over text, then shutdown."""
        game = doomed_game()
        game.queue_move(Direction.UP)
        loop = SimulationLoop(game, signals, shutdown, grace_period_ms=0)

        loop.run()

        assert game.is_over
        assert shutdown.is_set()
        assert shutdown.reason == "game over"
        assert shutdown.error is None
        assert drain(signals) == [Signal.RENDER, Signal.RENDER, Signal.GAME_OVER]

    def test_stops_on_shutdown(self, game, signals, shutdown):
        """The thread exits promptly once shutdown is signalled."""
        loop = SimulationLoop(game, signals, shutdown)
        loop.start()
        assert loop.is_running
        time.sleep(0.05)
        shutdown.signal("test")
        loop.join(timeout=2)
        assert not loop.is_running
        assert game.clock > 0

    def test_clock_frozen_after_shutdown(self, game, signals, shutdown):
        """No tick runs once shutdown is set."""
        shutdown.signal("before start")
        loop = SimulationLoop(game, signals, shutdown)
        loop.run()
        assert game.clock == 0

    def test_invariant_violation_is_fatal(self, game, signals, shutdown):
        """An internal-consistency fault stops the loop and is recorded."""
        game.world.remove(game.cursor_pos)
        game.queue_move(Direction.UP)
        loop = SimulationLoop(game, signals, shutdown)

        loop.run()

        assert shutdown.is_set()
        assert isinstance(shutdown.error, InvariantViolation)


class TestControlLoop:
    """Tests for the main-thread coordinator."""

    def test_renders_are_coalesced(self, game, signals, shutdown, recording_renderer):
        """A burst of RENDER signals draws one frame."""
        control = ControlLoop(game, recording_renderer, signals, shutdown, exit_delay_ms=0)
        for _ in range(5):
            signals.put(Signal.RENDER)
        control.dispatch(signals.get(timeout=0))
        assert recording_renderer.calls == ["render"]
        assert control.frames_drawn == 1

    def test_game_over_after_final_frame(self, game, signals, shutdown, recording_renderer):
        """Queued work is flushed before exiting, in order."""
        control = ControlLoop(game, recording_renderer, signals, shutdown, exit_delay_ms=0)
        signals.put(Signal.RENDER)
        signals.put(Signal.GAME_OVER)
        shutdown.signal("game over")

        control.run()

        assert recording_renderer.calls == ["render", ("game_over", 0, None), "exit"]

    def test_game_over_shows_cause(self, signals, shutdown, recording_renderer):
        """The game-over text names what the player ran into."""
        game = doomed_game()
        game.queue_move(Direction.UP)
        game.tick()
        control = ControlLoop(game, recording_renderer, signals, shutdown, exit_delay_ms=0)

        control.dispatch(Signal.GAME_OVER)

        assert recording_renderer.calls == [("game_over", 0, EntityKind.ENEMY)]

    def test_frame_is_a_snapshot(self, game, signals, shutdown, recording_renderer):
        """The renderer gets a copy, not the live world."""
        control = ControlLoop(game, recording_renderer, signals, shutdown, exit_delay_ms=0)
        control.draw()
        snapshot, score = recording_renderer.frames[0]
        game.world.remove(game.cursor_pos)
        assert game.cursor_pos in snapshot
        assert score == 0

    def test_exits_on_quit(self, game, signals, shutdown, recording_renderer):
        """A quit from another thread ends run()."""
        control = ControlLoop(game, recording_renderer, signals, shutdown, exit_delay_ms=0, poll_interval=0.01)
        timer = threading.Timer(0.05, shutdown.signal, args=("quit",))
        timer.start()
        control.run()
        timer.join()
        assert recording_renderer.calls[-1] == "exit"


class TestWholeGame:
    """All three activities running together."""

    def test_play_until_game_over(self, signals, shutdown, recording_renderer):
        """A scripted keystroke walks the cursor into an enemy and the game shuts itself down."""
        game = doomed_game()
        keys = ["x", "w"]

        def read_key(timeout):
            if keys:
                return keys.pop(0)
            time.sleep(timeout)
            return ""

        simulation = SimulationLoop(game, signals, shutdown, grace_period_ms=0)
        reader = InputReader(InputHandler(game, shutdown), read_key, shutdown, poll_timeout=0.01)
        control = ControlLoop(game, recording_renderer, signals, shutdown, exit_delay_ms=0, poll_interval=0.01)

        simulation.start()
        reader.start()
        control.run()
        simulation.join(timeout=2)
        reader.join(timeout=2)

        assert game.is_over
        assert shutdown.reason == "game over"
        assert ("game_over", 0, EntityKind.ENEMY) in recording_renderer.calls
        assert recording_renderer.calls[-1] == "exit"
        # The last frame drawn shows the explosion where the enemy was
        last_snapshot, _ = recording_renderer.frames[-1]
        assert last_snapshot[Coord(5, 6)].name == "explosion"
