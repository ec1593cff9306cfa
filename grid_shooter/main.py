#!/usr/bin/env python3
"""
Grid Shooter - Main Entry Point

Steer the cursor around the arena, shoot the descending enemies, and
don't touch the walls.

Usage:
    grid-shooter [--width N] [--height N] [--frame-rate MS] [--enemies N]

Controls:
    W/A/S/D: Move
    Space: Fire
    Q: Quit
"""
import argparse
import logging
import sys
from contextlib import contextmanager
from typing import Iterator, List, Optional

from blessed import Terminal
from pydantic import ValidationError

from grid_shooter.config import Settings
from grid_shooter.engine import ControlLoop, ShutdownToken, SignalQueue, SimulationLoop
from grid_shooter.errors import TerminalSetupError
from grid_shooter.gameplay.level import create_game
from grid_shooter.ui.input_handler import InputHandler, InputReader
from grid_shooter.ui.renderer import Renderer

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Seconds to wait for worker threads; the reader polls every 0.1s
THREAD_JOIN_TIMEOUT = 1.0

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    """Send logs to the configured file; the terminal is busy drawing the game."""
    kwargs = {"level": settings.log_level.upper(), "format": LOG_FORMAT}
    if settings.log_file:
        kwargs["filename"] = settings.log_file
    logging.basicConfig(**kwargs)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Grid Shooter - a terminal arcade game")
    parser.add_argument("--width", type=int, help="Grid width in columns")
    parser.add_argument("--height", type=int, help="Grid height in rows")
    parser.add_argument("--frame-rate", dest="frame_rate_ms", type=int, help="Tick interval in ms")
    parser.add_argument("--enemies", dest="start_num_enemies", type=int, help="Starting enemy count")
    return parser.parse_args(argv)


def load_settings(args: argparse.Namespace) -> Settings:
    """Environment settings with command-line overrides on top."""
    overrides = {k: v for k, v in vars(args).items() if v is not None}
    return Settings(**overrides)


@contextmanager
def configure_terminal(term: Terminal) -> Iterator[Terminal]:
    """
    Full screen, raw keys, hidden cursor for the duration of the game.
    Everything is restored on exit, including after errors.
    """
    if not term.is_a_tty:
        raise TerminalSetupError("Grid Shooter needs an interactive terminal")
    with term.fullscreen(), term.raw(), term.hidden_cursor():
        print(term.home + term.clear, end="", flush=True)
        yield term


def run(settings: Settings, term: Terminal) -> ShutdownToken:
    """Wire the game to the terminal and run until shutdown."""
    config = settings.to_game_config()
    game = create_game(config)

    shutdown = ShutdownToken()
    signals = SignalQueue()

    with configure_terminal(term):
        renderer = Renderer(config, term)
        control = ControlLoop(game, renderer, signals, shutdown, exit_delay_ms=settings.exit_delay_ms)
        control.draw()  # initial frame

        simulation = SimulationLoop(game, signals, shutdown, grace_period_ms=settings.grace_period_ms)
        reader = InputReader(
            InputHandler(game, shutdown),
            lambda timeout: term.inkey(timeout=timeout),
            shutdown,
        )
        simulation.start()
        reader.start()

        control.run()

        # The reader may still be inside inkey(); let it return before raw mode is undone
        reader.join(timeout=THREAD_JOIN_TIMEOUT)
        simulation.join(timeout=THREAD_JOIN_TIMEOUT)

    return shutdown


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    try:
        settings = load_settings(args)
    except ValidationError as e:
        print(f"Invalid configuration:\n{e}", file=sys.stderr)
        return 2

    configure_logging(settings)

    try:
        shutdown = run(settings, Terminal())
    except TerminalSetupError as e:
        logger.error(f"Error configuring terminal: {e}")
        print(f"Error configuring terminal: {e}", file=sys.stderr)
        return 1

    if shutdown.error is not None:
        print(f"Grid Shooter stopped: {shutdown.error}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
