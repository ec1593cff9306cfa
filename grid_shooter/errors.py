"""
Exceptions raised by Grid Shooter.
"""


class GridShooterError(Exception):
    """Base class for all Grid Shooter errors."""


class TerminalSetupError(GridShooterError):
    """The terminal could not be put into the mode the game needs."""


class InvariantViolation(GridShooterError):
    """The world is in a state the simulation cannot continue from."""


class InputReadError(GridShooterError):
    """Reading the next key from the input source failed."""
