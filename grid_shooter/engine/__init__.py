"""
Threaded engine for Grid Shooter: simulation loop, control loop and shutdown signalling.
"""

from grid_shooter.engine.control import ControlLoop
from grid_shooter.engine.loop import SimulationLoop
from grid_shooter.engine.signals import ShutdownToken, Signal, SignalQueue

__all__ = ["ControlLoop", "ShutdownToken", "Signal", "SignalQueue", "SimulationLoop"]
