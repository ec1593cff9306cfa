"""
Coordination primitives shared by the simulation, input and control threads.
"""

import logging
import queue
import threading
from enum import Enum, auto

logger = logging.getLogger(__name__)


class Signal(Enum):
    """Messages from the simulation thread to the control loop."""

    RENDER = auto()
    GAME_OVER = auto()


class ShutdownToken:
    """
    One-shot termination broadcast.

    The first call to signal() wins; later calls are no-ops. Every
    activity polls is_set() or blocks in wait(). An activity that dies
    from an exception records it with fail() so the process can exit
    with an error.
    """

    def __init__(self) -> None:
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._reason: str | None = None
        self._error: BaseException | None = None

    def signal(self, reason: str = "requested") -> bool:
        """
        Broadcast termination.
        Returns True for the call that actually triggered it.
        """
        with self._lock:
            if self._event.is_set():
                return False
            self._reason = reason
            self._event.set()
        logger.info(f"Shutdown signalled ({reason})")
        return True

    def fail(self, error: BaseException) -> bool:
        """Record a fatal error and broadcast termination."""
        with self._lock:
            if self._error is None:
                self._error = error
        return self.signal(f"fatal: {error}")

    def is_set(self) -> bool:
        return self._event.is_set()

    def wait(self, timeout: float | None = None) -> bool:
        return self._event.wait(timeout)

    @property
    def reason(self) -> str | None:
        return self._reason

    @property
    def error(self) -> BaseException | None:
        return self._error


class SignalQueue:
    """Thread-safe queue of Signals with render coalescing on the read side."""

    def __init__(self) -> None:
        self._queue: queue.Queue[Signal] = queue.Queue()

    def put(self, signal: Signal) -> None:
        self._queue.put(signal)

    def get(self, timeout: float | None = None) -> Signal | None:
        """Wait for the next signal. Returns None on timeout."""
        try:
            return self._queue.get(timeout=timeout)
        except queue.Empty:
            return None

    def drain_renders(self) -> Signal | None:
        """
        Discard queued RENDER signals.
        Returns the first non-RENDER signal found, if any, so it is not lost.
        """
        while True:
            try:
                signal = self._queue.get_nowait()
            except queue.Empty:
                return None
            if signal != Signal.RENDER:
                return signal
