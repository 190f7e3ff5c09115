"""
services/timer.py

Countdown building blocks.

  - TimerPhase:   IDLE -> RUNNING -> {EXPIRED, STOPPED}
  - Ticker:       daemon thread that calls a callback once per interval until cancelled
  - format_time:  seconds -> "HH:MM:SS"

The countdown value itself lives in SessionState; TestSession.tick() applies
each decrement under the session lock.
"""

import logging
import threading
from enum import Enum
from typing import Callable, Optional, Protocol

from config import TICK_INTERVAL_SECONDS

logger = logging.getLogger(__name__)


class TimerPhase(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    EXPIRED = "expired"
    STOPPED = "stopped"


class TickerLike(Protocol):
    """What TestSession needs from a ticker. Tests supply a manual fake."""

    def start(self) -> None:
        ...

    def cancel(self) -> None:
        """Stop scheduling ticks. Must not block."""
        ...

    def join(self, timeout: Optional[float] = None) -> None:
        ...


TickerFactory = Callable[[Callable[[], None]], TickerLike]


class Ticker:
    """
    Background one-second ticker.

    Runs in a daemon thread and calls on_tick after every interval.
    cancel() only sets an event, so it is safe to call while holding the
    session lock or from inside on_tick itself.
    """

    def __init__(self, on_tick: Callable[[], None], interval: float = TICK_INTERVAL_SECONDS):
        self.interval = interval
        self._on_tick = on_tick
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def start(self) -> None:
        if self._thread is not None:
            return
        self._thread = threading.Thread(target=self._run, name="countdown-ticker", daemon=True)
        self._thread.start()

    def _run(self) -> None:
        # Event.wait returns True once cancelled
        while not self._stop_event.wait(self.interval):
            try:
                self._on_tick()
            except Exception:
                logger.exception("Countdown tick failed, stopping ticker")
                self._stop_event.set()

    def cancel(self) -> None:
        self._stop_event.set()

    def join(self, timeout: Optional[float] = 2.0) -> None:
        thread = self._thread
        if thread is None or thread is threading.current_thread():
            return
        if thread.is_alive():
            thread.join(timeout=timeout)


def format_time(seconds: int) -> str:
    """
    Remaining time as zero-padded HH:MM:SS.

    Hours are not wrapped at 24; 90000 seconds is "25:00:00".
    """
    seconds = max(0, int(seconds))
    hours = seconds // 3600
    minutes = (seconds % 3600) // 60
    secs = seconds % 60
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"
