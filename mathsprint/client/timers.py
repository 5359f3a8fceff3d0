"""Cancellable timers used by the game session.

``ThreadingScheduler`` runs callbacks on daemon threads in real time.
``ManualScheduler`` keeps a virtual clock that only moves when
:meth:`ManualScheduler.advance` is called, so a whole 180 second game can be
replayed instantly and deterministically.
"""

import heapq
import itertools
import logging
import threading
from abc import ABC, abstractmethod
from typing import Callable, List, Optional, Tuple

logger = logging.getLogger(__name__)


class TimerHandle:
    def __init__(self):
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class Scheduler(ABC):
    @abstractmethod
    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        """Run ``callback`` once after ``delay`` seconds."""

    @abstractmethod
    def call_every(self, interval: float, callback: Callable[[], None]) -> TimerHandle:
        """Run ``callback`` every ``interval`` seconds until cancelled."""


class _ThreadTimerHandle(TimerHandle):
    def __init__(self, timer: threading.Timer):
        super().__init__()
        self._timer = timer

    def cancel(self) -> None:
        super().cancel()
        self._timer.cancel()


class _RepeatingHandle(TimerHandle):
    def __init__(self, interval: float, callback: Callable[[], None]):
        super().__init__()
        self._stop = threading.Event()
        self._thread = threading.Thread(target=self._run, args=(interval, callback), daemon=True)

    def _run(self, interval, callback):
        while not self._stop.wait(interval):
            try:
                callback()
            except Exception:
                logger.exception('[timer-error] recurring callback failed')

    def cancel(self) -> None:
        super().cancel()
        self._stop.set()


class ThreadingScheduler(Scheduler):
    def call_later(self, delay, callback):
        timer = threading.Timer(delay, callback)
        timer.daemon = True
        handle = _ThreadTimerHandle(timer)
        timer.start()
        return handle

    def call_every(self, interval, callback):
        handle = _RepeatingHandle(interval, callback)
        handle._thread.start()
        return handle


class _ManualEntry(TimerHandle):
    def __init__(self, callback: Callable[[], None], interval: Optional[float]):
        super().__init__()
        self.callback = callback
        self.interval = interval


class ManualScheduler(Scheduler):
    """Virtual-time scheduler; nothing fires until ``advance`` is called."""

    def __init__(self):
        self.now = 0.0
        self._queue: List[Tuple[float, int, _ManualEntry]] = []
        self._seq = itertools.count()

    def _push(self, due: float, entry: _ManualEntry) -> None:
        heapq.heappush(self._queue, (due, next(self._seq), entry))

    def call_later(self, delay, callback):
        entry = _ManualEntry(callback, None)
        self._push(self.now + delay, entry)
        return entry

    def call_every(self, interval, callback):
        entry = _ManualEntry(callback, interval)
        self._push(self.now + interval, entry)
        return entry

    @property
    def pending(self) -> int:
        return sum(1 for _, _, entry in self._queue if not entry.cancelled)

    def advance(self, seconds: float) -> None:
        """Move the clock forward, firing every callback that falls due."""
        target = self.now + seconds
        while self._queue and self._queue[0][0] <= target:
            due, _, entry = heapq.heappop(self._queue)
            if entry.cancelled:
                continue
            self.now = due
            if entry.interval is not None:
                self._push(due + entry.interval, entry)
            entry.callback()
        self.now = target
