import logging
import threading
import time
from typing import Callable, Optional


class DrawTimer:
    """Cancellable periodic task driving automatic number calls.

    - One live timer at a time: ``start`` cancels the previous one first
    - Each start gets a new generation; the worker fires ``callback(generation)``
      and the session drops ticks whose generation is no longer live
    - The period is read once at start
    - With ``spawn=None`` no thread is started (tests drive ticks by hand)
    """

    def __init__(self, spawn: Optional[Callable] = None, sleep: Optional[Callable[[float], None]] = None,
                 logger: Optional[logging.Logger] = None):
        self._spawn = spawn
        self._sleep = sleep or time.sleep
        self._logger = logger or logging.getLogger(__name__)
        self._lock = threading.Lock()
        self._generation = 0
        self._active: Optional[int] = None
        self.interval: Optional[float] = None

    @property
    def running(self) -> bool:
        return self._active is not None

    @property
    def generation(self) -> Optional[int]:
        return self._active

    def is_current(self, generation: int) -> bool:
        return self._active is not None and self._active == generation

    def start(self, interval: float, callback: Callable[[int], None]) -> int:
        with self._lock:
            if self._active is not None:
                self._logger.info(f"[timer-restart] cancelling generation={self._active}")
            self._generation += 1
            generation = self._generation
            self._active = generation
            self.interval = interval
        self._logger.info(f"[timer-set] generation={generation} interval={interval}s")
        if self._spawn is not None:
            self._spawn(self._worker, generation, interval, callback)
        return generation

    def cancel(self) -> None:
        with self._lock:
            if self._active is None:
                return
            self._logger.info(f"[timer-cancel] generation={self._active}")
            self._active = None
            self.interval = None

    def _worker(self, generation: int, interval: float, callback: Callable[[int], None]) -> None:
        while self.is_current(generation):
            self._sleep(interval)
            if not self.is_current(generation):
                self._logger.info(f"[timer-abort] generation={generation} no longer live")
                return
            self._logger.debug(f"[timer-fire] generation={generation}")
            try:
                callback(generation)
            except Exception:
                self._logger.exception(f"[timer-error] generation={generation}")
                with self._lock:
                    if self._active == generation:
                        self._active = None
                        self.interval = None
                raise
