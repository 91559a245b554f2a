from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from typing import Any, Optional

log = logging.getLogger("agentdiag.worker")


class TimedWorker(ABC):
    """
    Runs ``do_work()`` every ``interval_seconds`` on a background thread.

    - Runs never overlap: the loop re-arms only after a run returns, and
      ``run_once()`` callers queue on the same lock.
    - ``stop()`` sets ``cancel_event``; the idle wait wakes immediately and
      an in-flight run can observe it and return early. Once the loop thread
      has exited the event is cleared, so a later ``run_once()`` runs in full.
    """

    def __init__(self, interval_seconds: float, name: Optional[str] = None):
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be greater than zero")

        self.interval_seconds = float(interval_seconds)
        self.name = name or type(self).__name__
        self.cancel_event = threading.Event()

        self._run_lock = threading.Lock()
        self._thread: Optional[threading.Thread] = None
        self.last_result: Any = None

    @abstractmethod
    def do_work(self) -> Any:
        raise NotImplementedError

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def is_running(self) -> bool:
        return self._run_lock.locked()

    @property
    def is_started(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def run_once(self) -> Any:
        """
        Run one unit of work now, waiting for any in-flight run first.
        """
        with self._run_lock:
            self.last_result = self.do_work()
            return self.last_result

    def start(self) -> None:
        if self.is_started:
            return

        self.cancel_event.clear()
        self._thread = threading.Thread(target=self._loop, name=self.name, daemon=True)
        self._thread.start()
        log.debug(f"{self.name} started (interval={self.interval_seconds}s)")

    def stop(self, timeout: Optional[float] = None) -> None:
        self.cancel_event.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)
        if thread is None or not thread.is_alive():
            self._thread = None
            self.cancel_event.clear()
        log.debug(f"{self.name} stopped")

    def _loop(self) -> None:
        while not self.cancel_event.wait(self.interval_seconds):
            try:
                self.run_once()
            except Exception:
                # A failing run must not kill the schedule.
                log.exception(f"{self.name} run failed")
