from __future__ import annotations

import logging
import threading
from enum import Enum
from typing import Any, Callable, Dict, List

log = logging.getLogger("agentdiag.events")

Listener = Callable[..., Any]


class SweepEvent(str, Enum):
    INFO = "info"
    DELETED = "deleted"
    ERROR = "error"


class EventEmitter:
    """
    Minimal observer registry.

    Listeners are called synchronously, in registration order, on the
    emitting thread. A listener that raises is logged and skipped.
    """

    def __init__(self) -> None:
        self._listeners: Dict[str, List[Listener]] = {}
        self._lock = threading.Lock()

    def on(self, event: str | SweepEvent, callback: Listener) -> Listener:
        key = _key(event)
        with self._lock:
            self._listeners.setdefault(key, []).append(callback)
        return callback

    def off(self, event: str | SweepEvent, callback: Listener) -> None:
        key = _key(event)
        with self._lock:
            callbacks = self._listeners.get(key, [])
            if callback in callbacks:
                callbacks.remove(callback)

    def listeners(self, event: str | SweepEvent) -> List[Listener]:
        with self._lock:
            return list(self._listeners.get(_key(event), []))

    def emit(self, event: str | SweepEvent, *args: Any) -> int:
        """Call every listener for *event*; returns how many were called."""
        callbacks = self.listeners(event)
        for cb in callbacks:
            try:
                cb(*args)
            except Exception:
                log.exception("Listener for %r failed", _key(event))
        return len(callbacks)


def _key(event: str | SweepEvent) -> str:
    return event.value if isinstance(event, SweepEvent) else str(event)


def attach_logging(emitter: EventEmitter, target: logging.Logger) -> None:
    """
    Forward sweep notifications to a stdlib logger.
    """

    emitter.on(SweepEvent.INFO, lambda msg: target.info(msg))
    emitter.on(SweepEvent.DELETED, lambda path: target.info(f"Deleted {path}"))
    emitter.on(
        SweepEvent.ERROR,
        lambda path, exc: target.warning(f"Skipped {path}: {exc}"),
    )
