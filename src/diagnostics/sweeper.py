from __future__ import annotations

import logging
import os
import stat
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterator, Optional

from .events import EventEmitter, SweepEvent
from .worker import TimedWorker

log = logging.getLogger("agentdiag.sweeper")

WILDCARD = "*"


@dataclass(frozen=True)
class SweepTarget:
    root_path: Path
    extension: str
    max_age_seconds: float
    interval_seconds: float

    def matches(self, path: str) -> bool:
        ext = self.extension.strip()
        if ext == WILDCARD:
            return True
        return path.endswith("." + ext.lstrip("."))


@dataclass(frozen=True)
class SweepResult:
    deleted: int = 0
    scanned: int = 0
    skipped: int = 0
    cancelled: bool = False


class DiagnosticSweeper(TimedWorker, EventEmitter):
    """
    Periodically deletes files under ``target.root_path`` that are older
    than ``target.max_age_seconds``.

    Cleanup is best-effort: missing roots, unreadable entries and failed
    deletions are reported through events, never raised.

    Events:
      - ``info``    (message)
      - ``deleted`` (path)
      - ``error``   (path, exception)
    """

    def __init__(
        self,
        target: SweepTarget,
        clock: Optional[Callable[[], float]] = None,
    ):
        TimedWorker.__init__(self, target.interval_seconds, name="diagnostic-sweeper")
        EventEmitter.__init__(self)
        self.target = target
        self.clock = clock or time.time

    def do_work(self) -> SweepResult:
        return self.clean_files()

    def clean_files(self) -> SweepResult:
        root = Path(self.target.root_path)
        self.emit(SweepEvent.INFO, f"Cleaning Files: {root}")

        if not root.is_dir():
            return self._finish(SweepResult())

        deleted = scanned = skipped = 0
        cancelled = False

        for candidate in self._candidates(root):
            if self.cancel_event.is_set():
                cancelled = True
                break

            scanned += 1
            try:
                st = os.stat(candidate)
            except OSError as exc:
                log.debug(f"stat failed for {candidate}: {exc}")
                skipped += 1
                continue

            if stat.S_ISDIR(st.st_mode):
                continue

            age = self.clock() - st.st_mtime
            if age <= self.target.max_age_seconds:
                continue

            try:
                os.remove(candidate)
            except OSError as exc:
                skipped += 1
                self.emit(SweepEvent.ERROR, candidate, exc)
                continue

            deleted += 1
            self.emit(SweepEvent.DELETED, candidate)

        return self._finish(
            SweepResult(
                deleted=deleted, scanned=scanned, skipped=skipped, cancelled=cancelled
            )
        )

    def _finish(self, result: SweepResult) -> SweepResult:
        self.emit(SweepEvent.INFO, f"deleted file count: {result.deleted}")
        return result

    def _candidates(self, root: Path) -> Iterator[str]:
        # Directories are yielded too (the stat check skips them), so a
        # wildcard filter sees the same entries `find` would.
        for dirpath, dirnames, filenames in os.walk(root):
            for name in dirnames + filenames:
                path = os.path.join(dirpath, name)
                if self.target.matches(path):
                    yield path
