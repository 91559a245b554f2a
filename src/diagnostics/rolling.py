from __future__ import annotations

import logging
import os
from collections import deque
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import IO, Callable, Deque, Optional

from env.paths import ensure_dir
from .errors import InitializationFailure, RetentionDeleteFailure, RotationFailure
from .levels import parse_level
from .writers import DiagnosticWriter

log = logging.getLogger("agentdiag.rolling")

Clock = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class RotationPolicy:
    max_lines_per_file: int
    files_to_keep: int

    def __post_init__(self) -> None:
        if self.max_lines_per_file < 1:
            raise ValueError("max_lines_per_file must be >= 1")
        if self.files_to_keep < 1:
            raise ValueError("files_to_keep must be >= 1")


class FilenameGenerator:
    """
    Builds "{prefix}_{pid}_{timestamp}_.log" paths inside a folder.

    The timestamp is UTC at second granularity with ':' replaced by '_',
    so two names generated by the same pid within one second are equal.
    """

    def __init__(
        self,
        folder: str | Path,
        prefix: str,
        clock: Optional[Clock] = None,
        pid: Optional[int] = None,
    ):
        self.folder = Path(folder)
        self.prefix = prefix
        self.clock = clock or _utc_now
        self.pid = os.getpid() if pid is None else pid

    def timestamp(self) -> str:
        now = self.clock().astimezone(timezone.utc)
        return now.strftime("%Y-%m-%dT%H:%M:%SZ").replace(":", "_")

    def __call__(self) -> Path:
        return self.folder / f"{self.prefix}_{self.pid}_{self.timestamp()}_.log"


class RollingDiagnosticFileWriter(DiagnosticWriter):
    """
    Append-only writer that rotates after a number of writes and keeps
    at most ``policy.files_to_keep`` files for its prefix.

    Only one writer per (folder, prefix) is supported. Writes block and
    happen inline, so file order always matches call order.
    """

    def __init__(
        self,
        level: str | int,
        folder: str | Path,
        prefix: str,
        policy: RotationPolicy,
        filenames: Optional[FilenameGenerator] = None,
    ):
        self.level = parse_level(level)
        self.folder = Path(folder)
        self.prefix = prefix
        self.policy = policy
        self._filenames = filenames or FilenameGenerator(self.folder, prefix)

        self._fh: Optional[IO[str]] = None
        self._active: Optional[Path] = None
        self._line_count = 0
        self._queue: Deque[Path] = deque()
        self._opened = False

        self._initialize_file_queue()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def active_path(self) -> Optional[Path]:
        return self._active

    @property
    def line_count(self) -> int:
        return self._line_count

    @property
    def queue(self) -> tuple[Path, ...]:
        return tuple(self._queue)

    def write(self, message: str) -> None:
        fh = self._get_file()
        fh.write(message)
        fh.flush()
        self._line_count += 1

    def write_error(self, message: str) -> None:
        self.write(message)

    def end(self) -> None:
        if self._fh is not None:
            self._fh.close()
            self._fh = None
            self._active = None

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _get_file(self) -> IO[str]:
        if self._fh is not None and self._line_count >= self.policy.max_lines_per_file:
            rotated, count = self._active, self._line_count
            self.end()
            log.debug(f"Rotated {rotated} after {count} writes")

        if self._fh is None:
            path = self._filenames()
            self._line_count = 0
            try:
                self._fh = path.open("a", encoding="utf-8")
            except OSError as exc:
                if not self._opened:
                    raise InitializationFailure(
                        f"Cannot create first log file {path}: {exc}"
                    ) from exc
                raise RotationFailure(f"Cannot open log file {path}: {exc}") from exc
            self._active = path
            self._opened = True

            # Same-second rotation reuses the tail's name
            if not self._queue or self._queue[-1] != path:
                self._queue.append(path)
            self._enforce_retention()

        return self._fh

    def _enforce_retention(self) -> None:
        while len(self._queue) > self.policy.files_to_keep:
            old = self._queue.popleft()
            try:
                old.unlink()
            except FileNotFoundError:
                log.debug(f"Old log file {old} already removed")
                continue
            except OSError as exc:
                raise RetentionDeleteFailure(
                    f"Cannot delete old log file {old}: {exc}"
                ) from exc
            log.debug(f"Removed old log file {old}")

    def _initialize_file_queue(self) -> None:
        try:
            ensure_dir(self.folder)
            entries = []
            for p in self.folder.iterdir():
                if not p.name.startswith(self.prefix) or not p.is_file():
                    continue
                entries.append((p.stat().st_mtime, p))
        except OSError as exc:
            raise InitializationFailure(
                f"Cannot prepare log folder {self.folder}: {exc}"
            ) from exc

        entries.sort(key=lambda e: e[0])
        self._queue = deque(p for _, p in entries)

        if not self._queue:
            return

        # These files stay small; read the newest one whole.
        newest = self._queue[-1]
        try:
            text = newest.read_text(encoding="utf-8", errors="replace")
            line_count = len(text.split("\n"))
            if line_count < self.policy.max_lines_per_file:
                self._fh = newest.open("a", encoding="utf-8")
                self._active = newest
                self._line_count = line_count
                self._opened = True
                log.debug(f"Resuming {newest} at {line_count} lines")
        except OSError as exc:
            raise InitializationFailure(f"Cannot reopen log file {newest}: {exc}") from exc
