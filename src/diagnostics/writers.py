from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import IO, Iterable, Optional

from rich.console import Console

from env.paths import ensure_dir
from .errors import InitializationFailure
from .levels import DiagnosticLevel, parse_level

log = logging.getLogger("agentdiag.writers")

DIVIDER = "-" * 40


class DiagnosticWriter(ABC):
    """
    A sink for diagnostic text.

    Messages are written verbatim; callers own newline conventions.
    """

    level: DiagnosticLevel

    @abstractmethod
    def write(self, message: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def write_error(self, message: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def end(self) -> None:
        raise NotImplementedError

    def __enter__(self):
        return self

    def __exit__(self, *exc) -> None:
        self.end()


class DiagnosticFileWriter(DiagnosticWriter):
    """
    Appends to one fixed file. Meant for synchronous client processes.
    """

    def __init__(self, level: str | int, folder: str | Path, filename: str):
        self.level = parse_level(level)
        self.path = Path(folder) / filename

        try:
            ensure_dir(Path(folder))
            self._fh: Optional[IO[str]] = self.path.open("a", encoding="utf-8")
        except OSError as exc:
            raise InitializationFailure(f"Cannot open log file {self.path}: {exc}") from exc

    def write(self, message: str) -> None:
        if self._fh is None:
            raise ValueError(f"Writer for {self.path} is closed")
        self._fh.write(message)
        self._fh.flush()

    def write_error(self, message: str) -> None:
        self.write(message)

    def divider(self) -> None:
        self.write(DIVIDER)

    def end(self) -> None:
        if self._fh is not None:
            self._fh.close()
            self._fh = None


class DiagnosticConsoleWriter(DiagnosticWriter):
    """
    stdout for normal messages, stderr for errors.
    """

    def __init__(
        self,
        level: str | int,
        out: Optional[Console] = None,
        err: Optional[Console] = None,
    ):
        self.level = parse_level(level)
        self._out = out or Console(markup=False, highlight=False, soft_wrap=True)
        self._err = err or Console(
            stderr=True, markup=False, highlight=False, soft_wrap=True
        )

    def write(self, message: str) -> None:
        self._out.print(message, end="")

    def write_error(self, message: str) -> None:
        self._err.print(message, end="")

    def end(self) -> None:
        pass


class DiagnosticDispatcher:
    """
    Fans messages out to every writer whose level admits them.
    """

    def __init__(self, writers: Iterable[DiagnosticWriter]):
        self.writers = list(writers)

    def write(self, level: str | int, message: str) -> int:
        lvl = parse_level(level)
        count = 0
        for w in self.writers:
            if w.level >= lvl:
                w.write(message)
                count += 1
        return count

    def error(self, message: str) -> int:
        count = 0
        for w in self.writers:
            if w.level >= DiagnosticLevel.ERROR:
                w.write_error(message)
                count += 1
        return count

    def verbose(self, message: str) -> int:
        return self.write(DiagnosticLevel.VERBOSE, message)

    def info(self, message: str) -> int:
        return self.write(DiagnosticLevel.INFO, message)

    def end(self) -> None:
        for w in self.writers:
            w.end()
        log.debug(f"Closed {len(self.writers)} diagnostic writer(s)")
