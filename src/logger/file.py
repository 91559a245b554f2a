from __future__ import annotations

import logging
import threading
from pathlib import Path

from diagnostics.rolling import RollingDiagnosticFileWriter, RotationPolicy

FILE_FORMAT = "%(asctime)s | [%(levelname)s] | %(name)s | %(message)s"


class RollingWriterHandler(logging.Handler):
    """
    logging.Handler that appends one formatted line per record to a
    RollingDiagnosticFileWriter.
    """

    terminator = "\n"

    def __init__(self, writer: RollingDiagnosticFileWriter, level: int = logging.NOTSET):
        super().__init__(level)
        self.writer = writer
        self._local = threading.local()

    @property
    def folder(self) -> Path:
        return self.writer.folder

    @property
    def prefix(self) -> str:
        return self.writer.prefix

    def emit(self, record: logging.LogRecord) -> None:
        # The writer logs its own rotation and retention steps; records
        # raised while this thread is inside write() are dropped here.
        if getattr(self._local, "emitting", False):
            return
        self._local.emitting = True
        try:
            msg = self.format(record)
            self.writer.write(msg + self.terminator)
        except Exception:
            self.handleError(record)
        finally:
            self._local.emitting = False

    def close(self) -> None:
        self.acquire()
        try:
            self.writer.end()
        finally:
            self.release()
        super().close()


def build_file_handler(
    log_dir: Path, prefix: str, policy: RotationPolicy
) -> RollingWriterHandler:
    writer = RollingDiagnosticFileWriter("verbose", log_dir, prefix, policy)

    handler = RollingWriterHandler(writer)
    handler.setFormatter(
        logging.Formatter(
            FILE_FORMAT,
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    return handler
