from __future__ import annotations

from enum import IntEnum


class DiagnosticLevel(IntEnum):
    """
    Verbosity of a diagnostic writer or message.

    A writer configured at level N accepts messages at level N or lower.
    """

    ERROR = 1
    WARNING = 2
    STATUS = 3
    INFO = 4
    VERBOSE = 5


def parse_level(level: str | int | DiagnosticLevel) -> DiagnosticLevel:
    if isinstance(level, DiagnosticLevel):
        return level
    if isinstance(level, int):
        try:
            return DiagnosticLevel(level)
        except ValueError:
            return DiagnosticLevel.INFO
    return DiagnosticLevel.__members__.get(str(level).strip().upper(), DiagnosticLevel.INFO)
