"""
Diagnostic log sinks for the agent process.

- RollingDiagnosticFileWriter: line-count rotation with bounded retention.
- DiagnosticSweeper: interval-driven, age-based cleanup of a directory tree.
- DiagnosticFileWriter / DiagnosticConsoleWriter: plain pass-through sinks.
"""
from __future__ import annotations

from .errors import (
    DiagnosticsError,
    InitializationFailure,
    RetentionDeleteFailure,
    RotationFailure,
)
from .events import EventEmitter, SweepEvent, attach_logging
from .levels import DiagnosticLevel, parse_level
from .rolling import FilenameGenerator, RollingDiagnosticFileWriter, RotationPolicy
from .sweeper import DiagnosticSweeper, SweepResult, SweepTarget
from .worker import TimedWorker
from .writers import (
    DiagnosticConsoleWriter,
    DiagnosticDispatcher,
    DiagnosticFileWriter,
    DiagnosticWriter,
)

__all__ = [
    "DiagnosticsError",
    "InitializationFailure",
    "RetentionDeleteFailure",
    "RotationFailure",
    "EventEmitter",
    "SweepEvent",
    "attach_logging",
    "DiagnosticLevel",
    "parse_level",
    "FilenameGenerator",
    "RollingDiagnosticFileWriter",
    "RotationPolicy",
    "DiagnosticSweeper",
    "SweepResult",
    "SweepTarget",
    "TimedWorker",
    "DiagnosticConsoleWriter",
    "DiagnosticDispatcher",
    "DiagnosticFileWriter",
    "DiagnosticWriter",
]
