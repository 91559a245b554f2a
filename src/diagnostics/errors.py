from __future__ import annotations


class DiagnosticsError(Exception):
    """Base error for the diagnostic log sinks."""


class InitializationFailure(DiagnosticsError):
    """The log folder or the initial active file could not be prepared."""


class RotationFailure(DiagnosticsError):
    """A new log file could not be opened while rotating."""


class RetentionDeleteFailure(DiagnosticsError):
    """An overflow file could not be deleted while enforcing retention."""
