from __future__ import annotations

import logging
from pathlib import Path

from diagnostics.rolling import RotationPolicy
from env import get_diagnostics_env, get_logging_env, resolve_logs_dir
from .console import build_console_handler
from .file import build_file_handler
from . import state as _state


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def _level_to_int(level: str | int) -> int:
    if isinstance(level, int):
        return level
    lvl = logging.getLevelName(str(level).upper())
    return lvl if isinstance(lvl, int) else logging.INFO


def _target() -> tuple[Path, str]:
    command = get_logging_env().command
    return resolve_logs_dir() / command, command


def init_logging() -> None:
    """
    Initialize logging for the entire process.

    - Handlers are attached ONLY to the root logger.
    - Named loggers inherit via propagation.
    - Safe to call multiple times; a changed target replaces the file
      handler instead of stacking another one.
    """
    env = get_logging_env()
    diag = get_diagnostics_env()

    root = logging.getLogger()
    log_dir, prefix = _target()

    # Verbose forces DEBUG everywhere.
    root_level = logging.DEBUG if env.verbose else _level_to_int(env.log_level)

    if _state.INITIALIZED and _state.LOG_DIR == log_dir and _state.PREFIX == prefix:
        root.setLevel(root_level)
        return

    _detach(root)
    root.setLevel(root_level)

    policy = RotationPolicy(
        max_lines_per_file=diag.max_lines_per_file,
        files_to_keep=diag.files_to_keep,
    )
    handlers: list[logging.Handler] = [build_file_handler(log_dir, prefix, policy)]
    if not env.quiet:
        handlers.append(build_console_handler(root_level))

    for h in handlers:
        root.addHandler(h)
    _state.HANDLERS = handlers

    _state.INITIALIZED = True
    _state.LOG_DIR = log_dir
    _state.PREFIX = prefix


def _detach(root: logging.Logger) -> None:
    for h in _state.HANDLERS:
        root.removeHandler(h)
        h.close()
    _state.HANDLERS = []


def shutdown_logging() -> None:
    """Close and detach the handlers installed by init_logging()."""
    _detach(logging.getLogger())

    _state.INITIALIZED = False
    _state.LOG_DIR = None
    _state.PREFIX = None
