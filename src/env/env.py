from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from env.paths import PROJECT_ROOT, resolve_logs_dir

# ------------------------------------------------------------
# Errors / helpers
# ------------------------------------------------------------


class ConfigError(RuntimeError):
    pass


def _as_bool(v: str) -> bool:
    return v.strip().lower() in {"1", "true", "yes", "on"}


def _as_int(v: str, default: int) -> int:
    try:
        return int(v)
    except Exception:
        return default


def _as_float(v: str, default: float) -> float:
    try:
        return float(v)
    except Exception:
        return default


def _positive(name: str, value: float) -> float:
    if value <= 0:
        raise ConfigError(f"{name} must be greater than zero (got {value})")
    return value


# ------------------------------------------------------------
# Logging environment (SAFE ANYWHERE)
# ------------------------------------------------------------


@dataclass(frozen=True)
class LoggingEnvironment:
    log_level: str
    verbose: bool
    quiet: bool
    command: str


def get_logging_env() -> LoggingEnvironment:
    return LoggingEnvironment(
        log_level=os.environ.get("LOG_LEVEL", "INFO"),
        verbose=_as_bool(os.environ.get("AGENTDIAG_VERBOSE", "0")),
        quiet=_as_bool(os.environ.get("AGENTDIAG_QUIET", "0")),
        command=os.environ.get("AGENTDIAG_COMMAND") or "bootstrap",
    )


# ------------------------------------------------------------
# Diagnostics environment (rotation + sweep policy)
# ------------------------------------------------------------


@dataclass(frozen=True)
class DiagnosticsEnvironment:
    logs_dir: Path
    log_prefix: str
    max_lines_per_file: int
    files_to_keep: int
    sweep_path: Path
    sweep_extension: str
    sweep_age_seconds: float
    sweep_interval_seconds: float


def get_diagnostics_env() -> DiagnosticsEnvironment:
    logs_dir = resolve_logs_dir()

    max_lines = _as_int(os.environ.get("AGENTDIAG_MAX_LINES", "10000"), 10000)
    keep = _as_int(os.environ.get("AGENTDIAG_FILES_TO_KEEP", "10"), 10)

    raw_sweep = os.environ.get("AGENTDIAG_SWEEP_PATH")
    sweep_path = Path(raw_sweep).expanduser().resolve() if raw_sweep else logs_dir

    age = _as_float(os.environ.get("AGENTDIAG_SWEEP_AGE_SECONDS", "604800"), 604800.0)
    interval = _as_float(
        os.environ.get("AGENTDIAG_SWEEP_INTERVAL_SECONDS", "3600"), 3600.0
    )

    return DiagnosticsEnvironment(
        logs_dir=logs_dir,
        log_prefix=os.environ.get("AGENTDIAG_LOG_PREFIX") or "agent",
        max_lines_per_file=int(_positive("AGENTDIAG_MAX_LINES", max_lines)),
        files_to_keep=int(_positive("AGENTDIAG_FILES_TO_KEEP", keep)),
        sweep_path=sweep_path,
        sweep_extension=os.environ.get("AGENTDIAG_SWEEP_EXT") or "log",
        sweep_age_seconds=age,
        sweep_interval_seconds=_positive("AGENTDIAG_SWEEP_INTERVAL_SECONDS", interval),
    )


# ------------------------------------------------------------
# Full runtime environment (CLI only)
# ------------------------------------------------------------


class Environment:
    def __init__(self):
        # Snapshots (immutable)
        self._logging = get_logging_env()
        self._diagnostics = get_diagnostics_env()

        self.project_root = PROJECT_ROOT
        self.interactive = sys.stdout.isatty()

    def as_dict(self) -> dict:
        d = self._diagnostics
        return {
            "Logging": {
                "log_level": self.log_level,
                "verbose": self.verbose,
                "quiet": self.quiet,
                "command": self.command,
            },
            "Rotation": {
                "logs_dir": str(d.logs_dir),
                "log_prefix": d.log_prefix,
                "max_lines_per_file": d.max_lines_per_file,
                "files_to_keep": d.files_to_keep,
            },
            "Sweep": {
                "path": str(d.sweep_path),
                "extension": d.sweep_extension,
                "age_seconds": d.sweep_age_seconds,
                "interval_seconds": d.sweep_interval_seconds,
            },
        }

    @property
    def diagnostics(self) -> DiagnosticsEnvironment:
        return self._diagnostics

    # ---- logging passthrough ----
    @property
    def log_level(self) -> str:
        return self._logging.log_level

    @property
    def verbose(self) -> bool:
        return self._logging.verbose

    @property
    def quiet(self) -> bool:
        return self._logging.quiet

    @property
    def command(self) -> str:
        return self._logging.command


_ENV: Optional[Environment] = None


def reset_env_caches() -> None:
    """Invalidate cached views of environment variables."""
    global _ENV
    _ENV = None


def get_env() -> Environment:
    global _ENV
    if _ENV is None:
        _ENV = Environment()
    return _ENV
