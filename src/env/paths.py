from __future__ import annotations

import os
from pathlib import Path

# ---------------------------------------------------------------------
# Project root
# ---------------------------------------------------------------------

# This file lives in src/env/, so project root is two levels up
PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent

CONFIG_DIR = PROJECT_ROOT / "config"
ENV_FILE = CONFIG_DIR / ".env"

DIR_MODE = 0o775


# ---------------------------------------------------------------------
# Directory helpers
# ---------------------------------------------------------------------


def ensure_dir(path: Path) -> Path:
    """
    Create a directory (parents included) with DIR_MODE if it is missing.
    Existing directories keep their permissions.
    """
    if not path.is_dir():
        path.mkdir(mode=DIR_MODE, parents=True, exist_ok=True)
        # mkdir's mode is filtered by the umask
        os.chmod(path, DIR_MODE)
    return path


def resolve_logs_dir() -> Path:
    """
    Base log directory, from AGENTDIAG_LOGS_DIR or <project>/logs.
    Not created here; writers create their own folders.
    """
    raw = os.environ.get("AGENTDIAG_LOGS_DIR")
    return Path(raw).expanduser().resolve() if raw else PROJECT_ROOT / "logs"
