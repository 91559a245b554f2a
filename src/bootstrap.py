"""bootstrap.py

Process bootstrap for agentdiag.

Rules:
1) Only bootstrap is allowed to *mutate* os.environ for shared run context.
2) Call bootstrap_base_env() once at the true entrypoint.
3) Call bootstrap_run_context() after argparse parsing, before init_logging().
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from env import ENV_FILE, reset_env_caches


_BOOTSTRAPPED = False


def bootstrap_base_env(env_file: Optional[Path] = None) -> bool:
    """
    Load config/.env if present. Existing environment variables win.

    Returns True when a file was loaded.
    """
    global _BOOTSTRAPPED
    if _BOOTSTRAPPED:
        return False

    path = env_file or ENV_FILE
    loaded = False
    if path.exists():
        loaded = load_dotenv(path, override=False)

    reset_env_caches()
    _BOOTSTRAPPED = True
    return loaded


def bootstrap_run_context(
    *,
    command: str,
    verbose: bool | None = None,
    quiet: bool | None = None,
) -> None:
    """Establish run-scoped context used by logging + commands."""

    os.environ["AGENTDIAG_COMMAND"] = command

    if verbose is not None:
        os.environ["AGENTDIAG_VERBOSE"] = "1" if verbose else "0"
    if quiet is not None:
        os.environ["AGENTDIAG_QUIET"] = "1" if quiet else "0"

    # Context changes must invalidate cached env views.
    reset_env_caches()
