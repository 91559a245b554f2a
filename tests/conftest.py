import logging
import os
from datetime import datetime, timedelta, timezone

import pytest


@pytest.fixture(autouse=True)
def clean_env_and_logging(tmp_path, monkeypatch):
    """
    Ensure tests don't leak env, logger state, or handlers on the root logger.
    """

    for k in list(os.environ):
        if k.startswith("AGENTDIAG_"):
            monkeypatch.delenv(k, raising=False)
    monkeypatch.delenv("LOG_LEVEL", raising=False)

    # Keep anything the CLI/logger writes inside the test sandbox
    monkeypatch.setenv("AGENTDIAG_LOGS_DIR", str(tmp_path / "logs"))
    monkeypatch.setenv("AGENTDIAG_QUIET", "1")

    # bootstrap_run_context writes these directly; registering them here
    # lets monkeypatch restore them afterwards.
    monkeypatch.setenv("AGENTDIAG_COMMAND", "bootstrap")
    monkeypatch.setenv("AGENTDIAG_VERBOSE", "0")

    from env import reset_env_caches

    reset_env_caches()

    yield

    from logger import shutdown_logging

    shutdown_logging()
    root = logging.getLogger()
    root.setLevel(logging.WARNING)
    reset_env_caches()


class StepClock:
    """Deterministic UTC clock: each call advances by `step` seconds."""

    def __init__(self, start: datetime | None = None, step: float = 1.0):
        self.now = start or datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
        self.step = timedelta(seconds=step)

    def __call__(self) -> datetime:
        current = self.now
        self.now = self.now + self.step
        return current


@pytest.fixture
def step_clock():
    return StepClock()


@pytest.fixture
def frozen_clock():
    return StepClock(step=0)
