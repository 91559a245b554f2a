from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

from env import get_logging_env

# Console used by RichHandler (stderr keeps stdout free for command output)
LOG_CONSOLE = Console(
    stderr=True,
    soft_wrap=True,
)


class ConsoleGateFilter(logging.Filter):
    """
    Drop console output when quiet mode is enabled.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        return not get_logging_env().quiet


def build_console_handler(level: int = logging.INFO) -> logging.Handler:
    handler = RichHandler(
        console=LOG_CONSOLE,
        level=level,
        show_level=True,
        show_time=False,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )

    # RichHandler renders the level column; the formatter must not repeat it.
    handler.setFormatter(logging.Formatter("%(message)s"))

    handler.addFilter(ConsoleGateFilter())
    return handler
