from __future__ import annotations

from rich.console import Console

# Command output (stdout, resolved at print time). Logging has its own
# console on stderr.
RENDER = Console(
    soft_wrap=True,
    highlight=False,
)
