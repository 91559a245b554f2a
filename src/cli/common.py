from __future__ import annotations

import argparse
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional

from env import resolve_logs_dir
from cli.render import RENDER


# ----------------------------
# Help dispatch (subparser-local)
# ----------------------------


def dispatch_subparser_help(
    parser: argparse.ArgumentParser, path: list[str] | None
) -> int:
    """
    Implements consistent `X help [subcmd ...]` behavior for a subtree parser.
    """
    if not path:
        parser.print_help()
        return 0

    try:
        parser.parse_args(path + ["--help"])
    except SystemExit:
        pass
    return 0


# ----------------------------
# Logs filesystem helpers
# ----------------------------


def resolve_log_dir(*, explicit: str | None) -> Path:
    if explicit:
        return Path(explicit).expanduser().resolve()
    return resolve_logs_dir()


def find_log_file(log_dir: Path, name: str) -> Path | None:
    if not log_dir.exists():
        return None

    candidates = [
        log_dir / name,
        log_dir / f"{name}.log",
    ]
    for p in candidates:
        if p.exists() and p.is_file():
            return p

    for p in log_dir.rglob("*.log"):
        if p.stem == name or p.name == name:
            return p

    return None


def read_text(path: Path) -> str:
    return path.read_text(encoding="utf-8", errors="replace")


def print_tail(path: Path, lines: int) -> None:
    try:
        data = read_text(path).splitlines()
    except OSError as e:
        RENDER.print(f"[error reading log] {e}", markup=False)
        return

    tail = data[-lines:] if lines > 0 else data
    for line in tail:
        RENDER.print(line, markup=False)


# ----------------------------
# Log listing models
# ----------------------------


@dataclass(frozen=True)
class LogFileInfo:
    path: Path
    mtime: float
    size: int

    @property
    def name(self) -> str:
        return self.path.name


def list_log_files(log_dir: Path, prefix: Optional[str] = None) -> list[LogFileInfo]:
    if not log_dir.exists():
        return []

    items: list[LogFileInfo] = []
    for p in log_dir.rglob("*.log"):
        if prefix and not p.name.startswith(prefix):
            continue
        try:
            st = p.stat()
        except OSError:
            continue
        if not p.is_file():
            continue
        items.append(LogFileInfo(path=p, mtime=st.st_mtime, size=st.st_size))

    items.sort(key=lambda r: r.mtime, reverse=True)
    return items


def format_mtime(ts: float) -> str:
    return datetime.fromtimestamp(ts).strftime("%Y-%m-%d %H:%M:%S")


def format_size(n: int) -> str:
    size = float(n)
    for unit in ("B", "KB", "MB", "GB"):
        if size < 1024 or unit == "GB":
            return f"{size:.0f} {unit}" if unit == "B" else f"{size:.1f} {unit}"
        size /= 1024
    return f"{n} B"


# ----------------------------
# CLI output helpers
# ----------------------------


def print_table(headers: list[str], rows: list[list[str]]) -> None:
    """
    Simple fixed-width table printer for CLI output.
    """
    if not rows:
        RENDER.print("(no results)")
        return

    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(str(cell)))

    fmt = "  ".join(f"{{:{w}}}" for w in widths)

    RENDER.print(fmt.format(*headers), markup=False)
    RENDER.print(fmt.format(*("-" * w for w in widths)), markup=False)

    for row in rows:
        RENDER.print(fmt.format(*(str(c) for c in row)), markup=False)
