from __future__ import annotations

import argparse
from pathlib import Path

from rich.markup import escape

from diagnostics import DiagnosticSweeper, SweepTarget, attach_logging
from env import get_env
from logger import get_logger
from cli.render import RENDER

log = get_logger("agentdiag.cli.sweep")


def build_sweep_parser(subparsers: argparse._SubParsersAction) -> None:
    p = subparsers.add_parser("sweep", help="Delete stale files under a directory")
    p.add_argument("--path", help="Root directory (default: AGENTDIAG_SWEEP_PATH)")
    p.add_argument("--ext", help="Extension filter, '*' for all files")
    p.add_argument("--age", type=float, help="Max age in seconds")
    p.add_argument("--interval", type=float, help="Seconds between sweeps (--watch)")
    p.add_argument(
        "--watch", action="store_true", help="Keep sweeping until interrupted"
    )


def build_target(args: argparse.Namespace) -> SweepTarget:
    diag = get_env().diagnostics
    return SweepTarget(
        root_path=Path(args.path).expanduser().resolve() if args.path else diag.sweep_path,
        extension=args.ext or diag.sweep_extension,
        max_age_seconds=args.age if args.age is not None else diag.sweep_age_seconds,
        interval_seconds=args.interval or diag.sweep_interval_seconds,
    )


def handle_sweep(args: argparse.Namespace) -> int:
    target = build_target(args)
    sweeper = DiagnosticSweeper(target)
    attach_logging(sweeper, log)

    result = sweeper.run_once()
    RENDER.print(
        f"[bold]Sweep[/bold] {escape(str(target.root_path))}: "
        f"deleted={result.deleted} scanned={result.scanned} skipped={result.skipped}"
    )

    if not args.watch:
        return 0

    sweeper.start()
    log.info(f"Watching {target.root_path} every {target.interval_seconds}s (Ctrl-C to stop)")
    try:
        while sweeper.is_started:
            sweeper.cancel_event.wait(1.0)
    except KeyboardInterrupt:
        log.info("Interrupted; stopping sweeper")
    finally:
        sweeper.stop(timeout=target.interval_seconds)

    return 0
