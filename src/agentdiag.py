#!/usr/bin/env python3
from __future__ import annotations

import argparse
import sys

from bootstrap import bootstrap_base_env, bootstrap_run_context


def _dispatch_help(parser: argparse.ArgumentParser, argv: list[str]) -> int:
    # Support:
    #   agentdiag help
    #   agentdiag help sweep
    #   agentdiag sweep help
    argv = [a for a in argv if a != "help"]
    if not argv:
        parser.print_help()
        return 0

    try:
        build_parser().parse_args(argv + ["--help"])
    except SystemExit:
        pass
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="agentdiag",
        description="Rolling diagnostic logs and stale-file sweeping for agents.",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    p.add_argument("-q", "--quiet", action="store_true", help="No console logging")

    sub = p.add_subparsers(dest="command", required=True)

    help_cmd = sub.add_parser("help", help="Show help")
    help_cmd.add_argument("path", nargs="*", help="Command path to show help for")
    help_cmd.set_defaults(_help=True)

    # Keep imports inside builder to avoid early side effects.
    from cli.cli_env import build_env_parser
    from cli.cli_logs import build_logs_parser
    from cli.cli_sweep import build_sweep_parser
    from cli.cli_write import build_write_parser

    build_env_parser(sub)
    build_write_parser(sub)
    build_sweep_parser(sub)
    build_logs_parser(sub)

    return p


def main(argv: list[str] | None = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)

    bootstrap_base_env()

    parser = build_parser()
    args, unknown = parser.parse_known_args(argv)

    # Unified help routing
    if getattr(args, "_help", False) or (unknown and unknown[-1] == "help"):
        return _dispatch_help(parser, argv)
    if unknown:
        parser.error(f"unrecognized arguments: {' '.join(unknown)}")

    bootstrap_run_context(
        command=args.command,
        verbose=True if args.verbose else None,
        quiet=True if args.quiet else None,
    )

    # Imported after the run context is stamped
    from diagnostics import DiagnosticsError
    from env import ConfigError
    from logger import get_logger, init_logging
    from cli.render import RENDER
    from rich.markup import escape

    try:
        init_logging()
        log = get_logger("agentdiag")
        log.debug(f"Command: {args.command}")
        return _dispatch(args)
    except (DiagnosticsError, ConfigError) as e:
        RENDER.print(f"[bold red]error:[/bold red] {escape(str(e))}")
        return 2


def _dispatch(args: argparse.Namespace) -> int:
    if args.command == "env":
        from cli.cli_env import handle_env

        return handle_env(args)

    if args.command == "write":
        from cli.cli_write import handle_write

        return handle_write(args)

    if args.command == "sweep":
        from cli.cli_sweep import handle_sweep

        return handle_sweep(args)

    if args.command == "logs":
        from cli.cli_logs import handle_logs

        return handle_logs(args)

    raise RuntimeError(f"Unknown command: {args.command}")


if __name__ == "__main__":
    raise SystemExit(main())
