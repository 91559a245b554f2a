from __future__ import annotations

import argparse
import os

from env import get_env
from cli.render import RENDER
from cli.common import dispatch_subparser_help, print_table

# Setting name -> environment variable that overrides it
ENV_VARS = {
    "log_level": "LOG_LEVEL",
    "verbose": "AGENTDIAG_VERBOSE",
    "quiet": "AGENTDIAG_QUIET",
    "command": "AGENTDIAG_COMMAND",
    "logs_dir": "AGENTDIAG_LOGS_DIR",
    "log_prefix": "AGENTDIAG_LOG_PREFIX",
    "max_lines_per_file": "AGENTDIAG_MAX_LINES",
    "files_to_keep": "AGENTDIAG_FILES_TO_KEEP",
    "path": "AGENTDIAG_SWEEP_PATH",
    "extension": "AGENTDIAG_SWEEP_EXT",
    "age_seconds": "AGENTDIAG_SWEEP_AGE_SECONDS",
    "interval_seconds": "AGENTDIAG_SWEEP_INTERVAL_SECONDS",
}


def build_env_parser(subparsers: argparse._SubParsersAction) -> None:
    env = subparsers.add_parser("env", help="Show agentdiag configuration")
    sub = env.add_subparsers(dest="env_cmd", required=True)

    help_p = sub.add_parser("help", help="Show help for env")
    help_p.add_argument("path", nargs="*", help="Subcommand path")
    help_p.set_defaults(action="help", _help_parser=env)

    dump_p = sub.add_parser(
        "dump", help="Show resolved rotation and sweep settings with their source"
    )
    dump_p.add_argument(
        "--section",
        choices=["logging", "rotation", "sweep"],
        help="Only show one section",
    )
    dump_p.set_defaults(action="dump")


def handle_env(args: argparse.Namespace) -> int:
    if args.action == "help":
        return dispatch_subparser_help(
            args._help_parser, list(getattr(args, "path", []) or [])
        )

    if args.action == "dump":
        return handle_env_dump(getattr(args, "section", None))

    raise RuntimeError(f"Unknown env action: {args.action}")


def _source(key: str) -> str:
    var = ENV_VARS.get(key)
    if var and os.environ.get(var):
        return var
    return "default"


def handle_env_dump(section: str | None = None) -> int:
    env = get_env()

    for name, values in env.as_dict().items():
        if section and name.lower() != section:
            continue

        RENDER.print(f"\n[bold cyan]{name}[/bold cyan]")
        rows = [[key, str(value), _source(key)] for key, value in values.items()]
        print_table(["SETTING", "VALUE", "SOURCE"], rows)

    diag = env.diagnostics
    if section in (None, "rotation"):
        RENDER.print(
            f"\nActive log folder: {diag.logs_dir / env.command}",
            markup=False,
        )

    RENDER.print()
    return 0
