from __future__ import annotations

import argparse
from pathlib import Path

from diagnostics import RollingDiagnosticFileWriter, RotationPolicy
from env import get_env
from cli.render import RENDER


def build_write_parser(subparsers: argparse._SubParsersAction) -> None:
    p = subparsers.add_parser(
        "write", help="Append messages to a rolling diagnostic log"
    )
    p.add_argument("message", nargs="+", help="One line per message")
    p.add_argument("--folder", help="Log folder (default: AGENTDIAG_LOGS_DIR)")
    p.add_argument("--prefix", help="Filename prefix (default: AGENTDIAG_LOG_PREFIX)")
    p.add_argument("--max-lines", type=int, help="Writes per file before rotating")
    p.add_argument("--keep", type=int, help="Number of files to retain")
    p.add_argument("--error", action="store_true", help="Write as error messages")


def handle_write(args: argparse.Namespace) -> int:
    diag = get_env().diagnostics

    folder = Path(args.folder).expanduser().resolve() if args.folder else diag.logs_dir
    policy = RotationPolicy(
        max_lines_per_file=args.max_lines or diag.max_lines_per_file,
        files_to_keep=args.keep or diag.files_to_keep,
    )

    with RollingDiagnosticFileWriter(
        "verbose", folder, args.prefix or diag.log_prefix, policy
    ) as writer:
        for msg in args.message:
            if args.error:
                writer.write_error(msg + "\n")
            else:
                writer.write(msg + "\n")
        active = writer.active_path

    RENDER.print(f"Wrote {len(args.message)} message(s) to {active}", markup=False)
    return 0
