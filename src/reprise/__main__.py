"""Entry point for reprise."""

from __future__ import annotations

import argparse
import logging
import sys

from reprise import __version__
from reprise.config import ConfigError, ReplConfig
from reprise.kernel import CompositeKernel, KernelError, create_default_kernel
from reprise.log import setup_logging
from reprise.tui.app import ReplApp

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Create the command-line parser."""
    parser = argparse.ArgumentParser(
        prog="reprise", description="Interactive multi-kernel REPL with input history"
    )
    parser.add_argument("-v", "--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-k", "--kernel", help="Default kernel (python, shell)")
    parser.add_argument(
        "-e", "--execute", metavar="CODE", help="Run CODE once, print the output and exit"
    )
    parser.add_argument("--log-file", help="Append debug logs to this file")
    parser.add_argument("--log-level", help="Log level (DEBUG, INFO, WARNING, ERROR)")
    parser.add_argument(
        "--shell-timeout", type=float, help="Seconds before a shell submission is stopped"
    )
    parser.add_argument(
        "--reset-history-on-submit",
        action="store_true",
        default=None,
        help="End history browsing on every submission",
    )
    return parser


def run_once(kernel: CompositeKernel, code: str) -> int:
    """Evaluate one submission and print its output. Returns an exit status."""
    try:
        results = kernel.submit(code)
    except KernelError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    status = 0
    for result in results:
        output = result.format_output()
        if output:
            print(output, file=sys.stdout if result.ok else sys.stderr)
        if not result.ok:
            status = 1
    return status


def main(argv: list[str] | None = None) -> int:
    """Run the REPL, or a single submission with --execute."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = ReplConfig.load(
            default_kernel=args.kernel,
            log_file=args.log_file,
            log_level=args.log_level,
            shell_timeout=args.shell_timeout,
            reset_history_on_submit=args.reset_history_on_submit,
        )
    except ConfigError as e:
        parser.error(str(e))

    interactive = args.execute is None
    setup_logging(config.log_level, config.log_file, console=not interactive)

    try:
        kernel = create_default_kernel(config.default_kernel, config.shell_timeout)
    except KernelError as e:
        parser.error(str(e))

    if not interactive:
        return run_once(kernel, args.execute)

    logger.info("Starting REPL with default kernel %s", kernel.default_name)
    ReplApp(kernel=kernel, config=config).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
