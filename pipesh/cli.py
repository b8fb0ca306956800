"""Command-line interface for pipesh."""

from __future__ import annotations

import argparse
import logging
import sys

from .config import ShellConfig, parse_config
from .shell import PipelineShell

_EXIT_WORDS = {":q", "exit", "quit"}


def _add_common_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--prompt",
        default=None,
        help="Prompt printed before each line (default: 'MonShell%% ').",
    )
    parser.add_argument(
        "--max-expansion",
        type=int,
        default=None,
        help="Upper bound on the length of a line after $NAME expansion.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level for pipesh diagnostics (default: WARNING).",
    )


def _configure(args: argparse.Namespace) -> ShellConfig:
    config = parse_config(vars(args))
    logging.basicConfig(
        level=config.log_level,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    return config


def _run_exec(args: argparse.Namespace) -> int:
    shell = PipelineShell(config=_configure(args))
    return shell.exec(args.line).status


def _run_shell(args: argparse.Namespace) -> int:
    config = _configure(args)
    shell = PipelineShell(config=config)
    while True:
        try:
            line = input(config.prompt)
            if line.strip() in _EXIT_WORDS:
                return 0
            shell.exec(line)
        except KeyboardInterrupt:
            sys.stdout.write("\n")
        except EOFError:
            sys.stdout.write("\nGoodbye!\n")
            return 0


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="pipesh")
    subparsers = parser.add_subparsers(dest="command_name", required=True)

    exec_parser = subparsers.add_parser("exec", help="Run a single pipeline line")
    _add_common_flags(exec_parser)
    exec_parser.add_argument("line", help="Command line to execute")
    exec_parser.set_defaults(func=_run_exec)

    shell_parser = subparsers.add_parser("shell", help="Start an interactive shell")
    _add_common_flags(shell_parser)
    shell_parser.set_defaults(func=_run_shell)

    args = parser.parse_args(argv)
    try:
        exit_code = args.func(args)
    except ValueError as exc:
        parser.error(str(exc))
    raise SystemExit(exit_code)


__all__ = ["main"]
