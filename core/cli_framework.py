"""Decorator-driven argparse application.

Commands are plain functions taking the parsed namespace and returning
an exit code. ``@app.argument`` lines stacked under ``@app.command`` add
that command's options; the global options (--profile, --verbose,
--quiet, --dry-run, --output) go before the command name.
"""
from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from .cli_errors import ExitCode, handle_error
from .cli_output import OutputConfig, OutputFormat, OutputWriter

CommandFunc = Callable[[argparse.Namespace], int]

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


@dataclass
class Argument:
    name_or_flags: Tuple[str, ...]
    kwargs: Dict[str, Any] = field(default_factory=dict)


@dataclass
class CommandDef:
    name: str
    func: CommandFunc
    help: str = ""
    arguments: List[Argument] = field(default_factory=list)


def configure_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Send log records to stderr: WARNING by default, DEBUG with --verbose, ERROR with --quiet."""
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr, force=True)
    # discovery cache warnings are noise at DEBUG
    logging.getLogger("googleapiclient.discovery_cache").setLevel(logging.ERROR)


class CLIApp:
    """A named CLI made of registered subcommands.

    Example:
        app = CLIApp("tasks-assistant", "Recurring tasks")

        @app.command("show", help="Print the schedule")
        @app.argument("--schedule")
        def cmd_show(args):
            return 0
    """

    def __init__(
        self,
        name: str,
        description: str = "",
        *,
        version: Optional[str] = None,
        add_common_args: bool = True,
    ) -> None:
        self.name = name
        self.description = description
        self.version = version
        self.add_common_args = add_common_args
        self._commands: Dict[str, CommandDef] = {}
        self._pending: List[Argument] = []

    def argument(self, *name_or_flags: str, **kwargs: Any) -> Callable[[CommandFunc], CommandFunc]:
        """Queue an option for the command decorated next (place below @command)."""
        def decorator(func: CommandFunc) -> CommandFunc:
            self._pending.append(Argument(tuple(name_or_flags), kwargs))
            return func
        return decorator

    def command(self, name: str, *, help: str = "") -> Callable[[CommandFunc], CommandFunc]:
        def decorator(func: CommandFunc) -> CommandFunc:
            # argument decorators ran bottom-up; restore source order
            arguments = list(reversed(self._pending))
            self._pending = []
            self._commands[name] = CommandDef(name=name, func=func, help=help, arguments=arguments)
            return func
        return decorator

    def build_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            prog=self.name,
            description=self.description,
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )
        if self.version:
            parser.add_argument("--version", "-V", action="version", version=f"%(prog)s {self.version}")
        if self.add_common_args:
            self._add_common_arguments(parser)
        if self._commands:
            sub = parser.add_subparsers(dest="command", metavar="<command>")
            for cmd in self._commands.values():
                cmd_parser = sub.add_parser(cmd.name, help=cmd.help, description=cmd.help)
                for arg in cmd.arguments:
                    cmd_parser.add_argument(*arg.name_or_flags, **arg.kwargs)
                cmd_parser.set_defaults(_cmd_func=cmd.func)
        return parser

    @staticmethod
    def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
        parser.add_argument("--profile", "-p", help="credentials.ini profile (section tasks.<name>)")
        parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging on stderr")
        parser.add_argument("--quiet", "-q", action="store_true", help="Suppress non-essential output")
        parser.add_argument("--dry-run", action="store_true", help="Never change anything remotely")
        parser.add_argument(
            "--output", "-o",
            choices=[f.value for f in OutputFormat],
            default=OutputFormat.TEXT.value,
            help="Output format (default: text)",
        )

    def run(self, argv: Optional[Sequence[str]] = None) -> int:
        """Parse ``argv``, run the chosen command and return its exit code."""
        parser = self.build_parser()
        args = parser.parse_args(argv)
        verbose = bool(getattr(args, "verbose", False))
        quiet = bool(getattr(args, "quiet", False))
        configure_logging(verbose=verbose, quiet=quiet)
        args._output = OutputWriter(
            OutputConfig(
                format=OutputFormat(getattr(args, "output", OutputFormat.TEXT.value)),
                verbose=verbose,
                quiet=quiet,
            )
        )

        func = getattr(args, "_cmd_func", None)
        if func is None:
            parser.print_help()
            return int(ExitCode.USAGE)
        try:
            return int(func(args))
        except (Exception, KeyboardInterrupt) as exc:
            return handle_error(exc, verbose=verbose)
