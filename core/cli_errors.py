"""Exit codes and the errors the CLI reports to the user.

Commands raise a ``CLIError`` subclass when they know what went wrong
and how to fix it; ``handle_error`` prints it and picks the exit code.
"""
from __future__ import annotations

import logging
import sys
from enum import IntEnum
from typing import Optional

LOG = logging.getLogger(__name__)


class ExitCode(IntEnum):
    SUCCESS = 0
    ERROR = 1
    USAGE = 2
    CONFIG_ERROR = 3
    AUTH_ERROR = 4
    NETWORK_ERROR = 5
    NOT_FOUND = 6
    INTERRUPTED = 130  # SIGINT


class CLIError(Exception):
    """Error with a user-facing message, an exit code and an optional hint."""

    code: ExitCode = ExitCode.ERROR

    def __init__(self, message: str, code: Optional[ExitCode] = None, hint: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = ExitCode(code)
        self.hint = hint

    def __str__(self) -> str:
        return self.message


class ConfigError(CLIError):
    """Bad configuration or schedule document."""

    code = ExitCode.CONFIG_ERROR


class AuthError(CLIError):
    """Google authorization could not be completed."""

    code = ExitCode.AUTH_ERROR


class NetworkError(CLIError):
    """Remote API call failed."""

    code = ExitCode.NETWORK_ERROR


class NotFoundError(CLIError):
    code = ExitCode.NOT_FOUND


class UsageError(CLIError):
    code = ExitCode.USAGE


def exit_code_for(error: BaseException) -> int:
    """Exit code for ``error``.

    Besides CLIError, any exception with an integer ``exit_code``
    attribute chooses its own code; schedule errors use this to map to
    CONFIG_ERROR without core depending on them.
    """
    if isinstance(error, CLIError):
        return int(error.code)
    if isinstance(error, KeyboardInterrupt):
        return int(ExitCode.INTERRUPTED)
    code = getattr(error, "exit_code", None)
    if isinstance(code, int):
        return int(code)
    return int(ExitCode.ERROR)


def handle_error(error: BaseException, verbose: bool = False) -> int:
    """Report ``error`` on stderr and return the exit code to use."""
    if isinstance(error, KeyboardInterrupt):
        print("\nInterrupted.", file=sys.stderr)
    else:
        print(f"Error: {error}", file=sys.stderr)
        hint = getattr(error, "hint", None)
        if hint:
            print(f"Hint: {hint}", file=sys.stderr)
        if verbose and not isinstance(error, CLIError):
            LOG.error("Unhandled error", exc_info=error)
    return exit_code_for(error)
