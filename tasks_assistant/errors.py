"""Errors raised while turning a schedule document into a Schedule."""
from __future__ import annotations

from typing import Optional

from core.cli_errors import ExitCode


class ScheduleError(ValueError):
    """Base class for schedule construction failures."""

    exit_code = int(ExitCode.CONFIG_ERROR)


class DecodeError(ScheduleError):
    """An unrecognized frequency or weekday token."""

    def __init__(self, message: str, token: Optional[object] = None) -> None:
        super().__init__(message)
        self.token = token


class ValidationError(ScheduleError):
    """A record has a bad interval, a missing field or a field of the wrong type."""


class FormatError(ScheduleError):
    """The schedule document itself is malformed or unreadable."""
