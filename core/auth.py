"""Shared auth factories for the Google Tasks client."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .cli_errors import AuthError
from .config_resolver import TasksSettings, resolve_settings


@dataclass
class TasksServiceArgsConfig:
    """Attribute names used to pull client settings from an args object."""

    profile_attr: str = "profile"
    credentials_attr: str = "credentials"
    token_attr: str = "token"  # noqa: S107 - attribute name, not a secret


def build_tasks_client(
    profile: Optional[str] = None,
    credentials_path: Optional[str] = None,
    token_path: Optional[str] = None,
    client_cls=None,
    settings: Optional[TasksSettings] = None,
):
    """Instantiate and authenticate a GoogleTasksClient.

    Pass ``settings`` when the caller has already resolved them; the
    profile and path arguments are then ignored and credentials.ini is
    not read again.

    Authentication failures surface as AuthError so the CLI exits with
    ExitCode.AUTH_ERROR.
    """
    from tasks_assistant.google_tasks import GoogleTasksClient as DefaultClient

    client_cls = client_cls or DefaultClient
    if settings is None:
        settings = resolve_settings(
            profile=profile,
            credentials_path=credentials_path,
            token_path=token_path,
        )
    client = client_cls(settings.credentials_path, settings.token_path)
    try:
        client.authenticate()
    except FileNotFoundError as exc:
        raise AuthError(
            f"Google credentials not found: {exc.filename or exc}",
            hint="Download an OAuth client (Desktop app) JSON and pass --credentials PATH",
        ) from exc
    except RuntimeError as exc:
        raise AuthError(str(exc)) from exc
    return client


def settings_from_args(
    args,
    config: Optional[TasksServiceArgsConfig] = None,
    list_title: Optional[str] = None,
) -> TasksSettings:
    """Resolve TasksSettings from argparse-like args."""
    cfg = config or TasksServiceArgsConfig()
    return resolve_settings(
        profile=getattr(args, cfg.profile_attr, None),
        credentials_path=getattr(args, cfg.credentials_attr, None),
        token_path=getattr(args, cfg.token_attr, None),
        list_title=list_title,
    )


def build_tasks_client_from_args(
    args,
    config: Optional[TasksServiceArgsConfig] = None,
    client_cls=None,
    settings: Optional[TasksSettings] = None,
):
    """Instantiate a GoogleTasksClient using argparse-like args."""
    return build_tasks_client(
        client_cls=client_cls,
        settings=settings or settings_from_args(args, config),
    )
