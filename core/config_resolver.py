"""Resolve Google Tasks credential paths and defaults from credentials.ini.

Sections are ``[tasks]`` for the default profile and ``[tasks.<name>]``
for named profiles. Recognised keys: ``credentials``, ``token``, ``list``.
"""
from __future__ import annotations

import configparser
import logging
import os
from dataclasses import dataclass
from typing import Dict, Optional

from .cli_errors import ConfigError
from .constants import (
    DEFAULT_CREDENTIALS_FILE,
    DEFAULT_TASK_LIST,
    DEFAULT_TOKEN_FILE,
    ENV_CREDENTIALS,
    ENV_TOKEN,
    credential_ini_paths,
    default_config_dir,
)

LOG = logging.getLogger(__name__)

_SECTION = "tasks"


def expand_path(path: Optional[str]) -> Optional[str]:
    if not path:
        return path
    return os.path.expanduser(path)


def default_credentials_path() -> str:
    return os.path.join(default_config_dir(), DEFAULT_CREDENTIALS_FILE)


def default_token_path() -> str:
    return os.path.join(default_config_dir(), DEFAULT_TOKEN_FILE)


def _read_ini() -> Dict[str, Dict[str, str]]:
    """Merge all readable credentials.ini files; earlier paths win."""
    merged_sections: Dict[str, Dict[str, str]] = {}
    for p in credential_ini_paths():
        if not os.path.exists(p):
            continue
        cp = configparser.ConfigParser()
        try:
            cp.read(p, encoding="utf-8")
        except configparser.Error as exc:
            LOG.warning("Skipping unreadable %s: %s", p, exc)
            continue
        for section in cp.sections():
            sec = merged_sections.setdefault(section, {})
            for k, v in cp.items(section):
                sec.setdefault(k, v)
    return merged_sections


def get_profile_section(profile: Optional[str]) -> Dict[str, str]:
    """The [tasks] section overlaid with [tasks.<profile>].

    A named profile with no section of its own is a ConfigError.
    """
    ini = _read_ini()
    base = dict(ini.get(_SECTION, {}))
    if profile:
        section = f"{_SECTION}.{profile}"
        if section not in ini:
            raise ConfigError(
                f"Profile '{profile}' not found in credentials.ini",
                hint=f"Add a [{section}] section or drop --profile",
            )
        base.update(ini[section])
    return base


@dataclass(frozen=True)
class TasksSettings:
    credentials_path: str
    token_path: str
    list_title: str


def resolve_settings(
    *,
    profile: Optional[str] = None,
    credentials_path: Optional[str] = None,
    token_path: Optional[str] = None,
    list_title: Optional[str] = None,
) -> TasksSettings:
    """Fold CLI args over environment, INI profile and defaults.

    Resolution order: CLI arg > environment > INI profile > default.
    """
    sec = get_profile_section(profile)
    creds = (
        credentials_path
        or os.environ.get(ENV_CREDENTIALS)
        or sec.get("credentials")
        or default_credentials_path()
    )
    token = (
        token_path
        or os.environ.get(ENV_TOKEN)
        or sec.get("token")
        or default_token_path()
    )
    title = list_title or sec.get("list") or DEFAULT_TASK_LIST
    return TasksSettings(
        credentials_path=expand_path(creds) or creds,
        token_path=expand_path(token) or token,
        list_title=title,
    )
