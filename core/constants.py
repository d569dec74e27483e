"""Paths, Google Tasks API settings and CLI defaults."""

from __future__ import annotations

import os

# -----------------------------------------------------------------------------
# Where credentials.ini, the OAuth client JSON and the token cache live
# -----------------------------------------------------------------------------

INI_NAME = "credentials.ini"
APP_DIR = "tasks-assistant"


def _config_roots() -> list[str]:
    """Directories searched for config, most specific first.

    ``$CREDENTIALS`` (an explicit credentials.ini path) contributes its
    directory, then ``$XDG_CONFIG_HOME``, then ``~/.config``.
    """
    roots: list[str] = []
    explicit = os.environ.get("CREDENTIALS")
    if explicit:
        roots.append(os.path.dirname(os.path.expanduser(explicit)))
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        roots.append(os.path.expanduser(xdg))
    roots.append(os.path.expanduser("~/.config"))
    return roots


def credential_ini_paths() -> list[str]:
    """Candidate credentials.ini files in lookup order, without duplicates."""
    candidates: list[str] = []
    explicit = os.environ.get("CREDENTIALS")
    if explicit:
        candidates.append(os.path.expanduser(explicit))
    for root in _config_roots():
        candidates.append(os.path.join(root, INI_NAME))
        candidates.append(os.path.join(root, APP_DIR, INI_NAME))
    return list(dict.fromkeys(p for p in candidates if p))


def default_config_dir() -> str:
    return _config_roots()[0]


DEFAULT_CREDENTIALS_FILE = "credentials.json"
DEFAULT_TOKEN_FILE = "tasks_token.json"  # noqa: S105 - file name, not a secret

ENV_CREDENTIALS = "TASKS_ASSISTANT_CREDENTIALS"
ENV_TOKEN = "TASKS_ASSISTANT_TOKEN"  # noqa: S105 - variable name

# -----------------------------------------------------------------------------
# Google Tasks API
# -----------------------------------------------------------------------------

TASKS_API_NAME = "tasks"
TASKS_API_VERSION = "v1"

# Read/write; creating tasks needs more than tasks.readonly
TASKS_API_SCOPES = ["https://www.googleapis.com/auth/tasks"]

# Largest maxResults tasks.list and tasklists.list accept
TASKS_PAGE_SIZE = 100

DEFAULT_TASK_LIST = "Monthly Tasks"

# -----------------------------------------------------------------------------
# CLI defaults
# -----------------------------------------------------------------------------

FMT_MONTH = "%Y-%m"

DEFAULT_SCHEDULE_PATH = "config/tasks/schedule.yaml"
