"""Minimal Google Tasks API wrapper.

Provides the subset the CLI needs: find a task list by title, list its
tasks and insert new ones. Google libraries are imported at module load
but tolerated missing so ``--help`` and offline commands still work.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, Iterator, List, Optional

try:
    from google.auth.exceptions import RefreshError  # type: ignore
    from google.auth.transport.requests import Request  # type: ignore
    from google.oauth2.credentials import Credentials  # type: ignore
    from google_auth_oauthlib.flow import InstalledAppFlow  # type: ignore
    from googleapiclient.discovery import build  # type: ignore
except ImportError:  # pragma: no cover - optional dependency
    RefreshError = Request = Credentials = InstalledAppFlow = build = None  # type: ignore

from core.constants import TASKS_API_NAME, TASKS_API_SCOPES, TASKS_API_VERSION, TASKS_PAGE_SIZE

LOG = logging.getLogger(__name__)

SCOPES = list(TASKS_API_SCOPES)


def ensure_google_api() -> None:
    """Ensure optional Google API dependencies are present."""
    if Credentials is None or InstalledAppFlow is None or build is None or Request is None:
        raise RuntimeError(
            "Google API libraries not installed. Please `pip install google-api-python-client google-auth-httplib2 google-auth-oauthlib`."
        )


class GoogleTasksClient:
    def __init__(self, credentials_path: str, token_path: str) -> None:
        self.credentials_path = os.path.expanduser(credentials_path)
        self.token_path = os.path.expanduser(token_path)
        self.creds: Optional[Credentials] = None  # type: ignore
        self._service = None

    def authenticate(self) -> None:
        ensure_google_api()

        creds = None
        if os.path.exists(self.token_path):
            try:
                creds = Credentials.from_authorized_user_file(self.token_path, SCOPES)
            except ValueError as exc:
                LOG.warning("Ignoring unusable token %s: %s", self.token_path, exc)
                creds = None

        if creds and creds.expired and getattr(creds, "refresh_token", None):
            try:
                creds.refresh(Request())
            except RefreshError as exc:
                LOG.warning("Token refresh failed, re-authorizing: %s", exc)
                creds = None
            else:
                self._save_token(creds)

        if creds is None or not creds.valid:
            if not os.path.exists(self.credentials_path):
                raise FileNotFoundError(2, "No such file", self.credentials_path)
            flow = InstalledAppFlow.from_client_secrets_file(self.credentials_path, SCOPES)
            creds = flow.run_local_server(port=0)
            self._save_token(creds)
            LOG.info("Token stored to %s", self.token_path)

        self.creds = creds
        self._service = build(TASKS_API_NAME, TASKS_API_VERSION, credentials=self.creds, cache_discovery=False)

    def _save_token(self, creds) -> None:
        token_dir = os.path.dirname(self.token_path)
        if token_dir:
            os.makedirs(token_dir, exist_ok=True)
        with open(self.token_path, "w", encoding="utf-8") as token:
            token.write(creds.to_json())

    @property
    def service(self):
        if not self._service:
            raise RuntimeError("GoogleTasksClient not authenticated. Call authenticate().")
        return self._service

    @staticmethod
    def _paginate(method, **params: Any) -> Iterator[Dict[str, Any]]:
        page_token: Optional[str] = None
        while True:
            if page_token:
                params["pageToken"] = page_token
            resp = method(**params).execute()
            for item in resp.get("items", []) or []:
                yield item
            page_token = resp.get("nextPageToken")
            if not page_token:
                return

    def list_task_lists(self) -> List[Dict[str, Any]]:
        LOG.debug("Listing task lists")
        return list(self._paginate(self.service.tasklists().list, maxResults=TASKS_PAGE_SIZE))

    def find_task_list(self, title: str) -> Optional[Dict[str, Any]]:
        for task_list in self.list_task_lists():
            if task_list.get("title") == title:
                return task_list
        return None

    def list_tasks(self, tasklist_id: str) -> List[Dict[str, Any]]:
        """All tasks in a list, including completed and hidden ones."""
        LOG.debug("Listing tasks in %s", tasklist_id)
        return list(
            self._paginate(
                self.service.tasks().list,
                tasklist=tasklist_id,
                maxResults=TASKS_PAGE_SIZE,
                showCompleted=True,
                showHidden=True,
            )
        )

    def create_task(self, tasklist_id: str, title: str, due: str) -> Dict[str, Any]:
        LOG.debug("Creating task %r due %s in %s", title, due, tasklist_id)
        body = {"title": title, "due": due}
        return self.service.tasks().insert(tasklist=tasklist_id, body=body).execute()
