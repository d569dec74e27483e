"""Shared fake/mock objects for testing.

Modules:
    tasks - FakeTasksClient for Google Tasks API testing
"""

from __future__ import annotations

from tests.fakes.tasks import FakeTasksClient, make_tasks_client

__all__ = [
    "FakeTasksClient",
    "make_tasks_client",
]
