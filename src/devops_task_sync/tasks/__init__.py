"""Locally owned tasks and their persistence."""

from devops_task_sync.tasks.models import AzureDevOpsMetadata, Task
from devops_task_sync.tasks.store import (
    DuplicateTaskError,
    FileTaskStore,
    InMemoryTaskStore,
    TaskStore,
)

__all__ = [
    "AzureDevOpsMetadata",
    "Task",
    "DuplicateTaskError",
    "FileTaskStore",
    "InMemoryTaskStore",
    "TaskStore",
]
