"""Task persistence used by the sync engine."""

import logging
from typing import Protocol

from devops_task_sync.tasks.models import Task
from devops_task_sync.utils.storage import StorageManager

logger = logging.getLogger(__name__)


class DuplicateTaskError(Exception):
    """Raised when a task for the same project and work item already exists."""

    def __init__(self, project_id: str, external_id: int) -> None:
        self.project_id = project_id
        self.external_id = external_id
        super().__init__(
            f"Task for work item {external_id} already exists in project {project_id}"
        )


class TaskStore(Protocol):
    """Lookup and creation of tasks, keyed by (project, work item id)."""

    async def find_by_external_id(self, project_id: str, external_id: int) -> Task | None:
        ...

    async def create(self, task: Task) -> Task:
        ...

    async def list_tasks(self, project_id: str | None = None) -> list[Task]:
        ...


class InMemoryTaskStore:
    """Dict-backed task store."""

    def __init__(self, tasks: list[Task] | None = None) -> None:
        self._tasks: dict[str, Task] = {}
        for task in tasks or []:
            self._tasks[task.id] = task

    def _find(self, project_id: str, external_id: int) -> Task | None:
        for task in self._tasks.values():
            if task.project_id == project_id and task.external_id == external_id:
                return task
        return None

    async def find_by_external_id(self, project_id: str, external_id: int) -> Task | None:
        return self._find(project_id, external_id)

    async def create(self, task: Task) -> Task:
        if task.external_id is not None and self._find(task.project_id, task.external_id):
            raise DuplicateTaskError(task.project_id, task.external_id)
        self._tasks[task.id] = task
        return task

    async def list_tasks(self, project_id: str | None = None) -> list[Task]:
        return [
            task
            for task in self._tasks.values()
            if project_id is None or task.project_id == project_id
        ]


class FileTaskStore(InMemoryTaskStore):
    """Task store persisted to ``tasks.json`` in the config directory."""

    def __init__(self, storage: StorageManager) -> None:
        """Initialize file task store.

        Args:
            storage: StorageManager owning the tasks file.
        """
        self.storage = storage
        super().__init__([Task(**item) for item in storage.load_tasks()])

    async def create(self, task: Task) -> Task:
        created = await super().create(task)
        self.storage.save_tasks([t.to_storage_dict() for t in self._tasks.values()])
        logger.debug(f"Saved task {created.id} to {self.storage.tasks_file}")
        return created
