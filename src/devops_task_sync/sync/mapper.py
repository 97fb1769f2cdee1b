"""Mapping of Azure DevOps work items onto local tasks."""

import logging
from collections.abc import Callable
from datetime import datetime, timezone

from devops_task_sync.azure_devops.models import WorkItem
from devops_task_sync.tasks.models import AzureDevOpsMetadata, Task

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


class WorkItemMapper:
    """Builds and refreshes tasks from work items."""

    def __init__(self, clock: Clock | None = None) -> None:
        """Initialize work item mapper.

        Args:
            clock: Returns the current time; used for ``last_synced_at``.
        """
        self.clock = clock or utc_now

    def to_task(self, work_item: WorkItem, project_id: str, user_id: str) -> Task:
        """Build a new task from a work item.

        Args:
            work_item: Azure DevOps work item.
            project_id: Local project the task belongs to.
            user_id: Local user that owns the task.

        Returns:
            Unsaved task.
        """
        fields = work_item.fields
        return Task(
            name=fields.title,
            description=fields.description or "",
            url=work_item.url,
            project_id=project_id,
            user_id=user_id,
            azure_devops=AzureDevOpsMetadata(
                external_id=fields.id,
                work_item_type=fields.work_item_type,
                iteration_path=fields.iteration_path,
                assigned_to=work_item.assignee,
                last_synced_at=self.clock(),
                source_url=work_item.url,
            ),
        )

    def refresh(self, task: Task, work_item: WorkItem) -> Task:
        """Update a task in place from a work item.

        Args:
            task: Existing task.
            work_item: Azure DevOps work item.

        Returns:
            The same task object.
        """
        fields = work_item.fields

        task.name = fields.title
        if fields.description:
            task.description = fields.description

        # Tasks that were not imported keep having no metadata.
        if task.azure_devops is not None:
            task.azure_devops.iteration_path = fields.iteration_path
            task.azure_devops.assigned_to = work_item.assignee
            task.azure_devops.last_synced_at = self.clock()

        logger.debug(f"Refreshed task {task.id} from work item {fields.id}")
        return task
