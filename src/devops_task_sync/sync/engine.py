"""Sync engine importing Azure DevOps work items as tasks."""

import logging
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum

from devops_task_sync.azure_devops.models import WorkItem
from devops_task_sync.sync.mapper import Clock, WorkItemMapper, utc_now
from devops_task_sync.tasks.models import Task
from devops_task_sync.tasks.store import DuplicateTaskError, TaskStore

logger = logging.getLogger(__name__)

#: Imported tasks older than this are considered stale.
STALE_AFTER = timedelta(hours=24)


class OutcomeStatus(str, Enum):
    """What happened to a single work item during an import."""

    IMPORTED = "imported"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class ItemOutcome:
    """Result of importing one work item."""

    work_item_id: int
    status: OutcomeStatus
    task: Task | None = None
    error: Exception | None = None


class ImportResult:
    """Results from an import operation."""

    def __init__(self) -> None:
        """Initialize import result."""
        self.imported = 0
        self.skipped = 0
        self.tasks: list[Task] = []

    def add_imported(self, task: Task) -> None:
        """Record a newly created task."""
        self.imported += 1
        self.tasks.append(task)

    def add_skip(self) -> None:
        """Record a skipped work item."""
        self.skipped += 1

    @classmethod
    def from_outcomes(cls, outcomes: list[ItemOutcome]) -> "ImportResult":
        """Aggregate per-item outcomes, keeping input order.

        Failed items count as skipped.
        """
        result = cls()
        for outcome in outcomes:
            if outcome.status is OutcomeStatus.IMPORTED and outcome.task is not None:
                result.add_imported(outcome.task)
            else:
                result.add_skip()
        return result

    def to_dict(self) -> dict:
        """Convert to a JSON-compatible dictionary."""
        return {
            "imported": self.imported,
            "skipped": self.skipped,
            "tasks": [task.to_storage_dict() for task in self.tasks],
        }

    def __str__(self) -> str:
        """String representation of results."""
        return f"Imported: {self.imported}, Skipped: {self.skipped}"


class SyncEngine:
    """Turns Azure DevOps work items into local tasks.

    Work items are imported at most once per project: the
    (project, work item id) pair is the deduplication key. Nothing guards
    that check against a second import running concurrently for the same
    project; the task store's uniqueness constraint is the backstop.
    """

    def __init__(self, store: TaskStore, clock: Clock | None = None) -> None:
        """Initialize sync engine.

        Args:
            store: Task persistence.
            clock: Returns the current time. Defaults to UTC now.
        """
        self.store = store
        self.clock = clock or utc_now
        self.mapper = WorkItemMapper(self.clock)

    def transform_work_item_to_task(
        self, work_item: WorkItem, project_id: str, user_id: str
    ) -> Task:
        """Transform a work item into an unsaved task.

        Args:
            work_item: Azure DevOps work item.
            project_id: Local project ID.
            user_id: Local user ID.

        Returns:
            Task ready to be created.
        """
        return self.mapper.to_task(work_item, project_id, user_id)

    async def import_work_items(
        self, work_items: list[WorkItem], project_id: str, user_id: str
    ) -> ImportResult:
        """Import work items as tasks, one at a time in input order.

        Work items that already have a task in the project are skipped.
        A failure on one item is logged and counted as skipped; it never
        aborts the batch.

        Args:
            work_items: Work items to import.
            project_id: Local project ID.
            user_id: Local user ID.

        Returns:
            Import result with counts and the created tasks.
        """
        outcomes = []
        for work_item in work_items:
            outcomes.append(await self._import_one(work_item, project_id, user_id))

        result = ImportResult.from_outcomes(outcomes)
        logger.info(f"Import into project {project_id} complete: {result}")
        return result

    async def _import_one(self, work_item: WorkItem, project_id: str, user_id: str) -> ItemOutcome:
        work_item_id = work_item.id
        try:
            work_item_id = work_item.external_id
            existing = await self.store.find_by_external_id(project_id, work_item_id)
            if existing is not None:
                logger.info(f"Skipping duplicate work item {work_item_id}")
                return ItemOutcome(work_item_id, OutcomeStatus.SKIPPED, task=existing)

            task = await self.store.create(
                self.transform_work_item_to_task(work_item, project_id, user_id)
            )
            logger.info(f"Imported work item {work_item_id} as task {task.id}")
            return ItemOutcome(work_item_id, OutcomeStatus.IMPORTED, task=task)
        except DuplicateTaskError as e:
            logger.info(f"Skipping work item {work_item_id} imported concurrently: {e}")
            return ItemOutcome(work_item_id, OutcomeStatus.SKIPPED, error=e)
        except Exception as e:
            logger.error(f"Error importing work item {work_item_id}: {e}")
            return ItemOutcome(work_item_id, OutcomeStatus.FAILED, error=e)

    def should_update_existing_task(self, existing_task: Task, work_item: WorkItem) -> bool:
        """Check whether an imported task is stale.

        Args:
            existing_task: Task previously imported.
            work_item: Matching work item (unused by the current policy).

        Returns:
            True if the task was last synced more than 24 hours ago.
        """
        metadata = existing_task.azure_devops
        if metadata is None or metadata.last_synced_at is None:
            return False
        return self.clock() - metadata.last_synced_at > STALE_AFTER

    def update_task_from_work_item(self, task: Task, work_item: WorkItem) -> Task:
        """Refresh a task in place from its work item.

        Args:
            task: Existing task.
            work_item: Azure DevOps work item.

        Returns:
            The same, updated task.
        """
        return self.mapper.refresh(task, work_item)
