"""Synchronization of Azure DevOps work items into tasks."""

from devops_task_sync.sync.engine import ImportResult, ItemOutcome, OutcomeStatus, SyncEngine
from devops_task_sync.sync.mapper import WorkItemMapper

__all__ = ["ImportResult", "ItemOutcome", "OutcomeStatus", "SyncEngine", "WorkItemMapper"]
