"""Pydantic models for locally stored tasks."""

from datetime import datetime, timezone
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator

from devops_task_sync.azure_devops.models import WorkItemType


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AzureDevOpsMetadata(BaseModel):
    """Link between a task and the work item it was imported from."""

    model_config = ConfigDict(populate_by_name=True, validate_assignment=True)

    external_id: int = Field(alias="externalId", gt=0)
    work_item_type: WorkItemType = Field(alias="workItemType")
    iteration_path: str = Field(alias="iterationPath")
    assigned_to: str | None = Field(default=None, alias="assignedTo")
    last_synced_at: datetime | None = Field(default=None, alias="lastSyncedAt")
    source_url: str = Field(alias="sourceUrl")

    @field_validator("last_synced_at")
    @classmethod
    def assume_utc(cls, value: datetime | None) -> datetime | None:
        """Treat naive timestamps as UTC."""
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class Task(BaseModel):
    """Time-tracking task."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=lambda: uuid4().hex)
    name: str
    description: str = ""
    url: str | None = None
    project_id: str = Field(alias="projectId")
    user_id: str = Field(alias="userId")
    azure_devops: AzureDevOpsMetadata | None = Field(default=None, alias="azureDevOps")
    created_at: datetime = Field(default_factory=_utcnow, alias="createdAt")

    @property
    def external_id(self) -> int | None:
        """Work item id this task was imported from, if any."""
        if self.azure_devops is None:
            return None
        return self.azure_devops.external_id

    def to_storage_dict(self) -> dict:
        """Convert to a JSON-compatible dictionary for storage."""
        return self.model_dump(mode="json", by_alias=True)
