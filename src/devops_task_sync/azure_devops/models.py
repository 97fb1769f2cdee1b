"""Pydantic models for Azure DevOps API responses."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

#: Field projection requested for every work item.
WORK_ITEM_FIELDS = [
    "System.Id",
    "System.Title",
    "System.WorkItemType",
    "System.State",
    "System.AssignedTo",
    "System.IterationPath",
    "System.Description",
]


class WorkItemType(str, Enum):
    """Work item types that can be imported as tasks."""

    BUG = "Bug"
    TASK = "Task"
    USER_STORY = "User Story"


class AzureDevOpsProject(BaseModel):
    """Azure DevOps project model."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    description: str | None = None
    url: str


class IterationAttributes(BaseModel):
    """Date range of an iteration classification node."""

    model_config = ConfigDict(populate_by_name=True)

    start_date: datetime | None = Field(default=None, alias="startDate")
    finish_date: datetime | None = Field(default=None, alias="finishDate")


class IterationNode(BaseModel):
    """Iteration classification node, as returned by the API."""

    model_config = ConfigDict(populate_by_name=True)

    id: int | None = None
    identifier: str | None = None
    name: str
    attributes: IterationAttributes | None = None
    children: list[IterationNode] | None = None

    @property
    def has_dates(self) -> bool:
        """Whether the node carries a start or finish date."""
        if self.attributes is None:
            return False
        return self.attributes.start_date is not None or self.attributes.finish_date is not None

    @property
    def is_leaf(self) -> bool:
        """Whether the node has no children."""
        return not self.children


class Iteration(BaseModel):
    """A flattened iteration, ready to be listed for selection."""

    id: str
    name: str
    path: str
    display_name: str
    start_date: datetime | None = None
    finish_date: datetime | None = None


class IdentityRef(BaseModel):
    """Identity reference used for ``System.AssignedTo``."""

    model_config = ConfigDict(populate_by_name=True)

    display_name: str = Field(alias="displayName")
    unique_name: str | None = Field(default=None, alias="uniqueName")


class WorkItemFields(BaseModel):
    """The ``fields`` object of a work item."""

    model_config = ConfigDict(populate_by_name=True)

    id: int = Field(alias="System.Id", gt=0)
    title: str = Field(alias="System.Title")
    work_item_type: WorkItemType = Field(alias="System.WorkItemType")
    state: str | None = Field(default=None, alias="System.State")
    assigned_to: IdentityRef | None = Field(default=None, alias="System.AssignedTo")
    iteration_path: str = Field(alias="System.IterationPath")
    description: str | None = Field(default=None, alias="System.Description")


class WorkItem(BaseModel):
    """Azure DevOps work item model."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    url: str
    fields: WorkItemFields

    @property
    def external_id(self) -> int:
        """Work item id as reported in its fields."""
        return self.fields.id

    @property
    def assignee(self) -> str | None:
        """Display name of the assignee, if any."""
        if self.fields.assigned_to is None:
            return None
        return self.fields.assigned_to.display_name
