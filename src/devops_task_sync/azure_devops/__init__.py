"""Azure DevOps API integration."""

from devops_task_sync.azure_devops.client import ApiDialect, AzureDevOpsClient, build_iteration_wiql
from devops_task_sync.azure_devops.errors import (
    AuthenticationFailedError,
    AzureDevOpsError,
    AzureDevOpsRequestError,
    ErrorCategory,
    NotFoundError,
    RateLimitedError,
)
from devops_task_sync.azure_devops.iterations import build_display_name, flatten_iterations
from devops_task_sync.azure_devops.models import (
    AzureDevOpsProject,
    IdentityRef,
    Iteration,
    IterationNode,
    WorkItem,
    WorkItemFields,
    WorkItemType,
)

__all__ = [
    "ApiDialect",
    "AzureDevOpsClient",
    "build_iteration_wiql",
    "AuthenticationFailedError",
    "AzureDevOpsError",
    "AzureDevOpsRequestError",
    "ErrorCategory",
    "NotFoundError",
    "RateLimitedError",
    "build_display_name",
    "flatten_iterations",
    "AzureDevOpsProject",
    "IdentityRef",
    "Iteration",
    "IterationNode",
    "WorkItem",
    "WorkItemFields",
    "WorkItemType",
]
