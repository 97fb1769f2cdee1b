"""Pytest configuration and fixtures."""

import tempfile
from collections.abc import Callable
from pathlib import Path
from typing import Any

import httpx
import pytest
from cryptography.fernet import Fernet

from devops_task_sync.azure_devops import AzureDevOpsClient, WorkItem
from devops_task_sync.config import Config
from devops_task_sync.utils import StorageManager
from devops_task_sync.utils.secrets import ENCRYPTION_KEY_ENV

ORGANIZATION_URL = "https://dev.azure.com/contoso"
PAT = "abcd1234efgh5678ijkl"


@pytest.fixture
def temp_config_dir() -> Path:
    """Create a temporary configuration directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def storage_manager(temp_config_dir: Path) -> StorageManager:
    """Create a storage manager with temporary directory."""
    return StorageManager(temp_config_dir)


@pytest.fixture
def config(temp_config_dir: Path) -> Config:
    """Create a config instance with temporary directory."""
    return Config(temp_config_dir)


@pytest.fixture
def encryption_key(monkeypatch: pytest.MonkeyPatch) -> str:
    """Set a fresh Fernet key in the environment."""
    key = Fernet.generate_key().decode()
    monkeypatch.setenv(ENCRYPTION_KEY_ENV, key)
    return key


def _work_item_payload(
    work_item_id: int,
    title: str | None = None,
    work_item_type: str = "Task",
    iteration_path: str = "ProjectX\\Sprint 1",
    assigned_to: str | None = None,
    description: str | None = None,
    state: str | None = "New",
) -> dict[str, Any]:
    fields: dict[str, Any] = {
        "System.Id": work_item_id,
        "System.Title": title or f"Work item {work_item_id}",
        "System.WorkItemType": work_item_type,
        "System.IterationPath": iteration_path,
    }
    if state is not None:
        fields["System.State"] = state
    if assigned_to is not None:
        fields["System.AssignedTo"] = {
            "displayName": assigned_to,
            "uniqueName": f"{assigned_to.lower().replace(' ', '.')}@contoso.com",
        }
    if description is not None:
        fields["System.Description"] = description
    return {
        "id": work_item_id,
        "url": f"{ORGANIZATION_URL}/_apis/wit/workItems/{work_item_id}",
        "fields": fields,
    }


@pytest.fixture
def work_item_payload() -> Callable[..., dict[str, Any]]:
    """Factory for raw work item API payloads."""
    return _work_item_payload


@pytest.fixture
def make_work_item() -> Callable[..., WorkItem]:
    """Factory for parsed work items."""

    def factory(work_item_id: int, **kwargs: Any) -> WorkItem:
        return WorkItem(**_work_item_payload(work_item_id, **kwargs))

    return factory


@pytest.fixture
def make_client() -> Callable[..., AzureDevOpsClient]:
    """Factory for clients answering through an httpx.MockTransport handler."""

    def factory(
        handler: Callable[[httpx.Request], httpx.Response],
        organization_url: str = ORGANIZATION_URL,
    ) -> AzureDevOpsClient:
        return AzureDevOpsClient(organization_url, PAT, transport=httpx.MockTransport(handler))

    return factory
