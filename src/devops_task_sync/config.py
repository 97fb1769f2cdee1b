"""Configuration management for devops task sync."""

import getpass
from datetime import datetime
from pathlib import Path
from typing import Any

from devops_task_sync.utils.storage import StorageManager

PAT_TOKEN_KEY = "azure_devops"


class ConfigurationError(Exception):
    """Raised when required configuration is missing."""


class Config:
    """Manages the Azure DevOps connection and project links."""

    def __init__(self, config_dir: Path | None = None) -> None:
        """Initialize configuration.

        Args:
            config_dir: Directory for storing configuration.
        """
        self.storage = StorageManager(config_dir)
        self._settings = self.storage.load_settings()

    def get_settings(self) -> dict[str, Any]:
        """Get current settings.

        Returns:
            Settings dictionary.
        """
        return self._settings

    def _save(self) -> None:
        self.storage.save_settings(self._settings)

    def set_connection(self, organization_url: str, encrypted_pat: str) -> None:
        """Store the organization URL and the encrypted PAT.

        Args:
            organization_url: Azure DevOps organization URL.
            encrypted_pat: PAT as produced by the secret store.
        """
        self._settings["azure_devops"] = {"organization_url": organization_url.rstrip("/")}
        self._save()
        self.storage.set_token(PAT_TOKEN_KEY, encrypted_pat)

    def get_organization_url(self) -> str | None:
        """Get the configured organization URL, if any."""
        return self._settings.get("azure_devops", {}).get("organization_url")

    def require_connection(self) -> tuple[str, str]:
        """Get the organization URL and encrypted PAT.

        Returns:
            Tuple (organization_url, encrypted_pat).

        Raises:
            ConfigurationError: If either is missing.
        """
        organization_url = self.get_organization_url()
        encrypted_pat = self.storage.get_token(PAT_TOKEN_KEY)
        if not organization_url or not encrypted_pat:
            raise ConfigurationError(
                "Azure DevOps is not configured. Run: devops-task-sync configure"
            )
        return organization_url, encrypted_pat

    def get_user_id(self) -> str:
        """Get the local user that owns imported tasks."""
        return self._settings.get("user_id") or getpass.getuser()

    def set_user_id(self, user_id: str) -> None:
        """Set the local user that owns imported tasks."""
        self._settings["user_id"] = user_id
        self._save()

    def link_project(
        self, project_id: str, azure_project_id: str, azure_project_name: str
    ) -> None:
        """Link a local project to an Azure DevOps project.

        Args:
            project_id: Local project ID.
            azure_project_id: Azure DevOps project ID (GUID).
            azure_project_name: Azure DevOps project name.
        """
        if "projects" not in self._settings:
            self._settings["projects"] = {}

        self._settings["projects"][project_id] = {
            "azure_project_id": azure_project_id,
            "azure_project_name": azure_project_name,
        }
        self._save()

    def get_project_link(self, project_id: str) -> dict[str, Any] | None:
        """Get the Azure DevOps project linked to a local project.

        Args:
            project_id: Local project ID.

        Returns:
            Link details or None if not linked.
        """
        return self._settings.get("projects", {}).get(project_id)

    def require_project_link(self, project_id: str) -> dict[str, Any]:
        """Get a project link or fail.

        Raises:
            ConfigurationError: If the project is not linked.
        """
        link = self.get_project_link(project_id)
        if not link or not link.get("azure_project_id"):
            raise ConfigurationError(
                f"Azure DevOps is not enabled for project '{project_id}'. "
                f"Run: devops-task-sync link {project_id} <azure-project-name>"
            )
        return link

    def get_all_project_links(self) -> dict[str, dict[str, Any]]:
        """Get every project link."""
        return dict(self._settings.get("projects", {}))

    def record_sync(self, project_id: str, synced_at: datetime) -> None:
        """Record a completed import for a project."""
        self.storage.set_last_sync_date(project_id, synced_at)

    def get_last_sync(self, project_id: str) -> datetime | None:
        """Get when a project was last imported into."""
        return self.storage.get_last_sync_date(project_id)
