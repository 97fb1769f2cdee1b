"""Storage for settings, state, tokens and tasks."""

import json
from datetime import datetime
from pathlib import Path
from typing import Any

import yaml

DEFAULT_CONFIG_DIR = Path.home() / ".devops-task-sync"


class StorageManager:
    """Manages configuration, state, token and task storage."""

    def __init__(self, config_dir: Path | None = None) -> None:
        """Initialize storage manager.

        Args:
            config_dir: Directory to store configuration. Defaults to ~/.devops-task-sync/
        """
        self.config_dir = config_dir or DEFAULT_CONFIG_DIR
        self.config_dir.mkdir(parents=True, exist_ok=True)

        self.settings_file = self.config_dir / "settings.yaml"
        self.state_file = self.config_dir / "state.json"
        self.tokens_file = self.config_dir / "tokens.json"
        self.tasks_file = self.config_dir / "tasks.json"

    def load_settings(self) -> dict[str, Any]:
        """Load connection and project link settings.

        Returns:
            Settings dictionary.
        """
        if self.settings_file.exists():
            with open(self.settings_file) as f:
                return yaml.safe_load(f) or {}
        return {}

    def save_settings(self, settings: dict[str, Any]) -> None:
        """Save connection and project link settings.

        Args:
            settings: Settings to save.
        """
        with open(self.settings_file, "w") as f:
            yaml.dump(settings, f, default_flow_style=False, sort_keys=False)

    def load_state(self) -> dict[str, Any]:
        """Load synchronization state.

        Returns:
            State dictionary with last sync timestamps, etc.
        """
        if self.state_file.exists():
            with open(self.state_file) as f:
                return json.load(f)
        return {}

    def save_state(self, state: dict[str, Any]) -> None:
        """Save synchronization state.

        Args:
            state: State dictionary to save.
        """
        with open(self.state_file, "w") as f:
            json.dump(state, f, indent=2)

    def get_last_sync_date(self, project_id: str) -> datetime | None:
        """Get when work items were last imported into a project.

        Args:
            project_id: Local project ID.

        Returns:
            Last sync datetime or None if never synced.
        """
        last_sync = self.load_state().get("last_sync_dates", {}).get(project_id)
        if last_sync:
            return datetime.fromisoformat(last_sync)
        return None

    def set_last_sync_date(self, project_id: str, date: datetime) -> None:
        """Record when work items were last imported into a project.

        Args:
            project_id: Local project ID.
            date: The synchronization datetime.
        """
        state = self.load_state()
        state.setdefault("last_sync_dates", {})[project_id] = date.isoformat()
        self.save_state(state)

    def load_tokens(self) -> dict[str, str]:
        """Load stored (encrypted) tokens.

        Returns:
            Dictionary of service names to tokens.
        """
        if self.tokens_file.exists():
            with open(self.tokens_file) as f:
                return json.load(f)
        return {}

    def save_tokens(self, tokens: dict[str, str]) -> None:
        """Save tokens.

        Args:
            tokens: Dictionary of service names to tokens.
        """
        self.tokens_file.parent.mkdir(parents=True, exist_ok=True)
        with open(self.tokens_file, "w") as f:
            json.dump(tokens, f)
        # User read/write only
        self.tokens_file.chmod(0o600)

    def get_token(self, service: str) -> str | None:
        """Get stored token for a service.

        Args:
            service: Service name (e.g., "azure_devops").

        Returns:
            Token if available, None otherwise.
        """
        return self.load_tokens().get(service)

    def set_token(self, service: str, token: str) -> None:
        """Save token for a service.

        Args:
            service: Service name.
            token: Token value.
        """
        tokens = self.load_tokens()
        tokens[service] = token
        self.save_tokens(tokens)

    def load_tasks(self) -> list[dict[str, Any]]:
        """Load stored task records.

        Returns:
            List of task dictionaries.
        """
        if self.tasks_file.exists():
            with open(self.tasks_file) as f:
                return json.load(f)
        return []

    def save_tasks(self, tasks: list[dict[str, Any]]) -> None:
        """Save task records.

        Args:
            tasks: List of task dictionaries.
        """
        with open(self.tasks_file, "w") as f:
            json.dump(tasks, f, indent=2)
