"""Tests for work item mapper."""

from datetime import datetime, timezone

from devops_task_sync.sync import WorkItemMapper

SYNCED_AT = datetime(2024, 6, 1, 8, 0, tzinfo=timezone.utc)


class TestWorkItemMapper:
    """Test WorkItemMapper functionality."""

    def test_default_clock_is_utc(self, make_work_item) -> None:
        """Test the default clock produces aware UTC timestamps."""
        task = WorkItemMapper().to_task(make_work_item(1), "p", "u")

        assert task.azure_devops.last_synced_at.tzinfo is not None

    def test_to_task_uses_clock(self, make_work_item) -> None:
        """Test the injected clock stamps the sync time."""
        mapper = WorkItemMapper(clock=lambda: SYNCED_AT)

        task = mapper.to_task(make_work_item(8, work_item_type="User Story"), "p", "u")

        assert task.azure_devops.last_synced_at == SYNCED_AT
        assert task.azure_devops.work_item_type.value == "User Story"

    def test_each_task_gets_its_own_id(self, make_work_item) -> None:
        """Test mapping the same work item twice yields distinct tasks."""
        mapper = WorkItemMapper()

        first = mapper.to_task(make_work_item(1), "p", "u")
        second = mapper.to_task(make_work_item(1), "p", "u")

        assert first.id != second.id

    def test_refresh_in_place(self, make_work_item) -> None:
        """Test refresh mutates and returns the same task."""
        mapper = WorkItemMapper(clock=lambda: SYNCED_AT)
        task = WorkItemMapper().to_task(make_work_item(1, assigned_to="Ada Lovelace"), "p", "u")

        refreshed = mapper.refresh(task, make_work_item(1, title="Renamed", assigned_to="Grace Hopper"))

        assert refreshed is task
        assert task.name == "Renamed"
        assert task.azure_devops.assigned_to == "Grace Hopper"
        assert task.azure_devops.last_synced_at == SYNCED_AT
