"""Tests for iteration tree flattening."""

from devops_task_sync.azure_devops import IterationNode, build_display_name, flatten_iterations


def _sprint(name: str, identifier: str, start: str = "2024-01-01T00:00:00Z") -> dict:
    return {
        "identifier": identifier,
        "name": name,
        "attributes": {"startDate": start, "finishDate": "2024-01-14T00:00:00Z"},
    }


class TestBuildDisplayName:
    """Test display name formatting."""

    def test_strips_project_name(self) -> None:
        """Test project prefix is dropped and folders are slash-joined."""
        assert build_display_name("ProjectX\\TeamA\\Sprint 1", "ProjectX") == "TeamA / Sprint 1"

    def test_single_child_is_bare(self) -> None:
        """Test a sprint directly under the project has no separator."""
        assert build_display_name("ProjectX\\Sprint 1", "ProjectX") == "Sprint 1"

    def test_project_only_returns_path(self) -> None:
        """Test nothing left after stripping falls back to the path."""
        assert build_display_name("ProjectX", "ProjectX") == "ProjectX"

    def test_other_prefix_is_kept(self) -> None:
        """Test a first segment that is not the project name stays."""
        assert build_display_name("Other\\Sprint 1", "ProjectX") == "Other / Sprint 1"

    def test_forward_slash_paths(self) -> None:
        """Test paths without backslashes are split on forward slashes."""
        assert build_display_name("ProjectX/TeamA/Sprint 2", "ProjectX") == "TeamA / Sprint 2"


class TestFlattenIterations:
    """Test flattening of classification trees."""

    def test_dated_leaves_under_folders(self) -> None:
        """Test every dated leaf is emitted with its full path."""
        root = IterationNode(
            **{
                "id": 1,
                "identifier": "root",
                "name": "ProjectX",
                "children": [
                    {
                        "identifier": "team-a",
                        "name": "TeamA",
                        "children": [_sprint("Sprint 1", "a1"), _sprint("Sprint 2", "a2")],
                    },
                    {
                        "identifier": "team-b",
                        "name": "TeamB",
                        "children": [
                            {
                                "identifier": "release",
                                "name": "Release 1",
                                "children": [_sprint("Sprint 1", "b1")],
                            }
                        ],
                    },
                ],
            }
        )

        iterations = flatten_iterations(root)

        assert len(iterations) == 3
        assert [i.path for i in iterations] == [
            "ProjectX\\TeamA\\Sprint 1",
            "ProjectX\\TeamA\\Sprint 2",
            "ProjectX\\TeamB\\Release 1\\Sprint 1",
        ]
        assert [i.display_name for i in iterations] == [
            "TeamA / Sprint 1",
            "TeamA / Sprint 2",
            "TeamB / Release 1 / Sprint 1",
        ]
        assert len({i.id for i in iterations}) == 3

    def test_undated_leaf_is_included(self) -> None:
        """Test leaves without dates are still selectable."""
        root = IterationNode(name="ProjectX", children=[IterationNode(id=5, name="Backlog")])

        iterations = flatten_iterations(root)

        assert len(iterations) == 1
        assert iterations[0].id == "5"
        assert iterations[0].display_name == "Backlog"
        assert iterations[0].start_date is None

    def test_dated_folder_is_included(self) -> None:
        """Test a folder carrying dates is emitted along with its children."""
        root = IterationNode(
            **{
                "name": "ProjectX",
                "children": [
                    {
                        "identifier": "release",
                        "name": "Release 1",
                        "attributes": {"finishDate": "2024-06-30T00:00:00Z"},
                        "children": [_sprint("Sprint 1", "s1")],
                    }
                ],
            }
        )

        iterations = flatten_iterations(root)

        assert [i.id for i in iterations] == ["release", "s1"]
        assert iterations[0].start_date is None
        assert iterations[0].finish_date is not None

    def test_root_without_dates_is_excluded(self) -> None:
        """Test a childless root is not reported as a sprint."""
        assert flatten_iterations(IterationNode(name="ProjectX")) == []

    def test_root_with_dates_is_included(self) -> None:
        """Test a dated root keeps its plain path as display name."""
        root = IterationNode(
            name="ProjectX",
            attributes={"startDate": "2024-01-01T00:00:00Z"},
        )

        iterations = flatten_iterations(root)

        assert len(iterations) == 1
        assert iterations[0].path == "ProjectX"
        assert iterations[0].display_name == "ProjectX"

    def test_empty_children_counts_as_leaf(self) -> None:
        """Test an empty children list is treated like a missing one."""
        root = IterationNode(name="ProjectX", children=[IterationNode(name="Sprint 1", children=[])])

        assert [i.path for i in flatten_iterations(root)] == ["ProjectX\\Sprint 1"]

    def test_missing_identifiers(self) -> None:
        """Test id falls back to the numeric id, then to an empty string."""
        root = IterationNode(
            name="ProjectX",
            children=[IterationNode(id=12, name="A"), IterationNode(name="B")],
        )

        assert [i.id for i in flatten_iterations(root)] == ["12", ""]
