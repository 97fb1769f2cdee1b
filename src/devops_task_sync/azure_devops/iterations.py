"""Flattening of iteration classification trees into selectable sprints."""

from collections.abc import Iterator

from devops_task_sync.azure_devops.models import Iteration, IterationNode

PATH_SEPARATOR = "\\"


def build_display_name(path: str, project_name: str) -> str:
    """Build a readable label for an iteration path.

    The project name is dropped from the front of the path and the
    remaining segments are joined with ``" / "``.

    Args:
        path: Full iteration path (e.g. ``"Project\\Team\\Sprint 1"``).
        project_name: Project name to strip from the path.

    Returns:
        Display name (e.g. ``"Team / Sprint 1"``).
    """
    separator = PATH_SEPARATOR if PATH_SEPARATOR in path else "/"
    parts = path.split(separator)

    if parts and parts[0] == project_name:
        parts = parts[1:]

    if not parts:
        return path
    if len(parts) == 1:
        return parts[0]
    return " / ".join(parts)


def _walk(node: IterationNode, parent_path: str, project_name: str) -> Iterator[Iteration]:
    current_path = f"{parent_path}{PATH_SEPARATOR}{node.name}" if parent_path else node.name

    # Folders without dates are skipped; the root is only kept when dated.
    if node.has_dates or (node.is_leaf and parent_path):
        attributes = node.attributes
        yield Iteration(
            id=node.identifier or (str(node.id) if node.id is not None else ""),
            name=node.name,
            path=current_path,
            display_name=build_display_name(current_path, project_name),
            start_date=attributes.start_date if attributes else None,
            finish_date=attributes.finish_date if attributes else None,
        )

    for child in node.children or []:
        yield from _walk(child, current_path, project_name)


def flatten_iterations(root: IterationNode) -> list[Iteration]:
    """Flatten an iteration tree depth-first.

    Args:
        root: Root node of the classification tree; its name is the project name.

    Returns:
        Iterations in pre-order, children in API order.
    """
    return list(_walk(root, "", root.name))
