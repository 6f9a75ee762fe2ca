"""
Display ordering for projects.

Projects are shown in ascending `order`. New projects go to the end
(`max(order) + 1`), and moving a project up or down swaps its `order` value
with its neighbour's rather than renumbering the list.
"""

from __future__ import annotations

from dataclasses import replace
from enum import StrEnum
from typing import Iterable, Optional, Sequence

from sitecatalog.errors import NotFoundError, ValidationError
from sitecatalog.types import Project


class Direction(StrEnum):
    UP = "up"
    DOWN = "down"

    @classmethod
    def parse(cls, value: "Direction | str") -> "Direction":
        try:
            return cls(value)
        except ValueError:
            raise ValidationError(
                "direction", f"expected 'up' or 'down', got {value!r}"
            ) from None


def next_order(orders: Iterable[Optional[int]]) -> int:
    """Return the order value for a project appended after `orders`."""
    return max((order for order in orders if order is not None), default=0) + 1


def sort_projects(projects: Iterable[Project]) -> list[Project]:
    return sorted(projects, key=lambda project: project.order)


def plan_swap(
    projects: Sequence[Project], project_id: str, direction: Direction | str
) -> Optional[tuple[Project, Project]]:
    """
    Work out the two writes needed to move a project one step.

    Args:
        projects: The current projects, in any order.
        project_id: The project to move.
        direction: "up" moves towards the front of the list.

    Returns:
        The moved project and its neighbour, each carrying the other's
        previous `order`, or None when the project is already at that end of
        the list.

    Raises:
        NotFoundError: If `project_id` is not among `projects`.
    """
    direction = Direction.parse(direction)
    ordered = sort_projects(projects)
    index = next(
        (i for i, project in enumerate(ordered) if project.id == project_id), None
    )
    if index is None:
        raise NotFoundError("reorder_project", "project", project_id)

    target_index = index - 1 if direction is Direction.UP else index + 1
    if target_index < 0 or target_index >= len(ordered):
        return None

    current, target = ordered[index], ordered[target_index]
    return (
        replace(current, order=target.order),
        replace(target, order=current.order),
    )
