"""Selection state and deletion-scope resolution."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from vecdraw_py.core.types import DeletionScope, PointRole

if TYPE_CHECKING:
    from uuid import UUID


@dataclass(frozen=True)
class SubpathRef:
    """Reference to one subpath of a path element."""

    element_id: UUID
    subpath_index: int


@dataclass(frozen=True)
class PointRef:
    """Reference to one editable point of a path element.

    Attributes:
        element_id: Owning path element.
        subpath_index: Index of the subpath inside the path.
        command_index: Index of the command inside the subpath.
        role: Which point of the command (anchor or a control point).
    """

    element_id: UUID
    subpath_index: int
    command_index: int
    role: PointRole = PointRole.ANCHOR


@dataclass(frozen=True)
class Selection:
    """Multi-granularity selection held by a scene.

    Attributes:
        element_ids: Selected elements, in selection order.
        subpaths: Selected subpaths.
        points: Selected points.
    """

    element_ids: tuple[UUID, ...] = ()
    subpaths: frozenset[SubpathRef] = frozenset()
    points: frozenset[PointRef] = frozenset()

    @property
    def is_empty(self) -> bool:
        """Whether nothing is selected at any granularity."""
        return not (self.element_ids or self.subpaths or self.points)

    @property
    def deletion_scope(self) -> DeletionScope:
        """Scope a delete request would act on for this selection."""
        return resolve_deletion_scope(len(self.points), len(self.subpaths), len(self.element_ids))


def resolve_deletion_scope(points: int, subpaths: int, elements: int) -> DeletionScope:
    """Pick the finest granularity that has a non-empty selection.

    Args:
        points: Number of selected points.
        subpaths: Number of selected subpaths.
        elements: Number of selected elements.

    Returns:
        ``POINTS`` beats ``SUBPATHS`` beats ``ELEMENTS``; ``NONE`` when all
        counts are zero.
    """
    if points > 0:
        return DeletionScope.POINTS
    if subpaths > 0:
        return DeletionScope.SUBPATHS
    if elements > 0:
        return DeletionScope.ELEMENTS
    return DeletionScope.NONE
