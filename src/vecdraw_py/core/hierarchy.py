"""Parent/child bookkeeping for scene drafts.

Groups list their children in ``child_ids`` and every child points back via
``parent_id``. The functions here are the only places either side is written,
so the two stay consistent. They operate on a mutable draft
(``dict[UUID, CanvasElement]``) that is frozen into a ``Scene`` afterwards.
"""

from __future__ import annotations

from collections import deque
from dataclasses import replace
from uuid import UUID

from vecdraw_py.core.models import CanvasElement, GroupData

Draft = dict[UUID, CanvasElement]


def _replace_children(draft: Draft, group_id: UUID, child_ids: list[UUID]) -> None:
    group = draft[group_id]
    if isinstance(group.data, GroupData):
        draft[group_id] = replace(group, data=replace(group.data, child_ids=tuple(child_ids)))


def detach(draft: Draft, element_id: UUID) -> int | None:
    """Remove an element from its parent's ``child_ids``.

    Args:
        draft: Mutable element map.
        element_id: Element to detach.

    Returns:
        The index the element occupied in its parent, or None when it was at
        the root.
    """
    element = draft.get(element_id)
    if element is None or element.parent_id is None:
        return None
    parent = draft.get(element.parent_id)
    draft[element_id] = replace(element, parent_id=None)
    if parent is None:
        return None
    children = list(parent.child_ids)
    if element_id not in children:
        return None
    index = children.index(element_id)
    children.pop(index)
    _replace_children(draft, parent.id, children)
    return index


def set_parent(draft: Draft, element_id: UUID, parent_id: UUID | None, *, index: int | None = None) -> bool:
    """Move an element under ``parent_id`` (or to the root when None).

    Args:
        draft: Mutable element map.
        element_id: Element to move.
        parent_id: New parent group, or None for the root.
        index: Slot in the parent's ``child_ids``; appended when None.

    Returns:
        False when the move is rejected (unknown IDs, a non-group parent, or
        a parent inside the element's own subtree).
    """
    if element_id not in draft:
        return False
    if parent_id is not None:
        parent = draft.get(parent_id)
        if parent is None or not parent.is_group or parent_id in subtree(draft, element_id):
            return False
    detach(draft, element_id)
    draft[element_id] = replace(draft[element_id], parent_id=parent_id)
    if parent_id is not None:
        children = list(draft[parent_id].child_ids)
        children.insert(len(children) if index is None else index, element_id)
        _replace_children(draft, parent_id, children)
    return True


def subtree(draft: Draft, element_id: UUID) -> list[UUID]:
    """The element and all of its descendants, breadth first."""
    found = [element_id]
    visited = {element_id}
    queue = deque([element_id])
    while queue:
        current = draft.get(queue.popleft())
        if current is None:
            continue
        for child_id in current.child_ids:
            if child_id not in visited and child_id in draft:
                visited.add(child_id)
                found.append(child_id)
                queue.append(child_id)
    return found


def remove_subtree(draft: Draft, element_id: UUID) -> set[UUID]:
    """Delete an element and its descendants, pruning the parent's children.

    Returns:
        The IDs that were removed.
    """
    if element_id not in draft:
        return set()
    detach(draft, element_id)
    removed = set(subtree(draft, element_id))
    for removed_id in removed:
        draft.pop(removed_id, None)
    return removed


def prune_empty_groups(draft: Draft) -> set[UUID]:
    """Remove groups left without children, repeating up the hierarchy."""
    removed: set[UUID] = set()
    while True:
        empty = [element.id for element in draft.values() if element.is_group and not element.child_ids]
        if not empty:
            return removed
        for group_id in empty:
            removed |= remove_subtree(draft, group_id)
