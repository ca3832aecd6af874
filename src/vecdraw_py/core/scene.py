"""Immutable scene snapshot."""

from __future__ import annotations

from collections import deque
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from vecdraw_py.core.selection import Selection

if TYPE_CHECKING:
    from collections.abc import Iterable
    from uuid import UUID

    from vecdraw_py.core.models import CanvasElement


def _frozen_mapping(value: Mapping[Any, Any] | None = None) -> Mapping[Any, Any]:
    return MappingProxyType(dict(value or {}))


@dataclass(frozen=True)
class Scene:
    """A complete, immutable state of the document.

    Every mutation produces a new ``Scene``. Unchanged elements are shared
    between snapshots, which keeps history cheap.

    Attributes:
        name: Document name.
        elements: Elements keyed by ID.
        hidden_ids: IDs currently hidden.
        locked_ids: IDs currently locked.
        propagated_hidden: For each group hidden at group level, the IDs that
            the toggle added to ``hidden_ids``.
        propagated_locked: Same bookkeeping for ``locked_ids``.
        selection: Current selection.
        group_name_counter: Number used for the next default group name.
    """

    name: str = "Untitled"
    elements: Mapping[UUID, CanvasElement] = field(default_factory=_frozen_mapping)
    hidden_ids: frozenset[UUID] = frozenset()
    locked_ids: frozenset[UUID] = frozenset()
    propagated_hidden: Mapping[UUID, frozenset[UUID]] = field(default_factory=_frozen_mapping)
    propagated_locked: Mapping[UUID, frozenset[UUID]] = field(default_factory=_frozen_mapping)
    selection: Selection = field(default_factory=Selection)
    group_name_counter: int = 1

    def __post_init__(self) -> None:
        """Wrap mappings read-only and coerce id sets."""
        object.__setattr__(self, "elements", _frozen_mapping(self.elements))
        object.__setattr__(self, "propagated_hidden", _frozen_mapping(self.propagated_hidden))
        object.__setattr__(self, "propagated_locked", _frozen_mapping(self.propagated_locked))
        object.__setattr__(self, "hidden_ids", frozenset(self.hidden_ids))
        object.__setattr__(self, "locked_ids", frozenset(self.locked_ids))

    def with_changes(self, **changes: Any) -> Scene:
        """Return a copy of the scene with the given fields replaced."""
        return replace(self, **changes)

    def __contains__(self, element_id: object) -> bool:
        return element_id in self.elements

    def __len__(self) -> int:
        return len(self.elements)

    def get(self, element_id: UUID) -> CanvasElement | None:
        """Look up an element, returning None when it does not exist."""
        return self.elements.get(element_id)

    def ordered(self, ids: Iterable[UUID] | None = None) -> list[CanvasElement]:
        """Return elements sorted by z-index (bottom first).

        Args:
            ids: Restrict to these IDs; unknown IDs are ignored.
        """
        if ids is None:
            candidates = list(self.elements.values())
        else:
            candidates = [self.elements[i] for i in dict.fromkeys(ids) if i in self.elements]
        return sorted(candidates, key=lambda element: element.z_index)

    def roots(self) -> list[CanvasElement]:
        """Top-level elements in z order."""
        return [element for element in self.ordered() if element.parent_id is None]

    def children(self, group_id: UUID) -> list[CanvasElement]:
        """Direct children of a group in ``child_ids`` order."""
        group = self.elements.get(group_id)
        if group is None:
            return []
        return [self.elements[child] for child in group.child_ids if child in self.elements]

    def descendants(self, element_id: UUID) -> list[UUID]:
        """All IDs below ``element_id``, breadth first, without the element itself.

        A visited set guards against malformed cyclic hierarchies.
        """
        found: list[UUID] = []
        visited = {element_id}
        queue = deque([element_id])
        while queue:
            current = self.elements.get(queue.popleft())
            if current is None:
                continue
            for child_id in current.child_ids:
                if child_id in visited or child_id not in self.elements:
                    continue
                visited.add(child_id)
                found.append(child_id)
                queue.append(child_id)
        return found

    def ancestors(self, element_id: UUID) -> list[UUID]:
        """Parent chain of an element, nearest first."""
        chain: list[UUID] = []
        element = self.elements.get(element_id)
        while element is not None and element.parent_id is not None and element.parent_id not in chain:
            chain.append(element.parent_id)
            element = self.elements.get(element.parent_id)
        return chain

    @property
    def max_z_index(self) -> int:
        """Highest z-index in the scene, -1 when empty."""
        return max((element.z_index for element in self.elements.values()), default=-1)

    @property
    def next_z_index(self) -> int:
        """Z-index for the next element placed on top of everything."""
        return self.max_z_index + 1

    def is_hidden(self, element_id: UUID) -> bool:
        """Whether an element is hidden."""
        return element_id in self.hidden_ids

    def is_locked(self, element_id: UUID) -> bool:
        """Whether an element is locked."""
        return element_id in self.locked_ids

    def is_interactive(self, element_id: UUID) -> bool:
        """Whether an element exists and can be selected or edited."""
        return element_id in self.elements and not self.is_hidden(element_id) and not self.is_locked(element_id)
