"""Scene service providing the editing operations of a drawing document."""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING
from uuid import uuid4

import structlog

from vecdraw_py.codec.path_string import commands_to_string, path_data_from_string
from vecdraw_py.composition.boolean import exclude, intersect, subtract, union
from vecdraw_py.config import EngineConfig
from vecdraw_py.core.history import SnapshotHistory
from vecdraw_py.core.hierarchy import Draft, detach, prune_empty_groups, remove_subtree, set_parent
from vecdraw_py.core.logging import operation_context
from vecdraw_py.core.models import (
    CanvasElement,
    ClosePath,
    CubicBezier,
    GroupData,
    LineTo,
    MoveTo,
    PathData,
    Point,
    ShapeData,
    TextData,
)
from vecdraw_py.core.precision import round_value
from vecdraw_py.core.scene import Scene
from vecdraw_py.core.selection import PointRef, Selection, SubpathRef
from vecdraw_py.core.style import PathStyle
from vecdraw_py.core.types import (
    Alignment,
    Axis,
    BooleanOperation,
    DeletionScope,
    PointRole,
    ShapeType,
    SizeDimension,
)
from vecdraw_py.exceptions import ElementNotFoundError, InvalidElementError, PathParseError
from vecdraw_py.geometry.commands import drawable_segment_count, reverse_subpath
from vecdraw_py.geometry.elements import element_bounds, selection_bounds
from vecdraw_py.geometry.shapes import shape_to_path
from vecdraw_py.geometry.simplify import simplify
from vecdraw_py.geometry.transform import (
    TransformOptions,
    scale_stroke_width,
    transform_path_data,
    translate_path_data,
)
from vecdraw_py.importing.models import ImportOptions
from vecdraw_py.importing.pipeline import ImportPipeline, read_artworks
from vecdraw_py.importing.svg_reader import SvgArtworkReader

if TYPE_CHECKING:
    from collections.abc import Callable, Collection, Iterable, Mapping, Sequence
    from pathlib import Path
    from uuid import UUID

    from vecdraw_py.core.models import Command, ElementData, SubPath
    from vecdraw_py.geometry.bounds import Bounds
    from vecdraw_py.importing.models import ArtworkParser, ImportResult, ParsedArtwork

logger = structlog.get_logger(__name__)

# Relative size difference below which match-size leaves an element alone.
SIZE_MATCH_TOLERANCE = 1e-4


def _translate_data(data: ElementData, dx: float, dy: float) -> ElementData:
    match data:
        case PathData():
            return translate_path_data(data, dx, dy)
        case ShapeData() | TextData():
            return replace(data, x=round_value(data.x + dx), y=round_value(data.y + dy))
    return data


def _transform_data(data: ElementData, options: TransformOptions, *, scale_stroke: bool) -> ElementData:
    match data:
        case PathData():
            return transform_path_data(data, options, scale_stroke=scale_stroke)
        case ShapeData():
            return transform_path_data(shape_to_path(data), options, scale_stroke=scale_stroke)
        case TextData():
            anchor = options.apply(Point(data.x, data.y)).rounded()
            size = scale_stroke_width(data.font_size, options.scale_x, options.scale_y)
            return replace(data, x=anchor.x, y=anchor.y, font_size=size)
    return data


def _shift(dx: float, dy: float) -> Callable[[ElementData], ElementData]:
    return lambda data: _translate_data(data, dx, dy)


def _scale(options: TransformOptions) -> Callable[[ElementData], ElementData]:
    return lambda data: _transform_data(data, options, scale_stroke=False)


def _alignment_target(alignment: Alignment, boxes: Sequence[Bounds]) -> float:
    """Coordinate a group of boxes lines up on for ``alignment``."""
    match alignment:
        case Alignment.LEFT:
            return min(box.min_x for box in boxes)
        case Alignment.RIGHT:
            return max(box.max_x for box in boxes)
        case Alignment.CENTER:
            return sum(box.center[0] for box in boxes) / len(boxes)
        case Alignment.TOP:
            return min(box.min_y for box in boxes)
        case Alignment.BOTTOM:
            return max(box.max_y for box in boxes)
        case Alignment.MIDDLE:
            return sum(box.center[1] for box in boxes) / len(boxes)
    msg = f"Unknown alignment {alignment!r}"
    raise ValueError(msg)


def _as_path(data: ElementData) -> PathData | None:
    match data:
        case PathData():
            return data
        case ShapeData():
            return shape_to_path(data)
    return None


def _prune_records(records: Mapping[UUID, frozenset[UUID]], alive: Collection[UUID]) -> dict[UUID, frozenset[UUID]]:
    return {key: frozenset(i for i in ids if i in alive) for key, ids in records.items() if key in alive}


def _delete_points(sub_path: SubPath, anchors: set[int], controls: set[int]) -> SubPath | None:
    """Remove anchors and straighten cubics whose handles were deleted."""
    kept: list[Command] = []
    for index, command in enumerate(sub_path):
        if index in anchors and not isinstance(command, ClosePath):
            continue
        if index in controls and isinstance(command, CubicBezier):
            command = LineTo(command.position)
        kept.append(command)

    while kept and isinstance(kept[0], ClosePath):
        kept.pop(0)
    if kept and not isinstance(kept[0], MoveTo):
        kept[0] = MoveTo(kept[0].position)
    result = tuple(kept)
    if drawable_segment_count(result) == 0:
        return None
    return result


class SceneService:
    """Service for editing a scene.

    Every mutation replaces the current immutable ``Scene`` and records the
    previous one for undo. Selection changes are not recorded. Stale or
    unknown IDs passed to mutations are ignored rather than raising.

    Attributes:
        config: Engine configuration.
        history: Undo/redo snapshot history.
    """

    def __init__(self, scene: Scene | None = None, config: EngineConfig | None = None) -> None:
        """Initialize the scene service.

        Args:
            scene: Initial scene, defaults to an empty one.
            config: Engine configuration, defaults to ``EngineConfig()``.
        """
        self.config = config or EngineConfig()
        self.history = SnapshotHistory(self.config.max_history)
        self._scene = scene or Scene()
        self._interaction_start: Scene | None = None

    @property
    def scene(self) -> Scene:
        """The current scene snapshot."""
        return self._scene

    # Lifecycle

    def reset(self, name: str = "Untitled") -> Scene:
        """Start a new empty document and drop all history."""
        self.load(Scene(name=name))
        return self._scene

    def load(self, scene: Scene) -> None:
        """Replace the document, dropping history and any open interaction."""
        self._scene = scene
        self._interaction_start = None
        self.history.clear()
        logger.info("Scene loaded", name=scene.name, elements=len(scene))

    def rename_document(self, name: str) -> None:
        """Set the document name."""
        if name != self._scene.name:
            self._commit(self._scene.with_changes(name=name), "rename_document")

    # Internal helpers

    def _commit(self, scene: Scene, operation: str, *, record: bool = True) -> Scene:
        if scene is self._scene:
            return scene
        if record and self._interaction_start is None:
            self.history.push(self._scene)
        self._scene = scene
        logger.debug("Scene updated", operation=operation, elements=len(scene), recorded=record)
        return scene

    def _draft(self) -> Draft:
        return dict(self._scene.elements)

    def _freeze(self, draft: Draft, *, selection: Selection | None = None, **changes: object) -> Scene:
        """Build a scene from a draft, pruning references to removed IDs."""
        scene = self._scene
        alive = draft.keys()
        selection = selection if selection is not None else scene.selection
        selection = Selection(
            element_ids=tuple(i for i in selection.element_ids if i in alive),
            subpaths=frozenset(ref for ref in selection.subpaths if ref.element_id in alive),
            points=frozenset(ref for ref in selection.points if ref.element_id in alive),
        )
        return scene.with_changes(
            elements=draft,
            hidden_ids=frozenset(i for i in scene.hidden_ids if i in alive),
            locked_ids=frozenset(i for i in scene.locked_ids if i in alive),
            propagated_hidden=_prune_records(scene.propagated_hidden, alive),
            propagated_locked=_prune_records(scene.propagated_locked, alive),
            selection=selection,
            **changes,
        )

    def _selected_roots(self) -> list[UUID]:
        """Selected IDs without those whose ancestor is also selected, z ordered."""
        scene = self._scene
        selected = {i for i in scene.selection.element_ids if i in scene}
        roots = [i for i in selected if not any(a in selected for a in scene.ancestors(i))]
        return [element.id for element in scene.ordered(roots)]

    def _selected_leaves(self, *, editable: bool = True) -> list[CanvasElement]:
        """Non-group elements covered by the selection, z ordered."""
        scene = self._scene
        ids: list[UUID] = []
        for root in self._selected_roots():
            ids.extend([root, *scene.descendants(root)])
        leaves = [element for element in scene.ordered(ids) if not element.is_group]
        if editable:
            leaves = [element for element in leaves if not scene.is_locked(element.id)]
        return leaves

    # Element operations

    def get_element(self, element_id: UUID) -> CanvasElement:
        """Get an element by ID.

        Args:
            element_id: The unique identifier of the element.

        Returns:
            The requested element.

        Raises:
            ElementNotFoundError: If the element does not exist.
        """
        element = self._scene.get(element_id)
        if element is None:
            raise ElementNotFoundError(element_id)
        return element

    def list_elements(self) -> list[CanvasElement]:
        """All elements ordered by z-index, bottom first."""
        return self._scene.ordered()

    def add_element(self, data: ElementData, *, parent_id: UUID | None = None) -> CanvasElement:
        """Add an element on top of everything.

        Args:
            data: Payload of the new element.
            parent_id: Group to insert into; unknown groups fall back to the root.

        Returns:
            The created element.

        Raises:
            InvalidElementError: If ``data`` is a group that already lists
                children; groups are built with ``group_selection``.
        """
        if isinstance(data, GroupData) and data.child_ids:
            raise InvalidElementError("Groups cannot be added with children, use group_selection")
        element = CanvasElement(data=data, z_index=self._scene.next_z_index)
        draft = self._draft()
        draft[element.id] = element
        if parent_id is not None and not set_parent(draft, element.id, parent_id):
            logger.warning("Parent group not found, element added at root", parent_id=str(parent_id))
        self._commit(self._freeze(draft), "add_element")
        return self._scene.elements[element.id]

    def add_path(self, path: PathData, *, parent_id: UUID | None = None) -> CanvasElement:
        """Add a path element."""
        return self.add_element(path, parent_id=parent_id)

    def add_shape(
        self,
        shape_type: ShapeType,
        x: float,
        y: float,
        width: float,
        height: float,
        *,
        style: PathStyle | None = None,
        parent_id: UUID | None = None,
    ) -> CanvasElement:
        """Add a parametric shape.

        Args:
            shape_type: Type of shape (rectangle, ellipse, etc.).
            x: Left edge of the shape box.
            y: Top edge of the shape box.
            width: Width of the shape box.
            height: Height of the shape box.
            style: Visual styling, defaults to the configured stroke color.
            parent_id: Group to insert into.

        Returns:
            The created shape element.
        """
        style = style or PathStyle(stroke_color=self.config.default_stroke_color)
        return self.add_element(ShapeData(shape_type, x, y, width, height, style), parent_id=parent_id)

    def add_text(
        self,
        content: str,
        x: float,
        y: float,
        *,
        font_size: float = 16.0,
        font_family: str = "sans-serif",
        parent_id: UUID | None = None,
    ) -> CanvasElement:
        """Add a text element."""
        return self.add_element(TextData(content, x, y, font_size, font_family), parent_id=parent_id)

    def update_path(self, element_id: UUID, path: PathData) -> CanvasElement | None:
        """Replace the path data of a path element.

        Returns:
            The updated element, or None when the ID is not an editable path.
        """
        element = self._scene.get(element_id)
        if element is None or not isinstance(element.data, PathData) or self._scene.is_locked(element_id):
            return None
        draft = self._draft()
        draft[element_id] = replace(element, data=path)
        self._commit(self._freeze(draft), "update_path")
        return draft[element_id]

    def delete_elements(self, element_ids: Iterable[UUID]) -> set[UUID]:
        """Delete elements together with their descendants.

        Groups left without children are removed as well.

        Returns:
            Every removed ID.
        """
        draft = self._draft()
        removed: set[UUID] = set()
        for element_id in element_ids:
            removed |= remove_subtree(draft, element_id)
        if not removed:
            return removed
        removed |= prune_empty_groups(draft)
        self._commit(self._freeze(draft), "delete_elements")
        logger.info("Elements deleted", count=len(removed))
        return removed

    # Selection

    def select_elements(self, element_ids: Iterable[UUID], *, additive: bool = False) -> Selection:
        """Select elements, ignoring unknown, hidden and locked ones.

        Args:
            element_ids: Elements to select.
            additive: Extend the current selection instead of replacing it.

        Returns:
            The resulting selection.
        """
        scene = self._scene
        ids = [i for i in dict.fromkeys(element_ids) if scene.is_interactive(i)]
        if additive:
            ids = [*scene.selection.element_ids, *(i for i in ids if i not in scene.selection.element_ids)]
        keep = set(ids)
        points: frozenset[PointRef] = frozenset()
        if len(ids) == 1:
            points = frozenset(ref for ref in scene.selection.points if ref.element_id in keep)
        selection = Selection(
            element_ids=tuple(ids),
            subpaths=frozenset(ref for ref in scene.selection.subpaths if ref.element_id in keep),
            points=points,
        )
        self._commit(scene.with_changes(selection=selection), "select_elements", record=False)
        return selection

    def toggle_element_selection(self, element_id: UUID) -> Selection:
        """Add an element to the selection, or remove it when already selected."""
        current = self._scene.selection.element_ids
        if element_id in current:
            return self.select_elements([i for i in current if i != element_id])
        return self.select_elements([element_id], additive=True)

    def clear_selection(self) -> None:
        """Deselect everything."""
        self._commit(self._scene.with_changes(selection=Selection()), "clear_selection", record=False)

    def select_subpaths(self, refs: Iterable[SubpathRef], *, additive: bool = False) -> Selection:
        """Select subpaths of path elements that have at least two subpaths."""
        scene = self._scene
        valid: set[SubpathRef] = set(scene.selection.subpaths) if additive else set()
        for ref in refs:
            element = scene.get(ref.element_id)
            if element is None or not scene.is_interactive(ref.element_id):
                continue
            if not isinstance(element.data, PathData) or len(element.data.sub_paths) < 2:
                continue
            if 0 <= ref.subpath_index < len(element.data.sub_paths):
                valid.add(ref)
        selection = replace(scene.selection, subpaths=frozenset(valid))
        self._commit(scene.with_changes(selection=selection), "select_subpaths", record=False)
        return selection

    def select_points(self, refs: Iterable[PointRef], *, additive: bool = False) -> Selection:
        """Select points of the single selected path element.

        Points are only selectable while exactly one element is selected;
        references to other elements or to points a command does not carry
        are ignored.
        """
        scene = self._scene
        if len(scene.selection.element_ids) != 1:
            return scene.selection
        owner = scene.get(scene.selection.element_ids[0])
        if owner is None or not isinstance(owner.data, PathData):
            return scene.selection
        valid: set[PointRef] = set(scene.selection.points) if additive else set()
        for ref in refs:
            if ref.element_id != owner.id or not 0 <= ref.subpath_index < len(owner.data.sub_paths):
                continue
            sub_path = owner.data.sub_paths[ref.subpath_index]
            if not 0 <= ref.command_index < len(sub_path):
                continue
            command = sub_path[ref.command_index]
            if isinstance(command, ClosePath):
                continue
            if ref.role is not PointRole.ANCHOR and not isinstance(command, CubicBezier):
                continue
            valid.add(ref)
        selection = replace(scene.selection, points=frozenset(valid))
        self._commit(scene.with_changes(selection=selection), "select_points", record=False)
        return selection

    # Deletion

    def delete_selection(self) -> DeletionScope:
        """Delete at the finest granularity that has a selection.

        Points win over subpaths, which win over elements. Only the winning
        tier is deleted.

        Returns:
            The scope that was applied.
        """
        scope = self._scene.selection.deletion_scope
        with operation_context("delete_selection", scope=str(scope)):
            match scope:
                case DeletionScope.POINTS:
                    self._delete_selected_points()
                case DeletionScope.SUBPATHS:
                    self._delete_selected_subpaths()
                case DeletionScope.ELEMENTS:
                    self.delete_elements(self._scene.selection.element_ids)
                    self._commit(self._scene.with_changes(selection=Selection()), "delete_selection", record=False)
            logger.info("Selection deleted", scope=str(scope))
        return scope

    def _rewrite_paths(self, updates: dict[UUID, tuple[SubPath, ...]], operation: str) -> None:
        draft = self._draft()
        changed = False
        for element_id, sub_paths in updates.items():
            element = draft.get(element_id)
            if element is None or not isinstance(element.data, PathData):
                continue
            if sub_paths == element.data.sub_paths:
                continue
            changed = True
            if sub_paths:
                draft[element_id] = replace(element, data=replace(element.data, sub_paths=sub_paths))
            else:
                remove_subtree(draft, element_id)
        if not changed:
            return
        prune_empty_groups(draft)
        selection = replace(self._scene.selection, subpaths=frozenset(), points=frozenset())
        self._commit(self._freeze(draft, selection=selection), operation)

    def _delete_selected_points(self) -> None:
        scene = self._scene
        by_subpath: dict[tuple[UUID, int], list[PointRef]] = {}
        for ref in scene.selection.points:
            by_subpath.setdefault((ref.element_id, ref.subpath_index), []).append(ref)

        updates: dict[UUID, tuple[SubPath, ...]] = {}
        for element_id in {key[0] for key in by_subpath}:
            element = scene.get(element_id)
            if element is None or not isinstance(element.data, PathData) or scene.is_locked(element_id):
                continue
            sub_paths: list[SubPath] = []
            for index, sub_path in enumerate(element.data.sub_paths):
                refs = by_subpath.get((element_id, index))
                if not refs:
                    sub_paths.append(sub_path)
                    continue
                anchors = {ref.command_index for ref in refs if ref.role is PointRole.ANCHOR}
                controls = {ref.command_index for ref in refs if ref.role is not PointRole.ANCHOR}
                remaining = _delete_points(sub_path, anchors, controls)
                if remaining is not None:
                    sub_paths.append(remaining)
            updates[element_id] = tuple(sub_paths)
        self._rewrite_paths(updates, "delete_points")

    def _delete_selected_subpaths(self) -> None:
        scene = self._scene
        doomed: dict[UUID, set[int]] = {}
        for ref in scene.selection.subpaths:
            doomed.setdefault(ref.element_id, set()).add(ref.subpath_index)

        updates: dict[UUID, tuple[SubPath, ...]] = {}
        for element_id, indices in doomed.items():
            element = scene.get(element_id)
            if element is None or not isinstance(element.data, PathData) or scene.is_locked(element_id):
                continue
            updates[element_id] = tuple(
                sub_path for index, sub_path in enumerate(element.data.sub_paths) if index not in indices
            )
        self._rewrite_paths(updates, "delete_subpaths")

    # Grouping operations

    def group_selection(self, name: str | None = None) -> UUID | None:
        """Wrap the selected elements in a new group.

        Elements whose ancestor is also selected are left inside that
        ancestor. The group joins the common parent of its children (the root
        when they have different parents) and takes the highest child
        z-index.

        Args:
            name: Group name, defaults to ``"Group N"``.

        Returns:
            The new group ID, or None when fewer than two elements qualify.
        """
        scene = self._scene
        roots = scene.ordered(self._selected_roots())
        if len(roots) < 2:
            logger.debug("Grouping needs at least two elements", selected=len(roots))
            return None

        with operation_context("group", children=len(roots)):
            parents = {element.parent_id for element in roots}
            parent_id = parents.pop() if len(parents) == 1 else None
            counter = scene.group_name_counter
            if not name:
                name = f"Group {counter}"
                counter += 1

            draft = self._draft()
            slot: int | None = None
            if parent_id is not None:
                siblings = draft[parent_id].child_ids
                slot = min(siblings.index(element.id) for element in roots if element.id in siblings)

            group_id = uuid4()
            draft[group_id] = CanvasElement(
                data=GroupData(name=name),
                id=group_id,
                z_index=max(element.z_index for element in roots),
            )
            for element in roots:
                set_parent(draft, element.id, group_id)
            if parent_id is not None:
                set_parent(draft, group_id, parent_id, index=slot)
            prune_empty_groups(draft)

            self._commit(
                self._freeze(draft, selection=Selection(element_ids=(group_id,)), group_name_counter=counter),
                "group",
            )
            logger.info("Elements grouped", group_id=str(group_id), name=name, children=len(roots))
        return group_id

    def ungroup_selection(self) -> list[UUID]:
        """Dissolve the selected groups.

        Children move to the group's former parent, in the group's slot, with
        their geometry untouched.

        Returns:
            The freed child IDs, which become the new selection.
        """
        scene = self._scene
        groups = [element for element in scene.ordered(scene.selection.element_ids) if element.is_group]
        if not groups:
            return []

        with operation_context("ungroup", groups=len(groups)):
            draft = self._draft()
            freed: list[UUID] = []
            for group in groups:
                current = draft.get(group.id)
                if current is None:
                    continue
                parent_id = current.parent_id
                slot = detach(draft, group.id)
                for offset, child_id in enumerate(current.child_ids):
                    set_parent(draft, child_id, parent_id, index=None if slot is None else slot + offset)
                    freed.append(child_id)
                draft.pop(group.id)

            self._commit(self._freeze(draft, selection=Selection(element_ids=tuple(freed))), "ungroup")
            logger.info("Groups dissolved", groups=len(groups), children=len(freed))
        return freed

    def rename_group(self, group_id: UUID, name: str) -> bool:
        """Rename a group. Returns False for unknown or non-group IDs."""
        element = self._scene.get(group_id)
        if element is None or not isinstance(element.data, GroupData):
            return False
        draft = self._draft()
        draft[group_id] = replace(element, data=replace(element.data, name=name))
        self._commit(self._freeze(draft), "rename_group")
        return True

    def set_group_expanded(self, group_id: UUID, expanded: bool) -> bool:
        """Expand or collapse a group in layer lists."""
        element = self._scene.get(group_id)
        if element is None or not isinstance(element.data, GroupData):
            return False
        if element.data.is_expanded == expanded:
            return True
        draft = self._draft()
        draft[group_id] = replace(element, data=replace(element.data, is_expanded=expanded))
        self._commit(self._freeze(draft), "set_group_expanded")
        return True

    # Layer state operations (visibility/lock)

    def _toggle_flag(self, element_id: UUID, flag: str) -> bool | None:
        scene = self._scene
        element = scene.get(element_id)
        if element is None:
            return None
        ids_field, record_field = f"{flag}_ids", f"propagated_{flag}"
        flagged = set(getattr(scene, ids_field))
        records = dict(getattr(scene, record_field))

        if element_id in flagged:
            flagged.discard(element_id)
            flagged -= records.pop(element_id, frozenset())
            enabled = False
        else:
            flagged.add(element_id)
            if element.is_group:
                added = frozenset(i for i in scene.descendants(element_id) if i not in flagged)
                flagged |= added
                records[element_id] = added
            enabled = True

        changes = {ids_field: frozenset(flagged), record_field: records}
        if enabled:
            selection = scene.selection
            changes["selection"] = Selection(
                element_ids=tuple(i for i in selection.element_ids if i not in flagged),
                subpaths=frozenset(ref for ref in selection.subpaths if ref.element_id not in flagged),
                points=frozenset(ref for ref in selection.points if ref.element_id not in flagged),
            )
        self._commit(scene.with_changes(**changes), f"toggle_{flag}")
        return enabled

    def toggle_visibility(self, element_id: UUID) -> bool | None:
        """Hide or show an element.

        Hiding a group also hides every descendant that was visible; showing
        the group again only reveals those descendants, so a child hidden on
        its own stays hidden.

        Returns:
            True when the element is now hidden, False when shown, None for
            unknown IDs.
        """
        return self._toggle_flag(element_id, "hidden")

    def toggle_lock(self, element_id: UUID) -> bool | None:
        """Lock or unlock an element; groups propagate like visibility."""
        return self._toggle_flag(element_id, "locked")

    def is_hidden(self, element_id: UUID) -> bool:
        """Whether an element is hidden."""
        return self._scene.is_hidden(element_id)

    def is_locked(self, element_id: UUID) -> bool:
        """Whether an element is locked."""
        return self._scene.is_locked(element_id)

    # Geometry operations

    def _rewrite_leaves(self, func: Callable[[ElementData], ElementData], operation: str) -> list[UUID]:
        draft = self._draft()
        changed: list[UUID] = []
        for element in self._selected_leaves():
            data = func(element.data)
            if data != element.data:
                draft[element.id] = replace(element, data=data)
                changed.append(element.id)
        if changed:
            self._commit(self._freeze(draft), operation)
        return changed

    def move_selection(self, dx: float, dy: float) -> list[UUID]:
        """Translate the selected elements (groups move their descendants)."""
        if dx == 0 and dy == 0:
            return []
        return self._rewrite_leaves(lambda data: _translate_data(data, dx, dy), "move")

    def transform_selection(self, options: TransformOptions, *, scale_stroke: bool = False) -> list[UUID]:
        """Scale and rotate the selected elements.

        Shapes become paths since a rotated shape has no parametric form.

        Args:
            options: Scale origin, factors and rotation.
            scale_stroke: Scale stroke widths with the geometry.

        Returns:
            IDs of the changed elements.
        """
        return self._rewrite_leaves(
            lambda data: _transform_data(data, options, scale_stroke=scale_stroke), "transform"
        )

    def simplify_selection(self, tolerance: float) -> list[UUID]:
        """Simplify the selected paths with the given tolerance."""
        if tolerance <= 0:
            return []

        def apply(data: ElementData) -> ElementData:
            if not isinstance(data, PathData):
                return data
            return replace(data, sub_paths=tuple(simplify(sub_path, tolerance) for sub_path in data.sub_paths))

        return self._rewrite_leaves(apply, "simplify")

    def reverse_selected_subpaths(self) -> list[UUID]:
        """Reverse the selected subpaths, or every subpath of the selected paths."""
        scene = self._scene
        if scene.selection.subpaths:
            targets: dict[UUID, set[int]] = {}
            for ref in scene.selection.subpaths:
                targets.setdefault(ref.element_id, set()).add(ref.subpath_index)
        else:
            targets = {
                element.id: set(range(len(element.data.sub_paths)))
                for element in self._selected_leaves()
                if isinstance(element.data, PathData)
            }

        draft = self._draft()
        changed: list[UUID] = []
        for element_id, indices in targets.items():
            element = draft.get(element_id)
            if element is None or not isinstance(element.data, PathData) or scene.is_locked(element_id):
                continue
            sub_paths = tuple(
                reverse_subpath(sub_path) if index in indices else sub_path
                for index, sub_path in enumerate(element.data.sub_paths)
            )
            draft[element_id] = replace(element, data=replace(element.data, sub_paths=sub_paths))
            changed.append(element_id)
        if changed:
            self._commit(self._freeze(draft), "reverse_subpaths")
        return changed

    def compose_selection(self, operation: BooleanOperation = BooleanOperation.UNION) -> UUID | None:
        """Replace the selected paths with their boolean combination.

        Union combines every selected path. The other operators take the two
        lowest paths in z order, the upper one acting on the lower one.

        Returns:
            The new element ID, or None when the operation produced nothing.
        """
        leaves = [(element, _as_path(element.data)) for element in self._selected_leaves()]
        leaves = [(element, path) for element, path in leaves if path is not None]
        if len(leaves) < 2:
            return None

        with operation_context("compose", operator=str(operation), inputs=len(leaves)):
            paths = [path for _, path in leaves]
            match operation:
                case BooleanOperation.UNION:
                    result = union(paths)
                case BooleanOperation.SUBTRACT:
                    leaves = leaves[:2]
                    result = subtract(paths[0], paths[1])
                case BooleanOperation.INTERSECT:
                    leaves = leaves[:2]
                    result = intersect(paths[0], paths[1])
                case _:
                    leaves = leaves[:2]
                    result = exclude(paths[0], paths[1])
            if result is None:
                logger.info("Boolean operation produced no shape", operator=str(operation))
                return None

            top = leaves[-1][0]
            draft = self._draft()
            composed = CanvasElement(data=result, z_index=top.z_index)
            draft[composed.id] = composed
            if top.parent_id is not None:
                set_parent(draft, composed.id, top.parent_id)
            for element, _ in leaves:
                remove_subtree(draft, element.id)
            prune_empty_groups(draft)
            self._commit(self._freeze(draft, selection=Selection(element_ids=(composed.id,))), "compose")
            logger.info("Paths composed", operator=str(operation), inputs=len(leaves), element_id=str(composed.id))
        return composed.id

    def union_selection(self) -> UUID | None:
        """Merge the selected paths into one; see ``compose_selection``."""
        return self.compose_selection(BooleanOperation.UNION)

    # Arrangement

    def _arrange_units(self) -> list[tuple[UUID, Bounds]]:
        """Selected roots that can move, with their bounds. Groups count as one unit."""
        units: list[tuple[UUID, Bounds]] = []
        for root_id in self._selected_roots():
            if self._scene.is_locked(root_id):
                continue
            box = self.element_bounds(root_id)
            if box is not None:
                units.append((root_id, box))
        return units

    def _rewrite_units(
        self, edits: Mapping[UUID, Callable[[ElementData], ElementData]], operation: str
    ) -> list[UUID]:
        """Apply one edit per unit to its editable leaves as a single undo step."""
        scene = self._scene
        draft = self._draft()
        changed: list[UUID] = []
        for root_id, func in edits.items():
            for element in scene.ordered([root_id, *scene.descendants(root_id)]):
                if element.is_group or scene.is_locked(element.id):
                    continue
                data = func(element.data)
                if data != element.data:
                    draft[element.id] = replace(element, data=data)
                    changed.append(element.id)
        if changed:
            self._commit(self._freeze(draft), operation)
            logger.info("Selection arranged", operation=operation, changed=len(changed))
        return changed

    def align_selection(self, alignment: Alignment) -> list[UUID]:
        """Align the selected elements on a shared edge or center line.

        Edge alignments use the outermost edge of the selection. Center and
        middle use the mean of the element centers. Nothing happens with fewer
        than two measurable elements.

        Args:
            alignment: Edge or center line to align on.

        Returns:
            IDs of the changed elements.
        """
        units = self._arrange_units()
        if len(units) < 2:
            return []
        target = _alignment_target(alignment, [box for _, box in units])
        edits: dict[UUID, Callable[[ElementData], ElementData]] = {}
        for element_id, box in units:
            delta = round_value(target - _alignment_target(alignment, [box]))
            if delta:
                edits[element_id] = _shift(delta, 0.0) if alignment.is_horizontal else _shift(0.0, delta)
        return self._rewrite_units(edits, f"align_{alignment}")

    def distribute_selection(self, axis: Axis) -> list[UUID]:
        """Space the selected elements evenly along an axis.

        Elements are ordered by their centers. The first and last keep their
        place and the gaps between neighbouring boxes are made equal. Needs at
        least three measurable elements.

        Returns:
            IDs of the changed elements.
        """
        units = self._arrange_units()
        if len(units) < 3:
            return []
        horizontal = axis is Axis.HORIZONTAL
        units.sort(key=lambda unit: unit[1].center[0 if horizontal else 1])
        boxes = [box for _, box in units]
        starts = [box.min_x if horizontal else box.min_y for box in boxes]
        sizes = [box.width if horizontal else box.height for box in boxes]
        end = boxes[-1].max_x if horizontal else boxes[-1].max_y
        gap = (end - starts[0] - sum(sizes)) / (len(units) - 1)

        edits: dict[UUID, Callable[[ElementData], ElementData]] = {}
        position = starts[0]
        for (element_id, _), start, size in zip(units, starts, sizes, strict=True):
            delta = round_value(position - start)
            if delta:
                edits[element_id] = _shift(delta, 0.0) if horizontal else _shift(0.0, delta)
            position += size + gap
        return self._rewrite_units(edits, f"distribute_{axis}")

    def match_size_selection(self, dimension: SizeDimension) -> list[UUID]:
        """Stretch the selected elements to the largest width or height.

        Each element scales about its own center along ``dimension`` only.
        Elements of zero size stay as they are. Shapes become paths.

        Returns:
            IDs of the changed elements.
        """
        units = self._arrange_units()
        if len(units) < 2:
            return []
        width = dimension is SizeDimension.WIDTH
        largest = max(box.width if width else box.height for _, box in units)

        edits: dict[UUID, Callable[[ElementData], ElementData]] = {}
        for element_id, box in units:
            size = box.width if width else box.height
            if size == 0:
                continue
            factor = largest / size
            if abs(factor - 1) < SIZE_MATCH_TOLERANCE:
                continue
            cx, cy = box.center
            edits[element_id] = _scale(
                TransformOptions(
                    scale_x=factor if width else 1.0,
                    scale_y=1.0 if width else factor,
                    origin_x=cx,
                    origin_y=cy,
                )
            )
        return self._rewrite_units(edits, f"match_{dimension}")

    # Z-ordering operations

    def _reorder(self, element_ids: Iterable[UUID], *, to_front: bool) -> bool:
        scene = self._scene
        moving: set[UUID] = set()
        for element_id in element_ids:
            if element_id in scene:
                moving.update([element_id, *scene.descendants(element_id)])
        if not moving:
            return False
        order = scene.ordered()
        moved = [element for element in order if element.id in moving]
        rest = [element for element in order if element.id not in moving]
        sequence = rest + moved if to_front else moved + rest
        draft = {element.id: replace(element, z_index=index) for index, element in enumerate(sequence)}
        self._commit(self._freeze(draft), "bring_to_front" if to_front else "send_to_back")
        return True

    def bring_to_front(self, element_ids: Iterable[UUID]) -> bool:
        """Move elements (with their descendants) above everything else."""
        return self._reorder(element_ids, to_front=True)

    def send_to_back(self, element_ids: Iterable[UUID]) -> bool:
        """Move elements (with their descendants) below everything else."""
        return self._reorder(element_ids, to_front=False)

    # Copy/paste operations

    def duplicate_selection(self, offset: float | None = None) -> list[UUID]:
        """Copy the selected elements, offset and stacked on top.

        Group structure is copied with fresh IDs. The copies become the
        selection.

        Args:
            offset: Distance along both axes, defaults to the configured offset.

        Returns:
            The IDs of the copied top-level elements.
        """
        scene = self._scene
        offset = self.config.duplicate_offset if offset is None else offset
        roots = self._selected_roots()
        if not roots:
            return []

        originals = scene.ordered([i for root in roots for i in (root, *scene.descendants(root))])
        id_mapping: dict[UUID, UUID] = {element.id: uuid4() for element in originals}  # old_id -> new_id
        next_z = scene.next_z_index
        draft = self._draft()
        for element in originals:
            data = element.data
            if isinstance(data, GroupData):
                data = replace(data, child_ids=tuple(id_mapping[c] for c in data.child_ids if c in id_mapping))
            else:
                data = _translate_data(data, offset, offset)
            draft[id_mapping[element.id]] = CanvasElement(
                data=data,
                id=id_mapping[element.id],
                z_index=next_z,
                parent_id=id_mapping.get(element.parent_id),
            )
            next_z += 1
        for root in roots:
            parent_id = scene.elements[root].parent_id
            if parent_id is not None:
                set_parent(draft, id_mapping[root], parent_id)

        copies = [id_mapping[root] for root in roots]
        self._commit(self._freeze(draft, selection=Selection(element_ids=tuple(copies))), "duplicate")
        return copies

    def path_string(self, element_ids: Iterable[UUID]) -> str | None:
        """Path string of the given elements, groups contributing their descendants.

        Returns:
            The combined string, or None when no element has path geometry.
        """
        scene = self._scene
        ids = [i for root in element_ids if root in scene for i in (root, *scene.descendants(root))]
        commands: list[Command] = []
        for element in scene.ordered(ids):
            path = _as_path(element.data)
            if path is not None:
                commands.extend(path.commands)
        return commands_to_string(commands) if commands else None

    def copy_path_string(self) -> str | None:
        """Path string of every selected path, or None when none is selected."""
        return self.path_string(self._selected_roots())

    def paste_path_string(self, text: str, *, style: PathStyle | None = None) -> UUID | None:
        """Create a path from a clipboard string.

        Invalid text is logged and ignored.

        Returns:
            The new element ID, or None when the text holds no path.
        """
        try:
            path = path_data_from_string(text, style or PathStyle(stroke_color=self.config.default_stroke_color))
        except PathParseError as exc:
            logger.warning("Ignoring clipboard text that is not a path", error=str(exc))
            return None
        if path.is_empty:
            return None
        element = self.add_path(path)
        self.select_elements([element.id])
        return element.id

    # Import

    def import_artwork(self, artworks: Sequence[ParsedArtwork], options: ImportOptions | None = None) -> ImportResult:
        """Place parsed artwork into the scene as one undoable step.

        Args:
            artworks: Parsed files in placement order.
            options: Import settings, defaults to the configured ones.

        Returns:
            Summary of the batch; the new top-level elements are selected.
        """
        result = ImportPipeline(options or self.import_options()).plan(artworks, self._scene)
        if not result.elements:
            return result
        draft = self._draft()
        for element in result.elements:
            draft[element.id] = element
        self._commit(
            self._freeze(
                draft,
                selection=Selection(element_ids=tuple(result.selection_ids)),
                group_name_counter=result.group_name_counter,
            ),
            "import",
        )
        return result

    def import_files(
        self,
        sources: Iterable[str | Path],
        *,
        parser: ArtworkParser | None = None,
        options: ImportOptions | None = None,
    ) -> ImportResult:
        """Read, parse and place artwork files; unreadable files become warnings."""
        artworks, warnings = read_artworks(sources, parser or SvgArtworkReader())
        result = self.import_artwork(artworks, options)
        result.warnings[:0] = warnings
        return result

    def import_options(self) -> ImportOptions:
        """Import settings derived from the engine configuration."""
        config = self.config
        return ImportOptions(
            resize=config.import_resize,
            resize_width=config.import_resize_width,
            resize_height=config.import_resize_height,
            apply_union=config.import_apply_union,
            add_frame=config.import_add_frame,
            margin=config.import_margin,
            max_row_width=config.import_max_row_width,
            frame_stroke_color=config.default_stroke_color,
        )

    # Measurement

    def element_bounds(self, element_id: UUID) -> Bounds | None:
        """Stroke-aware bounds of one element."""
        return element_bounds(self._scene, element_id)

    def selection_bounds(self) -> Bounds | None:
        """Bounds of the current element selection."""
        return selection_bounds(self._scene, self._scene.selection.element_ids)

    # Interactions and undo/redo

    @property
    def in_interaction(self) -> bool:
        """Whether a continuous interaction (drag, resize...) is open."""
        return self._interaction_start is not None

    def begin_interaction(self) -> None:
        """Start coalescing mutations into a single undo step."""
        if self._interaction_start is None:
            self._interaction_start = self._scene

    def end_interaction(self) -> bool:
        """Finish an interaction, recording one undo step if anything changed."""
        start = self._interaction_start
        self._interaction_start = None
        if start is None or start is self._scene:
            return False
        self.history.push(start)
        return True

    def cancel_interaction(self) -> bool:
        """Abort an interaction and restore the scene it started from."""
        start = self._interaction_start
        self._interaction_start = None
        if start is None:
            return False
        self._scene = start
        logger.debug("Interaction cancelled")
        return True

    def undo(self) -> bool:
        """Restore the previous snapshot. Returns False when there is none."""
        self.cancel_interaction()
        previous = self.history.undo(self._scene)
        if previous is None:
            return False
        self._scene = previous
        return True

    def redo(self) -> bool:
        """Re-apply an undone snapshot. Returns False when there is none."""
        self.cancel_interaction()
        following = self.history.redo(self._scene)
        if following is None:
            return False
        self._scene = following
        return True

    def can_undo(self) -> bool:
        """Check if undo is available."""
        return self.history.can_undo()

    def can_redo(self) -> bool:
        """Check if redo is available."""
        return self.history.can_redo()
