"""Geometry of whole scene elements."""

from __future__ import annotations

from typing import TYPE_CHECKING

from vecdraw_py.core.models import GroupData, PathData, ShapeData, TextData
from vecdraw_py.geometry.bounds import Bounds, measure_path_bounds, union_bounds
from vecdraw_py.geometry.shapes import shape_to_path

if TYPE_CHECKING:
    from uuid import UUID

    from vecdraw_py.core.scene import Scene

# Average glyph advance as a fraction of the font size.
TEXT_ADVANCE_RATIO = 0.6


def text_bounds(text: TextData) -> Bounds:
    """Estimated box of a text element; real metrics come from the renderer."""
    width = len(text.content) * text.font_size * TEXT_ADVANCE_RATIO
    return Bounds(text.x, text.y, text.x + width, text.y + text.font_size).rounded()


def element_bounds(scene: Scene, element_id: UUID) -> Bounds | None:
    """Stroke-aware bounds of an element.

    Groups measure the union of their descendants. Unknown IDs and empty
    groups yield None.
    """
    element = scene.get(element_id)
    if element is None:
        return None
    match element.data:
        case PathData(sub_paths=sub_paths, style=style):
            return measure_path_bounds(sub_paths, style.stroke_width)
        case ShapeData() as shape:
            path = shape_to_path(shape)
            return measure_path_bounds(path.sub_paths, path.style.stroke_width)
        case TextData() as text:
            return text_bounds(text)
        case GroupData():
            return union_bounds(
                element_bounds(scene, child_id)
                for child_id in scene.descendants(element_id)
                if not scene.elements[child_id].is_group
            )
    return None


def selection_bounds(scene: Scene, element_ids: list[UUID] | tuple[UUID, ...]) -> Bounds | None:
    """Union of the bounds of several elements."""
    return union_bounds(element_bounds(scene, element_id) for element_id in element_ids)
