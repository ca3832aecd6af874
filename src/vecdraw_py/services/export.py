"""Export service for scene documents and SVG rendering."""

from __future__ import annotations

import json
from enum import Enum
from typing import TYPE_CHECKING, Any
from uuid import UUID

import structlog

from vecdraw_py.codec.path_string import format_number, path_data_to_string
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
from vecdraw_py.core.scene import Scene
from vecdraw_py.core.style import NO_PAINT, PathStyle
from vecdraw_py.core.types import ElementType, ShapeType
from vecdraw_py.exceptions import DocumentFormatError
from vecdraw_py.geometry.bounds import union_bounds
from vecdraw_py.geometry.elements import element_bounds
from vecdraw_py.geometry.shapes import shape_to_path

if TYPE_CHECKING:
    from vecdraw_py.core.models import Command, ElementData

logger = structlog.get_logger(__name__)

DOCUMENT_VERSION = "1.0"
SVG_PADDING = 20.0


class ExportService:
    """Service for exporting scenes to various formats.

    Supports exporting to:
    - JSON: Full scene document with hierarchy, visibility and lock state
    - SVG: Vector graphics representation of the visible elements

    The selection is editor state and is never written to documents.
    """

    def to_json(self, scene: Scene, *, indent: int | None = 2) -> str:
        """Export a scene to JSON format.

        Args:
            scene: The scene to export.
            indent: JSON indentation level (None for compact).

        Returns:
            JSON string representation of the scene.
        """
        return json.dumps(self.to_dict(scene), indent=indent, default=self._json_serializer)

    def to_dict(self, scene: Scene) -> dict[str, Any]:
        """Export a scene to a dictionary.

        Args:
            scene: The scene to export.

        Returns:
            Dictionary representation of the scene, elements in z order.
        """
        return {
            "version": DOCUMENT_VERSION,
            "name": scene.name,
            "group_name_counter": scene.group_name_counter,
            "elements": [self._element_to_dict(element) for element in scene.ordered()],
            "hidden_ids": sorted(str(i) for i in scene.hidden_ids),
            "locked_ids": sorted(str(i) for i in scene.locked_ids),
            "propagated_hidden": self._records_to_dict(scene.propagated_hidden),
            "propagated_locked": self._records_to_dict(scene.propagated_locked),
        }

    def from_json(self, text: str) -> Scene:
        """Load a scene from JSON text.

        Raises:
            DocumentFormatError: If the text is not a valid scene document.
        """
        try:
            document = json.loads(text)
        except json.JSONDecodeError as exc:
            raise DocumentFormatError(f"Invalid JSON: {exc}") from exc
        return self.from_dict(document)

    def from_dict(self, document: dict[str, Any]) -> Scene:
        """Load a scene from a dictionary produced by ``to_dict``.

        Args:
            document: Scene document.

        Returns:
            The scene, with an empty selection.

        Raises:
            DocumentFormatError: If the document is malformed or of an
                unsupported version.
        """
        if not isinstance(document, dict):
            raise DocumentFormatError("Scene document must be an object")
        version = document.get("version")
        if version != DOCUMENT_VERSION:
            raise DocumentFormatError(f"Unsupported document version {version!r}")
        try:
            elements = [self._element_from_dict(item) for item in document["elements"]]
            scene = Scene(
                name=str(document.get("name", "Untitled")),
                elements={element.id: element for element in elements},
                hidden_ids=frozenset(UUID(i) for i in document.get("hidden_ids", [])),
                locked_ids=frozenset(UUID(i) for i in document.get("locked_ids", [])),
                propagated_hidden=self._records_from_dict(document.get("propagated_hidden", {})),
                propagated_locked=self._records_from_dict(document.get("propagated_locked", {})),
                group_name_counter=int(document.get("group_name_counter", 1)),
            )
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            raise DocumentFormatError(f"Malformed scene document: {exc}") from exc
        if len(scene) != len(elements):
            raise DocumentFormatError("Scene document contains duplicate element IDs")
        logger.debug("Scene document loaded", name=scene.name, elements=len(scene))
        return scene

    def to_svg(self, scene: Scene, *, padding: float = SVG_PADDING) -> str:
        """Export the visible elements of a scene to SVG format.

        The view box covers the bounds of the visible elements plus
        ``padding`` on every side. Groups become ``<g>`` elements.

        Args:
            scene: The scene to export.
            padding: Space around the content.

        Returns:
            SVG string representation of the scene.
        """
        visible = [element for element in scene.roots() if not scene.is_hidden(element.id)]
        bounds = union_bounds(element_bounds(scene, element.id) for element in visible)
        if bounds is None:
            min_x = min_y = -padding
            width = height = 2 * padding
        else:
            min_x, min_y = bounds.min_x - padding, bounds.min_y - padding
            width, height = bounds.width + 2 * padding, bounds.height + 2 * padding

        svg_elements = [markup for element in visible if (markup := self._element_to_svg(scene, element, 1))]
        view_box = " ".join(format_number(value) for value in (min_x, min_y, width, height))
        return f"""<?xml version="1.0" encoding="UTF-8"?>
<svg xmlns="http://www.w3.org/2000/svg"
     width="{format_number(width)}"
     height="{format_number(height)}"
     viewBox="{view_box}">
  <title>{self._escape_xml(scene.name)}</title>
{chr(10).join(svg_elements)}
</svg>"""

    # Document encoding

    def _records_to_dict(self, records: Any) -> dict[str, list[str]]:
        return {str(group_id): sorted(str(i) for i in ids) for group_id, ids in records.items()}

    def _records_from_dict(self, records: dict[str, list[str]]) -> dict[UUID, frozenset[UUID]]:
        return {UUID(group_id): frozenset(UUID(i) for i in ids) for group_id, ids in records.items()}

    def _element_to_dict(self, element: CanvasElement) -> dict[str, Any]:
        """Convert element to dictionary with proper serialization."""
        base: dict[str, Any] = {
            "id": str(element.id),
            "element_type": element.element_type.value,
            "z_index": element.z_index,
            "parent_id": str(element.parent_id) if element.parent_id else None,
        }
        data = element.data
        if isinstance(data, PathData):
            base["sub_paths"] = [[self._command_to_list(c) for c in sub_path] for sub_path in data.sub_paths]
            base["style"] = self._style_to_dict(data.style)
        elif isinstance(data, GroupData):
            base["name"] = data.name
            base["children"] = [str(child_id) for child_id in data.child_ids]
            base["is_expanded"] = data.is_expanded
        elif isinstance(data, ShapeData):
            base["shape_type"] = data.shape_type.value
            base["x"] = data.x
            base["y"] = data.y
            base["width"] = data.width
            base["height"] = data.height
            base["style"] = self._style_to_dict(data.style)
        elif isinstance(data, TextData):
            base["content"] = data.content
            base["x"] = data.x
            base["y"] = data.y
            base["font_size"] = data.font_size
            base["font_family"] = data.font_family
            base["style"] = self._style_to_dict(data.style)
        return base

    def _element_from_dict(self, item: dict[str, Any]) -> CanvasElement:
        element_type = ElementType(item["element_type"])
        data: ElementData
        match element_type:
            case ElementType.PATH:
                sub_paths = tuple(
                    tuple(self._command_from_list(c) for c in sub_path) for sub_path in item["sub_paths"]
                )
                data = PathData(sub_paths, self._style_from_dict(item.get("style", {})))
            case ElementType.GROUP:
                data = GroupData(
                    name=item.get("name", ""),
                    child_ids=tuple(UUID(child_id) for child_id in item.get("children", [])),
                    is_expanded=bool(item.get("is_expanded", True)),
                )
            case ElementType.SHAPE:
                data = ShapeData(
                    ShapeType(item["shape_type"]),
                    float(item["x"]),
                    float(item["y"]),
                    float(item["width"]),
                    float(item["height"]),
                    self._style_from_dict(item.get("style", {})),
                )
            case ElementType.TEXT:
                data = TextData(
                    content=item["content"],
                    x=float(item["x"]),
                    y=float(item["y"]),
                    font_size=float(item.get("font_size", 16.0)),
                    font_family=item.get("font_family", "sans-serif"),
                    style=self._style_from_dict(item["style"]) if "style" in item else TextData().style,
                )
        parent_id = item.get("parent_id")
        return CanvasElement(
            data=data,
            id=UUID(item["id"]),
            z_index=int(item["z_index"]),
            parent_id=UUID(parent_id) if parent_id else None,
        )

    def _command_to_list(self, command: Command) -> list[Any]:
        match command:
            case MoveTo(position=p) | LineTo(position=p):
                return [command.type.value, p.x, p.y]
            case CubicBezier(control1=c1, control2=c2, position=p):
                return [command.type.value, c1.x, c1.y, c2.x, c2.y, p.x, p.y]
        return [command.type.value]

    def _command_from_list(self, values: list[Any]) -> Command:
        letter, *coords = values
        points = [Point(float(x), float(y)) for x, y in zip(coords[0::2], coords[1::2], strict=True)]
        match letter, len(points):
            case "M", 1:
                return MoveTo(points[0])
            case "L", 1:
                return LineTo(points[0])
            case "C", 3:
                return CubicBezier(*points)
            case "Z", 0:
                return ClosePath()
        msg = f"Invalid path command {values!r}"
        raise ValueError(msg)

    def _style_to_dict(self, style: PathStyle) -> dict[str, Any]:
        return {
            "stroke_width": style.stroke_width,
            "stroke_color": style.stroke_color,
            "stroke_opacity": style.stroke_opacity,
            "fill_color": style.fill_color,
            "fill_opacity": style.fill_opacity,
            "stroke_linecap": style.stroke_linecap,
            "stroke_linejoin": style.stroke_linejoin,
            "fill_rule": style.fill_rule,
            "stroke_dasharray": style.stroke_dasharray,
        }

    def _style_from_dict(self, values: dict[str, Any]) -> PathStyle:
        return PathStyle(**values)

    # SVG rendering

    def _element_to_svg(self, scene: Scene, element: CanvasElement, depth: int) -> str | None:
        """Convert an element to SVG markup."""
        indent = "  " * depth
        data = element.data
        if isinstance(data, GroupData):
            children = [
                markup
                for child in scene.ordered(data.child_ids)
                if not scene.is_hidden(child.id) and (markup := self._element_to_svg(scene, child, depth + 1))
            ]
            if not children:
                return None
            name = self._escape_xml(data.name)
            return f'{indent}<g id="{element.id}" data-name="{name}">\n' + "\n".join(children) + f"\n{indent}</g>"
        if isinstance(data, TextData):
            return self._text_to_svg(data, indent)
        path = shape_to_path(data) if isinstance(data, ShapeData) else data
        if path.is_empty:
            return None
        return f'{indent}<path d="{path_data_to_string(path)}" {self._style_attributes(path.style)}/>'

    def _style_attributes(self, style: PathStyle) -> str:
        attributes = {
            "fill": style.fill_color,
            "stroke": style.stroke_color,
            "stroke-width": format_number(style.stroke_width),
            "stroke-linecap": style.stroke_linecap,
            "stroke-linejoin": style.stroke_linejoin,
        }
        if style.fill_opacity < 1:
            attributes["fill-opacity"] = format_number(style.fill_opacity)
        if style.stroke_opacity < 1:
            attributes["stroke-opacity"] = format_number(style.stroke_opacity)
        if style.fill_rule != "nonzero":
            attributes["fill-rule"] = style.fill_rule
        if style.stroke_dasharray != NO_PAINT:
            attributes["stroke-dasharray"] = style.stroke_dasharray
        return " ".join(f'{key}="{self._escape_xml(str(value))}"' for key, value in attributes.items())

    def _text_to_svg(self, text: TextData, indent: str) -> str:
        """Convert a text element to SVG."""
        content = self._escape_xml(text.content)
        return (
            f'{indent}<text x="{format_number(text.x)}" y="{format_number(text.y)}" '
            f'font-family="{self._escape_xml(text.font_family)}" '
            f'font-size="{format_number(text.font_size)}" '
            f'dominant-baseline="text-before-edge" '
            f'fill="{text.style.fill_color}">'
            f"{content}</text>"
        )

    def _escape_xml(self, text: str) -> str:
        """Escape special XML characters."""
        return (
            text.replace("&", "&amp;")
            .replace("<", "&lt;")
            .replace(">", "&gt;")
            .replace('"', "&quot;")
            .replace("'", "&apos;")
        )

    def _json_serializer(self, obj: Any) -> Any:
        """Custom JSON serializer for special types."""
        if isinstance(obj, UUID):
            return str(obj)
        if isinstance(obj, Enum):
            return obj.value
        msg = f"Object of type {type(obj)} is not JSON serializable"
        raise TypeError(msg)
