"""SVG artwork reader for the import pipeline."""

from __future__ import annotations

import math
import re
from typing import TYPE_CHECKING
from xml.etree import ElementTree as ET

import numpy as np
import structlog
from svgpathtools.parser import parse_transform

from vecdraw_py.codec.path_string import parse_path_string
from vecdraw_py.core.models import PathData, Point
from vecdraw_py.core.style import NO_PAINT, PathStyle
from vecdraw_py.core.types import FillRule, LineCap, LineJoin
from vecdraw_py.exceptions import ArtworkImportError, PathParseError
from vecdraw_py.geometry.commands import map_points
from vecdraw_py.geometry.shapes import ellipse_commands, rectangle_commands
from vecdraw_py.importing.models import Dimensions, ImportedGroup, ImportedPath, ParsedArtwork

if TYPE_CHECKING:
    from vecdraw_py.core.models import Command
    from vecdraw_py.importing.models import ImportedNode

logger = structlog.get_logger(__name__)

INKSCAPE_LABEL = "{http://www.inkscape.org/namespaces/inkscape}label"

# Presentation attributes inherited from ancestors.
INHERITED = (
    "fill",
    "fill-opacity",
    "fill-rule",
    "stroke",
    "stroke-width",
    "stroke-opacity",
    "stroke-linecap",
    "stroke-linejoin",
    "stroke-dasharray",
)

SKIPPED_TAGS = {"defs", "clipPath", "mask", "symbol", "title", "desc", "metadata", "style", "script", "text"}

_LENGTH_RE = re.compile(r"^\s*([-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)\s*(px)?\s*$")
_NUMBER_RE = re.compile(r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _parse_length(value: str | None) -> float | None:
    """Parse a unitless or ``px`` length; other units are unsupported."""
    if not value:
        return None
    match = _LENGTH_RE.match(value)
    return float(match.group(1)) if match else None


def _numbers(value: str | None) -> list[float]:
    return [float(token) for token in _NUMBER_RE.findall(value or "")]


def _style_attributes(element: ET.Element) -> dict[str, str]:
    """Presentation attributes of an element, inline ``style`` winning."""
    attributes = {key: element.get(key) for key in (*INHERITED, "opacity") if element.get(key) is not None}
    for declaration in (element.get("style") or "").split(";"):
        if ":" in declaration:
            key, value = declaration.split(":", 1)
            attributes[key.strip()] = value.strip()
    return attributes


def _to_float(value: str | None, default: float) -> float:
    try:
        return float(value) if value is not None else default
    except ValueError:
        return default


def _enum_or_default(enum_type: type, value: str | None, default: object) -> object:
    try:
        return enum_type(value) if value else default
    except ValueError:
        return default


class SvgArtworkReader:
    """Parses SVG documents into ``ParsedArtwork``.

    Supports ``path``, ``rect``, ``circle``, ``ellipse``, ``line``,
    ``polyline``, ``polygon`` and nested ``g`` elements with ``transform``
    attributes and inherited presentation styles.
    """

    def parse(self, source: str, *, name: str | None = None) -> ParsedArtwork:
        """Parse SVG text.

        Args:
            source: SVG document text.
            name: Name to report in warnings and to label the artwork.

        Returns:
            The parsed artwork.

        Raises:
            ArtworkImportError: If the text is not an SVG document.
        """
        label = name or "artwork.svg"
        try:
            root = ET.fromstring(source)
        except ET.ParseError as exc:
            raise ArtworkImportError(label, f"invalid XML ({exc})") from exc
        if _local_name(root.tag) != "svg":
            raise ArtworkImportError(label, f"root element is <{_local_name(root.tag)}>, expected <svg>")

        dimensions, root_matrix = self._document_frame(root)
        elements = self._children(root, root_matrix, {}, label)
        logger.debug("Parsed SVG artwork", source=label, nodes=len(elements))
        return ParsedArtwork(name=label, dimensions=dimensions, elements=elements)

    def _document_frame(self, root: ET.Element) -> tuple[Dimensions | None, np.ndarray]:
        width = _parse_length(root.get("width"))
        height = _parse_length(root.get("height"))
        matrix = np.identity(3)
        view_box = _numbers(root.get("viewBox"))
        if len(view_box) == 4 and view_box[2] > 0 and view_box[3] > 0:
            min_x, min_y, vb_width, vb_height = view_box
            if width is None or height is None:
                width, height = vb_width, vb_height
            matrix = np.array(
                [
                    [width / vb_width, 0.0, -min_x * width / vb_width],
                    [0.0, height / vb_height, -min_y * height / vb_height],
                    [0.0, 0.0, 1.0],
                ]
            )
        if width is None or height is None:
            return None, matrix
        return Dimensions(width, height), matrix

    def _children(
        self, parent: ET.Element, matrix: np.ndarray, inherited: dict[str, str], source: str
    ) -> tuple[ImportedNode, ...]:
        nodes: list[ImportedNode] = []
        for element in parent:
            node = self._node(element, matrix, inherited, source)
            if node is not None:
                nodes.append(node)
        return tuple(nodes)

    def _node(
        self, element: ET.Element, matrix: np.ndarray, inherited: dict[str, str], source: str
    ) -> ImportedNode | None:
        tag = _local_name(element.tag) if isinstance(element.tag, str) else ""
        if not tag or tag in SKIPPED_TAGS:
            return None
        if (element.get("display") or "").strip() == "none":
            return None

        if element.get("transform"):
            matrix = matrix @ parse_transform(element.get("transform"))
        own = _style_attributes(element)
        attributes = {**inherited, **own}
        if "opacity" in inherited and "opacity" in own:
            attributes["opacity"] = str(_to_float(inherited["opacity"], 1.0) * _to_float(own["opacity"], 1.0))

        if tag in {"g", "svg"}:
            children = self._children(element, matrix, attributes, source)
            if not children:
                return None
            name = element.get(INKSCAPE_LABEL) or element.get("id") or ""
            return ImportedGroup(name=name, children=children)

        commands = self._shape_commands(tag, element, source)
        if not commands:
            return None
        transformed = map_points(commands, lambda point: self._apply(matrix, point))
        stroke_scale = math.sqrt(abs(float(np.linalg.det(matrix[:2, :2]))))
        return ImportedPath(PathData.from_commands(transformed, self._style(attributes, stroke_scale)))

    def _shape_commands(self, tag: str, element: ET.Element, source: str) -> tuple[Command, ...]:
        get = element.get
        match tag:
            case "path":
                try:
                    return parse_path_string(get("d") or "")
                except PathParseError as exc:
                    logger.warning("Skipping unparsable SVG path", source=source, error=str(exc))
                    return ()
            case "rect":
                width, height = _to_float(get("width"), 0), _to_float(get("height"), 0)
                if width <= 0 or height <= 0:
                    return ()
                return rectangle_commands(_to_float(get("x"), 0), _to_float(get("y"), 0), width, height)
            case "circle":
                r = _to_float(get("r"), 0)
                if r <= 0:
                    return ()
                return ellipse_commands(_to_float(get("cx"), 0) - r, _to_float(get("cy"), 0) - r, 2 * r, 2 * r)
            case "ellipse":
                rx, ry = _to_float(get("rx"), 0), _to_float(get("ry"), 0)
                if rx <= 0 or ry <= 0:
                    return ()
                return ellipse_commands(_to_float(get("cx"), 0) - rx, _to_float(get("cy"), 0) - ry, 2 * rx, 2 * ry)
            case "line":
                x1, y1 = _to_float(get("x1"), 0), _to_float(get("y1"), 0)
                x2, y2 = _to_float(get("x2"), 0), _to_float(get("y2"), 0)
                return parse_path_string(f"M {x1} {y1} L {x2} {y2}")
            case "polyline" | "polygon":
                values = _numbers(get("points"))
                pairs = list(zip(values[0::2], values[1::2], strict=False))
                if len(pairs) < 2:
                    return ()
                text = "M " + " L ".join(f"{x} {y}" for x, y in pairs)
                return parse_path_string(text + (" Z" if tag == "polygon" else ""))
        return ()

    def _apply(self, matrix: np.ndarray, point: Point) -> Point:
        x, y, _ = matrix @ np.array([point.x, point.y, 1.0])
        return Point(float(x), float(y)).rounded()

    def _style(self, attributes: dict[str, str], stroke_scale: float) -> PathStyle:
        opacity = _to_float(attributes.get("opacity"), 1.0)
        stroke_width = _parse_length(attributes.get("stroke-width"))
        return PathStyle(
            stroke_width=(1.0 if stroke_width is None else stroke_width) * stroke_scale,
            stroke_color=attributes.get("stroke", NO_PAINT),
            stroke_opacity=_to_float(attributes.get("stroke-opacity"), 1.0) * opacity,
            fill_color=attributes.get("fill", "#000000"),
            fill_opacity=_to_float(attributes.get("fill-opacity"), 1.0) * opacity,
            stroke_linecap=_enum_or_default(LineCap, attributes.get("stroke-linecap"), LineCap.BUTT),
            stroke_linejoin=_enum_or_default(LineJoin, attributes.get("stroke-linejoin"), LineJoin.MITER),
            fill_rule=_enum_or_default(FillRule, attributes.get("fill-rule"), FillRule.NONZERO),
            stroke_dasharray=attributes.get("stroke-dasharray", NO_PAINT),
        )
