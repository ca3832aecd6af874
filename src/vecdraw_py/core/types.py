"""Core type definitions for vecdraw-py."""

from __future__ import annotations

from enum import StrEnum


class ElementType(StrEnum):
    """Enumeration of element types in the scene."""

    PATH = "path"
    GROUP = "group"
    SHAPE = "shape"
    TEXT = "text"


class CommandType(StrEnum):
    """Path command letters."""

    MOVE = "M"
    LINE = "L"
    CUBIC = "C"
    CLOSE = "Z"


class ShapeType(StrEnum):
    """Enumeration of shape types available for drawing."""

    RECTANGLE = "rectangle"
    ELLIPSE = "ellipse"
    LINE = "line"
    TRIANGLE = "triangle"
    DIAMOND = "diamond"


class PointRole(StrEnum):
    """Role of an editable point inside its command."""

    ANCHOR = "anchor"
    CONTROL1 = "control1"
    CONTROL2 = "control2"


class DeletionScope(StrEnum):
    """Granularity a delete request applies to, finest first."""

    POINTS = "points"
    SUBPATHS = "subpaths"
    ELEMENTS = "elements"
    NONE = "none"


class LineCap(StrEnum):
    """Stroke line caps."""

    BUTT = "butt"
    ROUND = "round"
    SQUARE = "square"


class LineJoin(StrEnum):
    """Stroke line joins."""

    MITER = "miter"
    ROUND = "round"
    BEVEL = "bevel"


class FillRule(StrEnum):
    """Fill rules for paths with several subpaths."""

    NONZERO = "nonzero"
    EVENODD = "evenodd"


class BooleanOperation(StrEnum):
    """Boolean operators for composing paths."""

    UNION = "union"
    SUBTRACT = "subtract"
    INTERSECT = "intersect"
    EXCLUDE = "exclude"


class Alignment(StrEnum):
    """Edges and centers the selection can be aligned to."""

    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"
    TOP = "top"
    MIDDLE = "middle"
    BOTTOM = "bottom"

    @property
    def is_horizontal(self) -> bool:
        """Whether the alignment moves elements along the x axis."""
        return self in (Alignment.LEFT, Alignment.CENTER, Alignment.RIGHT)


class Axis(StrEnum):
    """Direction used when distributing elements."""

    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


class SizeDimension(StrEnum):
    """Box dimension matched across the selection."""

    WIDTH = "width"
    HEIGHT = "height"
