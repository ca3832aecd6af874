"""Core domain models for vecdraw-py."""

from vecdraw_py.core.history import SnapshotHistory
from vecdraw_py.core.models import (
    CanvasElement,
    ClosePath,
    Command,
    CubicBezier,
    ElementData,
    GroupData,
    LineTo,
    MoveTo,
    PathData,
    Point,
    ShapeData,
    SubPath,
    TextData,
)
from vecdraw_py.core.precision import PATH_DECIMAL_PRECISION
from vecdraw_py.core.scene import Scene
from vecdraw_py.core.selection import PointRef, Selection, SubpathRef, resolve_deletion_scope
from vecdraw_py.core.style import PathStyle
from vecdraw_py.core.types import (
    BooleanOperation,
    CommandType,
    DeletionScope,
    ElementType,
    FillRule,
    LineCap,
    LineJoin,
    PointRole,
    ShapeType,
)

__all__ = [
    "PATH_DECIMAL_PRECISION",
    "BooleanOperation",
    "CanvasElement",
    "ClosePath",
    "Command",
    "CommandType",
    "CubicBezier",
    "DeletionScope",
    "ElementData",
    "ElementType",
    "FillRule",
    "GroupData",
    "LineCap",
    "LineJoin",
    "LineTo",
    "MoveTo",
    "PathData",
    "PathStyle",
    "Point",
    "PointRef",
    "PointRole",
    "Scene",
    "Selection",
    "ShapeData",
    "ShapeType",
    "SnapshotHistory",
    "SubPath",
    "SubpathRef",
    "TextData",
    "resolve_deletion_scope",
]
