"""Command builders for parametric shapes."""

from __future__ import annotations

from vecdraw_py.core.models import ClosePath, Command, CubicBezier, LineTo, MoveTo, PathData, Point, ShapeData
from vecdraw_py.core.types import ShapeType

# Control-point distance for a quarter ellipse drawn with one cubic.
KAPPA = 0.5522847498


def _p(x: float, y: float) -> Point:
    return Point(x, y).rounded()


def rectangle_commands(x: float, y: float, width: float, height: float) -> tuple[Command, ...]:
    """Closed rectangle, clockwise from the top-left corner."""
    return (
        MoveTo(_p(x, y)),
        LineTo(_p(x + width, y)),
        LineTo(_p(x + width, y + height)),
        LineTo(_p(x, y + height)),
        ClosePath(),
    )


def ellipse_commands(x: float, y: float, width: float, height: float) -> tuple[Command, ...]:
    """Closed ellipse inscribed in the box, four cubic quarters."""
    rx, ry = width / 2, height / 2
    cx, cy = x + rx, y + ry
    ox, oy = rx * KAPPA, ry * KAPPA
    return (
        MoveTo(_p(cx, y)),
        CubicBezier(_p(cx + ox, y), _p(x + width, cy - oy), _p(x + width, cy)),
        CubicBezier(_p(x + width, cy + oy), _p(cx + ox, y + height), _p(cx, y + height)),
        CubicBezier(_p(cx - ox, y + height), _p(x, cy + oy), _p(x, cy)),
        CubicBezier(_p(x, cy - oy), _p(cx - ox, y), _p(cx, y)),
        ClosePath(),
    )


def line_commands(x: float, y: float, width: float, height: float) -> tuple[Command, ...]:
    """Open diagonal from the box origin to the opposite corner."""
    return (MoveTo(_p(x, y)), LineTo(_p(x + width, y + height)))


def triangle_commands(x: float, y: float, width: float, height: float) -> tuple[Command, ...]:
    """Closed isosceles triangle with its apex at the top center."""
    return (
        MoveTo(_p(x + width / 2, y)),
        LineTo(_p(x + width, y + height)),
        LineTo(_p(x, y + height)),
        ClosePath(),
    )


def diamond_commands(x: float, y: float, width: float, height: float) -> tuple[Command, ...]:
    """Closed rhombus touching the middle of each box edge."""
    return (
        MoveTo(_p(x + width / 2, y)),
        LineTo(_p(x + width, y + height / 2)),
        LineTo(_p(x + width / 2, y + height)),
        LineTo(_p(x, y + height / 2)),
        ClosePath(),
    )


_BUILDERS = {
    ShapeType.RECTANGLE: rectangle_commands,
    ShapeType.ELLIPSE: ellipse_commands,
    ShapeType.LINE: line_commands,
    ShapeType.TRIANGLE: triangle_commands,
    ShapeType.DIAMOND: diamond_commands,
}


def shape_to_path(shape: ShapeData) -> PathData:
    """Convert a parametric shape to equivalent path data."""
    builder = _BUILDERS[ShapeType(shape.shape_type)]
    return PathData((builder(shape.x, shape.y, shape.width, shape.height),), shape.style)
