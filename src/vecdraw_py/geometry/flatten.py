"""Curve flattening for polygon-based operations."""

from __future__ import annotations

from typing import TYPE_CHECKING

from vecdraw_py.core.models import CubicBezier, LineTo, MoveTo, Point

if TYPE_CHECKING:
    from vecdraw_py.core.models import SubPath

DEFAULT_CURVE_SEGMENTS = 16


def cubic_point(p0: Point, p1: Point, p2: Point, p3: Point, t: float) -> Point:
    """Evaluate a cubic Bezier at parameter ``t``."""
    mt = 1 - t
    a = mt * mt * mt
    b = 3 * mt * mt * t
    c = 3 * mt * t * t
    d = t * t * t
    return Point(a * p0.x + b * p1.x + c * p2.x + d * p3.x, a * p0.y + b * p1.y + c * p2.y + d * p3.y)


def flatten_subpath(sub_path: SubPath, segments: int = DEFAULT_CURVE_SEGMENTS) -> list[tuple[float, float]]:
    """Sample a subpath into a list of ``(x, y)`` vertices.

    Cubic segments are sampled at ``segments`` evenly spaced parameters.
    ``ClosePath`` adds nothing; callers treat the result as a ring when they
    need one.
    """
    vertices: list[tuple[float, float]] = []
    current: Point | None = None
    for command in sub_path:
        match command:
            case MoveTo(position=p) | LineTo(position=p):
                vertices.append((p.x, p.y))
                current = p
            case CubicBezier(control1=c1, control2=c2, position=p) if current is not None:
                for step in range(1, segments + 1):
                    sample = cubic_point(current, c1, c2, p, step / segments)
                    vertices.append((sample.x, sample.y))
                current = p
    return vertices
