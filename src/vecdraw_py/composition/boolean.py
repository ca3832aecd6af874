"""Boolean composition of paths.

Curves are flattened to polygons, combined with shapely and converted back to
straight-segment subpaths. Results are visually correct for typical artwork,
not topologically exact for degenerate or self-intersecting input.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from shapely.errors import ShapelyError
from shapely.geometry import GeometryCollection, MultiPolygon, Polygon
from shapely.geometry.polygon import orient
from shapely.ops import unary_union
from shapely.validation import make_valid

from vecdraw_py.core.models import ClosePath, LineTo, MoveTo, PathData, Point
from vecdraw_py.geometry.flatten import DEFAULT_CURVE_SEGMENTS, flatten_subpath

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from shapely.geometry.base import BaseGeometry

    from vecdraw_py.core.models import Command, SubPath
    from vecdraw_py.core.style import PathStyle

logger = structlog.get_logger(__name__)


def _polygonal(geometry: BaseGeometry) -> list[Polygon]:
    """Polygon parts of any geometry, dropping lines and points."""
    if geometry.is_empty:
        return []
    if isinstance(geometry, Polygon):
        return [geometry]
    if isinstance(geometry, (MultiPolygon, GeometryCollection)):
        return [part for member in geometry.geoms for part in _polygonal(member)]
    return []


def _ring(vertices: list[tuple[float, float]]) -> list[tuple[float, float]]:
    ring: list[tuple[float, float]] = []
    for vertex in vertices:
        if not ring or ring[-1] != vertex:
            ring.append(vertex)
    if len(ring) > 1 and ring[0] == ring[-1]:
        ring.pop()
    return ring


def path_to_geometry(path: PathData, segments: int = DEFAULT_CURVE_SEGMENTS) -> BaseGeometry:
    """Convert a path into a shapely area.

    Subpaths are treated as closed rings and combined with even-odd parity,
    so counters inside glyph-like outlines stay holes.
    """
    area: BaseGeometry = Polygon()
    for sub_path in path.sub_paths:
        ring = _ring(flatten_subpath(sub_path, segments))
        if len(set(ring)) < 3:
            continue
        polygon = MultiPolygon(_polygonal(make_valid(Polygon(ring))))
        if polygon.is_empty:
            continue
        area = area.symmetric_difference(polygon)
    return area


def _ring_commands(coords: Sequence[tuple[float, ...]]) -> SubPath | None:
    points: list[Point] = []
    for x, y, *_ in coords[:-1]:
        point = Point(x, y).rounded()
        if not points or points[-1] != point:
            points.append(point)
    if len(points) > 1 and points[0] == points[-1]:
        points.pop()
    if len(points) < 3:
        return None
    commands: list[Command] = [MoveTo(points[0])]
    commands.extend(LineTo(point) for point in points[1:])
    commands.append(ClosePath())
    return tuple(commands)


def geometry_to_path(geometry: BaseGeometry, style: PathStyle) -> PathData | None:
    """Convert a shapely area back to path data.

    Exteriors run counter-clockwise and holes clockwise, so holes survive
    under both fill rules. Returns None when nothing polygonal remains.
    """
    sub_paths: list[SubPath] = []
    for polygon in _polygonal(geometry):
        polygon = orient(polygon)
        for ring in (polygon.exterior, *polygon.interiors):
            sub_path = _ring_commands(list(ring.coords))
            if sub_path is not None:
                sub_paths.append(sub_path)
    if not sub_paths:
        return None
    return PathData(tuple(sub_paths), style)


def _compose(
    operation: str, paths: Sequence[PathData], combine: Callable[[list[BaseGeometry]], BaseGeometry]
) -> PathData | None:
    try:
        result = make_valid(combine([path_to_geometry(path) for path in paths]))
    except (ShapelyError, ValueError) as exc:
        logger.warning("Boolean operation failed", operation=operation, inputs=len(paths), error=str(exc))
        return None
    composed = geometry_to_path(result, paths[0].style)
    if composed is None:
        logger.debug("Boolean operation produced no area", operation=operation, inputs=len(paths))
    return composed


def union(paths: Sequence[PathData]) -> PathData | None:
    """Merge several paths into one outline.

    Args:
        paths: Paths to merge. The first path's style is used for the result.

    Returns:
        The merged path, or None with fewer than two inputs or when the
        result is empty.
    """
    if len(paths) < 2:
        return None
    return _compose("union", paths, unary_union)


def subtract(base: PathData, cutter: PathData) -> PathData | None:
    """Remove ``cutter`` from ``base``; style from ``base``."""
    return _compose("subtract", [base, cutter], lambda areas: areas[0].difference(areas[1]))


def intersect(first: PathData, second: PathData) -> PathData | None:
    """Keep the area shared by both paths; style from ``first``."""
    return _compose("intersect", [first, second], lambda areas: areas[0].intersection(areas[1]))


def exclude(first: PathData, second: PathData) -> PathData | None:
    """Keep the area covered by exactly one of the paths; style from ``first``."""
    return _compose("exclude", [first, second], lambda areas: areas[0].symmetric_difference(areas[1]))
