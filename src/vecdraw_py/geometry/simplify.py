"""Polyline simplification (Ramer-Douglas-Peucker)."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from vecdraw_py.core.models import ClosePath, LineTo, MoveTo
from vecdraw_py.geometry.commands import extract_subpaths

if TYPE_CHECKING:
    from collections.abc import Sequence

    from vecdraw_py.core.models import Command, Point, SubPath


def _segment_distance(point: Point, start: Point, end: Point) -> float:
    dx = end.x - start.x
    dy = end.y - start.y
    length_sq = dx * dx + dy * dy
    if length_sq == 0:
        return math.hypot(point.x - start.x, point.y - start.y)
    t = max(0.0, min(1.0, ((point.x - start.x) * dx + (point.y - start.y) * dy) / length_sq))
    return math.hypot(point.x - (start.x + t * dx), point.y - (start.y + t * dy))


def douglas_peucker(points: Sequence[Point], tolerance: float) -> list[Point]:
    """Reduce a polyline, keeping both endpoints.

    Every removed point lies within ``tolerance`` of the simplified polyline.
    """
    if len(points) < 3:
        return list(points)

    keep = [False] * len(points)
    keep[0] = keep[-1] = True
    stack = [(0, len(points) - 1)]
    while stack:
        first, last = stack.pop()
        farthest, distance = first, 0.0
        for index in range(first + 1, last):
            current = _segment_distance(points[index], points[first], points[last])
            if current > distance:
                farthest, distance = index, current
        if distance > tolerance:
            keep[farthest] = True
            stack.append((first, farthest))
            stack.append((farthest, last))
    return [point for point, kept in zip(points, keep, strict=True) if kept]


def _simplify_subpath(sub_path: SubPath, tolerance: float) -> list[Command]:
    start = sub_path[0].position
    result: list[Command] = [sub_path[0]]
    run: list[Point] = [start]

    def flush() -> None:
        result.extend(LineTo(point) for point in douglas_peucker(run, tolerance)[1:])

    for command in sub_path[1:]:
        if isinstance(command, LineTo):
            run.append(command.position)
            continue
        flush()
        result.append(command)
        run = [start] if isinstance(command, (ClosePath, MoveTo)) else [command.position]
    flush()
    return result


def simplify(commands: Sequence[Command], tolerance: float) -> tuple[Command, ...]:
    """Simplify straight-line runs of every subpath.

    Runs of consecutive ``LineTo`` anchors are reduced with Douglas-Peucker.
    Cubic segments and ``ClosePath`` break runs and are kept as they are, so
    the first and last point of every subpath always survive.

    Args:
        commands: Commands of one or more subpaths.
        tolerance: Maximum deviation allowed; ``<= 0`` returns the input.

    Returns:
        The simplified commands, never more than the input.
    """
    if tolerance <= 0:
        return tuple(commands)
    simplified: list[Command] = []
    for sub_path in extract_subpaths(commands):
        simplified.extend(_simplify_subpath(sub_path.commands, tolerance))
    return tuple(simplified)
