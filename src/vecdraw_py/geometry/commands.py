"""Command-list utilities: point extraction, subpath slicing, reversal."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from vecdraw_py.core.models import ClosePath, CubicBezier, LineTo, MoveTo, Point, command_points
from vecdraw_py.core.types import PointRole

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from vecdraw_py.core.models import Command, SubPath


@dataclass(frozen=True)
class EditablePoint:
    """A point the user can drag.

    Attributes:
        command_index: Index of the owning command in the input list.
        role: Anchor or one of the cubic control points.
        x: X-coordinate.
        y: Y-coordinate.
        anchor: The anchor this point belongs to (itself for anchors).
    """

    command_index: int
    role: PointRole
    x: float
    y: float
    anchor: Point

    @property
    def is_control(self) -> bool:
        return self.role is not PointRole.ANCHOR


@dataclass(frozen=True)
class SubpathSlice:
    """One subpath located inside a flat command list.

    ``end_index`` is exclusive.
    """

    start_index: int
    end_index: int
    commands: SubPath


def extract_editable_points(commands: Sequence[Command]) -> list[EditablePoint]:
    """List every draggable point in command order.

    Cubic segments yield ``control1``, ``control2`` and then the anchor.
    ``ClosePath`` yields nothing.
    """
    points: list[EditablePoint] = []
    for index, command in enumerate(commands):
        match command:
            case MoveTo(position=p) | LineTo(position=p):
                points.append(EditablePoint(index, PointRole.ANCHOR, p.x, p.y, p))
            case CubicBezier(control1=c1, control2=c2, position=p):
                points.append(EditablePoint(index, PointRole.CONTROL1, c1.x, c1.y, p))
                points.append(EditablePoint(index, PointRole.CONTROL2, c2.x, c2.y, p))
                points.append(EditablePoint(index, PointRole.ANCHOR, p.x, p.y, p))
    return points


def extract_subpaths(commands: Sequence[Command]) -> list[SubpathSlice]:
    """Split a flat command list at each ``MoveTo``.

    Commands before the first ``MoveTo`` are ignored.
    """
    slices: list[SubpathSlice] = []
    start: int | None = None
    for index, command in enumerate(commands):
        if isinstance(command, MoveTo):
            if start is not None:
                slices.append(SubpathSlice(start, index, tuple(commands[start:index])))
            start = index
    if start is not None:
        slices.append(SubpathSlice(start, len(commands), tuple(commands[start:])))
    return slices


def map_points(commands: Sequence[Command], func: Callable[[Point], Point]) -> tuple[Command, ...]:
    """Apply ``func`` to every anchor and control point."""
    mapped: list[Command] = []
    for command in commands:
        match command:
            case MoveTo(position=p):
                mapped.append(MoveTo(func(p)))
            case LineTo(position=p):
                mapped.append(LineTo(func(p)))
            case CubicBezier(control1=c1, control2=c2, position=p):
                mapped.append(CubicBezier(func(c1), func(c2), func(p)))
            case _:
                mapped.append(command)
    return tuple(mapped)


def update_point(commands: Sequence[Command], command_index: int, role: PointRole, point: Point) -> tuple[Command, ...]:
    """Return commands with one point moved.

    Out-of-range indices and roles that the command does not carry leave the
    input unchanged.
    """
    result = list(commands)
    if not 0 <= command_index < len(result):
        return tuple(result)
    point = point.rounded()
    match result[command_index], role:
        case MoveTo(), PointRole.ANCHOR:
            result[command_index] = MoveTo(point)
        case LineTo(), PointRole.ANCHOR:
            result[command_index] = LineTo(point)
        case CubicBezier(control2=c2, position=p), PointRole.CONTROL1:
            result[command_index] = CubicBezier(point, c2, p)
        case CubicBezier(control1=c1, position=p), PointRole.CONTROL2:
            result[command_index] = CubicBezier(c1, point, p)
        case CubicBezier(control1=c1, control2=c2), PointRole.ANCHOR:
            result[command_index] = CubicBezier(c1, c2, point)
    return tuple(result)


def _is_finite(command: Command) -> bool:
    return all(math.isfinite(p.x) and math.isfinite(p.y) for p in command_points(command))


def normalize_commands(commands: Sequence[Command]) -> tuple[Command, ...]:
    """Drop commands that cannot be drawn.

    Removes commands with non-finite coordinates, leading commands without a
    ``MoveTo``, repeated ``ClosePath`` and a dangling ``MoveTo`` followed
    directly by another one.
    """
    cleaned: list[Command] = []
    for command in commands:
        if not _is_finite(command):
            continue
        if not cleaned and not isinstance(command, MoveTo):
            continue
        if isinstance(command, ClosePath) and isinstance(cleaned[-1], (ClosePath, MoveTo)):
            continue
        if isinstance(command, MoveTo) and cleaned and isinstance(cleaned[-1], MoveTo):
            cleaned[-1] = command
            continue
        cleaned.append(command)
    return tuple(cleaned)


def reverse_subpath(sub_path: SubPath) -> SubPath:
    """Reverse the traversal direction of one subpath.

    The rendered shape is unchanged: line segments run backwards, cubic
    control points swap, and a trailing ``ClosePath`` is kept.
    """
    if not sub_path or not isinstance(sub_path[0], MoveTo):
        return tuple(sub_path)

    closed = any(isinstance(command, ClosePath) for command in sub_path)
    anchors: list[Point] = [sub_path[0].position]
    segments: list[Command] = []
    for command in sub_path[1:]:
        if isinstance(command, (LineTo, CubicBezier)):
            segments.append(command)
            anchors.append(command.position)

    reversed_commands: list[Command] = [MoveTo(anchors[-1])]
    for index in range(len(segments) - 1, -1, -1):
        segment = segments[index]
        target = anchors[index]
        if isinstance(segment, CubicBezier):
            reversed_commands.append(CubicBezier(segment.control2, segment.control1, target))
        else:
            reversed_commands.append(LineTo(target))
    if closed:
        reversed_commands.append(ClosePath())
    return tuple(reversed_commands)


def drawable_segment_count(sub_path: SubPath) -> int:
    """Number of line and cubic segments in a subpath."""
    return sum(1 for command in sub_path if isinstance(command, (LineTo, CubicBezier)))
