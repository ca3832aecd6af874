"""Stroke-aware bounding boxes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from vecdraw_py.core.models import command_points
from vecdraw_py.core.precision import round_value

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from vecdraw_py.core.models import Command, Point, SubPath


@dataclass(frozen=True)
class Bounds:
    """Axis-aligned bounding box."""

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def center(self) -> tuple[float, float]:
        return ((self.min_x + self.max_x) / 2, (self.min_y + self.max_y) / 2)

    def union(self, other: Bounds) -> Bounds:
        """Smallest box containing both boxes."""
        return Bounds(
            min(self.min_x, other.min_x),
            min(self.min_y, other.min_y),
            max(self.max_x, other.max_x),
            max(self.max_y, other.max_y),
        )

    def expanded(self, amount: float) -> Bounds:
        """Grow the box by ``amount`` on every side."""
        return Bounds(self.min_x - amount, self.min_y - amount, self.max_x + amount, self.max_y + amount)

    def contains(self, other: Bounds) -> bool:
        """Whether ``other`` lies fully inside this box."""
        return (
            self.min_x <= other.min_x
            and self.min_y <= other.min_y
            and self.max_x >= other.max_x
            and self.max_y >= other.max_y
        )

    def rounded(self) -> Bounds:
        return Bounds(
            round_value(self.min_x), round_value(self.min_y), round_value(self.max_x), round_value(self.max_y)
        )


def bounds_of_points(points: Iterable[Point]) -> Bounds | None:
    """Bounding box of a point cloud, or None when there are no points."""
    xs: list[float] = []
    ys: list[float] = []
    for point in points:
        xs.append(point.x)
        ys.append(point.y)
    if not xs:
        return None
    return Bounds(min(xs), min(ys), max(xs), max(ys))


def measure_bounds(commands: Sequence[Command], stroke_width: float = 0.0, scale: float = 1.0) -> Bounds | None:
    """Measure the visible extent of a command list.

    Control points are included, so curves are over-approximated by the
    convex hull of their control polygon. The box grows by half the stroke
    width (scaled by ``scale``) on every side.

    Args:
        commands: Commands to measure.
        stroke_width: Stroke width of the path.
        scale: Zoom or transform factor applied to the stroke.

    Returns:
        The bounds, or None for input without any positioned command.
    """
    raw = bounds_of_points(point for command in commands for point in command_points(command))
    if raw is None:
        return None
    return raw.expanded(max(0.0, stroke_width) / 2 * scale).rounded()


def measure_path_bounds(
    sub_paths: Sequence[SubPath], stroke_width: float = 0.0, scale: float = 1.0
) -> Bounds | None:
    """Measure several subpaths at once; see ``measure_bounds``."""
    return measure_bounds([command for sub_path in sub_paths for command in sub_path], stroke_width, scale)


def union_bounds(boxes: Iterable[Bounds | None]) -> Bounds | None:
    """Union of several boxes, skipping None entries."""
    result: Bounds | None = None
    for box in boxes:
        if box is None:
            continue
        result = box if result is None else result.union(box)
    return result
