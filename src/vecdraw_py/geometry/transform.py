"""Affine transforms over command lists."""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from vecdraw_py.core.models import PathData, Point
from vecdraw_py.core.precision import round_value
from vecdraw_py.geometry.commands import map_points

if TYPE_CHECKING:
    from collections.abc import Sequence

    from vecdraw_py.core.models import Command


@dataclass(frozen=True)
class TransformOptions:
    """Scale and rotation applied by ``transform_commands``.

    Scaling happens about ``(origin_x, origin_y)``; rotation (degrees,
    clockwise in y-down canvas space) happens afterwards about the rotation
    center, which defaults to the scale origin.

    Attributes:
        scale_x: Horizontal scale factor.
        scale_y: Vertical scale factor.
        origin_x: X of the scale origin.
        origin_y: Y of the scale origin.
        rotation: Rotation in degrees.
        rotation_center_x: X of the rotation pivot, None for ``origin_x``.
        rotation_center_y: Y of the rotation pivot, None for ``origin_y``.
    """

    scale_x: float = 1.0
    scale_y: float = 1.0
    origin_x: float = 0.0
    origin_y: float = 0.0
    rotation: float = 0.0
    rotation_center_x: float | None = None
    rotation_center_y: float | None = None

    @property
    def pivot(self) -> tuple[float, float]:
        cx = self.origin_x if self.rotation_center_x is None else self.rotation_center_x
        cy = self.origin_y if self.rotation_center_y is None else self.rotation_center_y
        return cx, cy

    def apply(self, point: Point) -> Point:
        """Transform a single point without rounding."""
        x = self.origin_x + (point.x - self.origin_x) * self.scale_x
        y = self.origin_y + (point.y - self.origin_y) * self.scale_y
        if self.rotation:
            cx, cy = self.pivot
            radians = math.radians(self.rotation)
            cos, sin = math.cos(radians), math.sin(radians)
            dx, dy = x - cx, y - cy
            x, y = cx + dx * cos - dy * sin, cy + dx * sin + dy * cos
        return Point(x, y)


def transform_commands(commands: Sequence[Command], options: TransformOptions) -> tuple[Command, ...]:
    """Scale then rotate every anchor and control point.

    Stroke width is not part of the geometry and is never changed here; use
    ``scale_stroke_width`` when the caller wants strokes to follow the scale.

    Args:
        commands: Commands to transform.
        options: Scale origin, factors and rotation.

    Returns:
        The transformed commands, rounded to the path precision.
    """
    return map_points(commands, lambda point: options.apply(point).rounded())


def translate_commands(commands: Sequence[Command], dx: float, dy: float) -> tuple[Command, ...]:
    """Shift every point by ``(dx, dy)``."""
    return map_points(commands, lambda point: point.translated(dx, dy).rounded())


def translate_path_data(path: PathData, dx: float, dy: float) -> PathData:
    """Shift a whole path by ``(dx, dy)``, keeping its style."""
    return PathData(tuple(translate_commands(sub_path, dx, dy) for sub_path in path.sub_paths), path.style)


def transform_path_data(path: PathData, options: TransformOptions, *, scale_stroke: bool = False) -> PathData:
    """Transform a whole path.

    Args:
        path: Path to transform.
        options: Scale origin, factors and rotation.
        scale_stroke: Also scale the stroke width with ``scale_stroke_width``.
    """
    style = path.style
    if scale_stroke:
        style = replace(style, stroke_width=scale_stroke_width(style.stroke_width, options.scale_x, options.scale_y))
    return PathData(tuple(transform_commands(sub_path, options) for sub_path in path.sub_paths), style)


def scale_stroke_width(stroke_width: float, scale_x: float, scale_y: float) -> float:
    """Scale a stroke width for a non-uniform scale.

    Uses the geometric mean of the absolute factors, so a uniform scale ``s``
    multiplies the width by ``|s|``. A zero width stays zero.
    """
    if stroke_width == 0:
        return 0.0
    return round_value(stroke_width * math.sqrt(abs(scale_x * scale_y)))
