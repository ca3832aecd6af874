"""Style definitions for path elements."""

from __future__ import annotations

from dataclasses import dataclass

from vecdraw_py.core.precision import clamp_unit, round_value
from vecdraw_py.core.types import FillRule, LineCap, LineJoin

NO_PAINT = "none"


@dataclass(frozen=True)
class PathStyle:
    """Styling configuration for a path.

    Numeric fields are rounded to the shared path precision and opacities are
    clamped to [0, 1] on construction.

    Attributes:
        stroke_width: Width of the stroke in canvas units.
        stroke_color: Stroke color, or ``"none"``.
        stroke_opacity: Stroke opacity from 0.0 to 1.0.
        fill_color: Fill color, or ``"none"``.
        fill_opacity: Fill opacity from 0.0 to 1.0.
        stroke_linecap: Line cap style.
        stroke_linejoin: Line join style.
        fill_rule: Fill rule used when subpaths overlap.
        stroke_dasharray: Dash pattern (``"none"`` for a solid stroke).
    """

    stroke_width: float = 1.0
    stroke_color: str = "#000000"
    stroke_opacity: float = 1.0
    fill_color: str = NO_PAINT
    fill_opacity: float = 1.0
    stroke_linecap: LineCap = LineCap.ROUND
    stroke_linejoin: LineJoin = LineJoin.ROUND
    fill_rule: FillRule = FillRule.NONZERO
    stroke_dasharray: str = NO_PAINT

    def __post_init__(self) -> None:
        """Normalize numeric fields and enum values."""
        object.__setattr__(self, "stroke_width", round_value(max(0.0, self.stroke_width)))
        object.__setattr__(self, "stroke_opacity", round_value(clamp_unit(self.stroke_opacity)))
        object.__setattr__(self, "fill_opacity", round_value(clamp_unit(self.fill_opacity)))
        object.__setattr__(self, "stroke_linecap", LineCap(self.stroke_linecap))
        object.__setattr__(self, "stroke_linejoin", LineJoin(self.stroke_linejoin))
        object.__setattr__(self, "fill_rule", FillRule(self.fill_rule))

    @property
    def has_stroke(self) -> bool:
        """Whether the stroke is painted at all."""
        return self.stroke_color != NO_PAINT and self.stroke_width > 0

    @property
    def has_fill(self) -> bool:
        """Whether the fill is painted at all."""
        return self.fill_color != NO_PAINT
