"""Coordinate precision shared by every geometry operation."""

from __future__ import annotations

PATH_DECIMAL_PRECISION = 2


def round_value(value: float, precision: int = PATH_DECIMAL_PRECISION) -> float:
    """Round a coordinate or style number to the shared precision.

    Negative zero is folded into zero so rounded output compares and
    serializes cleanly.
    """
    result = round(float(value), precision)
    return 0.0 if result == 0 else result


def clamp_unit(value: float) -> float:
    """Clamp a value into the closed interval [0, 1]."""
    return min(1.0, max(0.0, float(value)))
