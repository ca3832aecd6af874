"""Clipboard path strings (SVG path ``d`` syntax).

Output is always absolute ``M/L/C/Z`` with numbers at the path precision.
Input accepts the full SVG path grammar: quadratic segments are elevated to
cubics and elliptical arcs are approximated by cubic pieces.
"""

from __future__ import annotations

import math
import re
from typing import TYPE_CHECKING

from svgpathtools import Arc, Line, QuadraticBezier, parse_path
from svgpathtools import CubicBezier as SvgCubic
from svgpathtools import Path as SvgPath

from vecdraw_py.core.models import ClosePath, CubicBezier, LineTo, MoveTo, PathData, Point
from vecdraw_py.core.precision import round_value
from vecdraw_py.exceptions import PathParseError
from vecdraw_py.geometry.commands import normalize_commands

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from vecdraw_py.core.models import Command
    from vecdraw_py.core.style import PathStyle

# Largest arc sweep, in degrees, approximated by a single cubic.
MAX_ARC_SWEEP = 90.0

MOVE_RE = re.compile(r"(?=[Mm])")
NUMBER_RE = re.compile(r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")


def format_number(value: float) -> str:
    """Format a coordinate without trailing zeros."""
    text = format(round_value(value), "f").rstrip("0").rstrip(".")
    return "0" if text in {"", "-0"} else text


def _pt(point: Point) -> str:
    return f"{format_number(point.x)} {format_number(point.y)}"


def commands_to_string(commands: Sequence[Command]) -> str:
    """Serialize commands as an absolute SVG path string."""
    parts: list[str] = []
    for command in commands:
        match command:
            case MoveTo(position=p):
                parts.append(f"M {_pt(p)}")
            case LineTo(position=p):
                parts.append(f"L {_pt(p)}")
            case CubicBezier(control1=c1, control2=c2, position=p):
                parts.append(f"C {_pt(c1)} {_pt(c2)} {_pt(p)}")
            case ClosePath():
                parts.append("Z")
    return " ".join(parts)


def path_data_to_string(path: PathData) -> str:
    """Serialize every subpath of a path."""
    return commands_to_string(path.commands)


def _point(value: complex) -> Point:
    return Point(value.real, value.imag).rounded()


def _arc_to_cubics(arc: Arc) -> list[CubicBezier]:
    pieces = max(1, math.ceil(abs(arc.delta) / MAX_ARC_SWEEP))
    cubics: list[CubicBezier] = []
    for index in range(pieces):
        t0, t1 = index / pieces, (index + 1) / pieces
        span = (t1 - t0) / 3
        start, end = arc.point(t0), arc.point(t1)
        control1 = start + arc.derivative(t0) * span
        control2 = end - arc.derivative(t1) * span
        cubics.append(CubicBezier(_point(control1), _point(control2), _point(end)))
    return cubics


def _segment_commands(segment: object) -> list[Command]:
    if isinstance(segment, Line):
        return [LineTo(_point(segment.end))]
    if isinstance(segment, SvgCubic):
        return [CubicBezier(_point(segment.control1), _point(segment.control2), _point(segment.end))]
    if isinstance(segment, QuadraticBezier):
        start, control, end = segment.start, segment.control, segment.end
        return [
            CubicBezier(
                _point(start + (2.0 / 3.0) * (control - start)),
                _point(end + (2.0 / 3.0) * (control - end)),
                _point(end),
            )
        ]
    if isinstance(segment, Arc):
        if segment.start == segment.end:
            return []
        return _arc_to_cubics(segment)
    return []


def _move_target(piece: str, current: complex) -> complex:
    numbers = NUMBER_RE.findall(piece)
    if len(numbers) < 2:
        return current
    target = complex(float(numbers[0]), float(numbers[1]))
    return target + current if piece.startswith("m") else target


def _split_moves(text: str) -> Iterator[tuple[complex, list[object]]]:
    """Yield the start point and segments of every moveto-delimited piece.

    Each piece is parsed on its own so subpaths stay separate even when one
    starts where the previous one ended.
    """
    current = 0j
    for piece in MOVE_RE.split(text.strip()):
        if not piece.strip():
            continue
        segments = list(parse_path(piece, current_pos=current))
        start = segments[0].start if segments else _move_target(piece, current)
        yield start, segments
        current = segments[-1].end if segments else start


def parse_path_string(text: str) -> tuple[Command, ...]:
    """Parse SVG path data into commands.

    Args:
        text: Path data such as ``"M 0 0 L 10 10 Z"``.

    Returns:
        The commands, with a new subpath at every moveto. Closed subpaths end
        in ``ClosePath``.

    Raises:
        PathParseError: If the text is not valid path data.
    """
    if not text.strip():
        return ()
    try:
        pieces = list(_split_moves(text))
    except (ValueError, IndexError, TypeError) as exc:
        raise PathParseError(text, str(exc)) from exc

    commands: list[Command] = []
    for start, segments in pieces:
        if not segments:
            continue
        closed = SvgPath(*segments).isclosed()
        commands.append(MoveTo(_point(start)))
        if closed and isinstance(segments[-1], Line) and len(segments) > 1:
            segments = segments[:-1]
        for segment in segments:
            commands.extend(_segment_commands(segment))
        if closed:
            commands.append(ClosePath())

    if not commands:
        raise PathParseError(text, "no drawable segments")
    return normalize_commands(commands)


def path_data_from_string(text: str, style: PathStyle | None = None) -> PathData:
    """Parse a clipboard string straight into path data.

    Raises:
        PathParseError: If the text is not valid path data.
    """
    return PathData.from_commands(parse_path_string(text), style)
