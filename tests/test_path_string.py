"""Tests for the clipboard path string codec."""

from __future__ import annotations

import pytest

from vecdraw_py.codec.path_string import (
    commands_to_string,
    format_number,
    parse_path_string,
    path_data_from_string,
    path_data_to_string,
)
from vecdraw_py.core.models import ClosePath, CubicBezier, LineTo, MoveTo, PathData, Point
from vecdraw_py.core.style import PathStyle
from vecdraw_py.exceptions import PathParseError
from vecdraw_py.geometry.bounds import measure_bounds


class TestFormatting:
    """Tests for serializing commands."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [(10.0, "10"), (1.5, "1.5"), (0.125, "0.12"), (-0.001, "0"), (-3.25, "-3.25")],
    )
    def test_format_number(self, value: float, expected: str) -> None:
        """Test compact number formatting at the path precision."""
        assert format_number(value) == expected

    def test_commands_to_string(self, curve_path: PathData) -> None:
        """Test absolute M/L/C output."""
        assert commands_to_string(curve_path.commands) == "M 0 0 L 10 0 C 15 0 20 5 20 10"

    def test_closed_path(self, unit_square: PathData) -> None:
        """Test that closed subpaths end in Z."""
        assert path_data_to_string(unit_square) == "M 0 0 L 10 0 L 10 10 L 0 10 Z"


class TestParsing:
    """Tests for parsing SVG path data."""

    def test_parse_lines(self) -> None:
        """Test parsing absolute lines."""
        assert parse_path_string("M 0 0 L 10 0 L 10 10") == (
            MoveTo(Point(0, 0)),
            LineTo(Point(10, 0)),
            LineTo(Point(10, 10)),
        )

    def test_parse_closed(self, unit_square: PathData) -> None:
        """Test that a closing segment becomes ClosePath."""
        assert parse_path_string("M0,0 H10 V10 H0 Z") == unit_square.commands

    def test_parse_relative_commands(self) -> None:
        """Test relative commands are made absolute."""
        commands = parse_path_string("m 5 5 l 10 0 l 0 10")
        assert commands[-1] == LineTo(Point(15, 15))

    def test_parse_cubic(self) -> None:
        """Test parsing a cubic segment."""
        commands = parse_path_string("M 0 0 C 15 0 20 5 20 10")
        assert commands[1] == CubicBezier(Point(15, 0), Point(20, 5), Point(20, 10))

    def test_quadratic_is_elevated(self) -> None:
        """Test that quadratic segments become equivalent cubics."""
        commands = parse_path_string("M 0 0 Q 30 30 60 0")
        assert commands[1] == CubicBezier(Point(20, 20), Point(40, 20), Point(60, 0))

    def test_arc_is_approximated(self) -> None:
        """Test that a half-circle arc becomes cubic pieces on the circle."""
        commands = parse_path_string("M 0 0 A 10 10 0 0 1 20 0")
        assert all(isinstance(c, CubicBezier) for c in commands[1:])
        assert len(commands) - 1 == 2
        assert commands[-1].position == Point(20, 0)
        bounds = measure_bounds(commands)
        assert bounds.width == pytest.approx(20)
        assert bounds.height == pytest.approx(10, abs=0.01)

    def test_subpaths_split(self) -> None:
        """Test that pen jumps start new subpaths."""
        path = path_data_from_string("M 0 0 L 10 0 M 20 0 L 30 0", PathStyle(stroke_width=3))
        assert len(path.sub_paths) == 2
        assert path.style.stroke_width == 3

    def test_round_trip(self, curve_path: PathData) -> None:
        """Test that serialized paths parse back to the same commands."""
        assert parse_path_string(path_data_to_string(curve_path)) == curve_path.commands

    def test_empty_string(self) -> None:
        """Test that blank input is an empty path."""
        assert parse_path_string("   ") == ()

    @pytest.mark.parametrize("text", ["10 20 30", "M 0 0"])
    def test_invalid_input_raises(self, text: str) -> None:
        """Test that malformed or undrawable input raises PathParseError."""
        with pytest.raises(PathParseError):
            parse_path_string(text)

    def test_parse_error_truncates_source(self) -> None:
        """Test that error messages keep a bounded excerpt of the input."""
        error = PathParseError("M" * 200, "bad")
        assert len(error.source) == 80

    def test_closing_path_round_trip(self) -> None:
        """Test that a closed square keeps its ClosePath through a round trip."""
        commands = (MoveTo(Point(0, 0)), LineTo(Point(5, 0)), LineTo(Point(5, 5)), ClosePath())
        assert parse_path_string(commands_to_string(commands)) == commands

    def test_touching_closed_subpaths_stay_separate(self) -> None:
        """Test that a subpath starting where the previous one ended keeps its own MoveTo."""
        text = "M 0 0 L 10 0 L 10 10 Z M 0 0 L -10 0 L -10 -10 Z"
        commands = parse_path_string(text)
        assert sum(isinstance(command, MoveTo) for command in commands) == 2
        assert sum(isinstance(command, ClosePath) for command in commands) == 2
        assert commands_to_string(commands) == text

    def test_relative_move_after_close(self) -> None:
        """Test that a relative moveto starts from the closed subpath's start."""
        path = path_data_from_string("M 5 5 l 10 0 l 0 10 z m 20 0 l 10 0")
        assert len(path.sub_paths) == 2
        assert path.sub_paths[1][0] == MoveTo(Point(25, 5))
        assert path.sub_paths[1][1] == LineTo(Point(35, 5))
