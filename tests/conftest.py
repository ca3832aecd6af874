"""Pytest configuration and fixtures for vecdraw-py tests."""

from __future__ import annotations

import pytest

from vecdraw_py.config import EngineConfig
from vecdraw_py.core.models import ClosePath, CubicBezier, LineTo, MoveTo, PathData, Point
from vecdraw_py.core.style import PathStyle
from vecdraw_py.importing.models import Dimensions, ImportedGroup, ImportedPath, ParsedArtwork
from vecdraw_py.services.scene import SceneService


def square(x: float, y: float, size: float, *, stroke_width: float = 0.0) -> PathData:
    """Closed square path with its top-left corner at ``(x, y)``."""
    return PathData.from_commands(
        [
            MoveTo(Point(x, y)),
            LineTo(Point(x + size, y)),
            LineTo(Point(x + size, y + size)),
            LineTo(Point(x, y + size)),
            ClosePath(),
        ],
        PathStyle(stroke_width=stroke_width, fill_color="#000000"),
    )


def artwork(name: str, size: float, *, paths: int = 1) -> ParsedArtwork:
    """Parsed artwork of ``paths`` squares in a row along the top of a ``size`` x ``size`` document."""
    step = size / paths
    nodes = tuple(ImportedPath(square(i * step, 0, step)) for i in range(paths))
    return ParsedArtwork(name=name, dimensions=Dimensions(size, size), elements=nodes)


# Path fixtures


@pytest.fixture
def unit_square() -> PathData:
    """A 10x10 square at the origin without stroke."""
    return square(0, 0, 10)


@pytest.fixture
def curve_path() -> PathData:
    """An open path mixing a line and a cubic segment."""
    return PathData.from_commands(
        [
            MoveTo(Point(0, 0)),
            LineTo(Point(10, 0)),
            CubicBezier(Point(15, 0), Point(20, 5), Point(20, 10)),
        ]
    )


@pytest.fixture
def two_subpath_path() -> PathData:
    """A path with two disjoint closed subpaths."""
    outer = square(0, 0, 10)
    inner = square(20, 0, 10)
    return PathData(outer.sub_paths + inner.sub_paths, outer.style)


# Import fixtures


@pytest.fixture
def nested_artwork() -> ParsedArtwork:
    """Artwork with an unnamed group holding two paths next to a loose path."""
    return ParsedArtwork(
        name="nested.svg",
        dimensions=Dimensions(100, 100),
        elements=(
            ImportedGroup(name="", children=(ImportedPath(square(0, 0, 20)), ImportedPath(square(30, 0, 20)))),
            ImportedPath(square(60, 60, 40)),
        ),
    )


# Service fixtures


@pytest.fixture
def config() -> EngineConfig:
    """Engine configuration with defaults."""
    return EngineConfig()


@pytest.fixture
def service(config: EngineConfig) -> SceneService:
    """Create a scene service with an empty scene."""
    return SceneService(config=config)
