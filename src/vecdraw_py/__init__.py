"""Vecdraw-py: a vector path geometry and composition engine for drawing apps.

This package provides the document model and editing operations behind a 2D
vector editor. It includes immutable scene snapshots, path geometry
(measurement, transforms, simplification, reversal), boolean composition,
a path string codec, an SVG import pipeline, undo/redo history, and a CLI.

Key Components:
    - Core Models: Scene, CanvasElement, PathData, GroupData, PathStyle, Point
    - Geometry: Bounds, TransformOptions, simplify, reverse_subpath
    - Composition: union, subtract, intersect, exclude
    - Importing: ImportPipeline, SvgArtworkReader
    - Services: SceneService (editing operations), ExportService (documents)

Quick Start:
    >>> from vecdraw_py import SceneService, ShapeType
    >>>
    >>> service = SceneService()
    >>> rect = service.add_shape(ShapeType.RECTANGLE, 0, 0, 100, 50)
    >>> service.select_elements([rect.id])
    >>> service.move_selection(10, 10)
    >>> service.undo()

Importing Artwork:
    >>> from vecdraw_py import ImportOptions, SceneService
    >>>
    >>> service = SceneService()
    >>> result = service.import_files(["logo.svg"], options=ImportOptions(resize=True, add_frame=True))
    >>> result.warnings
    []
"""

from __future__ import annotations

from vecdraw_py.config import EngineConfig
from vecdraw_py.core import (
    BooleanOperation,
    CanvasElement,
    ClosePath,
    CubicBezier,
    DeletionScope,
    ElementType,
    GroupData,
    LineTo,
    MoveTo,
    PathData,
    PathStyle,
    Point,
    PointRef,
    PointRole,
    Scene,
    Selection,
    ShapeData,
    ShapeType,
    SubpathRef,
    TextData,
)
from vecdraw_py.exceptions import (
    ArtworkImportError,
    DocumentFormatError,
    ElementNotFoundError,
    InvalidElementError,
    PathParseError,
    VecdrawError,
)
from vecdraw_py.geometry import Bounds, TransformOptions
from vecdraw_py.importing import ImportOptions, ImportPipeline, SvgArtworkReader
from vecdraw_py.services import ExportService, SceneService

__all__ = [
    "ArtworkImportError",
    "BooleanOperation",
    "Bounds",
    "CanvasElement",
    "ClosePath",
    "CubicBezier",
    "DeletionScope",
    "DocumentFormatError",
    "ElementNotFoundError",
    "ElementType",
    "EngineConfig",
    "ExportService",
    "GroupData",
    "ImportOptions",
    "ImportPipeline",
    "InvalidElementError",
    "LineTo",
    "MoveTo",
    "PathData",
    "PathParseError",
    "PathStyle",
    "Point",
    "PointRef",
    "PointRole",
    "Scene",
    "SceneService",
    "Selection",
    "ShapeData",
    "ShapeType",
    "SubpathRef",
    "SvgArtworkReader",
    "TextData",
    "TransformOptions",
    "VecdrawError",
]

__version__ = "0.1.0"
