"""Import of external vector artwork into a scene."""

from vecdraw_py.importing.models import (
    ArtworkParser,
    Dimensions,
    ImportedGroup,
    ImportedNode,
    ImportedPath,
    ImportOptions,
    ImportResult,
    ParsedArtwork,
)
from vecdraw_py.importing.pipeline import ImportPipeline, LayoutCursor, read_artworks
from vecdraw_py.importing.svg_reader import SvgArtworkReader

__all__ = [
    "ArtworkParser",
    "Dimensions",
    "ImportOptions",
    "ImportPipeline",
    "ImportResult",
    "ImportedGroup",
    "ImportedNode",
    "ImportedPath",
    "LayoutCursor",
    "ParsedArtwork",
    "SvgArtworkReader",
    "read_artworks",
]
