"""Data handed to the import pipeline by artwork parsers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from vecdraw_py.config import IMPORT_MARGIN, IMPORT_MAX_ROW_WIDTH

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator
    from uuid import UUID

    from vecdraw_py.core.models import CanvasElement, PathData


@dataclass(frozen=True)
class Dimensions:
    """Declared size of a source document."""

    width: float
    height: float

    @property
    def is_valid(self) -> bool:
        return self.width > 0 and self.height > 0


@dataclass(frozen=True)
class ImportedPath:
    """A leaf path of parsed artwork."""

    data: PathData


@dataclass(frozen=True)
class ImportedGroup:
    """A named group of parsed artwork.

    Attributes:
        name: Group name from the source, empty when unnamed.
        children: Nested paths and groups in document order.
    """

    name: str = ""
    children: tuple[ImportedNode, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "children", tuple(self.children))


ImportedNode = ImportedPath | ImportedGroup


def iter_paths(nodes: tuple[ImportedNode, ...]) -> Iterator[PathData]:
    """Leaf paths of an imported tree in document order."""
    for node in nodes:
        if isinstance(node, ImportedPath):
            yield node.data
        else:
            yield from iter_paths(node.children)


def map_paths(nodes: tuple[ImportedNode, ...], func: Callable[[PathData], PathData]) -> tuple[ImportedNode, ...]:
    """Rebuild an imported tree with ``func`` applied to every leaf path."""
    mapped: list[ImportedNode] = []
    for node in nodes:
        if isinstance(node, ImportedPath):
            mapped.append(ImportedPath(func(node.data)))
        else:
            mapped.append(ImportedGroup(node.name, map_paths(node.children, func)))
    return tuple(mapped)


@dataclass(frozen=True)
class ParsedArtwork:
    """One source file after parsing.

    Attributes:
        name: Source name (usually the file name).
        dimensions: Declared document size, None when unknown.
        elements: Top-level nodes in document order.
    """

    name: str
    dimensions: Dimensions | None
    elements: tuple[ImportedNode, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "elements", tuple(self.elements))

    @property
    def path_count(self) -> int:
        return sum(1 for _ in iter_paths(self.elements))


@runtime_checkable
class ArtworkParser(Protocol):
    """Anything that can turn a source file into ``ParsedArtwork``."""

    def parse(self, source: str, *, name: str | None = None) -> ParsedArtwork:
        """Parse source text.

        Raises:
            ArtworkImportError: If the source cannot be parsed.
        """
        ...


@dataclass
class ImportOptions:
    """How imported artwork is adjusted before placement.

    Attributes:
        resize: Scale each file to ``resize_width`` x ``resize_height``.
        resize_width: Target width.
        resize_height: Target height.
        apply_union: Merge each file's paths into one outline.
        add_frame: Add an unfilled rectangle of the file size behind it.
        margin: Gap between placed files.
        max_row_width: Row width at which placement wraps.
        frame_stroke_color: Stroke color of frames.
    """

    resize: bool = False
    resize_width: float = 64.0
    resize_height: float = 64.0
    apply_union: bool = False
    add_frame: bool = False
    margin: float = IMPORT_MARGIN
    max_row_width: float = IMPORT_MAX_ROW_WIDTH
    frame_stroke_color: str = "#000000"


@dataclass
class ImportResult:
    """Outcome of an import batch.

    Attributes:
        elements: New elements to insert, z-ordered.
        created_ids: IDs of every new element in insertion order.
        selection_ids: Top-level IDs to select afterwards.
        imported_path_count: Number of paths created, frames included.
        warnings: Human-readable problems, one per skipped file or step.
        group_name_counter: Next free number for default group names.
    """

    elements: list[CanvasElement] = field(default_factory=list)
    created_ids: list[UUID] = field(default_factory=list)
    selection_ids: list[UUID] = field(default_factory=list)
    imported_path_count: int = 0
    warnings: list[str] = field(default_factory=list)
    group_name_counter: int = 1
