"""Import pipeline: resize, merge, measure and place parsed artwork.

Each file goes through the same steps: flatten leaf paths, optional resize,
optional union, measure, place on a shared grid, optional frame, then emit
z-ordered scene elements. Files that cannot be used are skipped with a
warning and never abort the batch.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING
from uuid import uuid4

import structlog

from vecdraw_py.composition.boolean import union
from vecdraw_py.core.logging import operation_context
from vecdraw_py.core.models import CanvasElement, GroupData, PathData
from vecdraw_py.core.style import NO_PAINT, PathStyle
from vecdraw_py.exceptions import ArtworkImportError
from vecdraw_py.geometry.bounds import Bounds, measure_path_bounds, union_bounds
from vecdraw_py.geometry.shapes import rectangle_commands
from vecdraw_py.geometry.transform import TransformOptions, transform_path_data, translate_path_data
from vecdraw_py.importing.models import (
    ImportedPath,
    ImportOptions,
    ImportResult,
    iter_paths,
    map_paths,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from uuid import UUID

    from vecdraw_py.core.scene import Scene
    from vecdraw_py.importing.models import ArtworkParser, ImportedNode, ParsedArtwork

logger = structlog.get_logger(__name__)


@dataclass
class LayoutCursor:
    """Left-to-right, top-to-bottom placement grid shared by a batch.

    Attributes:
        x_offset: Left edge of the next placement.
        y_offset: Top edge of the current row.
        row_max_height: Height of the tallest item in the current row.
    """

    x_offset: float = 0.0
    y_offset: float = 0.0
    row_max_height: float = 0.0

    def place(self, width: float, height: float, *, margin: float, max_row_width: float) -> tuple[float, float]:
        """Reserve a slot and return its top-left corner.

        A row wraps when the item would cross ``max_row_width``, unless the
        row is still empty.
        """
        if self.x_offset > 0 and self.x_offset + width > max_row_width:
            self.x_offset = 0.0
            self.y_offset += self.row_max_height + margin
            self.row_max_height = 0.0
        position = (self.x_offset, self.y_offset)
        self.x_offset += width + margin
        self.row_max_height = max(self.row_max_height, height)
        return position


def read_artworks(sources: Iterable[str | Path], parser: ArtworkParser) -> tuple[list[ParsedArtwork], list[str]]:
    """Read and parse source files, collecting failures as warnings.

    Args:
        sources: File paths to read.
        parser: Parser turning file contents into ``ParsedArtwork``.

    Returns:
        The parsed artworks and one warning per file that failed.
    """
    artworks: list[ParsedArtwork] = []
    warnings: list[str] = []
    for source in sources:
        path = Path(source)
        try:
            artworks.append(parser.parse(path.read_text(encoding="utf-8"), name=path.name))
        except (ArtworkImportError, OSError, UnicodeDecodeError) as exc:
            logger.warning("Skipping unreadable artwork", source=str(path), error=str(exc))
            warnings.append(f"{path.name}: {exc}")
    return artworks, warnings


class ImportPipeline:
    """Turns parsed artwork into scene elements.

    Attributes:
        options: Resize, union, frame and layout settings.
    """

    def __init__(self, options: ImportOptions | None = None) -> None:
        """Initialize the pipeline.

        Args:
            options: Import settings, defaults to ``ImportOptions()``.
        """
        self.options = options or ImportOptions()

    def plan(self, artworks: Sequence[ParsedArtwork], scene: Scene) -> ImportResult:
        """Build the elements for a batch without touching the scene.

        Args:
            artworks: Parsed files, placed in the given order.
            scene: Current scene, used for the starting z-index and group names.

        Returns:
            The elements to insert and a summary of the batch.
        """
        result = ImportResult(group_name_counter=scene.group_name_counter)
        cursor = LayoutCursor()
        next_z = scene.next_z_index

        with operation_context("import", files=len(artworks)):
            for artwork in artworks:
                next_z = self._plan_artwork(artwork, cursor, next_z, result)
            logger.info(
                "Planned artwork import",
                files=len(artworks),
                paths=result.imported_path_count,
                elements=len(result.elements),
                warnings=len(result.warnings),
            )
        return result

    def _plan_artwork(self, artwork: ParsedArtwork, cursor: LayoutCursor, next_z: int, result: ImportResult) -> int:
        options = self.options
        nodes = artwork.elements
        path_count = artwork.path_count
        if path_count == 0:
            result.warnings.append(f"{artwork.name}: no paths found, file skipped")
            return next_z

        frame_size: tuple[float, float] | None = None
        if artwork.dimensions is not None and artwork.dimensions.is_valid:
            frame_size = (artwork.dimensions.width, artwork.dimensions.height)

        if options.resize:
            if frame_size is None:
                result.warnings.append(f"{artwork.name}: unknown document size, resize skipped")
            else:
                scale = TransformOptions(
                    scale_x=options.resize_width / frame_size[0],
                    scale_y=options.resize_height / frame_size[1],
                )
                nodes = map_paths(nodes, lambda path: transform_path_data(path, scale, scale_stroke=True))
                frame_size = (options.resize_width, options.resize_height)

        if options.apply_union and path_count >= 2:
            merged = union(list(iter_paths(nodes)))
            if merged is None:
                result.warnings.append(f"{artwork.name}: union produced no shape, paths kept as they are")
            else:
                nodes = (ImportedPath(merged),)

        content = union_bounds(
            measure_path_bounds(path.sub_paths, path.style.stroke_width) for path in iter_paths(nodes)
        )
        if content is None:
            result.warnings.append(f"{artwork.name}: paths have no measurable geometry, file skipped")
            return next_z

        frame: PathData | None = None
        box = content
        if options.add_frame:
            frame_box = Bounds(0, 0, *frame_size) if frame_size is not None else content
            frame = PathData(
                (rectangle_commands(frame_box.min_x, frame_box.min_y, frame_box.width, frame_box.height),),
                PathStyle(stroke_width=1, stroke_color=options.frame_stroke_color, fill_color=NO_PAINT),
            )
            box = content.union(frame_box)

        x, y = cursor.place(box.width, box.height, margin=options.margin, max_row_width=options.max_row_width)
        dx, dy = x - box.min_x, y - box.min_y
        nodes = map_paths(nodes, lambda path: translate_path_data(path, dx, dy))

        if frame is not None:
            frame_element = CanvasElement(data=translate_path_data(frame, dx, dy), z_index=next_z)
            next_z += 1
            self._add(result, frame_element)
            result.imported_path_count += 1
            result.selection_ids.append(frame_element.id)

        for node in nodes:
            element_id, next_z = self._emit(node, None, next_z, result)
            if element_id is not None:
                result.selection_ids.append(element_id)

        logger.debug("Placed artwork", source=artwork.name, x=x, y=y, width=box.width, height=box.height)
        return next_z

    def _add(self, result: ImportResult, element: CanvasElement) -> None:
        result.elements.append(element)
        result.created_ids.append(element.id)

    def _emit(
        self, node: ImportedNode, parent_id: UUID | None, next_z: int, result: ImportResult
    ) -> tuple[UUID | None, int]:
        """Emit a node depth first; groups take their z-index before children."""
        if isinstance(node, ImportedPath):
            element = CanvasElement(data=node.data, z_index=next_z, parent_id=parent_id)
            self._add(result, element)
            result.imported_path_count += 1
            return element.id, next_z + 1

        if not any(True for _ in iter_paths(node.children)):
            return None, next_z

        group_id = uuid4()
        group_z = next_z
        next_z += 1
        index = len(result.elements)
        name = node.name
        if not name:
            name = f"Imported Group {result.group_name_counter}"
            result.group_name_counter += 1

        child_ids: list[UUID] = []
        for child in node.children:
            child_id, next_z = self._emit(child, group_id, next_z, result)
            if child_id is not None:
                child_ids.append(child_id)

        group = CanvasElement(
            data=GroupData(name=name, child_ids=tuple(child_ids)),
            id=group_id,
            z_index=group_z,
            parent_id=parent_id,
        )
        result.elements.insert(index, group)
        result.created_ids.insert(index, group_id)
        return group_id, next_z

