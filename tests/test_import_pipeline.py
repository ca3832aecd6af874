"""Tests for the artwork import pipeline and grid placement."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from conftest import artwork, square
from vecdraw_py.core.models import CanvasElement, GroupData, PathData
from vecdraw_py.core.scene import Scene
from vecdraw_py.geometry.bounds import Bounds, measure_path_bounds
from vecdraw_py.importing.models import Dimensions, ImportedPath, ImportOptions, ParsedArtwork
from vecdraw_py.importing.pipeline import ImportPipeline, LayoutCursor, read_artworks
from vecdraw_py.importing.svg_reader import SvgArtworkReader

if TYPE_CHECKING:
    from pathlib import Path

    from vecdraw_py.importing.models import ImportResult


def _paths(result: ImportResult) -> list[CanvasElement]:
    return [e for e in result.elements if isinstance(e.data, PathData)]


def _bounds(element: CanvasElement) -> Bounds:
    return measure_path_bounds(element.data.sub_paths, element.data.style.stroke_width)


class TestLayoutCursor:
    """Tests for the shared placement grid."""

    def test_places_left_to_right(self) -> None:
        """Test horizontal placement with a margin."""
        cursor = LayoutCursor()
        assert cursor.place(100, 100, margin=160, max_row_width=12288) == (0, 0)
        assert cursor.place(100, 50, margin=160, max_row_width=12288) == (260, 0)
        assert cursor.row_max_height == 100

    def test_wraps_rows(self) -> None:
        """Test wrapping when an item would cross the row width."""
        cursor = LayoutCursor()
        cursor.place(100, 80, margin=160, max_row_width=300)
        assert cursor.place(100, 40, margin=160, max_row_width=300) == (0, 240)

    def test_oversized_item_stays_on_empty_row(self) -> None:
        """Test that an item wider than a row is never wrapped before the first slot."""
        cursor = LayoutCursor()
        assert cursor.place(1000, 10, margin=160, max_row_width=300) == (0, 0)


class TestImportPipeline:
    """Tests for planning imported elements."""

    def test_second_file_placed_after_margin(self) -> None:
        """Test that two 100x100 files are 260 apart horizontally."""
        result = ImportPipeline().plan([artwork("a.svg", 100), artwork("b.svg", 100)], Scene())
        first, second = _paths(result)
        assert _bounds(first) == Bounds(0, 0, 100, 100)
        assert _bounds(second) == Bounds(260, 0, 360, 100)
        assert result.imported_path_count == 2
        assert result.warnings == []

    def test_wide_files_wrap(self) -> None:
        """Test that overflowing files move to the next row."""
        options = ImportOptions(max_row_width=300)
        result = ImportPipeline(options).plan([artwork("a.svg", 100), artwork("b.svg", 100)], Scene())
        _, second = _paths(result)
        assert _bounds(second).min_x == 0
        assert _bounds(second).min_y == 100 + 160

    def test_z_index_continues_after_scene(self) -> None:
        """Test that imported elements stack above existing ones."""
        existing = CanvasElement(data=square(0, 0, 10), z_index=4)
        scene = Scene(elements={existing.id: existing})
        result = ImportPipeline().plan([artwork("a.svg", 100, paths=2)], scene)
        assert [e.z_index for e in result.elements] == [5, 6]

    def test_content_is_moved_to_slot(self) -> None:
        """Test that offset content is aligned to its slot corner."""
        shifted = ParsedArtwork("s.svg", None, (ImportedPath(square(500, 300, 20)),))
        result = ImportPipeline().plan([shifted], Scene())
        assert _bounds(result.elements[0]) == Bounds(0, 0, 20, 20)

    def test_resize(self) -> None:
        """Test scaling files to the target size."""
        options = ImportOptions(resize=True, resize_width=64, resize_height=32)
        result = ImportPipeline(options).plan([artwork("a.svg", 100)], Scene())
        assert _bounds(result.elements[0]) == Bounds(0, 0, 64, 32)

    def test_resize_without_dimensions_warns(self) -> None:
        """Test that files without a size are placed unscaled with a warning."""
        unsized = ParsedArtwork("u.svg", None, (ImportedPath(square(0, 0, 10)),))
        result = ImportPipeline(ImportOptions(resize=True)).plan([unsized], Scene())
        assert _bounds(result.elements[0]) == Bounds(0, 0, 10, 10)
        assert "u.svg" in result.warnings[0]

    def test_union_merges_paths(self) -> None:
        """Test that union leaves one path per file covering both squares."""
        result = ImportPipeline(ImportOptions(apply_union=True)).plan([artwork("a.svg", 100, paths=2)], Scene())
        assert len(result.elements) == 1
        assert result.imported_path_count == 1
        assert _bounds(result.elements[0]) == Bounds(0, 0, 100, 50)

    def test_frame_is_added_first(self) -> None:
        """Test that the frame sits behind the content, is selected and is counted."""
        result = ImportPipeline(ImportOptions(add_frame=True)).plan([artwork("a.svg", 100)], Scene())
        frame, content = result.elements
        assert frame.z_index < content.z_index
        assert frame.data.style.fill_color == "none"
        assert _bounds(frame) == Bounds(-0.5, -0.5, 100.5, 100.5)
        assert result.selection_ids == [frame.id, content.id]
        assert result.imported_path_count == 2

    def test_frame_uses_declared_size(self) -> None:
        """Test that the frame covers the document even when content is smaller."""
        small = ParsedArtwork("s.svg", Dimensions(100, 50), (ImportedPath(square(10, 10, 20)),))
        result = ImportPipeline(ImportOptions(add_frame=True)).plan([small], Scene())
        frame, content = result.elements
        assert _bounds(content) == Bounds(10, 10, 30, 30)
        assert _bounds(frame) == Bounds(-0.5, -0.5, 100.5, 50.5)

    def test_empty_files_are_skipped(self) -> None:
        """Test that files without paths produce a warning and no slot."""
        empty = ParsedArtwork("empty.svg", Dimensions(10, 10), ())
        result = ImportPipeline().plan([empty, artwork("a.svg", 100)], Scene())
        assert "empty.svg" in result.warnings[0]
        assert _bounds(result.elements[0]).min_x == 0

    def test_groups_keep_structure(self, nested_artwork: ParsedArtwork) -> None:
        """Test nested groups, default names and depth-first z order."""
        result = ImportPipeline().plan([nested_artwork], Scene(group_name_counter=3))
        group, first, second, loose = result.elements
        assert isinstance(group.data, GroupData)
        assert group.data.name == "Imported Group 3"
        assert group.data.child_ids == (first.id, second.id)
        assert first.parent_id == group.id
        assert loose.parent_id is None
        assert [e.z_index for e in result.elements] == [0, 1, 2, 3]
        assert result.selection_ids == [group.id, loose.id]
        assert result.group_name_counter == 4
        assert result.created_ids == [e.id for e in result.elements]


class TestReadArtworks:
    """Tests for reading files from disk."""

    def test_unreadable_files_become_warnings(self, tmp_path: Path) -> None:
        """Test that missing and invalid files are skipped with warnings."""
        good = tmp_path / "good.svg"
        good.write_text('<svg xmlns="http://www.w3.org/2000/svg"><rect width="5" height="5"/></svg>')
        bad = tmp_path / "bad.svg"
        bad.write_text("<not-svg")
        artworks, warnings = read_artworks([good, bad, tmp_path / "missing.svg"], SvgArtworkReader())
        assert [a.name for a in artworks] == ["good.svg"]
        assert len(warnings) == 2
        assert warnings[0].startswith("bad.svg")

    @pytest.mark.parametrize("margin", [0, 40])
    def test_margin_option(self, margin: float) -> None:
        """Test that the margin option drives spacing."""
        result = ImportPipeline(ImportOptions(margin=margin)).plan(
            [artwork("a.svg", 10), artwork("b.svg", 10)], Scene()
        )
        assert _bounds(result.elements[1]).min_x == 10 + margin
