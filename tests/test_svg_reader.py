"""Tests for the SVG artwork reader."""

from __future__ import annotations

import pytest

from vecdraw_py.core.models import ClosePath, CubicBezier, MoveTo, PathData, Point
from vecdraw_py.core.types import LineCap
from vecdraw_py.exceptions import ArtworkImportError
from vecdraw_py.geometry.bounds import Bounds, measure_path_bounds
from vecdraw_py.importing.models import Dimensions, ImportedGroup, ImportedPath, iter_paths
from vecdraw_py.importing.svg_reader import SvgArtworkReader

SVG_NS = 'xmlns="http://www.w3.org/2000/svg"'


def _svg(body: str, attributes: str = 'width="100" height="100"') -> str:
    return f"<svg {SVG_NS} {attributes}>{body}</svg>"


def _only_path(source: str) -> PathData:
    paths = list(iter_paths(SvgArtworkReader().parse(source).elements))
    assert len(paths) == 1
    return paths[0]


@pytest.fixture
def reader() -> SvgArtworkReader:
    """Create an SVG reader."""
    return SvgArtworkReader()


class TestDocument:
    """Tests for document-level parsing."""

    def test_dimensions(self, reader: SvgArtworkReader) -> None:
        """Test reading width and height."""
        artwork = reader.parse(_svg('<rect width="10" height="10"/>', 'width="120px" height="80"'), name="a.svg")
        assert artwork.name == "a.svg"
        assert artwork.dimensions == Dimensions(120, 80)

    def test_view_box_fallback(self, reader: SvgArtworkReader) -> None:
        """Test that the view box supplies missing dimensions."""
        artwork = reader.parse(_svg('<rect width="10" height="10"/>', 'viewBox="0 0 48 24"'))
        assert artwork.dimensions == Dimensions(48, 24)

    def test_view_box_scales_content(self) -> None:
        """Test that the view box maps onto the declared size."""
        source = _svg('<rect x="5" y="5" width="10" height="10"/>', 'width="100" height="100" viewBox="0 0 50 50"')
        path = _only_path(source)
        assert measure_path_bounds(path.sub_paths) == Bounds(10, 10, 30, 30)

    def test_missing_size(self, reader: SvgArtworkReader) -> None:
        """Test that unsupported units leave the size unknown."""
        artwork = reader.parse(_svg('<rect width="10" height="10"/>', 'width="10mm" height="10mm"'))
        assert artwork.dimensions is None

    @pytest.mark.parametrize("source", ["<svg", f"<html {SVG_NS}/>"])
    def test_invalid_documents(self, reader: SvgArtworkReader, source: str) -> None:
        """Test that non-SVG input raises ArtworkImportError."""
        with pytest.raises(ArtworkImportError):
            reader.parse(source, name="broken.svg")


class TestElements:
    """Tests for shape elements."""

    def test_rect(self) -> None:
        """Test rectangles become closed four-corner paths."""
        path = _only_path(_svg('<rect x="1" y="2" width="3" height="4"/>'))
        assert path.sub_paths[0][0] == MoveTo(Point(1, 2))
        assert isinstance(path.sub_paths[0][-1], ClosePath)

    def test_circle(self) -> None:
        """Test circles become cubic ellipses."""
        path = _only_path(_svg('<circle cx="50" cy="50" r="10"/>'))
        assert isinstance(path.sub_paths[0][1], CubicBezier)
        assert measure_path_bounds(path.sub_paths) == Bounds(40, 40, 60, 60)

    def test_polyline_and_polygon(self, reader: SvgArtworkReader) -> None:
        """Test that polygons close and polylines stay open."""
        artwork = reader.parse(
            _svg('<polyline points="0,0 10,0 10,10"/><polygon points="20,0 30,0 30,10"/>')
        )
        polyline, polygon = iter_paths(artwork.elements)
        assert not isinstance(polyline.sub_paths[0][-1], ClosePath)
        assert isinstance(polygon.sub_paths[0][-1], ClosePath)

    def test_line(self) -> None:
        """Test line elements."""
        path = _only_path(_svg('<line x1="0" y1="0" x2="10" y2="5" stroke="#000"/>'))
        assert measure_path_bounds(path.sub_paths) == Bounds(0, 0, 10, 5)

    def test_skipped_elements(self, reader: SvgArtworkReader) -> None:
        """Test that definitions, hidden elements and degenerate shapes are skipped."""
        artwork = reader.parse(
            _svg(
                '<defs><rect width="5" height="5"/></defs>'
                '<rect width="5" height="5" display="none"/>'
                '<rect width="0" height="5"/>'
                "<text>hello</text>"
                '<path d="M 0 0 L 5 5"/>'
            )
        )
        assert artwork.path_count == 1

    def test_invalid_path_data_is_skipped(self, reader: SvgArtworkReader) -> None:
        """Test that unparsable path data does not abort the file."""
        artwork = reader.parse(_svg('<path d="10 20 30"/><path d="M 0 0 L 1 1"/>'))
        assert artwork.path_count == 1


class TestGroupsAndStyles:
    """Tests for nesting, transforms and inherited styles."""

    def test_group_names(self, reader: SvgArtworkReader) -> None:
        """Test that group names come from labels or IDs."""
        source = _svg(
            '<g xmlns:inkscape="http://www.inkscape.org/namespaces/inkscape" inkscape:label="Layer 1">'
            '<g id="inner"><rect width="1" height="1"/></g></g>'
        )
        (outer,) = reader.parse(source).elements
        assert isinstance(outer, ImportedGroup)
        assert outer.name == "Layer 1"
        (inner,) = outer.children
        assert inner.name == "inner"
        assert isinstance(inner.children[0], ImportedPath)

    def test_empty_groups_are_dropped(self, reader: SvgArtworkReader) -> None:
        """Test that groups without drawable content vanish."""
        artwork = reader.parse(_svg('<g id="empty"><title>x</title></g><rect width="1" height="1"/>'))
        assert len(artwork.elements) == 1

    def test_nested_transforms(self) -> None:
        """Test that group and element transforms compose."""
        path = _only_path(
            _svg('<g transform="translate(10 20)"><rect width="10" height="10" transform="scale(2)"/></g>')
        )
        assert measure_path_bounds(path.sub_paths) == Bounds(10, 20, 30, 40)

    def test_stroke_width_follows_scale(self) -> None:
        """Test that transforms scale the stroke width."""
        path = _only_path(_svg('<rect width="1" height="1" stroke="#000" stroke-width="2" transform="scale(3)"/>'))
        assert path.style.stroke_width == 6

    def test_inherited_style(self) -> None:
        """Test inheritance of presentation attributes and inline style precedence."""
        path = _only_path(
            _svg('<g fill="#ff0000" stroke="#00ff00"><rect width="1" height="1" style="stroke: #0000ff"/></g>')
        )
        assert path.style.fill_color == "#ff0000"
        assert path.style.stroke_color == "#0000ff"

    def test_opacity_multiplies(self) -> None:
        """Test that group and element opacity combine."""
        path = _only_path(_svg('<g opacity="0.5"><rect width="1" height="1" opacity="0.5"/></g>'))
        assert path.style.fill_opacity == 0.25

    def test_group_opacity_applies_once(self) -> None:
        """Test that a child without its own opacity inherits the group value."""
        path = _only_path(_svg('<g opacity="0.5"><rect width="1" height="1"/></g>'))
        assert path.style.fill_opacity == 0.5

    def test_svg_defaults(self) -> None:
        """Test the SVG paint defaults."""
        style = _only_path(_svg('<rect width="1" height="1"/>')).style
        assert style.fill_color == "#000000"
        assert style.stroke_color == "none"
        assert style.stroke_linecap is LineCap.BUTT
