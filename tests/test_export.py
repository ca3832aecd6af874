"""Tests for export functionality."""

from __future__ import annotations

import json
from xml.etree import ElementTree

import pytest

from conftest import square
from vecdraw_py.core.models import LineTo, MoveTo, PathData, Point
from vecdraw_py.core.scene import Scene
from vecdraw_py.core.selection import Selection
from vecdraw_py.core.types import ShapeType
from vecdraw_py.exceptions import DocumentFormatError
from vecdraw_py.services.export import DOCUMENT_VERSION, ExportService
from vecdraw_py.services.scene import SceneService

SVG_NS = "{http://www.w3.org/2000/svg}"


@pytest.fixture
def export_service() -> ExportService:
    """Create an ExportService instance."""
    return ExportService()


@pytest.fixture
def populated_service(service: SceneService, curve_path: PathData) -> SceneService:
    """Create a scene with paths, a group, a shape, text and layer state."""
    service.rename_document("Export <Test>")
    a = service.add_path(square(0, 0, 10)).id
    b = service.add_path(curve_path).id
    service.add_shape(ShapeType.ELLIPSE, 40, 0, 20, 10)
    text = service.add_text("Hello & goodbye", 0, 40, font_size=12)
    service.select_elements([a, b])
    group_id = service.group_selection("Body")
    service.toggle_visibility(text.id)
    service.toggle_lock(group_id)
    return service


class TestDocumentExport:
    """Tests for JSON scene documents."""

    def test_round_trip(self, export_service: ExportService, populated_service: SceneService) -> None:
        """Test that a scene survives a JSON round trip without its selection."""
        scene = populated_service.scene
        loaded = export_service.from_json(export_service.to_json(scene))
        assert loaded == scene.with_changes(selection=Selection())

    def test_document_layout(self, export_service: ExportService, populated_service: SceneService) -> None:
        """Test the top-level keys and structural command lists."""
        document = json.loads(export_service.to_json(populated_service.scene))
        assert document["version"] == DOCUMENT_VERSION
        assert document["name"] == "Export <Test>"
        assert "selection" not in document
        z_indexes = [item["z_index"] for item in document["elements"]]
        assert z_indexes == sorted(z_indexes)
        paths = [item for item in document["elements"] if item["element_type"] == "path"]
        curve = next(item for item in paths if len(item["sub_paths"][0]) == 3)
        assert curve["sub_paths"][0][2] == ["C", 15, 0, 20, 5, 20, 10]
        assert len(document["locked_ids"]) == 3
        assert len(document["propagated_locked"]) == 1

    def test_coordinates_are_rounded(self, export_service: ExportService, service: SceneService) -> None:
        """Test that unrounded input is stored and written at the path precision."""
        path = PathData.from_commands([MoveTo(Point(0.123456, 1.98765)), LineTo(Point(10.005001, -3.33333))])
        service.add_path(path)
        service.add_shape(ShapeType.RECTANGLE, 1.23456, 2.34567, 10.55555, 4.44444)
        service.add_text("label", 0.3333, 0.6666, font_size=12.3456)
        elements = json.loads(export_service.to_json(service.scene))["elements"]
        assert elements[0]["sub_paths"][0] == [["M", 0.12, 1.99], ["L", 10.01, -3.33]]
        assert [elements[1][key] for key in ("x", "y", "width", "height")] == [1.23, 2.35, 10.56, 4.44]
        assert [elements[2][key] for key in ("x", "y", "font_size")] == [0.33, 0.67, 12.35]

    def test_update_path_is_rounded(self, service: SceneService, unit_square: PathData) -> None:
        """Test that replacing path data rounds the new coordinates."""
        element = service.add_path(unit_square)
        service.update_path(element.id, PathData.from_commands([MoveTo(Point(1.0049, 2.0051))]))
        assert service.get_element(element.id).data.sub_paths[0][0] == MoveTo(Point(1.0, 2.01))

    def test_compact_output(self, export_service: ExportService, populated_service: SceneService) -> None:
        """Test that indent=None writes a single line."""
        assert "\n" not in export_service.to_json(populated_service.scene, indent=None)

    @pytest.mark.parametrize(
        "document",
        [
            {"version": "0.1", "elements": []},
            {"version": DOCUMENT_VERSION},
            {"version": DOCUMENT_VERSION, "elements": [{"element_type": "path"}]},
            {"version": DOCUMENT_VERSION, "elements": [{"element_type": "blob", "id": "x", "z_index": 0}]},
            [],
        ],
    )
    def test_invalid_documents(self, export_service: ExportService, document: object) -> None:
        """Test that malformed documents raise DocumentFormatError."""
        with pytest.raises(DocumentFormatError):
            export_service.from_dict(document)

    def test_invalid_command(self, export_service: ExportService, unit_square: PathData) -> None:
        """Test that unknown path commands are rejected."""
        service = SceneService()
        service.add_path(unit_square)
        document = export_service.to_dict(service.scene)
        document["elements"][0]["sub_paths"][0][1] = ["Q", 1, 2, 3, 4]
        with pytest.raises(DocumentFormatError):
            export_service.from_dict(document)

    def test_duplicate_ids(self, export_service: ExportService, unit_square: PathData) -> None:
        """Test that repeated element IDs are rejected."""
        service = SceneService()
        service.add_path(unit_square)
        document = export_service.to_dict(service.scene)
        document["elements"].append(document["elements"][0])
        with pytest.raises(DocumentFormatError, match="duplicate"):
            export_service.from_dict(document)

    def test_invalid_json(self, export_service: ExportService) -> None:
        """Test that broken JSON raises DocumentFormatError."""
        with pytest.raises(DocumentFormatError):
            export_service.from_json("{not json")


class TestSvgExport:
    """Tests for SVG rendering."""

    def test_svg_is_well_formed(self, export_service: ExportService, populated_service: SceneService) -> None:
        """Test that the output parses and escapes the title."""
        svg = export_service.to_svg(populated_service.scene)
        root = ElementTree.fromstring(svg)
        assert root.tag == f"{SVG_NS}svg"
        assert root.find(f"{SVG_NS}title").text == "Export <Test>"
        assert "Export &lt;Test&gt;" in svg

    def test_groups_and_shapes(self, export_service: ExportService, populated_service: SceneService) -> None:
        """Test that groups become g elements and shapes become paths."""
        root = ElementTree.fromstring(export_service.to_svg(populated_service.scene))
        group = root.find(f"{SVG_NS}g")
        assert group is not None
        assert group.get("data-name") == "Body"
        assert len(group.findall(f"{SVG_NS}path")) == 2
        assert len(root.findall(f"{SVG_NS}path")) == 1

    def test_hidden_elements_are_skipped(self, export_service: ExportService, populated_service: SceneService) -> None:
        """Test that hidden text is not rendered."""
        svg = export_service.to_svg(populated_service.scene)
        assert "<text" not in svg
        assert "Hello" not in svg

    def test_text(self, export_service: ExportService) -> None:
        """Test text output with escaping."""
        service = SceneService()
        service.add_text("a < b", 5, 5)
        svg = export_service.to_svg(service.scene)
        assert "a &lt; b" in svg
        assert 'dominant-baseline="text-before-edge"' in svg

    def test_view_box_padding(self, export_service: ExportService, unit_square: PathData) -> None:
        """Test that the view box adds padding around the content."""
        service = SceneService()
        service.add_path(unit_square)
        root = ElementTree.fromstring(export_service.to_svg(service.scene, padding=5))
        assert root.get("viewBox") == "-5 -5 20 20"
        assert root.find(f"{SVG_NS}path").get("d") == "M 0 0 L 10 0 L 10 10 L 0 10 Z"

    def test_empty_scene(self, export_service: ExportService) -> None:
        """Test rendering a scene without visible elements."""
        root = ElementTree.fromstring(export_service.to_svg(Scene()))
        assert root.get("viewBox") == "-20 -20 40 40"
