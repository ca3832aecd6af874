"""Tests for the command line interface."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from click.testing import CliRunner
from structlog.testing import capture_logs

from vecdraw_py.cli import main
from vecdraw_py.cli.main import cli
from vecdraw_py.core.models import PathData
from vecdraw_py.services.export import ExportService

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

    from vecdraw_py.core.scene import Scene

SQUARE_SVG = '<svg xmlns="http://www.w3.org/2000/svg" width="100" height="100"><rect width="100" height="100"/></svg>'
PAIR_SVG = (
    '<svg xmlns="http://www.w3.org/2000/svg" width="50" height="50">'
    '<g id="pair"><rect width="20" height="20"/><rect x="30" width="20" height="20"/></g></svg>'
)


def _load(path: Path) -> Scene:
    return ExportService().from_json(path.read_text(encoding="utf-8"))


# Fixtures


@pytest.fixture
def runner() -> CliRunner:
    """Create a CLI runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def logging_calls(monkeypatch: pytest.MonkeyPatch) -> Iterator[list[dict[str, bool]]]:
    """Record logging setup and keep log lines out of command output."""
    calls: list[dict[str, bool]] = []
    monkeypatch.setattr(main, "configure_logging", lambda **kwargs: calls.append(kwargs))
    with capture_logs():
        yield calls


@pytest.fixture
def artwork_files(tmp_path: Path) -> list[Path]:
    """Write two SVG files to disk."""
    square = tmp_path / "square.svg"
    square.write_text(SQUARE_SVG)
    pair = tmp_path / "pair.svg"
    pair.write_text(PAIR_SVG)
    return [square, pair]


@pytest.fixture
def document(runner: CliRunner, tmp_path: Path, artwork_files: list[Path]) -> Path:
    """Import the artwork files into a scene document."""
    output = tmp_path / "scene.json"
    result = runner.invoke(cli, ["import", *map(str, artwork_files), "-o", str(output)])
    assert result.exit_code == 0, result.output
    return output


class TestImportCommand:
    """Tests for ``vecdraw import``."""

    def test_import(self, document: Path) -> None:
        """Test that files are placed and groups kept."""
        scene = _load(document)
        paths = [e for e in scene.ordered() if isinstance(e.data, PathData)]
        groups = [e for e in scene.ordered() if e.is_group]
        assert len(paths) == 3
        assert len(groups) == 1
        assert groups[0].data.name == "pair"

    def test_reports_summary(self, runner: CliRunner, tmp_path: Path, artwork_files: list[Path]) -> None:
        """Test the success message."""
        output = tmp_path / "out.json"
        result = runner.invoke(cli, ["import", str(artwork_files[0]), "-o", str(output)])
        assert result.exit_code == 0
        assert "Imported 1 path(s)" in result.output

    def test_frame_and_resize(self, runner: CliRunner, tmp_path: Path, artwork_files: list[Path]) -> None:
        """Test the frame and resize options."""
        output = tmp_path / "framed.json"
        args = ["import", str(artwork_files[0]), "-o", str(output), "--frame", "--resize", "64", "64"]
        assert runner.invoke(cli, args).exit_code == 0
        scene = _load(output)
        assert len(scene) == 2
        frame = scene.ordered()[0]
        assert frame.data.style.fill_color == "none"

    def test_union(self, runner: CliRunner, tmp_path: Path, artwork_files: list[Path]) -> None:
        """Test that --union merges each file into one path."""
        output = tmp_path / "merged.json"
        assert runner.invoke(cli, ["import", str(artwork_files[1]), "-o", str(output), "--union"]).exit_code == 0
        scene = _load(output)
        assert len(scene) == 1

    def test_append(self, runner: CliRunner, document: Path, artwork_files: list[Path]) -> None:
        """Test adding to an existing document."""
        before = len(_load(document))
        result = runner.invoke(cli, ["import", str(artwork_files[0]), "-o", str(document), "--append"])
        assert result.exit_code == 0
        scene = _load(document)
        assert len(scene) == before + 1
        assert scene.ordered()[-1].z_index == before

    def test_nothing_imported(self, runner: CliRunner, tmp_path: Path) -> None:
        """Test that unreadable input fails with warnings."""
        output = tmp_path / "none.json"
        result = runner.invoke(cli, ["import", str(tmp_path / "missing.svg"), "-o", str(output)])
        assert result.exit_code == 1
        assert "missing.svg" in result.output
        assert not output.exists()

    def test_logging_flags(
        self, runner: CliRunner, document: Path, logging_calls: list[dict[str, bool]], monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test that --debug and environment flags reach the logging setup."""
        monkeypatch.setenv("VECDRAW_JSON_LOGS", "1")
        logging_calls.clear()
        runner.invoke(cli, ["--debug", "info", str(document)])
        assert logging_calls == [{"debug": True, "json_logs": True}]


class TestInspectionCommands:
    """Tests for ``info``, ``export-svg`` and ``path``."""

    def test_info(self, runner: CliRunner, document: Path) -> None:
        """Test listing the elements of a document."""
        result = runner.invoke(cli, ["info", str(document)])
        assert result.exit_code == 0
        assert "Untitled" in result.output

    def test_export_svg_to_file(self, runner: CliRunner, document: Path, tmp_path: Path) -> None:
        """Test writing SVG output to a file."""
        output = tmp_path / "scene.svg"
        result = runner.invoke(cli, ["export-svg", str(document), "-o", str(output), "-p", "0"])
        assert result.exit_code == 0
        svg = output.read_text()
        assert svg.count("<path") == 3
        assert 'data-name="pair"' in svg

    def test_export_svg_to_stdout(self, runner: CliRunner, document: Path) -> None:
        """Test printing SVG output."""
        result = runner.invoke(cli, ["export-svg", str(document)])
        assert result.exit_code == 0
        assert "<svg" in result.output

    def test_path_by_prefix(self, runner: CliRunner, document: Path) -> None:
        """Test printing the path string of an element by ID prefix."""
        element = _load(document).ordered()[0]
        result = runner.invoke(cli, ["path", str(document), str(element.id)[:8]])
        assert result.exit_code == 0
        assert result.output.startswith("M ")
        assert result.output.strip().endswith("Z")

    def test_path_of_group(self, runner: CliRunner, document: Path) -> None:
        """Test that a group prints the paths of its children."""
        group = next(e for e in _load(document).ordered() if e.is_group)
        result = runner.invoke(cli, ["path", str(document), str(group.id)])
        assert result.exit_code == 0
        assert result.output.count("M ") == 2

    def test_unknown_element(self, runner: CliRunner, document: Path) -> None:
        """Test that an unmatched prefix fails."""
        result = runner.invoke(cli, ["path", str(document), "zzzz"])
        assert result.exit_code == 1
        assert "no element" in result.output

    def test_invalid_document(self, runner: CliRunner, tmp_path: Path) -> None:
        """Test that unreadable documents fail cleanly."""
        broken = tmp_path / "broken.json"
        broken.write_text("{}")
        result = runner.invoke(cli, ["info", str(broken)])
        assert result.exit_code == 1
        assert "Error" in result.output
