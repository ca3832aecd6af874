"""Command line interface for vecdraw-py.

Imports SVG artwork into scene documents and inspects or exports them.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import rich_click as click
from rich.console import Console
from rich.table import Table

from vecdraw_py.config import EngineConfig
from vecdraw_py.core.logging import configure_logging
from vecdraw_py.core.models import GroupData, PathData, ShapeData, TextData
from vecdraw_py.exceptions import DocumentFormatError
from vecdraw_py.services.export import ExportService
from vecdraw_py.services.scene import SceneService

if TYPE_CHECKING:
    from uuid import UUID

    from vecdraw_py.core.models import CanvasElement
    from vecdraw_py.core.scene import Scene

console = Console()


def load_document(path: Path) -> Scene:
    """Read a scene document, exiting with an error message when it is invalid."""
    try:
        return ExportService().from_json(path.read_text(encoding="utf-8"))
    except (OSError, DocumentFormatError) as e:
        console.print(f"[red]Error: cannot load {path}: {e}[/red]")
        raise SystemExit(1) from e


def resolve_element(scene: Scene, prefix: str) -> UUID:
    """Find the element whose ID starts with ``prefix``."""
    matches = [element_id for element_id in scene.elements if str(element_id).startswith(prefix.lower())]
    if len(matches) != 1:
        reason = "no element" if not matches else f"{len(matches)} elements"
        console.print(f"[red]Error: {reason} matching {prefix!r}[/red]")
        raise SystemExit(1)
    return matches[0]


def describe(element: CanvasElement) -> str:
    """Short human-readable summary of an element payload."""
    match element.data:
        case PathData(sub_paths=sub_paths):
            commands = sum(len(sub_path) for sub_path in sub_paths)
            return f"{len(sub_paths)} subpath(s), {commands} command(s)"
        case GroupData(name=name, child_ids=child_ids):
            return f"{name} ({len(child_ids)} children)"
        case ShapeData(shape_type=shape_type, width=width, height=height):
            return f"{shape_type} {width:g}x{height:g}"
        case TextData(content=content):
            return repr(content[:24])
    return "-"


@click.group(name="vecdraw", help="Vector path import, inspection and export.")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--json-logs", is_flag=True, help="Output logs as JSON")
@click.pass_context
def cli(ctx: click.Context, debug: bool, json_logs: bool) -> None:
    """Vector path import, inspection and export."""
    config = EngineConfig.from_env()
    config.debug = config.debug or debug
    config.json_logs = config.json_logs or json_logs
    configure_logging(debug=config.debug, json_logs=config.json_logs)
    ctx.obj = config


@cli.command(name="import", help="Import SVG files into a scene document.")
@click.argument("files", nargs=-1, required=True, type=click.Path(path_type=Path))
@click.option("--output", "-o", required=True, type=click.Path(path_type=Path), help="Scene document to write")
@click.option("--resize", nargs=2, type=float, default=None, help="Scale each file to WIDTH HEIGHT")
@click.option("--union", "apply_union", is_flag=True, help="Merge the paths of each file into one")
@click.option("--frame", "add_frame", is_flag=True, help="Add a frame rectangle behind each file")
@click.option("--append", is_flag=True, help="Add to the existing document instead of replacing it")
@click.pass_obj
def import_command(
    config: EngineConfig,
    files: tuple[Path, ...],
    output: Path,
    resize: tuple[float, float] | None,
    apply_union: bool,
    add_frame: bool,
    append: bool,
) -> None:
    """Import SVG files into a scene document."""
    scene = load_document(output) if append and output.exists() else None
    service = SceneService(scene, config)
    options = service.import_options()
    if resize is not None:
        options.resize = True
        options.resize_width, options.resize_height = resize
    options.apply_union = options.apply_union or apply_union
    options.add_frame = options.add_frame or add_frame

    result = service.import_files(files, options=options)
    for warning in result.warnings:
        console.print(f"[yellow]Warning: {warning}[/yellow]")
    if not result.elements:
        console.print("[red]Error: nothing was imported[/red]")
        raise SystemExit(1)

    output.write_text(ExportService().to_json(service.scene), encoding="utf-8")
    console.print(
        f"[green]Imported {result.imported_path_count} path(s) as {len(result.created_ids)} element(s) "
        f"into {output}[/green]"
    )


@cli.command(name="info", help="List the elements of a scene document.")
@click.argument("document", type=click.Path(path_type=Path))
def info_command(document: Path) -> None:
    """List the elements of a scene document."""
    scene = load_document(document)
    service = SceneService(scene)

    table = Table(title=f"{scene.name} ({len(scene)} elements)")
    table.add_column("ID", style="dim")
    table.add_column("Type", style="cyan")
    table.add_column("Z", style="magenta", justify="right")
    table.add_column("Parent", style="dim")
    table.add_column("Details", style="green")
    table.add_column("Bounds", style="blue")
    table.add_column("State", style="yellow")

    for element in scene.ordered():
        bounds = service.element_bounds(element.id)
        state: list[str] = []
        if scene.is_hidden(element.id):
            state.append("hidden")
        if scene.is_locked(element.id):
            state.append("locked")
        table.add_row(
            str(element.id)[:8],
            str(element.element_type),
            str(element.z_index),
            str(element.parent_id)[:8] if element.parent_id else "-",
            describe(element),
            f"{bounds.min_x:g},{bounds.min_y:g} {bounds.width:g}x{bounds.height:g}" if bounds else "-",
            ", ".join(state) or "-",
        )

    console.print(table)


@cli.command(name="export-svg", help="Render the visible elements of a scene document as SVG.")
@click.argument("document", type=click.Path(path_type=Path))
@click.option("--output", "-o", type=click.Path(path_type=Path), default=None, help="SVG file to write")
@click.option("--padding", "-p", default=20.0, help="Space around the content")
def export_svg_command(document: Path, output: Path | None, padding: float) -> None:
    """Render the visible elements of a scene document as SVG."""
    svg = ExportService().to_svg(load_document(document), padding=padding)
    if output is None:
        click.echo(svg)
        return
    output.write_text(svg, encoding="utf-8")
    console.print(f"[green]Wrote {output}[/green]")


@cli.command(name="path", help="Print the path string of an element.")
@click.argument("document", type=click.Path(path_type=Path))
@click.argument("element_id")
def path_command(document: Path, element_id: str) -> None:
    """Print the path string of an element."""
    scene = load_document(document)
    text = SceneService(scene).path_string([resolve_element(scene, element_id)])
    if text is None:
        console.print("[red]Error: element has no path geometry[/red]")
        raise SystemExit(1)
    click.echo(text)


if __name__ == "__main__":
    cli()
