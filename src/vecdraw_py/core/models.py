"""Core domain models for the vecdraw-py scene graph."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar
from uuid import UUID, uuid4

from vecdraw_py.core.precision import round_value
from vecdraw_py.core.style import PathStyle
from vecdraw_py.core.types import CommandType, ElementType, ShapeType


@dataclass(frozen=True)
class Point:
    """Represents a point in canvas coordinate space.

    Attributes:
        x: X-coordinate position.
        y: Y-coordinate position.
    """

    x: float
    y: float

    def translated(self, dx: float, dy: float) -> Point:
        """Return this point shifted by ``(dx, dy)``."""
        return Point(self.x + dx, self.y + dy)

    def rounded(self) -> Point:
        """Return this point rounded to the path precision."""
        return Point(round_value(self.x), round_value(self.y))


@dataclass(frozen=True)
class MoveTo:
    """Starts a new subpath at ``position``."""

    position: Point
    type: ClassVar[CommandType] = CommandType.MOVE


@dataclass(frozen=True)
class LineTo:
    """Straight segment ending at ``position``."""

    position: Point
    type: ClassVar[CommandType] = CommandType.LINE


@dataclass(frozen=True)
class CubicBezier:
    """Cubic segment ending at ``position``.

    Attributes:
        control1: First control point (outgoing handle of the previous anchor).
        control2: Second control point (incoming handle of ``position``).
        position: End anchor of the segment.
    """

    control1: Point
    control2: Point
    position: Point
    type: ClassVar[CommandType] = CommandType.CUBIC


@dataclass(frozen=True)
class ClosePath:
    """Closes the current subpath back to its ``MoveTo``."""

    type: ClassVar[CommandType] = CommandType.CLOSE


Command = MoveTo | LineTo | CubicBezier | ClosePath
SubPath = tuple[Command, ...]


def command_points(command: Command) -> tuple[Point, ...]:
    """Return every point a command carries, controls first."""
    match command:
        case MoveTo(position=p) | LineTo(position=p):
            return (p,)
        case CubicBezier(control1=c1, control2=c2, position=p):
            return (c1, c2, p)
        case _:
            return ()


def end_point(command: Command) -> Point | None:
    """Return the anchor a command ends at, or None for ``ClosePath``."""
    if isinstance(command, ClosePath):
        return None
    return command.position


def rounded_command(command: Command) -> Command:
    """Return a command with every point rounded to the path precision."""
    match command:
        case MoveTo(position=p):
            return MoveTo(p.rounded())
        case LineTo(position=p):
            return LineTo(p.rounded())
        case CubicBezier(control1=c1, control2=c2, position=p):
            return CubicBezier(c1.rounded(), c2.rounded(), p.rounded())
        case _:
            return command


def split_at_moves(commands: tuple[Command, ...] | list[Command]) -> list[SubPath]:
    """Split a flat command list into subpaths, one per ``MoveTo``.

    Commands that appear before the first ``MoveTo`` have no start point and
    are dropped.
    """
    sub_paths: list[list[Command]] = []
    for command in commands:
        if isinstance(command, MoveTo):
            sub_paths.append([command])
        elif sub_paths:
            sub_paths[-1].append(command)
    return [tuple(sub_path) for sub_path in sub_paths]


@dataclass(frozen=True)
class PathData:
    """Styled path made of one or more subpaths.

    Attributes:
        sub_paths: Subpaths, each starting with exactly one ``MoveTo``.
        style: Visual styling for the whole path.
    """

    sub_paths: tuple[SubPath, ...] = ()
    style: PathStyle = field(default_factory=PathStyle)

    def __post_init__(self) -> None:
        """Coerce nested sequences into tuples and round every point."""
        sub_paths = tuple(tuple(rounded_command(command) for command in sub_path) for sub_path in self.sub_paths)
        object.__setattr__(self, "sub_paths", sub_paths)

    @classmethod
    def from_commands(cls, commands: tuple[Command, ...] | list[Command], style: PathStyle | None = None) -> PathData:
        """Build path data from a flat command list.

        Args:
            commands: Commands of one or more subpaths.
            style: Style to attach, defaults to ``PathStyle()``.

        Returns:
            The path data with commands split at every ``MoveTo``.
        """
        return cls(sub_paths=tuple(split_at_moves(commands)), style=style or PathStyle())

    @property
    def commands(self) -> tuple[Command, ...]:
        """All commands of every subpath, in order."""
        return tuple(command for sub_path in self.sub_paths for command in sub_path)

    @property
    def is_empty(self) -> bool:
        """Whether the path has no subpaths."""
        return not self.sub_paths


@dataclass(frozen=True)
class GroupData:
    """Payload of a group element.

    Attributes:
        name: Display name for the group.
        child_ids: Ordered IDs of the direct children.
        is_expanded: Whether the group is expanded in a layer list.
    """

    name: str = ""
    child_ids: tuple[UUID, ...] = ()
    is_expanded: bool = True

    def __post_init__(self) -> None:
        """Coerce ``child_ids`` into a tuple."""
        object.__setattr__(self, "child_ids", tuple(self.child_ids))


@dataclass(frozen=True)
class ShapeData:
    """Parametric shape that renders as a path.

    Attributes:
        shape_type: Kind of shape (rectangle, ellipse, etc.).
        x: Left edge of the shape box.
        y: Top edge of the shape box.
        width: Width of the shape box.
        height: Height of the shape box.
        style: Visual styling configuration.
    """

    shape_type: ShapeType = ShapeType.RECTANGLE
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0
    style: PathStyle = field(default_factory=PathStyle)

    def __post_init__(self) -> None:
        """Round the shape box to the path precision."""
        for name in ("x", "y", "width", "height"):
            object.__setattr__(self, name, round_value(getattr(self, name)))


@dataclass(frozen=True)
class TextData:
    """Text element anchored at its top-left corner.

    Attributes:
        content: The text content to display.
        x: X-coordinate of the text box.
        y: Y-coordinate of the text box.
        font_size: Font size in canvas units.
        font_family: Font family name.
        style: Visual styling configuration.
    """

    content: str = ""
    x: float = 0.0
    y: float = 0.0
    font_size: float = 16.0
    font_family: str = "sans-serif"
    style: PathStyle = field(default_factory=lambda: PathStyle(stroke_width=0, fill_color="#000000"))

    def __post_init__(self) -> None:
        """Round the anchor and font size to the path precision."""
        for name in ("x", "y", "font_size"):
            object.__setattr__(self, name, round_value(getattr(self, name)))


ElementData = PathData | GroupData | ShapeData | TextData


@dataclass(frozen=True)
class CanvasElement:
    """A node of the scene graph.

    Hidden and locked state is kept on the scene, not on the element.

    Attributes:
        data: Variant payload (path, group, shape or text).
        id: Unique identifier for the element.
        z_index: Position in the global paint order (higher is on top).
        parent_id: ID of the parent group, or None at the root.
    """

    data: ElementData
    id: UUID = field(default_factory=uuid4)
    z_index: int = 0
    parent_id: UUID | None = None

    @property
    def element_type(self) -> ElementType:
        """Discriminator derived from the payload."""
        match self.data:
            case PathData():
                return ElementType.PATH
            case GroupData():
                return ElementType.GROUP
            case ShapeData():
                return ElementType.SHAPE
            case TextData():
                return ElementType.TEXT
        msg = f"Unknown element payload {type(self.data).__name__}"
        raise TypeError(msg)

    @property
    def is_group(self) -> bool:
        """Whether the element is a group."""
        return isinstance(self.data, GroupData)

    @property
    def child_ids(self) -> tuple[UUID, ...]:
        """Direct children for groups, empty otherwise."""
        if isinstance(self.data, GroupData):
            return self.data.child_ids
        return ()
