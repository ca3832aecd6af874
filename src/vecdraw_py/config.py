"""Engine configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass

IMPORT_MARGIN = 160.0
IMPORT_MAX_ROW_WIDTH = 12288.0


def _env_flag(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class EngineConfig:
    """Configuration for a vecdraw-py scene service.

    Attributes:
        default_stroke_color: Stroke color for new paths and import frames.
        duplicate_offset: Offset applied to duplicated elements.
        import_resize: Resize imported artwork to ``import_resize_width`` x
            ``import_resize_height``.
        import_resize_width: Target width when resizing imports.
        import_resize_height: Target height when resizing imports.
        import_apply_union: Merge the paths of each imported file into one.
        import_add_frame: Add a frame rectangle behind each imported file.
        import_margin: Gap between imported files in the placement grid.
        import_max_row_width: Row width at which placement wraps.
        max_history: Undo depth, or None for unbounded history.
        debug: Enable debug level logging.
        json_logs: Output logs as JSON.

    Example:
        >>> config = EngineConfig(import_resize=True, import_resize_width=64, import_resize_height=64)
    """

    default_stroke_color: str = "#000000"
    duplicate_offset: float = 10.0
    import_resize: bool = False
    import_resize_width: float = 64.0
    import_resize_height: float = 64.0
    import_apply_union: bool = False
    import_add_frame: bool = False
    import_margin: float = IMPORT_MARGIN
    import_max_row_width: float = IMPORT_MAX_ROW_WIDTH
    max_history: int | None = None
    debug: bool = False
    json_logs: bool = False

    @classmethod
    def from_env(cls) -> EngineConfig:
        """Build a configuration from ``VECDRAW_*`` environment variables."""
        max_history = os.environ.get("VECDRAW_MAX_HISTORY")
        return cls(
            default_stroke_color=os.environ.get("VECDRAW_STROKE_COLOR", "#000000"),
            duplicate_offset=float(os.environ.get("VECDRAW_DUPLICATE_OFFSET", "10")),
            import_resize=_env_flag("VECDRAW_IMPORT_RESIZE", default=False),
            import_resize_width=float(os.environ.get("VECDRAW_IMPORT_WIDTH", "64")),
            import_resize_height=float(os.environ.get("VECDRAW_IMPORT_HEIGHT", "64")),
            import_apply_union=_env_flag("VECDRAW_IMPORT_UNION", default=False),
            import_add_frame=_env_flag("VECDRAW_IMPORT_FRAME", default=False),
            max_history=int(max_history) if max_history else None,
            debug=_env_flag("VECDRAW_DEBUG", default=False),
            json_logs=_env_flag("VECDRAW_JSON_LOGS", default=False),
        )
