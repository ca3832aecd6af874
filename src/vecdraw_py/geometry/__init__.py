"""Path geometry: measurement, transforms, simplification and reversal."""

from vecdraw_py.geometry.bounds import Bounds, measure_bounds, measure_path_bounds, union_bounds
from vecdraw_py.geometry.commands import (
    EditablePoint,
    SubpathSlice,
    extract_editable_points,
    extract_subpaths,
    normalize_commands,
    reverse_subpath,
    update_point,
)
from vecdraw_py.geometry.simplify import simplify
from vecdraw_py.geometry.transform import (
    TransformOptions,
    scale_stroke_width,
    transform_commands,
    transform_path_data,
    translate_commands,
    translate_path_data,
)

__all__ = [
    "Bounds",
    "EditablePoint",
    "SubpathSlice",
    "TransformOptions",
    "extract_editable_points",
    "extract_subpaths",
    "measure_bounds",
    "measure_path_bounds",
    "normalize_commands",
    "reverse_subpath",
    "scale_stroke_width",
    "simplify",
    "transform_commands",
    "transform_path_data",
    "translate_commands",
    "translate_path_data",
    "union_bounds",
    "update_point",
]
