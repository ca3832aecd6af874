"""Boolean composition of paths."""

from vecdraw_py.composition.boolean import exclude, intersect, subtract, union

__all__ = ["exclude", "intersect", "subtract", "union"]
