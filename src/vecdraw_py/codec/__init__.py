"""Text codecs for path data."""

from vecdraw_py.codec.path_string import (
    commands_to_string,
    parse_path_string,
    path_data_from_string,
    path_data_to_string,
)

__all__ = ["commands_to_string", "parse_path_string", "path_data_from_string", "path_data_to_string"]
