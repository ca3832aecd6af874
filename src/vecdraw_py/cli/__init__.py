"""Command line interface for vecdraw-py."""

from vecdraw_py.cli.main import cli

__all__ = ["cli"]
