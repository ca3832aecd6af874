"""Business logic services for vecdraw-py."""

from vecdraw_py.services.export import ExportService
from vecdraw_py.services.scene import SceneService

__all__ = ["ExportService", "SceneService"]
