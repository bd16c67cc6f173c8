# plugins/core_projects/service.py
import logging
from uuid import UUID

from backend.core.errors import NotFoundError
from plugins.core_storage.contracts import FileSystemInterface
from .models import ProjectEntry, ProjectHandles, PRELOADER_PATH, ASSETS_ROOT, MEDIA_ROOT
from .registry import ProjectRegistry

logger = logging.getLogger(__name__)

INVALID_PROJECT_MESSAGE = (
    "Selected folder is not a valid Phaser ad project. "
    "Missing required entry '{missing}'."
)


class ProjectService:
    def __init__(self, file_system: FileSystemInterface, registry: ProjectRegistry):
        self._fs = file_system
        self._registry = registry

    @property
    def registry(self) -> ProjectRegistry:
        return self._registry

    async def open_project(self, root_path: str) -> ProjectHandles:
        """Opens a project root and checks the layout the scanner relies on."""
        root = await self._fs.open_directory(root_path)

        async def _require(kind: str, relative: str):
            try:
                if kind == "file":
                    return await root.resolve_file(relative)
                return await root.resolve_directory(relative)
            except NotFoundError as e:
                raise NotFoundError(INVALID_PROJECT_MESSAGE.format(missing=relative)) from e

        preloader = await _require("file", PRELOADER_PATH)
        media_dir = await _require("directory", MEDIA_ROOT)
        assets_dir = await _require("directory", ASSETS_ROOT)

        return ProjectHandles(
            root_path=str(root_path),
            root=root,
            assets_dir=assets_dir,
            media_dir=media_dir,
            preloader=preloader,
        )

    async def register(self, root_path: str) -> ProjectEntry:
        project = await self.open_project(root_path)
        return self._registry.register(project.root_path)

    async def open_registered(self, project_id: UUID) -> ProjectHandles:
        entry = self._registry.get(project_id)
        return await self.open_project(entry.root)
