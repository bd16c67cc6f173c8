# plugins/core_config_editor/service.py
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional
from uuid import UUID

from backend.core.errors import NotFoundError
from plugins.core_projects.models import ProjectHandles
from plugins.core_projects.service import ProjectService
from plugins.core_storage.contracts import FileHandle
from plugins.core_storage.locks import PathLocks
from .document import ConfigDocument, DEFAULT_HISTORY_LIMIT
from .models import ConfigSnapshot

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "src/config.js"


@dataclass
class ConfigSession:
    project_id: UUID
    root_path: str
    relative_path: str
    handle: FileHandle
    document: ConfigDocument

    @property
    def lock_path(self) -> str:
        return f"{self.root_path}/{self.relative_path}"


class ConfigEditorService:
    """
    Holds the one config document currently open for editing and performs
    one-shot rewrites for other plugins (the build flow sets the ad network
    this way).
    """

    def __init__(
        self,
        project_service: ProjectService,
        path_locks: PathLocks,
        history_limit: int = DEFAULT_HISTORY_LIMIT,
        default_config_file: str = DEFAULT_CONFIG_FILE,
    ):
        self._projects = project_service
        self._locks = path_locks
        self._history_limit = history_limit
        self._default_config_file = default_config_file
        self._session: Optional[ConfigSession] = None

    # --- session ---

    async def _load(self, project: ProjectHandles, relative_path: Optional[str]):
        relative_path = (relative_path or self._default_config_file).replace("\\", "/").strip("/")
        handle = await project.root.resolve_file(relative_path)
        document = ConfigDocument(self._history_limit)
        document.load(await handle.read_text())
        return relative_path, handle, document

    async def open(self, project_id: UUID, relative_path: Optional[str] = None) -> ConfigSnapshot:
        """Loads a config module. A failed load leaves the previous session open."""
        project = await self._projects.open_registered(project_id)
        relative_path, handle, document = await self._load(project, relative_path)
        self._session = ConfigSession(
            project_id=project_id,
            root_path=project.root_path,
            relative_path=relative_path,
            handle=handle,
            document=document,
        )
        logger.info(f"Opened config '{relative_path}' of project {project_id}.")
        return self.snapshot()

    @property
    def session(self) -> ConfigSession:
        if self._session is None:
            raise NotFoundError("No config document is open.")
        return self._session

    def snapshot(self) -> ConfigSnapshot:
        session = self.session
        document = session.document
        return ConfigSnapshot(
            project_id=session.project_id,
            path=session.relative_path,
            export_identifier=document.export_identifier,
            export_kind=document.export_kind,
            state=document.state,
            value=document.value,
            can_undo=document.can_undo,
            can_redo=document.can_redo,
            cursor=document.cursor,
            history_length=document.history_length,
        )

    def set_value(self, path: str, value: Any) -> ConfigSnapshot:
        self.session.document.set_path(path, value)
        return self.snapshot()

    def undo(self) -> ConfigSnapshot:
        self.session.document.undo()
        return self.snapshot()

    def redo(self) -> ConfigSnapshot:
        self.session.document.redo()
        return self.snapshot()

    async def save(self) -> ConfigSnapshot:
        session = self.session
        rendered = session.document.render()
        async with self._locks.hold(session.lock_path):
            await session.handle.write_text(rendered)
        session.document.mark_saved()
        logger.info(f"Saved config '{session.relative_path}' ({len(rendered)} chars).")
        return self.snapshot()

    def close(self) -> None:
        if self._session is not None:
            logger.info(f"Closed config '{self._session.relative_path}'.")
        self._session = None

    # --- one-shot access ---

    async def read(self, project: ProjectHandles, relative_path: Optional[str] = None) -> ConfigDocument:
        _, _, document = await self._load(project, relative_path)
        return document

    async def rewrite(
        self,
        project: ProjectHandles,
        updates: Dict[str, Any],
        relative_path: Optional[str] = None,
    ) -> ConfigDocument:
        """Loads, applies every ``path -> value`` update and saves, all under the file lock."""
        relative_path = (relative_path or self._default_config_file).replace("\\", "/").strip("/")
        async with self._locks.hold(f"{project.root_path}/{relative_path}"):
            relative_path, handle, document = await self._load(project, relative_path)
            for path, value in updates.items():
                document.set_path(path, value)
            await handle.write_text(document.render())
            document.mark_saved()

        session = self._session
        if session is not None and session.root_path == project.root_path and session.relative_path == relative_path:
            logger.warning(
                f"Config '{relative_path}' was rewritten while open in the editor; "
                f"the editor still shows the previous content."
            )
        logger.info(f"Rewrote config '{relative_path}' with keys {list(updates)}.")
        return document
