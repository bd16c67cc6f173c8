# plugins/core_projects/models.py

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from plugins.core_storage.contracts import DirectoryHandle, FileHandle

# --- 目录约定 (由本工具校验，不由本工具创建) ---
PRELOADER_PATH = "src/scenes/preloader.js"
ASSETS_ROOT = "public/assets"
MEDIA_ROOT = "media"


@dataclass(frozen=True)
class ProjectHandles:
    """An opened, validated project: its root and the three parts the scanner needs."""
    root_path: str
    root: DirectoryHandle
    assets_dir: DirectoryHandle
    media_dir: DirectoryHandle
    preloader: FileHandle

    @property
    def name(self) -> str:
        return self.root.name


class ProjectEntry(BaseModel):
    project_id: UUID
    root: str
    registered_at: datetime
    expires_at: datetime


class RegisterProjectRequest(BaseModel):
    path: str = Field(..., min_length=1, description="Absolute path of the playable-ad project root.")
