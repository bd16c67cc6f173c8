# plugins/core_storage/service.py

import os
import shutil
import asyncio
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import List, Union

import aiofiles

from backend.core.errors import NotFoundError, StorageIOError
from .contracts import DirectoryHandle, FileHandle, FileSystemInterface

logger = logging.getLogger(__name__)


class LocalFileHandle(FileHandle):
    def __init__(self, path: Path):
        self._path = path

    def __repr__(self) -> str:
        return f"LocalFileHandle({str(self._path)!r})"

    @property
    def name(self) -> str:
        return self._path.name

    @property
    def path(self) -> Path:
        return self._path

    @asynccontextmanager
    async def open_read(self):
        try:
            f = await aiofiles.open(self._path, mode='rb')
        except FileNotFoundError as e:
            raise NotFoundError(f"File not found: {self._path}") from e
        except OSError as e:
            raise StorageIOError(f"Failed to open '{self._path}' for reading: {e}") from e
        try:
            yield f
        finally:
            await f.close()

    @asynccontextmanager
    async def open_write(self):
        try:
            f = await aiofiles.open(self._path, mode='wb')
        except OSError as e:
            raise StorageIOError(f"Failed to open '{self._path}' for writing: {e}") from e
        try:
            yield f
        except OSError as e:
            raise StorageIOError(f"Failed to write '{self._path}': {e}") from e
        finally:
            await f.close()


class LocalDirectoryHandle(DirectoryHandle):
    def __init__(self, path: Path):
        self._path = path

    def __repr__(self) -> str:
        return f"LocalDirectoryHandle({str(self._path)!r})"

    @property
    def name(self) -> str:
        return self._path.name

    @property
    def path(self) -> Path:
        return self._path

    async def entries(self) -> List[Union[FileHandle, DirectoryHandle]]:
        def _sync_list():
            result = []
            with os.scandir(self._path) as it:
                for entry in it:
                    if entry.is_dir():
                        result.append(LocalDirectoryHandle(Path(entry.path)))
                    elif entry.is_file():
                        result.append(LocalFileHandle(Path(entry.path)))
            return result

        try:
            return await asyncio.to_thread(_sync_list)
        except OSError as e:
            raise StorageIOError(f"Failed to list directory '{self._path}': {e}") from e

    async def get_directory(self, name: str, create: bool = False) -> DirectoryHandle:
        target = self._path / name
        if target.is_dir():
            return LocalDirectoryHandle(target)
        if target.exists():
            raise StorageIOError(f"'{target}' exists but is not a directory.")
        if not create:
            raise NotFoundError(f"Directory not found: {target}")
        try:
            await asyncio.to_thread(target.mkdir, parents=True, exist_ok=True)
        except OSError as e:
            raise StorageIOError(f"Failed to create directory '{target}': {e}") from e
        logger.debug(f"Created directory {target}")
        return LocalDirectoryHandle(target)

    async def get_file(self, name: str, create: bool = False) -> FileHandle:
        target = self._path / name
        if target.is_dir():
            raise StorageIOError(f"'{target}' is a directory, not a file.")
        if not target.exists() and not create:
            raise NotFoundError(f"File not found: {target}")
        # with create=True the file itself appears on the first write
        return LocalFileHandle(target)

    async def remove_entry(self, name: str, recursive: bool = False) -> None:
        target = self._path / name
        if not target.exists():
            raise NotFoundError(f"Nothing to remove at {target}")
        try:
            if target.is_dir():
                if recursive:
                    await asyncio.to_thread(shutil.rmtree, target)
                else:
                    await asyncio.to_thread(target.rmdir)
            else:
                await asyncio.to_thread(os.remove, target)
        except OSError as e:
            raise StorageIOError(f"Failed to remove '{target}': {e}") from e
        logger.debug(f"Removed {target}")


class LocalFileSystem(FileSystemInterface):
    """Hands out directory capabilities rooted anywhere on the local disk."""

    async def open_directory(self, path: str) -> DirectoryHandle:
        root = Path(path).expanduser()
        if not root.exists():
            raise NotFoundError(f"Directory not found: {root}")
        if not root.is_dir():
            raise StorageIOError(f"'{root}' is not a directory.")
        if not os.access(root, os.R_OK | os.X_OK):
            raise StorageIOError(f"Directory '{root}' is not accessible.")
        return LocalDirectoryHandle(root.resolve())
