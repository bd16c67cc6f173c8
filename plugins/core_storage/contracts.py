# plugins/core_storage/contracts.py

from __future__ import annotations
from abc import ABC, abstractmethod
from enum import Enum
from typing import AsyncContextManager, List, Union

from backend.core.errors import StorageIOError, ValidationError


class EntryKind(str, Enum):
    FILE = "file"
    DIRECTORY = "directory"


def split_relative_path(relative_path: str) -> List[str]:
    """
    Splits a '/' or '\\' separated relative path into segments.
    Empty and '.' segments are dropped; '..' is rejected so a handle can
    never reach outside the directory it was resolved from.
    """
    segments = [s for s in relative_path.replace('\\', '/').split('/') if s and s != '.']
    if any(s == '..' for s in segments):
        raise ValidationError(f"Path '{relative_path}' may not contain '..' segments.")
    return segments


class FileHandle(ABC):
    """A capability for one file. Opening returns a scoped async context manager."""
    kind = EntryKind.FILE

    @property
    @abstractmethod
    def name(self) -> str: raise NotImplementedError

    @abstractmethod
    def open_read(self) -> AsyncContextManager: raise NotImplementedError

    @abstractmethod
    def open_write(self) -> AsyncContextManager:
        """Creates the file if missing, truncates it otherwise."""
        raise NotImplementedError

    async def read_bytes(self) -> bytes:
        async with self.open_read() as f:
            return await f.read()

    async def read_text(self, encoding: str = "utf-8") -> str:
        data = await self.read_bytes()
        try:
            return data.decode(encoding)
        except UnicodeDecodeError as e:
            raise StorageIOError(f"File '{self.name}' is not valid {encoding} text: {e.reason}.")

    async def write_bytes(self, data: bytes) -> None:
        async with self.open_write() as f:
            await f.write(data)

    async def write_text(self, text: str, encoding: str = "utf-8") -> None:
        try:
            data = text.encode(encoding)
        except UnicodeEncodeError as e:
            raise StorageIOError(f"Text for '{self.name}' cannot be encoded as {encoding}: {e.reason}.")
        await self.write_bytes(data)


class DirectoryHandle(ABC):
    """A capability for one directory: enumerate, open children, remove children."""
    kind = EntryKind.DIRECTORY

    @property
    @abstractmethod
    def name(self) -> str: raise NotImplementedError

    @abstractmethod
    async def entries(self) -> List[Union[FileHandle, DirectoryHandle]]: raise NotImplementedError

    @abstractmethod
    async def get_directory(self, name: str, create: bool = False) -> DirectoryHandle: raise NotImplementedError

    @abstractmethod
    async def get_file(self, name: str, create: bool = False) -> FileHandle: raise NotImplementedError

    @abstractmethod
    async def remove_entry(self, name: str, recursive: bool = False) -> None: raise NotImplementedError

    async def resolve_directory(self, relative_path: str, create: bool = False) -> DirectoryHandle:
        current: DirectoryHandle = self
        for segment in split_relative_path(relative_path):
            current = await current.get_directory(segment, create=create)
        return current

    async def resolve_file(self, relative_path: str, create: bool = False) -> FileHandle:
        segments = split_relative_path(relative_path)
        if not segments:
            raise ValidationError("A file path must not be empty.")
        parent = await self.resolve_directory('/'.join(segments[:-1]), create=create)
        return await parent.get_file(segments[-1], create=create)


class FileSystemInterface(ABC):
    @abstractmethod
    async def open_directory(self, path: str) -> DirectoryHandle: raise NotImplementedError
