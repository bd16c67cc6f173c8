# plugins/core_storage/locks.py
import asyncio
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Dict, Iterable, Union

logger = logging.getLogger(__name__)


class PathLocks:
    """
    One asyncio.Lock per normalized path. Writers of the same file are
    serialized; writers of different files never wait on each other.
    A path's lock is dropped once nobody holds or awaits it.
    """
    def __init__(self):
        self._locks: Dict[str, asyncio.Lock] = {}
        self._users: Dict[str, int] = {}

    @staticmethod
    def _key(path: Union[str, Path]) -> str:
        return str(Path(path).expanduser().resolve(strict=False))

    @asynccontextmanager
    async def hold(self, *paths: Union[str, Path]):
        """
        Acquires the locks of all given paths. Keys are acquired in sorted
        order so two callers locking the same pair cannot deadlock.
        """
        keys = sorted({self._key(p) for p in paths})
        for key in keys:
            self._locks.setdefault(key, asyncio.Lock())
            self._users[key] = self._users.get(key, 0) + 1

        acquired = []
        try:
            for key in keys:
                await self._locks[key].acquire()
                acquired.append(key)
            yield
        finally:
            for key in reversed(acquired):
                self._locks[key].release()
            for key in keys:
                self._users[key] -= 1
                if self._users[key] == 0:
                    del self._users[key]
                    del self._locks[key]

    def locked_paths(self) -> Iterable[str]:
        return [key for key, lock in self._locks.items() if lock.locked()]

    def __len__(self) -> int:
        return len(self._locks)
