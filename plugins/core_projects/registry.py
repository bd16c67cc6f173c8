# plugins/core_projects/registry.py
import asyncio
import logging
import time
from datetime import datetime, timezone
from typing import Callable, Dict, Optional, Tuple
from uuid import UUID, uuid4

from backend.core.errors import NotFoundError
from .models import ProjectEntry

logger = logging.getLogger(__name__)


class ProjectRegistry:
    """
    Process-wide mapping of generated project ids to project roots.

    Every entry expires ``ttl_seconds`` after its last use. Expired entries
    are dropped lazily on lookup and periodically by a sweeper task that
    lives between ``start()`` and ``stop()``.
    """
    def __init__(
        self,
        ttl_seconds: float = 3600.0,
        sweep_interval: float = 60.0,
        clock: Callable[[], float] = time.time,
    ):
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive.")
        self._ttl = ttl_seconds
        self._sweep_interval = sweep_interval
        self._clock = clock
        # id -> (root, registered_at, expires_at)
        self._entries: Dict[UUID, Tuple[str, float, float]] = {}
        self._sweeper: Optional[asyncio.Task] = None

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def is_running(self) -> bool:
        return self._sweeper is not None and not self._sweeper.done()

    def _to_entry(self, project_id: UUID) -> ProjectEntry:
        root, registered_at, expires_at = self._entries[project_id]
        return ProjectEntry(
            project_id=project_id,
            root=root,
            registered_at=datetime.fromtimestamp(registered_at, timezone.utc),
            expires_at=datetime.fromtimestamp(expires_at, timezone.utc),
        )

    def register(self, root: str) -> ProjectEntry:
        now = self._clock()
        project_id = uuid4()
        self._entries[project_id] = (root, now, now + self._ttl)
        logger.info(f"Registered project {project_id} -> {root}")
        return self._to_entry(project_id)

    def get(self, project_id: UUID) -> ProjectEntry:
        """Looks up a project and extends its lifetime by one TTL."""
        record = self._entries.get(project_id)
        now = self._clock()
        if record is None or record[2] <= now:
            self._entries.pop(project_id, None)
            raise NotFoundError(f"Project ID not found: {project_id}")
        root, registered_at, _ = record
        self._entries[project_id] = (root, registered_at, now + self._ttl)
        return self._to_entry(project_id)

    def remove(self, project_id: UUID) -> None:
        if self._entries.pop(project_id, None) is not None:
            logger.info(f"Removed project {project_id}")

    def evict_expired(self) -> int:
        now = self._clock()
        expired = [pid for pid, (_, _, expires_at) in self._entries.items() if expires_at <= now]
        for pid in expired:
            del self._entries[pid]
        if expired:
            logger.debug(f"Evicted {len(expired)} expired project(s).")
        return len(expired)

    async def _sweep_forever(self):
        while True:
            await asyncio.sleep(self._sweep_interval)
            self.evict_expired()

    def start(self) -> None:
        if self.is_running:
            logger.warning("ProjectRegistry sweeper is already running.")
            return
        self._sweeper = asyncio.create_task(self._sweep_forever())
        logger.info(f"ProjectRegistry started (ttl={self._ttl}s, sweep every {self._sweep_interval}s).")

    async def stop(self) -> None:
        """Stops the sweeper and forgets every entry."""
        if self._sweeper is not None:
            self._sweeper.cancel()
            await asyncio.gather(self._sweeper, return_exceptions=True)
            self._sweeper = None
        self._entries.clear()
        logger.info("ProjectRegistry stopped and cleared.")
