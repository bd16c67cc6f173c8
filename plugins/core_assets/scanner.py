# plugins/core_assets/scanner.py
import asyncio
import logging
from typing import List, Type, TypeVar

from plugins.core_storage.contracts import DirectoryHandle, EntryKind
from .classifier import classify
from .models import AssetFile

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=AssetFile)


async def scan_directory(directory: DirectoryHandle, model: Type[F] = AssetFile, _prefix: str = "") -> List[F]:
    """
    Recursively lists every file below ``directory``.

    Sibling subdirectories are scanned concurrently, so the order of the
    returned list is not meaningful. Any storage error aborts the whole scan.
    """
    entries = await directory.entries()

    files: List[F] = []
    subdirectories = []
    for entry in entries:
        if entry.kind == EntryKind.DIRECTORY:
            subdirectories.append(entry)
        else:
            files.append(model(
                name=entry.name,
                relative_path=f"{_prefix}{entry.name}",
                category=classify(entry.name),
                handle=entry,
            ))

    nested = await asyncio.gather(
        *(scan_directory(sub, model, f"{_prefix}{sub.name}/") for sub in subdirectories)
    )
    for chunk in nested:
        files.extend(chunk)

    if not _prefix:
        logger.debug(f"Scanned {len(files)} file(s) under '{directory.name}'.")
    return files
