# plugins/core_assets/pipeline.py
import base64
import logging
from typing import Optional

from backend.core.errors import AdToolError, CategoryMismatchError, OperationAborted
from plugins.core_projects.models import ProjectHandles, ASSETS_ROOT, MEDIA_ROOT
from plugins.core_storage.locks import PathLocks
from .classifier import classify, extension_of
from .models import AssetRecord, ReplaceResult

logger = logging.getLogger(__name__)

DEFAULT_MIME_TYPE = "application/octet-stream"
MIME_TYPES = {
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "gif": "image/gif",
    "webp": "image/webp",
    "svg": "image/svg+xml",
    "mp3": "audio/mpeg",
    "wav": "audio/wav",
    "ogg": "audio/ogg",
}


def mime_type_for(file_name: str) -> str:
    return MIME_TYPES.get(extension_of(file_name), DEFAULT_MIME_TYPE)


def build_module_source(export_identifier: str, mime_type: str, data: bytes) -> str:
    encoded = base64.b64encode(data).decode("ascii")
    return f'export const {export_identifier} = "data:{mime_type};base64,{encoded}";'


def check_replacement(original_name: str, new_file_name: str) -> None:
    expected, actual = classify(original_name), classify(new_file_name)
    if expected != actual:
        raise CategoryMismatchError(expected.value, actual.value)


class Base64Pipeline:
    """
    Replaces an asset's bytes and regenerates its base64 module.

    The module write and the asset write are two independent overwrites with
    no rollback. If the second one fails the pair stays inconsistent until
    the call is retried; a retry with the same inputs writes the same bytes
    to the same paths, so it is always safe.
    """
    def __init__(self, path_locks: Optional[PathLocks] = None):
        self._locks = path_locks or PathLocks()

    async def replace(
        self,
        project: ProjectHandles,
        record: AssetRecord,
        new_bytes: Optional[bytes],
        new_file_name: Optional[str],
    ) -> ReplaceResult:
        if new_bytes is None or not new_file_name:
            raise OperationAborted()

        check_replacement(record.name, new_file_name)

        mime_type = mime_type_for(new_file_name)
        source = build_module_source(record.expected_export_identifier, mime_type, new_bytes)

        module_lock_path = f"{project.root_path}/{MEDIA_ROOT}/{record.expected_module_path}"
        asset_lock_path = f"{project.root_path}/{ASSETS_ROOT}/{record.relative_path}"

        async with self._locks.hold(module_lock_path, asset_lock_path):
            module_file = await project.media_dir.resolve_file(record.expected_module_path, create=True)
            await module_file.write_text(source)
            logger.info(f"Wrote base64 module '{record.expected_module_path}' ({len(source)} chars).")

            try:
                asset_file = await project.assets_dir.resolve_file(record.relative_path, create=True)
                await asset_file.write_bytes(new_bytes)
            except AdToolError:
                logger.warning(
                    f"Module '{record.expected_module_path}' was regenerated but asset "
                    f"'{record.relative_path}' could not be overwritten; retry the replacement."
                )
                raise
            logger.info(f"Overwrote asset '{record.relative_path}' ({len(new_bytes)} bytes).")

        return ReplaceResult(
            module_path=record.expected_module_path,
            export_identifier=record.expected_export_identifier,
            mime_type=mime_type,
        )
