# plugins/core_assets/service.py
import asyncio
import logging
from collections import Counter
from typing import List, Optional

from backend.core.errors import NotFoundError
from plugins.core_projects.models import ProjectHandles
from .analyzer import analyze_source
from .models import AssetCategory, AssetFile, AssetRecord, ModuleFile, ReplaceResult, ScanSummary
from .naming import ASSET_ROOT_PREFIX
from .pipeline import Base64Pipeline
from .resolver import resolve_assets
from .scanner import scan_directory

logger = logging.getLogger(__name__)


def summarize(records: List[AssetRecord]) -> ScanSummary:
    by_category = Counter(r.category for r in records)
    return ScanSummary(
        total=len(records),
        in_use=sum(1 for r in records if r.in_use),
        missing_base64=sum(1 for r in records if not r.has_base64),
        by_category={category: by_category.get(category, 0) for category in AssetCategory},
    )


class AssetService:
    def __init__(self, pipeline: Base64Pipeline):
        self._pipeline = pipeline

    async def scan(self, project: ProjectHandles) -> List[AssetRecord]:
        """Full dependency scan of one project. Fails as a whole; never returns a partial list."""
        originals, modules, preloader_text = await asyncio.gather(
            scan_directory(project.assets_dir, AssetFile),
            scan_directory(project.media_dir, ModuleFile),
            project.preloader.read_text(),
        )
        bindings = analyze_source(preloader_text)
        records = resolve_assets(originals, modules, bindings)
        logger.info(
            f"Scanned project '{project.name}': {len(records)} asset(s), "
            f"{len(modules)} module(s), {len(bindings)} import binding(s)."
        )
        return records

    @staticmethod
    def find_record(records: List[AssetRecord], asset_path: str) -> AssetRecord:
        wanted = asset_path.replace("\\", "/").strip("/")
        if wanted.startswith(ASSET_ROOT_PREFIX):
            wanted = wanted[len(ASSET_ROOT_PREFIX):]
        for record in records:
            if record.relative_path == wanted:
                return record
        raise NotFoundError(f"Asset '{asset_path}' not found under public/assets.")

    async def replace(
        self,
        project: ProjectHandles,
        asset_path: str,
        new_bytes: Optional[bytes],
        new_file_name: Optional[str],
    ) -> ReplaceResult:
        record = self.find_record(await self.scan(project), asset_path)
        return await self._pipeline.replace(project, record, new_bytes, new_file_name)
