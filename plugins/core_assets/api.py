# plugins/core_assets/api.py
import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, HTTPException, Response, UploadFile

from backend.core.dependencies import Service
from backend.core.errors import AdToolError, OperationAborted, to_http_exception
from plugins.core_projects.service import ProjectService
from .models import AssetCategory, AssetListResponse, ReplaceResult
from .service import AssetService, summarize

logger = logging.getLogger(__name__)

assets_router = APIRouter(
    prefix="/api/projects/{project_id}/assets",
    tags=["Assets"]
)


@assets_router.get("", response_model=AssetListResponse)
async def list_assets(
    project_id: UUID,
    show_unused: bool = True,
    category: Optional[AssetCategory] = None,
    projects: ProjectService = Depends(Service("project_service")),
    assets: AssetService = Depends(Service("asset_service"))
):
    """
    Scans the project and returns one record per file under public/assets,
    with its base64 module and loader usage status. The summary always
    covers the whole project, regardless of the filters.
    """
    try:
        project = await projects.open_registered(project_id)
        records = await assets.scan(project)
    except AdToolError as e:
        logger.error(f"Scan of project {project_id} failed: {e.message}")
        raise to_http_exception(e)

    visible = [
        r for r in records
        if (show_unused or r.in_use) and (category is None or r.category == category)
    ]
    return AssetListResponse(assets=visible, summary=summarize(records))


@assets_router.post("/replace", response_model=ReplaceResult)
async def replace_asset(
    project_id: UUID,
    asset_path: str = Form(..., description="Path of the asset relative to public/assets."),
    file: Optional[UploadFile] = File(None),
    projects: ProjectService = Depends(Service("project_service")),
    assets: AssetService = Depends(Service("asset_service"))
):
    """
    Replaces an asset's content and regenerates its base64 module.
    A request without a file means the user cancelled the picker: 204, no writes.
    """
    new_bytes = await file.read() if file is not None else None
    new_name = file.filename if file is not None else None
    try:
        project = await projects.open_registered(project_id)
        return await assets.replace(project, asset_path, new_bytes, new_name)
    except OperationAborted:
        return Response(status_code=204)
    except AdToolError as e:
        logger.error(f"Replacing '{asset_path}' in project {project_id} failed: {e.message}")
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Unexpected error replacing '{asset_path}': {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error while replacing asset.")
