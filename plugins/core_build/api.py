# plugins/core_build/api.py
import logging
from uuid import UUID

from fastapi import APIRouter, Depends

from backend.core.dependencies import Service
from backend.core.errors import AdToolError, to_http_exception
from .models import BuildReport, BuildRequest
from .service import BuildService

logger = logging.getLogger(__name__)

builds_router = APIRouter(
    prefix="/api/projects/{project_id}/builds",
    tags=["Builds"]
)


@builds_router.post("", response_model=BuildReport)
async def build_networks(
    project_id: UUID,
    request_body: BuildRequest,
    builds: BuildService = Depends(Service("build_service"))
):
    """
    Prepares the config for each network and triggers the external build.
    Per-network failures are reported in the body; only request-level
    problems (bad name, unknown network, unknown project) fail the call.
    """
    try:
        return await builds.build(project_id, request_body)
    except AdToolError as e:
        logger.warning(f"Build request for project {project_id} rejected: {e.message}")
        raise to_http_exception(e)
