# plugins/core_projects/api.py
import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Response

from backend.core.dependencies import Service
from backend.core.errors import AdToolError, to_http_exception
from .models import ProjectEntry, RegisterProjectRequest
from .service import ProjectService

logger = logging.getLogger(__name__)

projects_router = APIRouter(
    prefix="/api/projects",
    tags=["Projects"]
)


@projects_router.post("", response_model=ProjectEntry, status_code=201)
async def register_project(
    body: RegisterProjectRequest,
    service: ProjectService = Depends(Service("project_service"))
):
    """Validates a project folder and hands out a short-lived project id for it."""
    try:
        return await service.register(body.path)
    except AdToolError as e:
        logger.info(f"Project registration refused for '{body.path}': {e.message}")
        raise to_http_exception(e)


@projects_router.get("/{project_id}", response_model=ProjectEntry)
async def get_project(
    project_id: UUID,
    service: ProjectService = Depends(Service("project_service"))
):
    try:
        return service.registry.get(project_id)
    except AdToolError as e:
        raise to_http_exception(e)


@projects_router.delete("/{project_id}", status_code=204)
async def forget_project(
    project_id: UUID,
    service: ProjectService = Depends(Service("project_service"))
):
    service.registry.remove(project_id)
    return Response(status_code=204)
