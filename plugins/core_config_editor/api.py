# plugins/core_config_editor/api.py
import logging

from fastapi import APIRouter, Depends, Response

from backend.core.dependencies import Service
from backend.core.errors import AdToolError, to_http_exception
from .models import ConfigSnapshot, OpenConfigRequest, SetValueRequest
from .service import ConfigEditorService

logger = logging.getLogger(__name__)

config_router = APIRouter(
    prefix="/api/config",
    tags=["Config Editor"]
)


@config_router.post("/open", response_model=ConfigSnapshot)
async def open_config(
    request_body: OpenConfigRequest,
    editor: ConfigEditorService = Depends(Service("config_editor"))
):
    try:
        return await editor.open(request_body.project_id, request_body.path)
    except AdToolError as e:
        logger.warning(f"Opening config failed: {e.message}")
        raise to_http_exception(e)


@config_router.get("", response_model=ConfigSnapshot)
async def get_config(editor: ConfigEditorService = Depends(Service("config_editor"))):
    try:
        return editor.snapshot()
    except AdToolError as e:
        raise to_http_exception(e)


@config_router.patch("", response_model=ConfigSnapshot)
async def set_config_value(
    request_body: SetValueRequest,
    editor: ConfigEditorService = Depends(Service("config_editor"))
):
    try:
        return editor.set_value(request_body.path, request_body.value)
    except AdToolError as e:
        raise to_http_exception(e)


@config_router.post("/undo", response_model=ConfigSnapshot)
async def undo_config(editor: ConfigEditorService = Depends(Service("config_editor"))):
    try:
        return editor.undo()
    except AdToolError as e:
        raise to_http_exception(e)


@config_router.post("/redo", response_model=ConfigSnapshot)
async def redo_config(editor: ConfigEditorService = Depends(Service("config_editor"))):
    try:
        return editor.redo()
    except AdToolError as e:
        raise to_http_exception(e)


@config_router.post("/save", response_model=ConfigSnapshot)
async def save_config(editor: ConfigEditorService = Depends(Service("config_editor"))):
    try:
        return await editor.save()
    except AdToolError as e:
        logger.error(f"Saving config failed: {e.message}")
        raise to_http_exception(e)


@config_router.delete("", status_code=204)
async def close_config(editor: ConfigEditorService = Depends(Service("config_editor"))):
    editor.close()
    return Response(status_code=204)
