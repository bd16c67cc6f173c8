# backend/core/dependencies.py

from typing import Any
from fastapi import Request


class Service:
    """
    FastAPI 依赖：按名称从容器解析服务。
    用法: service: ProjectScanService = Depends(Service("project_scan_service"))
    """
    def __init__(self, name: str):
        self.name = name

    def __call__(self, request: Request) -> Any:
        return request.app.state.container.resolve(self.name)
