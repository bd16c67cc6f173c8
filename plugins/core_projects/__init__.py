# plugins/core_projects/__init__.py
import os
import logging

from backend.core.contracts import Container, HookManager
from .registry import ProjectRegistry
from .service import ProjectService

logger = logging.getLogger(__name__)


def _create_registry() -> ProjectRegistry:
    return ProjectRegistry(
        ttl_seconds=float(os.getenv("ADTOOL_PROJECT_TTL", "3600")),
        sweep_interval=float(os.getenv("ADTOOL_PROJECT_SWEEP_INTERVAL", "60")),
    )


def _create_project_service(container: Container) -> ProjectService:
    return ProjectService(
        file_system=container.resolve("file_system"),
        registry=container.resolve("project_registry"),
    )


async def start_registry(container: Container):
    """钩子实现: 服务注册完成后启动注册表的过期清理任务。"""
    registry: ProjectRegistry = container.resolve("project_registry")
    registry.start()


async def stop_registry(container: Container):
    registry: ProjectRegistry = container.resolve("project_registry")
    await registry.stop()


async def provide_router(routers: list) -> list:
    from .api import projects_router
    routers.append(projects_router)
    logger.debug("Provided 'projects_router' to the application.")
    return routers


def register_plugin(container: Container, hook_manager: HookManager):
    logger.info("--> 正在注册 [core_projects] 插件...")
    container.register("project_registry", _create_registry, singleton=True)
    container.register("project_service", _create_project_service, singleton=True)

    hook_manager.add_implementation(
        "services_post_register", start_registry, priority=50, plugin_name="core_projects"
    )
    hook_manager.add_implementation(
        "app_shutdown", stop_registry, plugin_name="core_projects"
    )
    hook_manager.add_implementation(
        "collect_api_routers", provide_router, plugin_name="core_projects"
    )
    logger.info("插件 [core_projects] 注册成功。")
