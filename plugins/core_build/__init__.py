# plugins/core_build/__init__.py
import os
import logging

from backend.core.contracts import Container, HookManager
from .client import BuildTriggerClient, DEFAULT_BUILD_ENDPOINT, DEFAULT_BUILD_TIMEOUT
from .service import BuildService

logger = logging.getLogger(__name__)


def _create_build_client() -> BuildTriggerClient:
    return BuildTriggerClient(
        endpoint=os.getenv("ADTOOL_BUILD_ENDPOINT", DEFAULT_BUILD_ENDPOINT),
        timeout=float(os.getenv("ADTOOL_BUILD_TIMEOUT", str(DEFAULT_BUILD_TIMEOUT))),
    )


def _create_build_service(container: Container) -> BuildService:
    return BuildService(
        project_service=container.resolve("project_service"),
        config_editor=container.resolve("config_editor"),
        client=container.resolve("build_client"),
    )


async def close_build_client(container: Container):
    """钩子实现: 应用关闭时释放 HTTP 连接池。"""
    if container.has("build_client"):
        client: BuildTriggerClient = container.resolve("build_client")
        await client.aclose()


async def provide_router(routers: list) -> list:
    from .api import builds_router
    routers.append(builds_router)
    logger.debug("Provided 'builds_router' to the application.")
    return routers


def register_plugin(container: Container, hook_manager: HookManager):
    logger.info("--> 正在注册 [core_build] 插件...")
    container.register("build_client", _create_build_client, singleton=True)
    container.register("build_service", _create_build_service, singleton=True)

    hook_manager.add_implementation(
        "app_shutdown", close_build_client, plugin_name="core_build"
    )
    hook_manager.add_implementation(
        "collect_api_routers", provide_router, plugin_name="core_build"
    )
    logger.info("插件 [core_build] 注册成功。")
