# plugins/core_assets/__init__.py
import logging

from backend.core.contracts import Container, HookManager
from .pipeline import Base64Pipeline
from .service import AssetService

logger = logging.getLogger(__name__)


def _create_pipeline(container: Container) -> Base64Pipeline:
    return Base64Pipeline(path_locks=container.resolve("path_locks"))


def _create_asset_service(container: Container) -> AssetService:
    return AssetService(pipeline=container.resolve("base64_pipeline"))


async def provide_router(routers: list) -> list:
    from .api import assets_router
    routers.append(assets_router)
    logger.debug("Provided 'assets_router' to the application.")
    return routers


def register_plugin(container: Container, hook_manager: HookManager):
    logger.info("--> 正在注册 [core_assets] 插件...")
    container.register("base64_pipeline", _create_pipeline, singleton=True)
    container.register("asset_service", _create_asset_service, singleton=True)
    hook_manager.add_implementation(
        "collect_api_routers", provide_router, plugin_name="core_assets"
    )
    logger.info("插件 [core_assets] 注册成功。")
