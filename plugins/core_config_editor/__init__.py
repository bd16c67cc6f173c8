# plugins/core_config_editor/__init__.py
import os
import logging

from backend.core.contracts import Container, HookManager
from .service import ConfigEditorService, DEFAULT_CONFIG_FILE
from .document import DEFAULT_HISTORY_LIMIT

logger = logging.getLogger(__name__)


def _create_config_editor(container: Container) -> ConfigEditorService:
    return ConfigEditorService(
        project_service=container.resolve("project_service"),
        path_locks=container.resolve("path_locks"),
        history_limit=int(os.getenv("ADTOOL_CONFIG_HISTORY_LIMIT", str(DEFAULT_HISTORY_LIMIT))),
        default_config_file=os.getenv("ADTOOL_CONFIG_FILE", DEFAULT_CONFIG_FILE),
    )


async def provide_router(routers: list) -> list:
    from .api import config_router
    routers.append(config_router)
    logger.debug("Provided 'config_router' to the application.")
    return routers


def register_plugin(container: Container, hook_manager: HookManager):
    logger.info("--> 正在注册 [core_config_editor] 插件...")
    container.register("config_editor", _create_config_editor, singleton=True)
    hook_manager.add_implementation(
        "collect_api_routers", provide_router, plugin_name="core_config_editor"
    )
    logger.info("插件 [core_config_editor] 注册成功。")
