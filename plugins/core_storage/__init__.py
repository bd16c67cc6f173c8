# plugins/core_storage/__init__.py
import logging

from backend.core.contracts import Container, HookManager
from .service import LocalFileSystem
from .locks import PathLocks

logger = logging.getLogger(__name__)


def register_plugin(container: Container, hook_manager: HookManager):
    logger.info("--> 正在注册 [core_storage] 插件...")
    container.register("file_system", lambda: LocalFileSystem(), singleton=True)
    container.register("path_locks", lambda: PathLocks(), singleton=True)
    logger.debug("Registered 'file_system' and 'path_locks'.")
    logger.info("插件 [core_storage] 注册成功。")
