# backend/core/loader.py

import json
import logging
import importlib
import importlib.resources
import traceback
from typing import List, Dict

from backend.core.contracts import Container, HookManager, PluginRegisterFunc

logger = logging.getLogger(__name__)

DEFAULT_PRIORITY = 100


class PluginLoader:
    def __init__(self, container: Container, hook_manager: HookManager, package: str = "plugins"):
        self._container = container
        self._hook_manager = hook_manager
        self._package = package

    def load_plugins(self) -> List[str]:
        """发现、排序、注册全部插件，返回按加载顺序排列的插件名。"""
        # 日志系统由 core_logging 插件配置，在它注册之前只能用 print
        print("\n--- 插件系统：开始加载 ---")

        plugins = self._discover_plugins()
        if not plugins:
            print("警告：未发现任何插件。")
            print("--- 插件系统：加载完成 ---\n")
            return []

        plugins.sort(key=lambda p: (p['manifest'].get('priority', DEFAULT_PRIORITY), p['name']))

        print("插件加载顺序已确定：")
        for i, p_info in enumerate(plugins):
            print(f"  {i+1}. {p_info['name']} (优先级: {p_info['manifest'].get('priority', DEFAULT_PRIORITY)})")

        self._register_plugins(plugins)

        logger.info("所有插件均已加载并注册完毕。")
        print("--- 插件系统：加载完成 ---\n")
        return [p['name'] for p in plugins]

    def _discover_plugins(self) -> List[Dict]:
        """扫描插件包，读取每个子包中的 manifest.json。"""
        discovered = []
        try:
            package_root = importlib.resources.files(self._package)
        except ModuleNotFoundError:
            return discovered

        for plugin_path in package_root.iterdir():
            if not plugin_path.is_dir() or plugin_path.name.startswith(('__', '.')):
                continue

            manifest_path = plugin_path / "manifest.json"
            if not manifest_path.is_file():
                continue

            try:
                manifest = json.loads(manifest_path.read_text(encoding='utf-8'))
            except json.JSONDecodeError as e:
                print(f"警告：跳过 manifest 无法解析的插件 '{plugin_path.name}': {e}")
                continue

            discovered.append({
                "name": manifest.get('name', plugin_path.name),
                "manifest": manifest,
                "import_path": f"{self._package}.{plugin_path.name}",
            })
        return discovered

    def _register_plugins(self, plugins: List[Dict]):
        """按顺序导入每个插件并调用其 register_plugin。"""
        for plugin_info in plugins:
            plugin_name = plugin_info['name']
            import_path = plugin_info['import_path']

            try:
                plugin_module = importlib.import_module(import_path)
                register_func: PluginRegisterFunc = getattr(plugin_module, "register_plugin")
                register_func(self._container, self._hook_manager)
            except Exception as e:
                print("\n" + "=" * 80)
                print(f"!!! 致命错误：加载插件 '{plugin_name}' ({import_path}) 失败 !!!")
                print("=" * 80)
                traceback.print_exc()
                print("=" * 80)
                # 插件之间存在依赖，一个失败就停止启动
                raise RuntimeError(f"无法加载插件 {plugin_name}") from e
