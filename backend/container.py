# backend/container.py

import inspect
import logging
import threading
from typing import Dict, Any, Callable, Set

from backend.core.contracts import Container as ContainerInterface

logger = logging.getLogger(__name__)


class Container(ContainerInterface):
    """服务容器：按名称注册工厂，惰性创建实例，检测循环依赖。"""
    def __init__(self):
        self._factories: Dict[str, Callable] = {}
        self._singletons: Dict[str, bool] = {}
        self._instances: Dict[str, Any] = {}
        # 工厂内部会再次 resolve，所以必须是可重入锁
        self._lock = threading.RLock()
        # 每个线程各自的解析栈
        self._local = threading.local()

    def _resolution_stack(self) -> Set[str]:
        if not hasattr(self._local, 'stack'):
            self._local.stack = set()
        return self._local.stack

    def register(self, name: str, factory: Callable, singleton: bool = True) -> None:
        if name in self._factories:
            logger.warning(f"Overwriting service registration for '{name}'")
        self._factories[name] = factory
        self._singletons[name] = singleton
        self._instances.pop(name, None)

    def has(self, name: str) -> bool:
        return name in self._factories

    def _build(self, name: str) -> Any:
        factory = self._factories[name]
        # 工厂可以声明一个参数来接收容器，也可以是零参数的，例如 lambda: instance
        if inspect.signature(factory).parameters:
            return factory(self)
        return factory()

    def resolve(self, name: str) -> Any:
        stack = self._resolution_stack()
        if name in stack:
            path = " -> ".join(list(stack) + [name])
            raise RuntimeError(f"Circular dependency detected: {path}")

        stack.add(name)
        try:
            is_singleton = self._singletons.get(name, True)
            if is_singleton and name in self._instances:
                return self._instances[name]

            if name not in self._factories:
                raise ValueError(f"Service '{name}' not found in container.")

            if not is_singleton:
                return self._build(name)

            with self._lock:
                if name not in self._instances:
                    self._instances[name] = self._build(name)
                    logger.debug(f"Resolved service '{name}'. Singleton: True")
                return self._instances[name]
        finally:
            stack.discard(name)
