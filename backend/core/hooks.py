# backend/core/hooks.py
import asyncio
import logging
import inspect
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Awaitable, TypeVar, Optional

from backend.core.contracts import HookManager as HookManagerInterface, Container

logger = logging.getLogger(__name__)

T = TypeVar('T')

HookCallable = Callable[..., Awaitable[Any]]


@dataclass(order=True)
class HookImplementation:
    """一个钩子实现及其元数据。"""
    priority: int
    func: HookCallable = field(compare=False)
    plugin_name: str = field(compare=False, default="<unknown>")


class HookManager(HookManagerInterface):
    """
    钩子的注册与调度中心。
    钩子函数按参数名自动获得共享上下文 (container, hook_manager, app ...)。
    """
    def __init__(self, container: Optional[Container] = None):
        self._hooks: Dict[str, List[HookImplementation]] = defaultdict(list)
        self._shared_context: Dict[str, Any] = {"hook_manager": self}
        if container is not None:
            self._shared_context["container"] = container
        logger.info("HookManager initialized.")

    @property
    def hook_names(self) -> List[str]:
        return list(self._hooks.keys())

    def add_shared_context(self, name: str, service: Any) -> None:
        if name in self._shared_context:
            logger.warning(f"Overwriting shared context for hooks: '{name}'")
        self._shared_context[name] = service

    @staticmethod
    def _prepare_kwargs(func: HookCallable, call_context: Dict[str, Any], skip_first: bool = False) -> Dict[str, Any]:
        """只传递钩子函数签名里声明过的参数；声明了 **kwargs 则全部传递。"""
        params = list(inspect.signature(func).parameters.values())
        if skip_first and params:
            params = params[1:]

        if any(p.kind == p.VAR_KEYWORD for p in params):
            return dict(call_context)
        return {p.name: call_context[p.name] for p in params if p.name in call_context}

    def add_implementation(
        self,
        hook_name: str,
        implementation: HookCallable,
        priority: int = 10,
        plugin_name: str = "<core>"
    ):
        if not asyncio.iscoroutinefunction(implementation):
            raise TypeError(f"Hook implementation for '{hook_name}' must be an async function.")

        self._hooks[hook_name].append(
            HookImplementation(priority=priority, func=implementation, plugin_name=plugin_name)
        )
        self._hooks[hook_name].sort()  # 数值越小越先执行
        logger.debug(f"Registered hook '{hook_name}' from plugin '{plugin_name}' with priority {priority}.")

    async def trigger(self, hook_name: str, **kwargs: Any) -> None:
        """通知型钩子：并发执行，忽略返回值，单个实现的异常只记录不传播。"""
        implementations = self._hooks.get(hook_name)
        if not implementations:
            return

        call_context = {**self._shared_context, **kwargs}
        coros = [impl.func(**self._prepare_kwargs(impl.func, call_context)) for impl in implementations]
        results = await asyncio.gather(*coros, return_exceptions=True)

        for impl, result in zip(implementations, results):
            if isinstance(result, Exception):
                logger.error(
                    f"Error in NOTIFICATION hook '{hook_name}' from plugin '{impl.plugin_name}': {result}",
                    exc_info=result
                )

    async def filter(self, hook_name: str, data: T, **kwargs: Any) -> T:
        """过滤型钩子：按优先级串行执行，每个实现接收并返回 data。"""
        implementations = self._hooks.get(hook_name)
        if not implementations:
            return data

        call_context = {**self._shared_context, **kwargs}
        current = data
        for impl in implementations:
            try:
                prepared = self._prepare_kwargs(impl.func, call_context, skip_first=True)
                current = await impl.func(current, **prepared)
            except Exception as e:
                logger.error(
                    f"Error in FILTER hook '{hook_name}' from plugin '{impl.plugin_name}'. Skipping. Error: {e}",
                    exc_info=e
                )
        return current
