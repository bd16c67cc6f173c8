# backend/app.py
import os
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, APIRouter, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from backend.container import Container
from backend.core.errors import AdToolError
from backend.core.hooks import HookManager
from backend.core.loader import PluginLoader


@asynccontextmanager
async def lifespan(app: FastAPI):
    # --- 启动阶段 ---
    container = Container()
    hook_manager = HookManager(container)

    # 1. 平台核心服务
    container.register("container", lambda: container)
    container.register("hook_manager", lambda: hook_manager)

    # 2. 加载插件（同步注册服务与钩子）
    loader = PluginLoader(container, hook_manager)
    app.state.loaded_plugins = loader.load_plugins()

    logger = logging.getLogger(__name__)
    logger.info("--- FastAPI 应用组装 ---")

    app.state.container = container
    hook_manager.add_shared_context("app", app)

    # 3. 异步初始化（例如启动项目注册表的过期清理任务）
    await hook_manager.trigger('services_post_register')

    # 4. 收集各插件的 API 路由
    routers: list[APIRouter] = await hook_manager.filter("collect_api_routers", [])
    if routers:
        logger.info(f"已收集到 {len(routers)} 个路由。正在添加到应用中...")
        for router in routers:
            app.include_router(router)
            logger.debug(f"已添加路由: prefix='{router.prefix}', tags={router.tags}")
    else:
        logger.warning("未从插件中收集到任何 API 路由。")

    logger.info("--- Asset Studio 已就绪 ---")
    yield
    # --- 关闭阶段 ---
    logger.info("--- Asset Studio 正在关闭 ---")
    await hook_manager.trigger('app_shutdown')


async def _ad_tool_error_handler(request: Request, exc: AdToolError) -> JSONResponse:
    """路由未转换的领域错误的兜底处理，响应格式与 HTTPException 一致。"""
    logging.getLogger(__name__).warning(f"{request.method} {request.url.path} 失败: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


def create_app() -> FastAPI:
    """应用工厂函数"""
    app = FastAPI(
        title="Playable Ad Asset Studio",
        version="0.3.0",
        lifespan=lifespan
    )

    origins = [o.strip() for o in os.getenv("ADTOOL_CORS_ORIGINS", "*").split(",") if o.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(AdToolError, _ad_tool_error_handler)

    return app
