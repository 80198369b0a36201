"""
应用装配模块：
- 每个 worker 调用一次 create_app，得到各自独立的 FastAPI 副本。
- 进程级共享状态由调用方传入，worker 级状态在这里新建。
- 注册中间件、Host 守卫路由、各功能路由和异常处理器。
"""

from typing import Optional

from fastapi import FastAPI
from .core.config import SettingsDict, load_settings
from .core.lifespan import lifespan
from .core.middleware import RequestIdMiddleware, WorkerTagMiddleware
from .services.counters import SharedCounters, WorkerState
from .api.exception_handlers import register_exception_handlers
from .api.routes import basics, counters, extractors
from .api.routes.configured import create_config_router, create_json_router
from .api.routes.hosts import create_host_routes

def create_app(
    settings: Optional[SettingsDict] = None,
    shared: Optional[SharedCounters] = None,
    worker_id: int = 0,
) -> FastAPI:
    """
    创建并返回一个配置好的 FastAPI 应用副本。

    shared 为空时新建一份共享状态，这只适合单 worker 场景；
    多 worker 时必须由调用方创建一次并传给每个副本。
    """
    settings = settings if settings is not None else load_settings()
    shared = shared if shared is not None else SharedCounters()

    app = FastAPI(
        title="webtour",
        description="Request-handling feature demos: routing, extraction, shared state, streaming and guards.",
        version="1.0.0",
        lifespan=lifespan,
    )

    # 将配置和状态存储在应用状态中，以便在各处访问
    app.state.settings = settings
    app.state.shared = shared
    app.state.worker_state = WorkerState.create(worker_id, shared)

    app.add_middleware(WorkerTagMiddleware, worker_id=worker_id)
    app.add_middleware(RequestIdMiddleware)

    # Host 守卫路由必须排在无守卫的 "/" 之前
    app.router.routes.extend(create_host_routes(settings["host_guards"]))

    app.include_router(extractors.users_router)
    app.include_router(counters.router)
    app.include_router(create_json_router(settings["json"]))
    app.include_router(extractors.router)
    app.include_router(basics.router)
    app.include_router(create_config_router())

    register_exception_handlers(app)

    return app
