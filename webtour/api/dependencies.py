"""
API 依赖注入模块。

提供用于 FastAPI 路由的依赖项，以便从应用状态中获取共享状态与 worker 状态。
"""

from fastapi import Request
from ..core.config import SettingsDict
from ..services.counters import (
    CombinedCounterState,
    ExclusiveCounter,
    LocalCounter,
    WorkerState,
)

def get_settings(request: Request) -> SettingsDict:
    """依赖项：从应用状态获取配置。"""
    return request.app.state.settings

def get_worker_state(request: Request) -> WorkerState:
    """依赖项：获取当前 worker 的状态。"""
    return request.app.state.worker_state

def get_exclusive_counter(request: Request) -> ExclusiveCounter:
    """依赖项：获取进程级互斥计数器。"""
    return request.app.state.shared.exclusive

def get_local_counter(request: Request) -> LocalCounter:
    """依赖项：获取当前 worker 的本地计数器。"""
    return request.app.state.worker_state.count

def get_combined_state(request: Request) -> CombinedCounterState:
    """依赖项：获取当前 worker 的本地/全局组合计数状态。"""
    return request.app.state.worker_state.combined
