"""
应用生命周期管理模块：
- 使用 FastAPI 的 lifespan 上下文管理器。
- 每个 worker 副本各自经历一次启动与关闭。
- 关闭时记录该 worker 的本地计数，本地状态随副本一起释放。
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    worker 副本生命周期管理器。
    """
    # ===== worker 启动 =====
    worker_state = app.state.worker_state
    logger.info(f"Worker {worker_state.worker_id} startup complete.")

    yield

    # ===== worker 关闭 =====
    global_count, local_count = worker_state.combined.read()
    logger.info(
        f"Worker {worker_state.worker_id} shutdown: count={worker_state.count.get()}, "
        f"local_count={local_count}, global_count={global_count}"
    )
