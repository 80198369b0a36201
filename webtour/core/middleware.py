"""
中间件模块。

定义了用于 FastAPI 应用的中间件，例如添加请求 ID 以便进行日志追踪。
"""

import uuid
from contextvars import ContextVar
from typing import Optional
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response
from starlette.types import ASGIApp
from fastapi import Request

# 使用 ContextVar 来在整个请求处理链路中安全地传递请求 ID
request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

class RequestIdMiddleware(BaseHTTPMiddleware):
    """
    一个为每个进入的请求添加唯一 ID 的中间件。

    这个 ID 可用于日志记录，以便将同一请求产生的日志条目关联起来。
    """
    async def dispatch(
        self, request: Request, call_next
    ) -> Response:
        request_id = str(uuid.uuid4())
        request_id_var.set(request_id)

        # 在响应头中也包含这个 ID，方便客户端进行关联
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id

        return response

class WorkerTagMiddleware(BaseHTTPMiddleware):
    """
    在响应头中标明处理该请求的 worker。

    每个 worker 的本地计数互不可见，客户端可以据此判断读到的是哪个副本的计数。
    """
    def __init__(self, app: ASGIApp, worker_id: int):
        super().__init__(app)
        self.worker_id = worker_id

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)
        response.headers["X-Worker-Id"] = str(self.worker_id)
        return response
