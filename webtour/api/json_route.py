"""
JSON 提取器的作用域配置。

json_config() 生成一个 APIRoute 子类：挂在某个 APIRouter 上之后，该路由器下的
所有路由都会限制请求体大小，并在 JSON 解析或校验失败时返回指定状态码，
而不是全局的 400。
"""

import logging
from typing import Callable, Type

from fastapi import HTTPException, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.routing import APIRoute

logger = logging.getLogger(__name__)

def json_config(limit: int, error_status: int) -> Type[APIRoute]:
    """返回带有请求体上限和自定义错误状态码的路由类。"""

    class JsonConfigRoute(APIRoute):
        def get_route_handler(self) -> Callable:
            original_route_handler = super().get_route_handler()

            async def custom_route_handler(request: Request) -> Response:
                content_length = request.headers.get("content-length", "")
                if content_length.isdigit() and int(content_length) > limit:
                    logger.info(f"Rejected {request.url.path}: Content-Length {content_length} exceeds limit {limit}")
                    return Response(status_code=error_status)

                # 分块传输时边读边计数，超过上限立即停止读取
                chunks = []
                received = 0
                async for chunk in request.stream():
                    received += len(chunk)
                    if received > limit:
                        logger.info(f"Rejected {request.url.path}: payload exceeds limit {limit} after {received} bytes")
                        return Response(status_code=error_status)
                    chunks.append(chunk)
                # 后续的 request.body() / request.json() 直接使用已读取的内容
                request._body = b"".join(chunks)

                try:
                    return await original_route_handler(request)
                except RequestValidationError as exc:
                    logger.info(f"Rejected {request.url.path}: {exc.errors()}")
                    return Response(status_code=error_status)
                except HTTPException as exc:
                    # 旧版本 FastAPI 把无法解析的 JSON 报告为 400 HTTPException
                    if exc.status_code != 400:
                        raise
                    logger.info(f"Rejected {request.url.path}: {exc.detail}")
                    return Response(status_code=error_status)

            return custom_route_handler

    return JsonConfigRoute
