"""
全局异常处理模块：
- 定义并注册用于捕获未处理异常的处理器。
- 把请求参数提取失败映射为与提取位置相符的状态码。
- 提供丰富的错误日志上下文。
"""

import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse

from ..services.counters import LockPoisonedError

logger = logging.getLogger(__name__)

def _summarize_errors(exc: RequestValidationError) -> str:
    """把校验错误压缩成一行纯文本。"""
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ()))
        parts.append(f"{location}: {error.get('msg', 'invalid value')}")
    return "; ".join(parts)

async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    路径参数无法解析时返回 404（该资源不存在），
    其余位置（query、body、form）解析失败返回 400。
    """
    locations = {(error.get("loc") or ("",))[0] for error in exc.errors()}
    status_code = 404 if "path" in locations else 400
    message = _summarize_errors(exc)
    logger.debug(f"Extraction failed for {request.method} {request.url.path}: {message}")
    return PlainTextResponse(message, status_code=status_code)

async def lock_poisoned_handler(request: Request, exc: LockPoisonedError):
    """
    计数器锁已中毒：不做自动恢复，本次请求以 500 结束。
    """
    logger.error(f"Refusing request {request.method} {request.url.path}: {exc}")
    return PlainTextResponse("Internal Server Error", status_code=500)

async def generic_exception_handler(request: Request, exc: Exception):
    """
    捕获所有未处理的异常，记录详细信息，并返回一个标准的 500 错误。
    """
    logger.error(
        f"Unhandled exception for request: {request.method} {request.url}",
        exc_info=True,  # 包含完整的 traceback
        extra={
            "client": request.client,
            "headers": dict(request.headers),
        }
    )
    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "message": "An internal server error occurred.",
                "type": "internal_error",
            }
        },
    )

def register_exception_handlers(app: FastAPI):
    """在应用上注册本模块的所有处理器。"""
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(LockPoisonedError, lock_poisoned_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
