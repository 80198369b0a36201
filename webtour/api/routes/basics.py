"""
基础路由模块：
- 纯文本、回显、流式响应、JSON 对象等最简单的处理函数。
- 演示根据条件返回两种不同响应。
"""

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse, PlainTextResponse, StreamingResponse

from ...core.config import SettingsDict
from ...core.models import ANY_METHOD, NamedObject
from ...services.counters import WorkerState
from ..dependencies import get_settings, get_worker_state

router = APIRouter(
    tags=["Basics"],
    default_response_class=PlainTextResponse,
)

@router.get("/")
async def hello():
    return "Hello world!"

@router.post("/echo")
async def echo(request: Request):
    """原样返回请求体。"""
    body = await request.body()
    return Response(content=body, media_type="text/plain")

@router.get("/hey")
async def manual_hello():
    return "Hey there!"

@router.get("/app/index.html")
async def index():
    return "Hello world!"

@router.get("/state")
async def index_state(settings: SettingsDict = Depends(get_settings)):
    app_name = settings["app_name"]
    return f"Hello {app_name}!"

@router.get("/stream")
async def stream():
    """以流的形式发送一个数据块。"""
    async def body():
        yield b"test"

    return StreamingResponse(body(), media_type="application/json")

@router.api_route("/obj", methods=ANY_METHOD, response_model=NamedObject, response_class=JSONResponse)
async def index_obj():
    return NamedObject(name="user")

async def is_a_variant() -> bool:
    return True

@router.api_route("/either", methods=ANY_METHOD)
async def index_either():
    """两种响应之一：校验失败的 400，或者普通文本。"""
    if await is_a_variant():
        return PlainTextResponse("Bad data", status_code=400)
    return "Hello!"

@router.api_route("/ok", methods=ANY_METHOD)
async def ok():
    return Response(status_code=200)

@router.get("/health", response_class=JSONResponse)
async def health_check(worker_state: WorkerState = Depends(get_worker_state)):
    """健康检查，附带处理请求的 worker 编号。"""
    return {"status": "healthy", "worker": worker_state.worker_id}
