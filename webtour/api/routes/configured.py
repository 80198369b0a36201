"""
配置函数路由模块：
- configure_app / configure_scoped 可以放在任意模块中，向传入的路由器注册资源。
- create_json_router 为 /json 资源单独设置 JSON 提取器的上限和错误状态码。
"""

from fastapi import APIRouter, Response
from fastapi.responses import PlainTextResponse

from ...core.config import JsonSettings
from ...core.models import InfoUser
from ..json_route import json_config

async def _method_not_allowed():
    return Response(status_code=405)

def configure_scoped(router: APIRouter):
    """注册 /test：GET 返回文本，HEAD 返回 405。"""
    @router.get("/test", response_class=PlainTextResponse)
    async def scoped_test():
        return "test"

    router.add_api_route("/test", _method_not_allowed, methods=["HEAD"])

def configure_app(router: APIRouter):
    """注册 /app：GET 返回文本，HEAD 返回 405。"""
    @router.get("/app", response_class=PlainTextResponse)
    async def app_resource():
        return "app"

    router.add_api_route("/app", _method_not_allowed, methods=["HEAD"])

def create_config_router() -> APIRouter:
    """根路由器应用 configure_app，/api 作用域应用 configure_scoped。"""
    router = APIRouter(tags=["Configuration"])
    configure_app(router)

    api_router = APIRouter(prefix="/api")
    configure_scoped(api_router)
    router.include_router(api_router)

    @router.get("/config", response_class=PlainTextResponse)
    async def config_root():
        return "/"

    return router

def create_json_router(json_settings: JsonSettings) -> APIRouter:
    """/json 资源：超出上限或解析失败时返回配置的状态码，而不是 400。"""
    router = APIRouter(
        tags=["Configuration"],
        default_response_class=PlainTextResponse,
        route_class=json_config(json_settings["limit"], json_settings["error_status"]),
    )

    @router.post("/json")
    async def index_json(info: InfoUser):
        return f"Welcome {info.username}!"

    return router
