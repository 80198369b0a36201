"""
基于 Host 头的路由守卫模块。

HostGuardRoute 只在请求的 Host（去掉端口后）与配置一致时才参与匹配，
否则让路由器继续尝试后面的路由。
"""

from typing import Dict, List, Tuple

from starlette.datastructures import Headers
from starlette.requests import Request
from starlette.responses import PlainTextResponse
from starlette.routing import BaseRoute, Match, Route
from starlette.types import Scope

class HostGuardRoute(Route):
    """只接受指定 Host 的 Starlette 路由。"""

    def __init__(self, host: str, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.host = host

    def matches(self, scope: Scope) -> Tuple[Match, Scope]:
        if scope["type"] == "http":
            host = Headers(scope=scope).get("host", "").split(":")[0]
            if host != self.host:
                return Match.NONE, {}
        return super().matches(scope)

def _text_endpoint(body: str):
    async def endpoint(request: Request):
        return PlainTextResponse(body)
    return endpoint

def create_host_routes(host_guards: Dict[str, str]) -> List[BaseRoute]:
    """为每个 Host 生成一条 "/" 路由，接受任意方法，返回配置的文本。"""
    return [
        HostGuardRoute(host, "/", _text_endpoint(body), name=f"host:{host}")
        for host, body in host_guards.items()
    ]
