"""
请求参数提取路由模块：
- 路径参数：类型化参数、模型化参数、手动读取匹配结果三种写法。
- 查询参数、JSON 请求体、表单请求体。
- 路径参数与 JSON 请求体组合提取。
"""

import re

from fastapi import APIRouter, Depends, Form, HTTPException, Path, Query, Request
from fastapi.responses import PlainTextResponse

from ...core.models import USER_ID_MAX, Info, InfoUser

router = APIRouter(
    tags=["Extractors"],
    default_response_class=PlainTextResponse,
)

# /users 作用域下的路由
users_router = APIRouter(
    prefix="/users",
    tags=["Extractors"],
    default_response_class=PlainTextResponse,
)

def info_from_path(
    user_id: int = Path(ge=0, le=USER_ID_MAX),
    friend: str = Path(),
) -> Info:
    """依赖项：把路径参数整体解析为 Info 模型。"""
    return Info(user_id=user_id, friend=friend)

@users_router.get("/query")
async def show_users(username: str = Query()):
    return f"Welcome {username}!"

@users_router.get("/serde/{user_id}/{friend}")
async def index_serde(info: Info = Depends(info_from_path)):
    return f"Welcome {info.friend}, user_id {info.user_id}!"

@users_router.get("/match/{user_id}/{friend}")
async def index_matched(request: Request):
    """不声明参数，直接从路由匹配结果中读取并手动转换。"""
    name = request.path_params["friend"]
    raw_user_id = request.path_params["user_id"]
    # int() 还接受下划线、首尾空白和非 ASCII 数字，这里只认可 ASCII 十进制整数
    if not re.fullmatch(r"[+-]?[0-9]+", raw_user_id):
        raise HTTPException(status_code=400, detail=f"user_id is not an integer: {raw_user_id!r}")
    user_id = int(raw_user_id)
    return f"Welcome {name}, user_id {user_id}!"

@users_router.get("/{user_id}/{friend}")
async def index_path(
    user_id: int = Path(ge=0, le=USER_ID_MAX),
    friend: str = Path(),
):
    return f"Welcome {friend}, user_id {user_id}!"

@router.get("/query")
async def index_query(username: str = Query()):
    """查询参数缺失或无法解析时由全局处理器返回 400。"""
    return f"Welcome {username}!"

@router.post("/submit")
async def submit(info: InfoUser):
    return f"Welcome {info.username}!"

@router.post("/form")
async def index_form(username: str = Form()):
    return f"Welcome {username}!"

@router.get("/extraction/{first}/{second}")
async def index_extraction(first: str, second: str, info: Info):
    """同时使用路径参数和 JSON 请求体。"""
    return f"{first} {second} {info.user_id} {info.friend}"
