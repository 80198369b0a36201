"""
请求与响应模型定义模块。
"""

from pydantic import BaseModel, Field

# 与 32 位无符号整数的取值范围一致
USER_ID_MAX = 2 ** 32 - 1

class Info(BaseModel):
    """用户 ID 与好友名。"""
    user_id: int = Field(ge=0, le=USER_ID_MAX)
    friend: str

class InfoUser(BaseModel):
    username: str

class NamedObject(BaseModel):
    """/obj 端点返回的 JSON 对象。"""
    name: str

# 不限制方法的路由使用的方法列表，包含 TRACE 与 CONNECT
ANY_METHOD = ["GET", "POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS", "TRACE", "CONNECT"]
