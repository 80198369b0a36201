"""
配置模块：
- 定义了应用的所有配置项 (SettingsDict)。
- 提供 load_settings 函数，用于从 JSON 文件加载配置并与默认值合并。
"""

import json
import os
from typing import Dict, Optional, TypedDict


# ===== 类型定义 =====
class ServerSettings(TypedDict):
    host: str
    port: int
    workers: int

class JsonSettings(TypedDict):
    limit: int
    error_status: int

class SettingsDict(TypedDict):
    server: ServerSettings
    log_level: str
    app_name: str
    json: JsonSettings
    host_guards: Dict[str, str]

# ===== 默认配置 =====
def _get_default_settings() -> SettingsDict:
    """生成默认配置。"""
    data: SettingsDict = {
        "server": {"host": "127.0.0.1", "port": 8080, "workers": 4},
        "log_level": "info",
        "app_name": "FastAPI",
        "json": {"limit": 4096, "error_status": 409},
        "host_guards": {
            "www.rust-lang.org": "www",
            "users.rust-lang.org": "user",
        },
    }
    return data

def _validate(settings: SettingsDict):
    """校验合并后的配置，非法值直接抛出 ValueError。"""
    if settings["server"]["workers"] < 1:
        raise ValueError(f"server.workers must be at least 1, got {settings['server']['workers']}")
    if not 0 <= settings["server"]["port"] <= 65535:
        raise ValueError(f"server.port out of range: {settings['server']['port']}")
    if settings["json"]["limit"] < 0:
        raise ValueError(f"json.limit must not be negative, got {settings['json']['limit']}")
    if not 400 <= settings["json"]["error_status"] <= 599:
        raise ValueError(f"json.error_status must be a 4xx/5xx code, got {settings['json']['error_status']}")

def load_settings(config_path: Optional[str] = None) -> SettingsDict:
    """从指定路径读取配置文件，与默认值合并。"""
    settings = _get_default_settings()

    if config_path is not None:
        if not os.path.exists(config_path):
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path, "r", encoding="utf-8") as f:
            user_config = json.load(f)

        # 合并配置
        server_config = user_config.get("server", {})
        settings["server"]["host"] = server_config.get("host", settings["server"]["host"])
        settings["server"]["port"] = int(server_config.get("port", settings["server"]["port"]))
        settings["server"]["workers"] = int(server_config.get("workers", settings["server"]["workers"]))

        if "log_level" in user_config:
            settings["log_level"] = user_config["log_level"]

        if "app_name" in user_config:
            settings["app_name"] = user_config["app_name"]

        json_config = user_config.get("json", {})
        settings["json"]["limit"] = int(json_config.get("limit", settings["json"]["limit"]))
        settings["json"]["error_status"] = int(json_config.get("error_status", settings["json"]["error_status"]))

        if "host_guards" in user_config:
            settings["host_guards"] = dict(user_config["host_guards"])

    _validate(settings)
    return settings
