"""
日志配置模块：
- 使用 dictConfig 提供结构化的日志配置。
- 统一应用日志和 uvicorn 访问日志的格式。
- 注入 request_id 与 worker 名，以便区分不同副本上的请求。
"""

import logging
import threading
from typing import Dict, Any

from ..core.middleware import request_id_var

class RequestIdFilter(logging.Filter):
    """一个将请求 ID 注入日志记录的过滤器。"""
    def filter(self, record):
        record.request_id = request_id_var.get()
        return True

class WorkerNameFilter(logging.Filter):
    """worker 线程名形如 worker-N，主线程记为 main。"""
    def filter(self, record):
        name = threading.current_thread().name
        record.worker = name if name.startswith("worker-") else "main"
        return True

def _stream_handler(formatter: str) -> Dict[str, Any]:
    return {
        "class": "logging.StreamHandler",
        "formatter": formatter,
        "filters": ["request_id_filter", "worker_filter"],
        "stream": "ext://sys.stdout",
    }

def get_logging_config(log_level: str) -> Dict[str, Any]:
    """
    生成日志配置字典。
    """
    LOG_LEVEL = log_level.upper()

    loggers = {
        "webtour": {"handlers": ["default"], "level": LOG_LEVEL, "propagate": False},
        # 移除 uvicorn 根 logger 的 handler，避免重复
        "uvicorn": {"handlers": [], "level": LOG_LEVEL, "propagate": False},
    }
    for name, handler in (("uvicorn.error", "default"), ("uvicorn.access", "access")):
        loggers[name] = {"handlers": [handler], "level": LOG_LEVEL, "propagate": False}

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "request_id_filter": {"()": RequestIdFilter},
            "worker_filter": {"()": WorkerNameFilter},
        },
        "formatters": {
            "default": {
                "format": "%(asctime)s - %(worker)s - %(name)s - %(levelname)s - [%(request_id)s] - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "access": {
                "format": "%(asctime)s - %(worker)s - [%(request_id)s] - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": {
            "default": _stream_handler("default"),
            "access": _stream_handler("access"),
        },
        "loggers": loggers,
    }
