#!/usr/bin/env python3
"""
结构化日志初始化

提供 JSON/普通 文本两种格式，默认 JSON，支持 LOG_LEVEL 与 LOG_FORMAT 环境变量控制。
APP_ENV=production 时只输出 ERROR 及以上级别。
"""
import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .settings import AppSettings, get_settings

_RESERVED_ATTRS = {
    "args",
    "msg",
    "levelno",
    "levelname",
    "name",
    "pathname",
    "filename",
    "module",
    "exc_info",
    "exc_text",
    "stack_info",
    "lineno",
    "funcName",
    "created",
    "msecs",
    "relativeCreated",
    "thread",
    "threadName",
    "processName",
    "process",
    "taskName",
    "message",
}


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        payload: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        # 附加 extra 字段（如有）
        for key, value in getattr(record, "__dict__", {}).items():
            if key in _RESERVED_ATTRS or key.startswith("_"):
                continue
            payload[key] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def resolve_log_level(settings: AppSettings) -> int:
    if settings.is_production:
        return logging.ERROR
    level_name = str(settings.log_level).upper()
    return getattr(logging, level_name, logging.INFO)


def setup_logging(settings: Optional[AppSettings] = None, stream=None) -> None:
    settings = settings or get_settings()
    root = logging.getLogger()
    # 清理已有 handler，避免重复初始化
    for h in list(root.handlers):
        root.removeHandler(h)

    root.setLevel(resolve_log_level(settings))
    # stdout 留给命令输出
    handler = logging.StreamHandler(stream or sys.stderr)

    fmt_name = str(settings.log_format).lower()
    if fmt_name == "json":
        handler.setFormatter(JsonFormatter())
    else:
        formatter = logging.Formatter(fmt="[%(asctime)s] [%(levelname)s] %(name)s: %(message)s")
        handler.setFormatter(formatter)

    root.addHandler(handler)
