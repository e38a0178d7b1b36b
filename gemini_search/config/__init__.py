"""
配置管理包

统一管理应用配置、搜索客户端配置与日志初始化。
"""

from .logging_config import JsonFormatter, setup_logging
from .search_config import (
    SearchSettings,
    get_search_settings,
    normalize_base_url,
    reset_search_settings_cache,
)
from .settings import AppSettings, get_settings, reset_settings_cache

__all__ = [
    "AppSettings",
    "get_settings",
    "reset_settings_cache",
    "SearchSettings",
    "get_search_settings",
    "normalize_base_url",
    "reset_search_settings_cache",
    "JsonFormatter",
    "setup_logging",
]
