#!/usr/bin/env python3
"""
集中化应用配置（AppSettings）

目标：
- 统一管理日志、运行环境与 Gemini 兼容接口的地址、密钥、重试参数
- 默认从环境变量加载，支持 .env（如存在）
- 搜索核心只接收显式的 SearchSettings，不直接读取环境变量
"""
from functools import lru_cache
from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # 日志配置
    log_level: str = Field(default="INFO")
    # json|plain
    log_format: str = Field(default="json")
    # production 模式下仅输出 ERROR 及以上
    app_env: str = Field(default="development", validation_alias=AliasChoices("APP_ENV", "ENVIRONMENT"))

    # Gemini（OpenAI 兼容）接口配置
    gemini_base_url: Optional[str] = Field(default=None)
    gemini_api_key: Optional[str] = Field(default=None)
    gemini_model: str = Field(default="gemini-2.5-flash-lite")
    gemini_timeout: float = Field(default=30.0)
    gemini_max_retries: int = Field(default=3)
    gemini_retry_delay: float = Field(default=1.0)

    @property
    def is_production(self) -> bool:
        return self.app_env.strip().lower() == "production"


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    """获取全局应用配置（带缓存）"""
    return AppSettings()


def reset_settings_cache() -> None:
    """测试场景下清理缓存"""

    get_settings.cache_clear()  # type: ignore[attr-defined]
