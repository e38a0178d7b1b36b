"""
Web Search 配置

SearchSettings 是客户端生命周期内不可变的配置记录：接口基地址、密钥、
模型名称、超时与重试参数。构造时即校验，非法值直接抛出 ConfigurationError。
"""

from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Dict
from urllib.parse import urlparse

from pydantic import ValidationError as PydanticValidationError

from gemini_search.errors import ConfigurationError, configuration_error

from .settings import get_settings, reset_settings_cache

DEFAULT_MODEL = "gemini-2.5-flash-lite"
DEFAULT_TIMEOUT = 30.0
DEFAULT_MAX_RETRIES = 3
DEFAULT_RETRY_DELAY = 1.0


def normalize_base_url(base_url: str) -> str:
    """校验并去掉末尾的 '/'，重复调用结果不变"""

    value = (base_url or "").strip()
    if not value:
        raise configuration_error("GEMINI_BASE_URL", "GEMINI_BASE_URL is required")

    parsed = urlparse(value)
    if parsed.scheme not in {"http", "https"} or not parsed.netloc:
        raise configuration_error(
            "GEMINI_BASE_URL",
            f"Invalid GEMINI_BASE_URL format: {value}",
        )
    return value.rstrip("/")


@dataclass(slots=True, frozen=True)
class SearchSettings:
    """Gemini Search 客户端配置"""

    base_url: str
    api_key: str
    model: str = DEFAULT_MODEL
    timeout: float = DEFAULT_TIMEOUT
    max_retries: int = DEFAULT_MAX_RETRIES
    retry_delay: float = DEFAULT_RETRY_DELAY

    def __post_init__(self) -> None:
        object.__setattr__(self, "base_url", normalize_base_url(self.base_url))

        api_key = (self.api_key or "").strip()
        if not api_key:
            raise configuration_error("GEMINI_API_KEY", "GEMINI_API_KEY is required")
        object.__setattr__(self, "api_key", api_key)

        model = (self.model or "").strip()
        if not model:
            raise configuration_error("GEMINI_MODEL", "Model identifier cannot be empty")
        object.__setattr__(self, "model", model)

        if self.timeout <= 0:
            raise configuration_error("GEMINI_TIMEOUT", "Timeout must be positive")
        if int(self.max_retries) < 1:
            raise configuration_error("GEMINI_MAX_RETRIES", "Maximum attempts must be at least 1")
        object.__setattr__(self, "max_retries", int(self.max_retries))
        if self.retry_delay < 0:
            raise configuration_error("GEMINI_RETRY_DELAY", "Retry delay cannot be negative")

    @property
    def completions_url(self) -> str:
        return f"{self.base_url}/v1/chat/completions"

    def describe(self) -> Dict[str, Any]:
        """诊断信息，不包含密钥"""
        return {
            "url": self.completions_url,
            "model": self.model,
            "timeout": self.timeout,
            "max_retries": self.max_retries,
            "retry_delay": self.retry_delay,
            "has_api_key": bool(self.api_key),
        }


@lru_cache(maxsize=1)
def get_search_settings() -> SearchSettings:
    """读取 AppSettings（环境变量 / .env）并返回校验后的 SearchSettings"""

    try:
        settings = get_settings()
    except PydanticValidationError as exc:
        raise ConfigurationError(f"Invalid configuration: {exc}", cause=exc) from exc

    return SearchSettings(
        base_url=settings.gemini_base_url or "",
        api_key=settings.gemini_api_key or "",
        model=settings.gemini_model or DEFAULT_MODEL,
        timeout=settings.gemini_timeout,
        max_retries=settings.gemini_max_retries,
        retry_delay=settings.gemini_retry_delay,
    )


def reset_search_settings_cache() -> None:
    """测试场景下清理缓存"""

    reset_settings_cache()
    get_search_settings.cache_clear()  # type: ignore[attr-defined]
