"""
测试配置和共用固件

提供脚本化的假后端：替换 client 模块中的 aiohttp.ClientSession 与 asyncio.sleep，
记录每次发出的请求与退避延迟。
"""

import asyncio
import json
from typing import Any, Dict, List, Union

import aiohttp
import pytest

from gemini_search.config import SearchSettings, reset_search_settings_cache
import gemini_search.web_search.client as client_module

ENV_KEYS = [
    "GEMINI_BASE_URL",
    "GEMINI_API_KEY",
    "GEMINI_MODEL",
    "GEMINI_TIMEOUT",
    "GEMINI_MAX_RETRIES",
    "GEMINI_RETRY_DELAY",
    "APP_ENV",
    "ENVIRONMENT",
    "LOG_LEVEL",
    "LOG_FORMAT",
]


def completion(content: Any) -> Dict[str, Any]:
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


class _FakeResponse:
    def __init__(self, status: int, body: Union[str, bytes]) -> None:
        self.status = status
        self._body = body

    async def text(self) -> str:
        if isinstance(self._body, bytes):
            return self._body.decode("utf-8")
        return self._body


class _FakeRequestContext:
    def __init__(self, outcome: Union[Exception, _FakeResponse]) -> None:
        self._outcome = outcome

    async def __aenter__(self) -> _FakeResponse:
        if isinstance(self._outcome, Exception):
            raise self._outcome
        return self._outcome

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        return False


class FakeBackend:
    """Scripted chat-completion backend; the last scripted outcome repeats."""

    def __init__(self) -> None:
        self.outcomes: List[Union[Exception, _FakeResponse]] = []
        self.requests: List[Dict[str, Any]] = []
        self.timeouts: List[Any] = []
        self.delays: List[float] = []

    def respond(self, status: int = 200, body: Any = None) -> "FakeBackend":
        if body is None:
            body = completion("OK")
        if not isinstance(body, (str, bytes)):
            body = json.dumps(body, ensure_ascii=False)
        self.outcomes.append(_FakeResponse(status, body))
        return self

    def reply(self, content: Any) -> "FakeBackend":
        return self.respond(200, completion(content))

    def fail(self, exc: Exception) -> "FakeBackend":
        self.outcomes.append(exc)
        return self

    def _next(self) -> Union[Exception, _FakeResponse]:
        index = min(len(self.requests) - 1, len(self.outcomes) - 1)
        return self.outcomes[index]

    @property
    def calls(self) -> int:
        return len(self.requests)

    def session_factory(self, *args: Any, **kwargs: Any) -> "_FakeSession":
        self.timeouts.append(kwargs.get("timeout"))
        return _FakeSession(self)


class _FakeSession:
    def __init__(self, backend: FakeBackend) -> None:
        self._backend = backend

    async def __aenter__(self) -> "_FakeSession":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        return False

    def post(self, url: str, headers: Dict[str, str] = None, json: Dict[str, Any] = None) -> _FakeRequestContext:
        self._backend.requests.append({"url": url, "headers": dict(headers or {}), "json": json})
        return _FakeRequestContext(self._backend._next())


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """隔离环境变量与配置缓存"""
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    reset_search_settings_cache()
    yield
    reset_search_settings_cache()


@pytest.fixture()
def backend(monkeypatch) -> FakeBackend:
    fake = FakeBackend()

    async def fake_sleep(delay: float) -> None:
        fake.delays.append(delay)

    monkeypatch.setattr(client_module.aiohttp, "ClientSession", fake.session_factory)
    monkeypatch.setattr(client_module.asyncio, "sleep", fake_sleep)
    return fake


@pytest.fixture()
def settings() -> SearchSettings:
    return SearchSettings(
        base_url="https://gemini.example.com/",
        api_key="test-key",
        timeout=5.0,
        max_retries=3,
        retry_delay=0.5,
    )


@pytest.fixture()
def timeout_error() -> Exception:
    return asyncio.TimeoutError()


@pytest.fixture()
def connection_error() -> Exception:
    return aiohttp.ClientConnectionError("Connection reset by peer")
