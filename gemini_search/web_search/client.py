import asyncio
import json
import logging
from typing import Any, Dict, List, Optional, Sequence

import aiohttp

from gemini_search.config import SearchSettings
from gemini_search.errors import (
    AuthenticationError,
    ErrorCode,
    NetworkError,
    RateLimitError,
    RequestTimeoutError,
    ResponseFormatError,
    validation_error,
)

logger = logging.getLogger(__name__)

TEMPERATURE = 0.7
GOOGLE_SEARCH_TOOL: List[Dict[str, Any]] = [{"google_search": {}}]
JSON_OBJECT_FORMAT: Dict[str, str] = {"type": "json_object"}


class _RetryableFailure(Exception):
    """单次尝试的可重试失败（超时 / 网络 / 5xx / 429）"""

    def __init__(self, kind: str, detail: str, status: Optional[int] = None) -> None:
        super().__init__(detail)
        self.kind = kind
        self.detail = detail
        self.status = status


class GeminiClient:
    """
    OpenAI-compatible chat completion client with bounded retry.

    Responsibilities:
    - Build the request body (model, messages, temperature, tools, response_format)
    - Enforce a per-attempt timeout through aiohttp.ClientTimeout
    - Retry timeouts, transport errors, HTTP 5xx and HTTP 429 with exponential backoff
    - Fail immediately on HTTP 401, other 4xx and malformed response bodies
    """

    def __init__(self, settings: SearchSettings) -> None:
        self.settings = settings

    @property
    def url(self) -> str:
        return self.settings.completions_url

    def build_payload(
        self,
        messages: Sequence[Dict[str, str]],
        *,
        tools: Optional[List[Dict[str, Any]]] = None,
        response_format: Optional[Dict[str, Any]] = None,
        model: Optional[str] = None,
    ) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "model": model or self.settings.model,
            "messages": [{"role": m["role"], "content": m["content"]} for m in messages],
            "temperature": TEMPERATURE,
        }
        if tools:
            payload["tools"] = tools
        if response_format:
            payload["response_format"] = response_format
        return payload

    def _headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.settings.api_key}",
        }

    def backoff_delay(self, attempt: int) -> float:
        """Delay before attempt ``attempt + 1``."""
        return self.settings.retry_delay * (2 ** (attempt - 1))

    async def submit(
        self,
        messages: Sequence[Dict[str, str]],
        *,
        tools: Optional[List[Dict[str, Any]]] = None,
        response_format: Optional[Dict[str, Any]] = None,
        model: Optional[str] = None,
    ) -> str:
        """
        Send one logical completion request and return the message content.

        Raises:
            ValidationError: empty message list
            AuthenticationError: HTTP 401
            RequestTimeoutError / RateLimitError / NetworkError: retries exhausted
                or a non-retryable 4xx
            ResponseFormatError: 2xx body without choices[0].message.content
        """
        if not messages:
            raise validation_error("messages cannot be empty", field_name="messages")

        payload = self.build_payload(messages, tools=tools, response_format=response_format, model=model)
        max_attempts = self.settings.max_retries
        attempt = 1

        while True:
            logger.debug(
                "Gemini request attempt %d/%d",
                attempt,
                max_attempts,
                extra={"url": self.url, "model": payload["model"]},
            )
            try:
                return await self._attempt(payload)
            except _RetryableFailure as failure:
                if attempt >= max_attempts:
                    logger.error(
                        "Gemini request failed after %d attempts: %s",
                        attempt,
                        failure.detail,
                        extra={"kind": failure.kind, "status": failure.status},
                    )
                    raise self._exhausted_error(failure, attempt) from failure

                delay = self.backoff_delay(attempt)
                logger.warning(
                    "Gemini request attempt %d/%d failed (%s), retrying in %.2fs",
                    attempt,
                    max_attempts,
                    failure.detail,
                    delay,
                    extra={"kind": failure.kind, "status": failure.status},
                )
                await asyncio.sleep(delay)
                attempt += 1

    async def _attempt(self, payload: Dict[str, Any]) -> str:
        timeout = aiohttp.ClientTimeout(total=self.settings.timeout)
        body_error: Optional[UnicodeDecodeError] = None
        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.post(self.url, headers=self._headers(), json=payload) as response:
                    status = response.status
                    try:
                        raw_text = await response.text()
                    except UnicodeDecodeError as exc:
                        raw_text, body_error = "", exc
        except asyncio.TimeoutError as exc:
            raise _RetryableFailure("timeout", "Request timeout") from exc
        except aiohttp.ClientError as exc:
            raise _RetryableFailure("network", f"{type(exc).__name__}: {exc}") from exc

        if status == 401:
            raise AuthenticationError(
                "Invalid API key (HTTP 401)",
                context={"url": self.url, "status_code": status},
            )
        if status == 429:
            raise _RetryableFailure("rate_limited", "HTTP 429", status=status)
        if status >= 500:
            raise _RetryableFailure("http_error", f"HTTP {status}", status=status)
        if not 200 <= status < 300:
            raise NetworkError(
                f"API request failed with status: {status}: {raw_text[:200]}",
                url=self.url,
                status_code=status,
                attempts=1,
                error_code=ErrorCode.HTTP_CLIENT_ERROR,
            )
        if body_error is not None:
            raise ResponseFormatError(
                f"Response body is not valid text: {body_error}",
                cause=body_error,
            ) from body_error
        return self._extract_content(raw_text)

    @staticmethod
    def _extract_content(raw_text: str) -> str:
        try:
            data = json.loads(raw_text)
        except (ValueError, RecursionError) as exc:
            raise ResponseFormatError(f"Invalid JSON response: {exc}", raw=raw_text, cause=exc) from exc

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as exc:
            raise ResponseFormatError("Invalid API response format", raw=data, cause=exc) from exc

        if not isinstance(content, str):
            raise ResponseFormatError("Invalid API response format: message content is not text", raw=data)
        return content

    def _exhausted_error(self, failure: _RetryableFailure, attempts: int) -> NetworkError:
        message = f"{failure.detail} after {attempts} attempt(s)"
        if failure.kind == "timeout":
            return RequestTimeoutError(
                message,
                url=self.url,
                attempts=attempts,
                timeout=self.settings.timeout,
                cause=failure,
            )
        if failure.kind == "rate_limited":
            return RateLimitError(message, url=self.url, attempts=attempts, cause=failure)
        if failure.kind == "http_error":
            return NetworkError(
                message,
                url=self.url,
                status_code=failure.status,
                attempts=attempts,
                error_code=ErrorCode.HTTP_SERVER_ERROR,
                cause=failure,
            )
        return NetworkError(message, url=self.url, attempts=attempts, cause=failure)

    def config(self) -> Dict[str, Any]:
        return self.settings.describe()
