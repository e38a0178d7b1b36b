"""
Gemini search engine.

Turns ``search`` / ``fetch`` requests into prompts for the completion
pipeline and normalises what comes back.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union
from urllib.parse import urlparse

from gemini_search.config import SearchSettings
from gemini_search.errors import OperationError, invalid_format_error, validation_error

from .client import GOOGLE_SEARCH_TOOL, JSON_OBJECT_FORMAT, GeminiClient
from .prompts import build_fetch_prompt, build_search_prompt
from .result import FetchResult, StructuredSearchResult

logger = logging.getLogger(__name__)

DEFAULT_NUM_RESULTS = 10
MIN_NUM_RESULTS = 1
MAX_NUM_RESULTS = 100
DECODE_ERROR_MARKER = "Failed to parse structured response"


def clamp_num_results(value: Any) -> int:
    """Coerce to int and clamp to [1, 100]; non-numeric values fall back to 10."""
    try:
        number = int(value)
    except (TypeError, ValueError):
        return DEFAULT_NUM_RESULTS
    return max(MIN_NUM_RESULTS, min(MAX_NUM_RESULTS, number))


def is_valid_url(url: Any) -> bool:
    if not isinstance(url, str) or not url.strip():
        return False
    try:
        parsed = urlparse(url.strip())
    except ValueError:
        return False
    return bool(parsed.scheme) and bool(parsed.netloc)


def strip_code_fences(text: str) -> str:
    cleaned = text.strip()
    if cleaned.startswith("```"):
        lines = cleaned.splitlines()
        # drop opening fence
        while lines and lines[0].startswith("```"):
            lines.pop(0)
        # drop trailing fence
        while lines and lines[-1].strip().startswith("```"):
            lines.pop()
        cleaned = "\n".join(lines).strip()
    return cleaned


def decode_structured(text: str) -> Dict[str, Any]:
    """Parse a structured search reply, degrading to a fallback object instead of raising."""
    try:
        data = json.loads(strip_code_fences(text))
    except (ValueError, RecursionError) as exc:
        logger.warning("Structured search response is not valid JSON: %s", exc)
        return StructuredSearchResult(summary=text, error=f"{DECODE_ERROR_MARKER}: {exc}").to_dict()

    if not isinstance(data, dict) or not isinstance(data.get("results"), list):
        logger.warning("Structured search response lacks a 'results' list")
        return StructuredSearchResult(
            summary=text,
            error=f"{DECODE_ERROR_MARKER}: missing 'results' list",
        ).to_dict()
    return data


class GeminiSearch:
    """Search and fetch operations on top of :class:`GeminiClient`."""

    def __init__(self, settings: SearchSettings, client: Optional[GeminiClient] = None) -> None:
        self.settings = settings
        self.client = client or GeminiClient(settings)

    async def search(
        self,
        query: str,
        *,
        num_results: Any = DEFAULT_NUM_RESULTS,
        time_range: Optional[str] = None,
        structured: bool = False,
        model: Optional[str] = None,
    ) -> Union[str, Dict[str, Any]]:
        try:
            query_text = query.strip() if isinstance(query, str) else ""
            if not query_text:
                raise validation_error("Query cannot be empty", field_name="query")

            count = clamp_num_results(num_results)
            prompt = build_search_prompt(query_text, count, time_range, structured=structured)
            text = await self.client.submit(
                [{"role": "user", "content": prompt}],
                tools=GOOGLE_SEARCH_TOOL,
                response_format=JSON_OBJECT_FORMAT if structured else None,
                model=model,
            )
        except Exception as exc:
            raise OperationError("search", exc) from exc

        if structured:
            return decode_structured(text)
        return text

    async def fetch(
        self,
        url: str,
        prompt: Optional[str] = None,
        *,
        model: Optional[str] = None,
    ) -> FetchResult:
        try:
            if not is_valid_url(url):
                raise invalid_format_error("URL", "absolute URL with scheme and host", url)

            text = await self.client.submit(
                [{"role": "user", "content": build_fetch_prompt(url, prompt)}],
                model=model,
            )
        except Exception as exc:
            raise OperationError("fetch", exc) from exc

        return FetchResult(
            url=url,
            content=text,
            timestamp=datetime.now(timezone.utc).isoformat(),
        )

    def config(self) -> Dict[str, Any]:
        return self.client.config()
