"""
Gemini web search package.

Expose the request pipeline, the search engine, the skill dispatch layer and
a tool definition compatible with toolbox-style integrations.
"""

from .client import GeminiClient
from .handler import GeminiSearchSkill, gemini_search_handler, get_default_skill, reset_default_skill
from .result import FetchResult, StructuredSearchResult
from .search import GeminiSearch, clamp_num_results, decode_structured

gemini_search_tool = {
    "name": "gemini_search",
    "description": "使用 Gemini 内置 Google 搜索进行网络搜索，或获取并分析网页内容。",
    "category": "information_retrieval",
    "parameters_schema": {
        "type": "object",
        "properties": {
            "command": {
                "type": "string",
                "description": "search 或 fetch",
                "enum": ["search", "fetch"],
                "default": "search",
            },
            "query": {
                "type": "string",
                "description": "搜索查询字符串（search 必填，最长 1000 字符）",
            },
            "numResults": {
                "type": "integer",
                "description": "搜索结果数量（1-100，小数取整数部分）",
                "default": 10,
                "minimum": 1,
                "maximum": 100,
            },
            "timeRange": {
                "type": "string",
                "description": "搜索时间范围，如 1d、1w、1m",
            },
            "structured": {
                "type": "boolean",
                "description": "要求模型返回 JSON 结构化结果",
                "default": False,
            },
            "url": {
                "type": "string",
                "description": "需要获取的网页地址（fetch 必填）",
            },
            "prompt": {
                "type": "string",
                "description": "网页分析任务说明（可选，最长 2000 字符）",
            },
        },
        "required": ["command"],
    },
    "handler": gemini_search_handler,
    "tags": [
        "search",
        "web",
        "fetch",
        "gemini",
        "google_search",
    ],
    "examples": [
        "搜索人工智能最新发展",
        "总结 https://example.com 的主要内容",
    ],
}

__all__ = [
    "GeminiClient",
    "GeminiSearch",
    "GeminiSearchSkill",
    "FetchResult",
    "StructuredSearchResult",
    "clamp_num_results",
    "decode_structured",
    "gemini_search_handler",
    "gemini_search_tool",
    "get_default_skill",
    "reset_default_skill",
]
