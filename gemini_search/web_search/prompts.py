"""Prompt templates for the search and fetch operations."""

from typing import Optional

STRUCTURED_SCHEMA_PROMPT = (
    "Respond with a JSON object only, using this schema: "
    '{"results": [{"title": string, "snippet": string, "url": string, "source": string}], '
    '"summary": string}. '
    "Each entry in 'results' is one search result; 'summary' is an overall summary of the findings."
)


def build_search_prompt(
    query: str,
    num_results: int,
    time_range: Optional[str] = None,
    structured: bool = False,
) -> str:
    prompt = f'请搜索"{query}"，返回{num_results}个相关结果。'

    if time_range:
        prompt += f" 时间范围限制：{time_range}。"

    if structured:
        prompt += f"\n{STRUCTURED_SCHEMA_PROMPT}"

    return prompt


def build_fetch_prompt(url: str, prompt: Optional[str] = None) -> str:
    if prompt:
        return f"Please fetch and analyze the content from {url}. Task: {prompt}"
    return f"Please fetch and summarize the content from {url}"
