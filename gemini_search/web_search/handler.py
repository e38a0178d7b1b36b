import logging
from typing import Any, Dict, Optional

from gemini_search import __version__
from gemini_search.config import SearchSettings, get_search_settings
from gemini_search.errors import (
    BaseError,
    ErrorCode,
    invalid_format_error,
    out_of_range_error,
    required_field_error,
    validation_error,
)

from .search import DEFAULT_NUM_RESULTS, MAX_NUM_RESULTS, MIN_NUM_RESULTS, GeminiSearch, is_valid_url

logger = logging.getLogger(__name__)

MAX_QUERY_LENGTH = 1000
MAX_PROMPT_LENGTH = 2000
COMMANDS = ("search", "fetch")


def _validate_num_results(value: Any) -> int:
    """整数部分生效：5.5 与 "5.5" 均视为 5"""
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise out_of_range_error("numResults", MIN_NUM_RESULTS, MAX_NUM_RESULTS, value)
    try:
        number = int(float(value.strip())) if isinstance(value, str) else int(value)
    except (ValueError, OverflowError):
        raise out_of_range_error("numResults", MIN_NUM_RESULTS, MAX_NUM_RESULTS, value) from None
    if number < MIN_NUM_RESULTS or number > MAX_NUM_RESULTS:
        raise out_of_range_error("numResults", MIN_NUM_RESULTS, MAX_NUM_RESULTS, value)
    return number


class GeminiSearchSkill:
    """
    Gemini Search Skill

    提供网络搜索（search）和网页内容获取（fetch）两个命令，负责参数校验，
    并将请求委托给 GeminiSearch。
    """

    name = "gemini-search"
    description = "Web search and page analysis through a Gemini model with the built-in Google Search tool"

    def __init__(self, settings: Optional[SearchSettings] = None) -> None:
        self._settings = settings
        self.engine: Optional[GeminiSearch] = None
        self.initialized = False

    def initialize(self) -> None:
        if self.initialized:
            logger.debug("Skill already initialized")
            return

        logger.info("Initializing Gemini Search Skill")
        try:
            settings = self._settings or get_search_settings()
            self.engine = GeminiSearch(settings)
        except BaseError:
            logger.error("Failed to initialize skill")
            raise
        self._settings = settings
        self.initialized = True
        logger.info("Skill initialized successfully")

    async def execute(self, command: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        执行命令

        Args:
            command: 命令名称 (search 或 fetch)
            params: 命令参数
        """
        if not self.initialized:
            self.initialize()

        params = dict(params or {})
        logger.info("Executing command: %s", command, extra={"params": params})

        try:
            if command == "search":
                result = await self.search(params)
            elif command == "fetch":
                result = await self.fetch(params)
            else:
                raise validation_error(
                    f"Unknown command: {command}. Available commands: {', '.join(COMMANDS)}",
                    field_name="command",
                    error_code=ErrorCode.UNKNOWN_COMMAND,
                )
        except BaseError as exc:
            logger.error("Command %s failed", command, extra={"error": exc.message})
            raise

        logger.info("Command %s executed successfully", command)
        return result

    async def search(self, params: Dict[str, Any]) -> Dict[str, Any]:
        query = params.get("query")
        if query is None or query == "":
            raise required_field_error(["query"], "Query parameter is required for search")
        if not isinstance(query, str):
            raise validation_error("Query must be a string", field_name="query")

        trimmed_query = query.strip()
        if not trimmed_query:
            raise validation_error("Query cannot be empty", field_name="query")
        if len(trimmed_query) > MAX_QUERY_LENGTH:
            raise validation_error(
                f"Query too long (max {MAX_QUERY_LENGTH} characters)",
                field_name="query",
                error_code=ErrorCode.FIELD_VALUE_OUT_OF_RANGE,
            )

        num_results = _validate_num_results(params.get("numResults", DEFAULT_NUM_RESULTS))
        time_range = params.get("timeRange") or None
        structured = bool(params.get("structured", False))

        results = await self.engine.search(
            trimmed_query,
            num_results=num_results,
            time_range=time_range,
            structured=structured,
            model=params.get("model"),
        )

        return {
            "success": True,
            "command": "search",
            "query": trimmed_query,
            "numResults": num_results,
            "timeRange": time_range,
            "structured": structured,
            "results": results,
        }

    async def fetch(self, params: Dict[str, Any]) -> Dict[str, Any]:
        url = params.get("url")
        if not url:
            raise required_field_error(["url"], "URL parameter is required for fetch")
        if not is_valid_url(url):
            raise invalid_format_error("URL", "absolute URL with scheme and host", url)

        prompt = params.get("prompt") or ""
        if isinstance(prompt, str) and len(prompt) > MAX_PROMPT_LENGTH:
            raise validation_error(
                f"Prompt too long (max {MAX_PROMPT_LENGTH} characters)",
                field_name="prompt",
                error_code=ErrorCode.FIELD_VALUE_OUT_OF_RANGE,
            )

        result = await self.engine.fetch(url, prompt or None, model=params.get("model"))

        return {"success": True, "command": "fetch", **result.to_dict()}

    def get_info(self) -> Dict[str, Any]:
        info: Dict[str, Any] = {
            "name": self.name,
            "version": __version__,
            "description": self.description,
            "commands": list(COMMANDS),
            "initialized": self.initialized,
        }
        if self.engine is not None:
            info["config"] = self.engine.config()
        return info


_default_skill: Optional[GeminiSearchSkill] = None


def get_default_skill() -> GeminiSearchSkill:
    global _default_skill
    if _default_skill is None:
        _default_skill = GeminiSearchSkill()
    return _default_skill


def reset_default_skill() -> None:
    global _default_skill
    _default_skill = None


def _failure_payload(command: str, error: BaseError) -> Dict[str, Any]:
    return {
        "success": False,
        "command": command,
        "error": error.message,
        "code": error.error_code,
        "category": error.category.value,
        "meta": dict(error.context),
    }


async def gemini_search_handler(command: str = "search", **params: Any) -> Dict[str, Any]:
    """
    Toolbox entry point: returns a success payload, or a failure payload instead of raising.
    """
    skill = get_default_skill()
    try:
        return await skill.execute(command, params)
    except BaseError as exc:
        logger.warning(
            "Gemini search tool error: %s",
            exc.message,
            extra={"command": command, "code": exc.error_code},
        )
        return _failure_payload(command, exc)
