"""Command line entry point for gemini-search."""

import argparse
import asyncio
import json
import sys
from typing import Any, Dict, List, Optional

from gemini_search import __version__
from gemini_search.config import setup_logging
from gemini_search.web_search import GeminiSearchSkill

from .error_handler import ExitCode, handle_cli_exception

EPILOG = """\
Environment variables:
  GEMINI_BASE_URL      Base URL of the OpenAI-compatible API
  GEMINI_API_KEY       Gemini API key
  GEMINI_MODEL         Model identifier (default: gemini-2.5-flash-lite)
  GEMINI_TIMEOUT       Request timeout in seconds (default: 30)
  GEMINI_MAX_RETRIES   Maximum attempts per request (default: 3)
  GEMINI_RETRY_DELAY   Base retry delay in seconds (default: 1)

Examples:
  gemini-search search "人工智能最新发展" --num 5
  gemini-search fetch "https://example.com" "总结主要内容"
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gemini-search",
        description="Gemini Search Skill - web search and page analysis via Gemini",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-v", "--version", action="version", version=f"Gemini Search Skill v{__version__}")
    parser.add_argument("--verbose", action="store_true", help="Show detailed error information")

    subparsers = parser.add_subparsers(dest="command", metavar="command")

    search_parser = subparsers.add_parser("search", help="Search the web with Google Search")
    search_parser.add_argument("query", help="Search query")
    search_parser.add_argument("--num", dest="num_results", type=int, default=10, help="Number of results (1-100, default: 10)")
    search_parser.add_argument("--time", dest="time_range", help="Time range, e.g. 1d, 1w, 1m")
    search_parser.add_argument("--structured", action="store_true", help="Request JSON structured results")
    search_parser.add_argument("--model", help="Override the configured model for this call")

    fetch_parser = subparsers.add_parser("fetch", help="Fetch and analyze a web page")
    fetch_parser.add_argument("url", help="Page URL")
    fetch_parser.add_argument("prompt", nargs="?", default="", help="Analysis task (optional)")
    fetch_parser.add_argument("--model", help="Override the configured model for this call")

    subparsers.add_parser("info", help="Show skill information and configuration")

    return parser


def _params_from_args(args: argparse.Namespace) -> Dict[str, Any]:
    if args.command == "search":
        params: Dict[str, Any] = {
            "query": args.query,
            "numResults": args.num_results,
            "structured": args.structured,
        }
        if args.time_range:
            params["timeRange"] = args.time_range
    else:
        params = {"url": args.url}
        if args.prompt:
            params["prompt"] = args.prompt
    if args.model:
        params["model"] = args.model
    return params


def _print_json(payload: Dict[str, Any]) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2))


def main(argv: Optional[List[str]] = None, skill: Optional[GeminiSearchSkill] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return ExitCode.SUCCESS.value

    try:
        setup_logging()
        skill = skill or GeminiSearchSkill()
        if args.command == "info":
            skill.initialize()
            _print_json(skill.get_info())
            return ExitCode.SUCCESS.value

        result = asyncio.run(skill.execute(args.command, _params_from_args(args)))
    except KeyboardInterrupt:
        print("\nOperation interrupted", file=sys.stderr)
        return ExitCode.INTERRUPTED.value
    except Exception as exc:
        return handle_cli_exception(exc, verbose=args.verbose)

    _print_json(result)
    return ExitCode.SUCCESS.value


if __name__ == "__main__":
    sys.exit(main())
