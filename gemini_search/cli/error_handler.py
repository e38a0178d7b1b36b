"""
CLI友好错误处理器

提供用户友好的错误消息和退出码管理
"""

import logging
import sys
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, TextIO

from gemini_search.errors import BaseError, ErrorCategory, ErrorCode, ErrorSeverity, handle_cli_error


class ExitCode(Enum):
    """CLI退出码定义"""

    SUCCESS = 0
    GENERAL_ERROR = 1
    PERMISSION_DENIED = 3
    NETWORK_ERROR = 5
    CONFIGURATION_ERROR = 7
    VALIDATION_ERROR = 8
    SYSTEM_ERROR = 10
    EXTERNAL_SERVICE_ERROR = 11
    INTERRUPTED = 130


@dataclass
class CLIErrorInfo:
    """CLI错误信息"""

    exit_code: int
    message: str
    suggestions: List[str] = field(default_factory=list)
    show_help: bool = False
    verbose_info: Optional[str] = None


class CLIErrorHandler:
    """
    CLI错误处理器

    提供友好的错误消息和合适的退出码
    """

    def __init__(self, verbose: bool = False, stream: Optional[TextIO] = None):
        self.verbose = verbose
        self.stream = stream
        self.logger = logging.getLogger(__name__)

    def handle_error(self, error: BaseException) -> CLIErrorInfo:
        if isinstance(error, BaseError):
            return self._handle_custom_error(error)
        return self._handle_standard_error(error)

    def _handle_custom_error(self, error: BaseError) -> CLIErrorInfo:
        suggestions = list(error.suggestions)
        if error.severity == ErrorSeverity.CRITICAL:
            suggestions.append("Contact the service administrator")
        if error.category == ErrorCategory.VALIDATION:
            suggestions.append("Use --help to see parameter descriptions")

        return CLIErrorInfo(
            exit_code=self._determine_exit_code(error),
            message=f"Error: {error.message}",
            suggestions=suggestions,
            show_help=error.category == ErrorCategory.VALIDATION,
            verbose_info=handle_cli_error(error, verbose=True) if self.verbose else None,
        )

    def _handle_standard_error(self, error: BaseException) -> CLIErrorInfo:
        error_type = type(error).__name__
        error_message = str(error)

        if isinstance(error, KeyboardInterrupt):
            return CLIErrorInfo(exit_code=ExitCode.INTERRUPTED.value, message="Operation interrupted by user")

        return CLIErrorInfo(
            exit_code=ExitCode.GENERAL_ERROR.value,
            message=f"Error: Unknown error ({error_type}): {error_message}",
            suggestions=["Retry later", "Report this error if problem persists"],
            verbose_info=handle_cli_error(error, verbose=True) if self.verbose else None,
        )

    def _determine_exit_code(self, error: BaseError) -> int:
        """根据错误类型确定退出码"""
        if error.error_code == ErrorCode.CONFIGURATION_ERROR:
            return ExitCode.CONFIGURATION_ERROR.value

        category_exit_code_map = {
            ErrorCategory.VALIDATION: ExitCode.VALIDATION_ERROR.value,
            ErrorCategory.SYSTEM: ExitCode.SYSTEM_ERROR.value,
            ErrorCategory.NETWORK: ExitCode.NETWORK_ERROR.value,
            ErrorCategory.AUTHENTICATION: ExitCode.PERMISSION_DENIED.value,
            ErrorCategory.EXTERNAL_SERVICE: ExitCode.EXTERNAL_SERVICE_ERROR.value,
        }
        return category_exit_code_map.get(error.category, ExitCode.GENERAL_ERROR.value)

    def print_error(self, error_info: CLIErrorInfo) -> None:
        """打印错误信息到 stderr"""
        stream = self.stream or sys.stderr
        print(error_info.message, file=stream)

        if error_info.suggestions:
            print("\n💡 Suggestions:", file=stream)
            for suggestion in error_info.suggestions:
                print(f"   • {suggestion}", file=stream)

        if error_info.show_help:
            print("\nUse --help for complete help information", file=stream)

        if error_info.verbose_info and self.verbose:
            print("\n🔍 Detailed information:", file=stream)
            print(error_info.verbose_info, file=stream)


def handle_cli_exception(error: Exception, verbose: bool = False, stream: Optional[TextIO] = None) -> int:
    """
    处理CLI异常的便捷函数

    Returns:
        退出码
    """
    handler = CLIErrorHandler(verbose=verbose, stream=stream)
    error_info = handler.handle_error(error)
    handler.print_error(error_info)
    return error_info.exit_code
