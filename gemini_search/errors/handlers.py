"""
统一错误输出格式处理器

将错误渲染为 CLI 友好的文本
"""

from .exceptions import BaseError, ErrorSeverity
from .helpers import system_error


class ErrorResponseFormatter:
    """错误响应格式化器"""

    @staticmethod
    def format_for_cli(error: BaseError, verbose: bool = False) -> str:
        """
        格式化为CLI友好的错误输出

        Args:
            error: 基础错误实例
            verbose: 是否显示详细信息

        Returns:
            CLI格式的错误消息字符串
        """
        severity_icons = {
            ErrorSeverity.LOW: "ℹ️",
            ErrorSeverity.MEDIUM: "⚠️",
            ErrorSeverity.HIGH: "❌",
            ErrorSeverity.CRITICAL: "🚨",
        }

        icon = severity_icons.get(error.severity, "❌")

        lines = [f"{icon} Error [{error.error_code}]: {error.message}"]

        if error.suggestions:
            lines.append("Suggestions:")
            for suggestion in error.suggestions:
                lines.append(f"     • {suggestion}")

        if verbose:
            lines.append(f"   Category: {error.category.value}")
            lines.append(f"   Error ID: {error.error_id}")
            if error.context:
                lines.append("Context:")
                for key, value in error.context.items():
                    lines.append(f"     - {key}: {value}")
            lines.append(f"Time: {error.timestamp.strftime('%Y-%m-%d %H:%M:%S')}")
            if error.cause:
                lines.append(f"Root cause: {type(error.cause).__name__}: {error.cause}")

        return "\n".join(lines)


def handle_cli_error(exception: Exception, verbose: bool = False) -> str:
    """CLI错误处理便捷函数，非 BaseError 统一转换为 SystemError 语义"""
    if isinstance(exception, BaseError):
        error = exception
    else:
        error = system_error(str(exception) or type(exception).__name__, cause=exception)
    return ErrorResponseFormatter.format_for_cli(error, verbose)
