"""
错误处理辅助函数

为参数校验与配置校验提供便捷的错误创建函数
"""

from typing import Any, Dict, List, Optional

from .exceptions import (
    BaseError,
    ConfigurationError,
    ErrorCategory,
    ErrorCode,
    ErrorSeverity,
    ValidationError,
)


def validation_error(
    message: str,
    field_name: Optional[str] = None,
    error_code: int = ErrorCode.INVALID_FIELD_FORMAT,
    context: Optional[Dict[str, Any]] = None,
    cause: Optional[Exception] = None,
) -> ValidationError:
    """创建验证错误的便捷函数"""
    return ValidationError(message=message, field_name=field_name, error_code=error_code, context=context, cause=cause)


def required_field_error(field_names: List[str], message: Optional[str] = None) -> ValidationError:
    """创建必填字段错误的便捷函数"""
    if message is None:
        message = f"Missing required field: {', '.join(field_names)}"

    return ValidationError(
        message=message,
        field_name=field_names[0] if len(field_names) == 1 else None,
        error_code=ErrorCode.MISSING_REQUIRED_FIELD,
        context={"required_fields": field_names},
    )


def out_of_range_error(field_name: str, minimum: int, maximum: int, actual_value: Any = None) -> ValidationError:
    """创建数值越界错误的便捷函数"""
    return ValidationError(
        message=f"{field_name} must be a number between {minimum} and {maximum}",
        field_name=field_name,
        field_value=actual_value,
        error_code=ErrorCode.FIELD_VALUE_OUT_OF_RANGE,
        context={"minimum": minimum, "maximum": maximum},
    )


def invalid_format_error(field_name: str, expected_format: str, actual_value: Any = None) -> ValidationError:
    """创建格式错误的便捷函数"""
    message = f"Invalid {field_name} format"
    if actual_value is not None:
        message = f"{message}: {actual_value}"

    return ValidationError(
        message=message,
        field_name=field_name,
        field_value=actual_value,
        error_code=ErrorCode.INVALID_FIELD_FORMAT,
        context={"expected_format": expected_format},
    )


def configuration_error(setting: str, message: str, cause: Optional[Exception] = None) -> ConfigurationError:
    """创建配置错误的便捷函数"""
    return ConfigurationError(message=message, setting=setting, cause=cause)


def system_error(message: str, cause: Optional[Exception] = None) -> BaseError:
    """未分类异常统一包装为系统错误"""
    return BaseError(
        message=message,
        error_code=ErrorCode.INTERNAL_SERVER_ERROR,
        category=ErrorCategory.SYSTEM,
        severity=ErrorSeverity.HIGH,
        cause=cause,
    )
