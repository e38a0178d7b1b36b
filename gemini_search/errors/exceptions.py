"""
统一异常处理系统

为搜索管线提供分层错误分类：
- 配置错误：构造时立即失败，不重试
- 输入验证错误：在发出请求之前返回给调用方
- 认证 / 限流 / 网络 / 响应格式错误：由请求管线分类后抛出
"""

import logging
import uuid
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional


class ErrorSeverity(Enum):
    """错误严重程度分级"""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCategory(Enum):
    """错误分类枚举"""

    VALIDATION = "validation"
    SYSTEM = "system"
    NETWORK = "network"
    AUTHENTICATION = "authentication"
    EXTERNAL_SERVICE = "external_service"


class ErrorCode:
    """统一错误码定义"""

    # 验证错误 (2000-2999)
    MISSING_REQUIRED_FIELD = 2001
    INVALID_FIELD_FORMAT = 2002
    FIELD_VALUE_OUT_OF_RANGE = 2003
    UNKNOWN_COMMAND = 2006

    # 系统错误 (3000-3999)
    INTERNAL_SERVER_ERROR = 3001
    CONFIGURATION_ERROR = 3004

    # 网络错误 (4000-4999)
    CONNECTION_FAILED = 4001
    REQUEST_TIMEOUT = 4002
    HTTP_CLIENT_ERROR = 4003
    HTTP_SERVER_ERROR = 4004

    # 认证错误 (6000-6999)
    INVALID_CREDENTIALS = 6004

    # 外部服务错误 (7000-7999)
    LLM_SERVICE_ERROR = 7001
    API_RATE_LIMIT_EXCEEDED = 7004
    INVALID_RESPONSE_FORMAT = 7005


class BaseError(Exception):
    """
    基础错误类

    所有自定义异常的基类，提供统一的错误处理接口
    """

    def __init__(
        self,
        message: str,
        error_code: int,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        suggestions: Optional[List[str]] = None,
    ):
        super().__init__(message)

        # 核心错误信息
        self.message = message
        self.error_code = error_code
        self.category = category
        self.severity = severity

        # 错误追踪信息
        self.error_id = str(uuid.uuid4())
        self.timestamp = datetime.now()

        # 上下文和调试信息
        self.context = context or {}
        self.cause = cause
        self.suggestions = suggestions or []

        self._log_error()

    def _log_error(self):
        """自动记录错误到日志系统"""
        logger = logging.getLogger(self.__class__.__module__)

        log_data = {
            "error_id": self.error_id,
            "error_code": self.error_code,
            "category": self.category.value,
            "severity": self.severity.value,
            "message": self.message,
            "context": self.context,
        }

        if self.severity == ErrorSeverity.CRITICAL:
            logger.critical(f"Critical Error: {log_data}")
        elif self.severity == ErrorSeverity.HIGH:
            logger.error(f"High Severity Error: {log_data}")
        elif self.severity == ErrorSeverity.MEDIUM:
            logger.warning(f"Medium Severity Error: {log_data}")
        else:
            logger.info(f"Low Severity Error: {log_data}")

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典格式，用于工具响应"""
        return {
            "error_id": self.error_id,
            "error_code": self.error_code,
            "category": self.category.value,
            "severity": self.severity.value,
            "message": self.message,
            "timestamp": self.timestamp.isoformat(),
            "context": self.context,
            "suggestions": self.suggestions,
        }

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.category.value}: {self.message}"


class ValidationError(BaseError):
    """
    输入验证错误

    空查询、越界数量、非法 URL 等，永远不会发送到远端
    """

    def __init__(
        self,
        message: str,
        field_name: Optional[str] = None,
        field_value: Any = None,
        error_code: int = ErrorCode.INVALID_FIELD_FORMAT,
        severity: ErrorSeverity = ErrorSeverity.LOW,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        suggestions: Optional[List[str]] = None,
    ):
        validation_context = context or {}
        if field_name:
            validation_context["field_name"] = field_name
        if field_value is not None:
            validation_context["field_value"] = str(field_value)

        super().__init__(
            message=message,
            error_code=error_code,
            category=ErrorCategory.VALIDATION,
            severity=severity,
            context=validation_context,
            cause=cause,
            suggestions=suggestions or ["Check parameter format and value range", "Use --help to view usage"],
        )


class ConfigurationError(BaseError):
    """
    配置错误

    base url / api key 缺失或格式非法，构造客户端时立即失败
    """

    def __init__(
        self,
        message: str,
        setting: Optional[str] = None,
        severity: ErrorSeverity = ErrorSeverity.HIGH,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        suggestions: Optional[List[str]] = None,
    ):
        config_context = context or {}
        if setting:
            config_context["setting"] = setting

        super().__init__(
            message=message,
            error_code=ErrorCode.CONFIGURATION_ERROR,
            category=ErrorCategory.SYSTEM,
            severity=severity,
            context=config_context,
            cause=cause,
            suggestions=suggestions or ["Set GEMINI_BASE_URL and GEMINI_API_KEY", "Check the .env file"],
        )


class NetworkError(BaseError):
    """
    网络通信错误

    连接失败、HTTP 5xx、非 401 的 4xx
    """

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
        attempts: Optional[int] = None,
        error_code: int = ErrorCode.CONNECTION_FAILED,
        severity: ErrorSeverity = ErrorSeverity.HIGH,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        suggestions: Optional[List[str]] = None,
    ):
        network_context = context or {}
        if url:
            network_context["url"] = url
        if status_code:
            network_context["status_code"] = status_code
        if attempts:
            network_context["attempts"] = attempts

        self.status_code = status_code
        self.attempts = attempts

        super().__init__(
            message=message,
            error_code=error_code,
            category=ErrorCategory.NETWORK,
            severity=severity,
            context=network_context,
            cause=cause,
            suggestions=suggestions or ["Check network connectivity", "Confirm the endpoint is reachable", "Retry later"],
        )


class RequestTimeoutError(NetworkError):
    """请求超时（每次尝试都被取消）"""

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        attempts: Optional[int] = None,
        timeout: Optional[float] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(
            message=message,
            url=url,
            attempts=attempts,
            error_code=ErrorCode.REQUEST_TIMEOUT,
            context={"timeout": timeout} if timeout is not None else None,
            cause=cause,
            suggestions=["Increase GEMINI_TIMEOUT", "Retry later"],
        )


class RateLimitError(NetworkError):
    """HTTP 429，重试耗尽后抛出"""

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        attempts: Optional[int] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(
            message=message,
            url=url,
            status_code=429,
            attempts=attempts,
            error_code=ErrorCode.API_RATE_LIMIT_EXCEEDED,
            cause=cause,
            suggestions=["Check API quota", "Increase GEMINI_RETRY_DELAY", "Retry later"],
        )


class AuthenticationError(BaseError):
    """
    认证错误

    远端拒绝凭据（HTTP 401），不重试
    """

    def __init__(
        self,
        message: str,
        error_code: int = ErrorCode.INVALID_CREDENTIALS,
        severity: ErrorSeverity = ErrorSeverity.HIGH,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        suggestions: Optional[List[str]] = None,
    ):
        super().__init__(
            message=message,
            error_code=error_code,
            category=ErrorCategory.AUTHENTICATION,
            severity=severity,
            context=context,
            cause=cause,
            suggestions=suggestions or ["Check GEMINI_API_KEY"],
        )


class ExternalServiceError(BaseError):
    """
    外部服务错误

    用于模型服务返回内容不符合协议等问题
    """

    def __init__(
        self,
        message: str,
        service_name: Optional[str] = None,
        error_code: int = ErrorCode.LLM_SERVICE_ERROR,
        severity: ErrorSeverity = ErrorSeverity.HIGH,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        suggestions: Optional[List[str]] = None,
    ):
        service_context = context or {}
        if service_name:
            service_context["service_name"] = service_name

        super().__init__(
            message=message,
            error_code=error_code,
            category=ErrorCategory.EXTERNAL_SERVICE,
            severity=severity,
            context=service_context,
            cause=cause,
            suggestions=suggestions or ["Check the external service status", "Confirm API quota and limits"],
        )


class ResponseFormatError(ExternalServiceError):
    """2xx 响应缺少 choices / message / content，协议不匹配，不重试"""

    def __init__(
        self,
        message: str,
        raw: Any = None,
        cause: Optional[Exception] = None,
    ):
        context: Dict[str, Any] = {}
        if raw is not None:
            context["raw"] = str(raw)[:500]
        super().__init__(
            message=message,
            service_name="chat_completions",
            error_code=ErrorCode.INVALID_RESPONSE_FORMAT,
            context=context,
            cause=cause,
            suggestions=["Confirm the endpoint is OpenAI-compatible", "Check GEMINI_BASE_URL"],
        )


class OperationError(BaseError):
    """
    操作失败包装

    以 "Search failed: ..." / "Fetch failed: ..." 包装终止错误，
    保留底层错误的分类、错误码与上下文
    """

    def __init__(self, operation: str, cause: Exception):
        if isinstance(cause, BaseError):
            detail = cause.message
            error_code = cause.error_code
            category = cause.category
            severity = cause.severity
            context = dict(cause.context)
            suggestions = list(cause.suggestions)
        else:
            detail = str(cause) or type(cause).__name__
            error_code = ErrorCode.INTERNAL_SERVER_ERROR
            category = ErrorCategory.SYSTEM
            severity = ErrorSeverity.HIGH
            context = {}
            suggestions = []
        context["operation"] = operation
        self.operation = operation

        super().__init__(
            message=f"{operation.capitalize()} failed: {detail}",
            error_code=error_code,
            category=category,
            severity=severity,
            context=context,
            cause=cause,
            suggestions=suggestions,
        )
