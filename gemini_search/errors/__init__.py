"""
Error handling system for gemini-search.

This module provides:
- Classified exception types for the request pipeline
- Error formatting for the CLI
- Helper constructors for validation and configuration errors
"""

from .exceptions import (
    AuthenticationError,
    BaseError,
    ConfigurationError,
    ErrorCategory,
    ErrorCode,
    ErrorSeverity,
    ExternalServiceError,
    NetworkError,
    OperationError,
    RateLimitError,
    RequestTimeoutError,
    ResponseFormatError,
    ValidationError,
)
from .handlers import (
    ErrorResponseFormatter,
    handle_cli_error,
)
from .helpers import (
    configuration_error,
    invalid_format_error,
    out_of_range_error,
    required_field_error,
    system_error,
    validation_error,
)

__all__ = [
    # Exception classes
    "BaseError",
    "ValidationError",
    "ConfigurationError",
    "NetworkError",
    "RequestTimeoutError",
    "RateLimitError",
    "AuthenticationError",
    "ExternalServiceError",
    "ResponseFormatError",
    "OperationError",
    "ErrorCode",
    "ErrorCategory",
    "ErrorSeverity",
    # Error handlers
    "ErrorResponseFormatter",
    "handle_cli_error",
    # Helper functions
    "validation_error",
    "required_field_error",
    "out_of_range_error",
    "invalid_format_error",
    "configuration_error",
    "system_error",
]
