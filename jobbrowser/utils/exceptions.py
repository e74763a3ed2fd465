"""
Exception hierarchy and error handling utilities for jobbrowser.

Provides:
- Custom exception classes with error codes
- Error categorization (retryable, timeout, validation, fatal)
- Safe error message formatting (no credential leak)

Every failure of an RPC call surfaces as exactly one of:

    RemoteError      the service answered with a JSON-RPC error object
    RpcTimeoutError  the deadline passed before a response arrived
    TransportError   network failure or non-2xx HTTP status
    DecodeError      a 2xx reply whose body is not the expected shape
                     (subclass of TransportError)
"""

from __future__ import annotations

import asyncio
import json
import re
from enum import Enum
from typing import Any


class ErrorCategory(Enum):
    """Error categories for classification."""
    RETRYABLE = "retryable"
    FATAL = "fatal"
    VALIDATION = "validation"
    PERMISSION = "permission"
    TIMEOUT = "timeout"
    REMOTE = "remote"


class JobBrowserError(Exception):
    """Base exception for all jobbrowser errors."""

    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN_ERROR",
        category: ErrorCategory = ErrorCategory.FATAL,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.code,
            "message": self.message,
            "category": self.category.value,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class RemoteError(JobBrowserError):
    """The service rejected or failed the call.

    ``rpc_code`` is the numeric JSON-RPC error code; telling validation
    failures from authorization failures is up to the caller.
    """

    def __init__(
        self,
        rpc_code: int,
        message: str,
        detail: Any = None,
        name: str | None = None,
    ):
        super().__init__(
            message,
            code="REMOTE_ERROR",
            category=ErrorCategory.REMOTE,
            details={"rpc_code": rpc_code, "name": name},
        )
        self.rpc_code = rpc_code
        self.detail = detail
        self.name = name

    def __str__(self) -> str:
        return f"[{self.code} {self.rpc_code}] {self.message}"


class RpcTimeoutError(JobBrowserError):
    """Deadline exceeded before a response arrived."""

    def __init__(self, operation: str, timeout_seconds: float):
        super().__init__(
            f"Operation '{operation}' timed out after {timeout_seconds}s",
            code="TIMEOUT",
            category=ErrorCategory.TIMEOUT,
            details={"operation": operation, "timeout_seconds": timeout_seconds},
        )
        self.operation = operation
        self.timeout_seconds = timeout_seconds


class TransportError(JobBrowserError):
    """Network failure, non-2xx status or unusable response body."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        code: str = "TRANSPORT_ERROR",
        category: ErrorCategory = ErrorCategory.RETRYABLE,
    ):
        super().__init__(
            message,
            code=code,
            category=category,
            details={"status_code": status_code} if status_code is not None else {},
        )
        self.status_code = status_code

    @property
    def retryable(self) -> bool:
        """Hint for callers that implement their own retry policy."""
        if self.status_code is None:
            return self.category is ErrorCategory.RETRYABLE
        return self.status_code >= 500 or self.status_code in {408, 409, 425, 429}


class DecodeError(TransportError):
    """Well-formed HTTP reply whose payload does not match the expected shape."""

    def __init__(self, message: str, *, status_code: int | None = None):
        super().__init__(
            message,
            status_code=status_code,
            code="DECODE_ERROR",
            category=ErrorCategory.VALIDATION,
        )

    @property
    def retryable(self) -> bool:
        return False


_SENSITIVE_PATTERNS = [
    re.compile(r"(api[_-]?key|token|secret|password|auth(?:orization)?)[=:]\s*['\"]?([^\s'\"]+)['\"]?", re.IGNORECASE),
    re.compile(r"bearer\s+[a-zA-Z0-9\-._~+/]+=*", re.IGNORECASE),
    re.compile(r"[A-Z0-9]{32,}"),
]


def sanitize_error_message(message: str, replacement: str = "[REDACTED]") -> str:
    """Remove sensitive information from error messages."""
    sanitized = message
    for pattern in _SENSITIVE_PATTERNS:
        sanitized = pattern.sub(replacement, sanitized)
    return sanitized


def classify_exception(exc: Exception) -> tuple[str, ErrorCategory, bool]:
    """
    Classify an exception and return (error_code, category, should_retry).

    Returns:
        Tuple of (error_code, category, should_retry)
    """
    if isinstance(exc, TransportError):
        return exc.code, exc.category, exc.retryable

    if isinstance(exc, JobBrowserError):
        return exc.code, exc.category, exc.category is ErrorCategory.RETRYABLE

    if isinstance(exc, asyncio.TimeoutError):
        return "TIMEOUT", ErrorCategory.TIMEOUT, True

    if isinstance(exc, ConnectionError):
        return "CONNECTION_ERROR", ErrorCategory.RETRYABLE, True

    if isinstance(exc, json.JSONDecodeError):
        return "JSON_PARSE_ERROR", ErrorCategory.VALIDATION, False

    if isinstance(exc, (ValueError, KeyError, TypeError)):
        return "INVALID_VALUE", ErrorCategory.VALIDATION, False

    if isinstance(exc, PermissionError):
        return "PERMISSION_DENIED", ErrorCategory.PERMISSION, False

    return "INTERNAL_ERROR", ErrorCategory.FATAL, False
