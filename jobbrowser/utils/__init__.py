"""Utility functions for jobbrowser."""

from jobbrowser.utils.exceptions import (
    JobBrowserError,
    RemoteError,
    RpcTimeoutError,
    TransportError,
    DecodeError,
    ErrorCategory,
    classify_exception,
    sanitize_error_message,
)

__all__ = [
    "JobBrowserError",
    "RemoteError",
    "RpcTimeoutError",
    "TransportError",
    "DecodeError",
    "ErrorCategory",
    "classify_exception",
    "sanitize_error_message",
]
