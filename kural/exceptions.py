"""
Custom exceptions for the booth household rollup application.

All application-specific exceptions inherit from KuralError.
"""

from __future__ import annotations

from typing import Optional, Any


class KuralError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message: Human-readable error message
        details: Additional error details (for debugging)
        recoverable: Whether the error can potentially be recovered from
    """

    def __init__(
        self,
        message: str,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.recoverable = recoverable

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ConfigurationError(KuralError):
    """
    Invalid or missing configuration.

    Examples:
        - Missing API base URL
        - Booth identifier not supplied
    """

    def __init__(self, message: str, config_key: Optional[str] = None):
        details = {"config_key": config_key} if config_key else None
        super().__init__(message, details=details, recoverable=False)


class APIError(KuralError):
    """
    Backend request failed.

    Examples:
        - Connection refused / timeout
        - Non-2xx response
        - Response body is not JSON
    """

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
        response_text: Optional[str] = None
    ):
        details = {}
        if url:
            details["url"] = url
        if status_code is not None:
            details["status_code"] = status_code
        if response_text:
            details["response_preview"] = response_text[:500]
        # Network failures and server errors are worth retrying
        recoverable = status_code is None or status_code >= 500
        super().__init__(message, details=details, recoverable=recoverable)
        self.status_code = status_code


class ValidationError(KuralError):
    """
    Data validation failed.

    Examples:
        - Empty family id
        - Fewer than two voters selected for a family
    """

    def __init__(
        self,
        message: str,
        field_name: Optional[str] = None,
        field_value: Optional[Any] = None,
        expected: Optional[str] = None
    ):
        details = {}
        if field_name:
            details["field_name"] = field_name
        if field_value is not None:
            details["field_value"] = str(field_value)[:100]
        if expected:
            details["expected"] = expected
        super().__init__(message, details=details, recoverable=False)
