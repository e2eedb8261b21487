"""
errors/base.py
--------------
Root of the error hierarchy.

Subclasses only declare class-level defaults (category, code, HTTP status,
retryable); instances may override the code and the retryable flag and
attach diagnostic key/value context.
"""

from datetime import datetime
from enum import Enum
from http import HTTPStatus
from typing import Any, Optional


class ErrorCategory(str, Enum):
    """Top-level grouping used for routing and reporting."""
    VALIDATION = "VALIDATION"
    SECURITY = "SECURITY"
    FLOW = "FLOW"
    TRANSFORMATION = "TRANSFORMATION"
    CONFIGURATION = "CONFIGURATION"
    DATA_ACCESS = "DATA_ACCESS"
    SYSTEM = "SYSTEM"


class PlatformError(Exception):
    """
    Base class for every error raised by the platform.

    Attributes:
        code: Stable, machine-readable error code.
        category: The ErrorCategory this error belongs to.
        message: Human-readable description.
        context: Diagnostic key/value pairs (never secrets).
        timestamp: When the error was created (naive local time).
        http_status: Status hint for translation at an HTTP boundary.
        retryable: Whether retrying the same operation may succeed.
    """

    category: ErrorCategory = ErrorCategory.SYSTEM
    default_code: str = "SYSTEM_ERROR"
    http_status: HTTPStatus = HTTPStatus.INTERNAL_SERVER_ERROR
    default_retryable: bool = False

    def __init__(
        self,
        message: str,
        *,
        code: Optional[str] = None,
        context: Optional[dict[str, Any]] = None,
        retryable: Optional[bool] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.context: dict[str, Any] = dict(context or {})
        self.timestamp = datetime.now()
        self.retryable = self.default_retryable if retryable is None else retryable

    def with_context(self, **values: Any) -> "PlatformError":
        """Attach extra diagnostic values and return self for chaining."""
        self.context.update(values)
        return self

    def to_dict(self) -> dict[str, Any]:
        """Serializable view, e.g. for a JSON error response body."""
        return {
            "code": self.code,
            "category": self.category.value,
            "message": self.message,
            "context": {k: str(v) for k, v in self.context.items()},
            "timestamp": self.timestamp.isoformat(),
            "status": int(self.http_status),
            "retryable": self.retryable,
        }

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"
