"""
Standardized error model with retry semantics.

Every failure that crosses a service boundary in disaster-hub is a
ServiceError. The subclass says whether the failed operation may be
attempted again, so retry loops never have to inspect messages.
"""

from __future__ import annotations

import uuid
from typing import Any


class ServiceError(Exception):
    """Standardized service error with retry classification.

    Attributes:
        code: Machine-readable error code (see ErrorCode).
        message_safe: Message safe for logs and for display to users.
        message_debug: Optional detail for debugging (upstream body, etc.).
        retryable: Whether the operation can be retried.
        cause: Optional underlying exception.
        debug_id: Short identifier for correlating logs with a report.
        status_code: HTTP status returned by an upstream service, if any.
    """

    def __init__(
        self,
        code: str,
        message_safe: str,
        message_debug: str | None = None,
        retryable: bool = False,
        cause: Exception | None = None,
        debug_id: str | None = None,
        status_code: int | None = None,
    ):
        super().__init__(message_safe)
        self.code = code
        self.message_safe = message_safe
        self.message_debug = message_debug
        self.retryable = retryable
        self.cause = cause
        self.debug_id = debug_id or str(uuid.uuid4())[:8]
        self.status_code = status_code

    def __str__(self) -> str:
        return f"[{self.code}] {self.message_safe}"

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(code={self.code!r}, "
            f"message_safe={self.message_safe!r}, "
            f"retryable={self.retryable}, "
            f"debug_id={self.debug_id!r})"
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for API responses.

        Returns:
            Dictionary with error details (excludes debug info).
        """
        return {
            "code": self.code,
            "message": self.message_safe,
            "debug_id": self.debug_id,
        }


class RetryableError(ServiceError):
    """Transient failure: timeouts, rate limiting, empty upstream content."""

    def __init__(
        self,
        code: str,
        message_safe: str,
        message_debug: str | None = None,
        cause: Exception | None = None,
        debug_id: str | None = None,
        status_code: int | None = None,
    ):
        super().__init__(
            code=code,
            message_safe=message_safe,
            message_debug=message_debug,
            retryable=True,
            cause=cause,
            debug_id=debug_id,
            status_code=status_code,
        )


class TerminalError(ServiceError):
    """Permanent failure: the operation must not be attempted again."""

    def __init__(
        self,
        code: str,
        message_safe: str,
        message_debug: str | None = None,
        cause: Exception | None = None,
        debug_id: str | None = None,
        status_code: int | None = None,
    ):
        super().__init__(
            code=code,
            message_safe=message_safe,
            message_debug=message_debug,
            retryable=False,
            cause=cause,
            debug_id=debug_id,
            status_code=status_code,
        )


class ErrorCode:
    """Standard error codes for common failure scenarios."""

    # Network/connectivity
    TIMEOUT = "TIMEOUT"
    CONNECTION_ERROR = "CONNECTION_ERROR"

    # Upstream generation endpoint
    RATE_LIMITED = "RATE_LIMITED"
    EMPTY_CONTENT = "EMPTY_CONTENT"
    UPSTREAM_ERROR = "UPSTREAM_ERROR"
    MALFORMED_RESPONSE = "MALFORMED_RESPONSE"
    QUERY_FAILED = "QUERY_FAILED"

    # Identity
    UNAUTHORIZED = "UNAUTHORIZED"

    # Internal
    INTERNAL_ERROR = "INTERNAL_ERROR"
