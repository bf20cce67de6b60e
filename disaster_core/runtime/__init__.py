"""
Service runtime layer for disaster-hub.

This package provides shared infrastructure for reliability and observability:
- RunContext: Request-scoped context with correlation IDs
- ServiceError: Standardized errors with retry semantics
- ServiceHttpClient: Pooled async HTTP client with automatic headers
- RetryPolicy / run_with_retry: Backoff policy and the retry state machine
"""

from .context import RunContext
from .errors import ErrorCode, RetryableError, ServiceError, TerminalError
from .http_client import ServiceHttpClient
from .retry import (
    RequestOutcome,
    RetryPhase,
    RetryPolicy,
    RetryState,
    Success,
    TerminalFailure,
    TransientFailure,
    advance,
    run_with_retry,
)

__all__ = [
    "RunContext",
    "ErrorCode",
    "ServiceError",
    "RetryableError",
    "TerminalError",
    "ServiceHttpClient",
    "RequestOutcome",
    "RetryPhase",
    "RetryPolicy",
    "RetryState",
    "Success",
    "TerminalFailure",
    "TransientFailure",
    "advance",
    "run_with_retry",
]
