"""
Domain models for grounded answers.

An Answer is produced once per successful query and never mutated. A
QueryError is the single terminal failure a query can end in; its kind
keeps the failure category while its safe message stays the flattened
text shown to users.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from disaster_core.runtime.errors import ErrorCode, ServiceError, TerminalError

USER_ERROR_TEMPLATE = "Could not fetch data. Please try again. ({reason})"

EMPTY_CONTENT_REASON = "API responded but returned empty content."
STATUS_FAILURE_REASON = "API Request failed with status: {status}"


class Source(BaseModel):
    """A web citation attached to an answer by search grounding."""

    uri: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)

    model_config = {"frozen": True}


class Answer(BaseModel):
    """A grounded answer and its cited sources, in server order."""

    text: str
    sources: tuple[Source, ...] = ()

    model_config = {"frozen": True}


class QueryErrorKind(str, Enum):
    RATE_LIMIT_EXHAUSTED = "rate_limit_exhausted"
    EMPTY_CONTENT = "empty_content"
    HTTP_ERROR = "http_error"
    TRANSPORT_ERROR = "transport_error"
    MALFORMED_RESPONSE = "malformed_response"


_KIND_BY_CODE = {
    ErrorCode.RATE_LIMITED: QueryErrorKind.RATE_LIMIT_EXHAUSTED,
    ErrorCode.EMPTY_CONTENT: QueryErrorKind.EMPTY_CONTENT,
    ErrorCode.UPSTREAM_ERROR: QueryErrorKind.HTTP_ERROR,
    ErrorCode.MALFORMED_RESPONSE: QueryErrorKind.MALFORMED_RESPONSE,
}


class QueryError(TerminalError):
    """Terminal failure of a query.

    Attributes:
        kind: Failure category.
        reason: The raw failure reason, e.g. "API Request failed with status: 500".
        status_code: Upstream HTTP status, when the failure came with one.
    """

    def __init__(
        self,
        kind: QueryErrorKind,
        reason: str,
        status_code: int | None = None,
        message_debug: str | None = None,
        cause: Exception | None = None,
        debug_id: str | None = None,
    ):
        super().__init__(
            code=ErrorCode.QUERY_FAILED,
            message_safe=USER_ERROR_TEMPLATE.format(reason=reason),
            message_debug=message_debug,
            cause=cause,
            debug_id=debug_id,
            status_code=status_code,
        )
        self.kind = kind
        self.reason = reason

    @classmethod
    def from_failure(cls, error: ServiceError) -> "QueryError":
        """Flatten the last failure of a query into a QueryError."""
        if isinstance(error, QueryError):
            return error
        return cls(
            kind=_KIND_BY_CODE.get(error.code, QueryErrorKind.TRANSPORT_ERROR),
            reason=error.message_safe,
            status_code=error.status_code,
            message_debug=error.message_debug,
            cause=error.cause or error,
            debug_id=error.debug_id,
        )

    def to_dict(self) -> dict[str, Any]:
        return {**super().to_dict(), "kind": self.kind.value}
