"""
Request-scoped context for service operations.

RunContext carries the correlation ID and the identity of the session that
triggered an operation. Routes derive one from the application's current
session; background work builds one directly.
"""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from pydantic import BaseModel

if TYPE_CHECKING:
    from disaster_core.domain.identity import Session


class RunContext(BaseModel):
    """Request-scoped context for service operations.

    Attributes:
        request_id: Unique identifier for request tracing.
        app_id: Deployment identifier the request belongs to.
        user_id: Session identifier of the caller, when one is established.
    """

    request_id: str
    app_id: str
    user_id: str | None = None

    model_config = {"frozen": True}

    @classmethod
    def new(cls, app_id: str, user_id: str | None = None) -> "RunContext":
        """Create a context with a freshly generated request_id."""
        return cls(request_id=str(uuid.uuid4()), app_id=app_id, user_id=user_id)

    @classmethod
    def from_session(
        cls,
        session: "Session | None",
        app_id: str,
        request_id: str | None = None,
    ) -> "RunContext":
        """Create a context for a request made on behalf of ``session``.

        Args:
            session: The settled identity session, or None before sign-in.
            app_id: Deployment identifier.
            request_id: Incoming correlation ID to reuse, if any.

        Returns:
            A new RunContext.
        """
        return cls(
            request_id=request_id or str(uuid.uuid4()),
            app_id=app_id,
            user_id=session.user_id if session else None,
        )

    def get_headers(self) -> dict[str, str]:
        """Get HTTP headers for propagating context."""
        return {
            "X-Request-Id": self.request_id,
            "X-App-Id": self.app_id,
        }
