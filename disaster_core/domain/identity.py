"""
Identity session model.

A Session is the settled result of signing in, either with a custom
credential or anonymously. It is owned by the identity service; the rest
of the application only reads it.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

PROVIDER_CUSTOM_TOKEN = "custom_token"
PROVIDER_ANONYMOUS = "anonymous"


class Session(BaseModel):
    """A settled identity session."""

    user_id: str = Field(..., description="Stable session identifier")
    is_anonymous: bool = Field(default=True)
    provider: str = Field(default=PROVIDER_ANONYMOUS, description="How the session was obtained")

    model_config = {"frozen": True}
