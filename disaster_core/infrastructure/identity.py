"""
Identity service adapter.

Custom credentials are HS256-signed tokens verified with the shared
secret from the identity configuration blob. Anonymous sessions are
issued locally with a fresh identifier.
"""

from __future__ import annotations

import uuid
from typing import Any

import jwt
from loguru import logger

from disaster_core.domain.exceptions import IdentityError
from disaster_core.domain.identity import PROVIDER_ANONYMOUS, PROVIDER_CUSTOM_TOKEN, Session
from disaster_core.domain.interfaces import IdentityProvider


class TokenIdentityProvider:
    """Identity provider backed by signed custom tokens."""

    ALGORITHM = "HS256"

    def __init__(self, secret: str | None = None):
        """Initialize the provider.

        Args:
            secret: Signing secret for custom tokens. Without it only
                anonymous sign-in is available.
        """
        self.secret = secret

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> "TokenIdentityProvider":
        """Build a provider from the decoded identity configuration blob."""
        return cls(secret=config.get("token_secret"))

    def sign_in_with_custom_token(self, token: str) -> Session:
        if not self.secret:
            raise IdentityError("Custom token sign-in is not configured")
        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.ALGORITHM])
        except jwt.InvalidTokenError as exc:
            raise IdentityError(f"Invalid custom token: {exc}") from exc

        user_id = payload.get("uid") or payload.get("sub")
        if not user_id:
            raise IdentityError("Custom token carries no uid")
        return Session(user_id=str(user_id), is_anonymous=False, provider=PROVIDER_CUSTOM_TOKEN)

    def sign_in_anonymously(self) -> Session:
        return Session(user_id=uuid.uuid4().hex, is_anonymous=True, provider=PROVIDER_ANONYMOUS)


def establish_session(provider: IdentityProvider, token: str | None = None) -> Session:
    """Sign in with ``token`` if given, falling back to an anonymous session.

    Any failure of the custom sign-in triggers the fallback. A failure of
    the anonymous sign-in itself propagates.

    Args:
        provider: The identity provider.
        token: Optional custom credential.

    Returns:
        The settled Session.
    """
    if token:
        try:
            session = provider.sign_in_with_custom_token(token)
            logger.info(f"Signed in with custom token as {session.user_id}")
            return session
        except Exception as e:
            logger.warning(f"Custom token sign-in failed, falling back to anonymous: {e}")

    session = provider.sign_in_anonymously()
    logger.info(f"Signed in anonymously as {session.user_id}")
    return session
