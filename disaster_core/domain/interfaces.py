"""
Service interfaces (Protocols) for the external collaborators.

The dashboard panels depend on these contracts only:
- CollectionStore: live, ordered view of a remote collection plus append
- IdentityProvider: custom-credential and anonymous sign-in
"""

from __future__ import annotations

from typing import Any, Callable, Protocol, runtime_checkable

from disaster_core.domain.identity import Session

Listener = Callable[[list[dict[str, Any]]], None]
Unsubscribe = Callable[[], None]


@runtime_checkable
class CollectionStore(Protocol):
    """Interface for a live-updating document collection store."""

    def subscribe(self, path: str, listener: Listener) -> Unsubscribe:
        """
        Subscribe to the ordered live view of a collection.

        The listener receives the full record list immediately and again
        after every change, newest server timestamp first.

        Args:
            path: Collection path.
            listener: Called with a full replacement list.

        Returns:
            Callable that removes the subscription.
        """
        ...

    def append(self, path: str, record: dict[str, Any], session: Session) -> dict[str, Any]:
        """
        Append a record, stamping a server timestamp and the session identity.

        Args:
            path: Collection path.
            record: Field values supplied by the caller.
            session: Session of the submitting user.

        Returns:
            dict: The stored record including 'id', 'timestamp', 'reporter_id'.
        """
        ...

    def snapshot(self, path: str) -> list[dict[str, Any]]:
        """Return the current ordered view without subscribing."""
        ...


@runtime_checkable
class IdentityProvider(Protocol):
    """Interface for the identity service."""

    def sign_in_with_custom_token(self, token: str) -> Session:
        """Sign in with a custom credential; raises IdentityError on failure."""
        ...

    def sign_in_anonymously(self) -> Session:
        """Register a new anonymous session."""
        ...
