"""
Standard exceptions for the external-service adapters.

Failures inside the identity and collection-store adapters raise these;
request-facing code converts them to ServiceErrors.
"""


class HubError(Exception):
    """Base exception for adapter errors."""
    pass


class IdentityError(HubError):
    """Sign-in failed (bad credential, provider not configured)."""
    pass


class StoreError(HubError):
    """Collection store rejected an operation."""
    pass
