"""
Rate limiter infrastructure using slowapi.
"""

from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address

from disaster_core.config import settings

__all__ = ["limiter", "_rate_limit_exceeded_handler"]

# Memory storage is per-process; point RATE_LIMIT_STORAGE_URI at Redis when running several workers
limiter = Limiter(
    key_func=get_remote_address,
    storage_uri=settings.RATE_LIMIT_STORAGE_URI,
)
