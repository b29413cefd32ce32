"""
Cache Module - best-effort Redis cache for read-heavy catalog queries.
"""

from .cache_service import CacheKeys, CacheService

__all__ = [
    "CacheKeys",
    "CacheService",
]
