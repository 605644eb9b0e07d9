"""Data storage layer."""

from app.storage import cache
from app.storage.normalization_cache import RedisNormalizationCache

__all__ = [
    "cache",
    "RedisNormalizationCache",
]
