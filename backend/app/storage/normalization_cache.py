"""Redis-backed normalization cache.

Stores the rolling mean and standard deviation of closes per stream so
z-scores stay comparable across restarts and processes.

Data structure:
- norm:mean:{exch}:{symbol}:{tf} -> JSON number
- norm:std:{exch}:{symbol}:{tf}  -> JSON number

Reads return None on any miss (absent key, cache down, Redis error,
non-numeric payload); the feature builder then falls back to in-window
statistics.
"""

from __future__ import annotations

import logging
import math

from app.config import get_settings
from app.storage import cache

logger = logging.getLogger(__name__)

MEAN_PREFIX = "norm:mean:"
STD_PREFIX = "norm:std:"


def _mean_key(key: str) -> str:
    return f"{MEAN_PREFIX}{key}"


def _std_key(key: str) -> str:
    return f"{STD_PREFIX}{key}"


async def _load(redis_key: str) -> float | None:
    if not cache.is_cache_available():
        return None

    value = await cache.get_json(redis_key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        if value is not None:
            logger.warning(f"Ignoring non-numeric normalization value at {redis_key}: {value!r}")
        return None
    return float(value)


async def _store(redis_key: str, value: float, ttl: int | None) -> bool:
    if not cache.is_cache_available():
        return False
    if math.isnan(value) or math.isinf(value):
        logger.debug(f"Not caching non-finite value at {redis_key}")
        return False
    return await cache.set_json(redis_key, value, ttl)


class RedisNormalizationCache:
    """NormalizationCache implementation on top of ``app.storage.cache``.

    The shared connection must be opened with ``cache.init_cache()`` and
    released with ``cache.close_cache()``; while it is closed every read
    misses and every write is skipped.
    """

    def __init__(self, ttl: int | None = None):
        self.ttl = get_settings().normalization_ttl_sec if ttl is None else ttl

    async def get_mean(self, key: str) -> float | None:
        return await _load(_mean_key(key))

    async def get_std_dev(self, key: str) -> float | None:
        return await _load(_std_key(key))

    async def set_mean(self, key: str, value: float) -> None:
        await _store(_mean_key(key), value, self.ttl or None)

    async def set_std_dev(self, key: str, value: float) -> None:
        await _store(_std_key(key), value, self.ttl or None)

    async def clear(self) -> int:
        """Delete every cached normalization parameter."""
        deleted = await cache.delete_pattern("norm:*")
        logger.info(f"Cleared {deleted} normalization cache keys")
        return deleted
