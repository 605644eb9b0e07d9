"""Normalization cache interface for z-score parameters.

The feature builder reads the rolling mean/stddev of closes for a stream
from this cache, falling back to in-window statistics on a miss. The cache
is an optimization, never a correctness requirement: implementations
should return None rather than raise when the backing store is down.

Keys are ``"{exch}:{symbol}:{tf}"``.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


def normalization_key(exch: str, symbol: str, tf: str) -> str:
    """Build the cache key for a stream."""
    return f"{exch}:{symbol}:{tf}"


@runtime_checkable
class NormalizationCache(Protocol):
    """Async store of per-stream normalization parameters."""

    async def get_mean(self, key: str) -> float | None:
        ...

    async def get_std_dev(self, key: str) -> float | None:
        ...

    async def set_mean(self, key: str, value: float) -> None:
        ...

    async def set_std_dev(self, key: str, value: float) -> None:
        ...


class NullNormalizationCache:
    """Cache that always misses and discards writes."""

    async def get_mean(self, key: str) -> float | None:
        return None

    async def get_std_dev(self, key: str) -> float | None:
        return None

    async def set_mean(self, key: str, value: float) -> None:
        return None

    async def set_std_dev(self, key: str, value: float) -> None:
        return None


class InMemoryNormalizationCache:
    """Process-local cache, used by backtests and tests."""

    def __init__(self) -> None:
        self._means: dict[str, float] = {}
        self._stds: dict[str, float] = {}

    async def get_mean(self, key: str) -> float | None:
        return self._means.get(key)

    async def get_std_dev(self, key: str) -> float | None:
        return self._stds.get(key)

    async def set_mean(self, key: str, value: float) -> None:
        self._means[key] = value

    async def set_std_dev(self, key: str, value: float) -> None:
        self._stds[key] = value
