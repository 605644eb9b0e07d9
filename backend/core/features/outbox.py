"""Best-effort outbox for normalization cache write-back.

Feature construction must never wait on (or fail because of) a cache
write. Writes are queued here with a non-blocking ``submit`` and drained
by a background flush task:

- Bounded: when ``max_pending`` writes are queued, new ones are dropped
  (and counted) instead of blocking the caller
- At-most-once per key: a key already waiting to be written is not
  queued again until it has been flushed
- Failure isolated: cache errors are logged and the write is discarded
"""

from __future__ import annotations

import asyncio
import logging
from collections import OrderedDict
from dataclasses import dataclass

from core.features.cache import NormalizationCache

logger = logging.getLogger(__name__)

DEFAULT_MAX_PENDING = 1024


@dataclass(frozen=True)
class PendingWrite:
    """Normalization parameters waiting to be written for one key."""

    key: str
    mean: float | None = None
    std: float | None = None


class CacheWriteOutbox:
    """Bounded, deduplicating queue of cache writes."""

    def __init__(
        self,
        cache: NormalizationCache,
        max_pending: int = DEFAULT_MAX_PENDING,
    ):
        if max_pending <= 0:
            raise ValueError(f"max_pending must be positive, got {max_pending}")
        self._cache = cache
        self.max_pending = max_pending
        self._pending: OrderedDict[str, PendingWrite] = OrderedDict()
        self._flush_task: asyncio.Task | None = None
        self._dropped = 0

    @property
    def pending(self) -> int:
        """Number of queued writes."""
        return len(self._pending)

    @property
    def dropped(self) -> int:
        """Number of writes rejected because the outbox was full."""
        return self._dropped

    def submit(
        self,
        key: str,
        mean: float | None = None,
        std: float | None = None,
    ) -> bool:
        """Queue a write without blocking.

        Returns:
            True if queued, False if there was nothing to write, the key is
            already pending, or the outbox is full.
        """
        if mean is None and std is None:
            return False
        if key in self._pending:
            return False
        if len(self._pending) >= self.max_pending:
            self._dropped += 1
            logger.warning(
                f"Normalization outbox full ({self.max_pending}), dropping write for {key}"
            )
            return False

        self._pending[key] = PendingWrite(key=key, mean=mean, std=std)
        return True

    async def flush(self) -> int:
        """Write every queued entry to the cache.

        Returns:
            Number of entries written successfully
        """
        written = 0
        while self._pending:
            key, write = self._pending.popitem(last=False)
            try:
                if write.mean is not None:
                    await self._cache.set_mean(key, write.mean)
                if write.std is not None:
                    await self._cache.set_std_dev(key, write.std)
                written += 1
            except Exception as e:
                logger.warning(f"Normalization cache write failed for {key}: {e}")
        return written

    def schedule_flush(self) -> asyncio.Task | None:
        """Start a background flush on the running loop if none is active.

        Must be called from within a running event loop. The returned task
        is kept referenced by the outbox and is never awaited by callers on
        the critical path.
        """
        if not self._pending:
            return self._flush_task
        if self._flush_task is not None and not self._flush_task.done():
            return self._flush_task

        loop = asyncio.get_running_loop()
        self._flush_task = loop.create_task(self.flush())
        return self._flush_task

    async def drain(self) -> int:
        """Wait for the background flush and write anything still queued.

        Intended for shutdown and tests.
        """
        written = 0
        if self._flush_task is not None:
            written += await self._flush_task
            self._flush_task = None
        written += await self.flush()
        return written
