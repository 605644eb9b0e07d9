#!/usr/bin/env python3
"""Drop cached normalization parameters from Redis.

Run after changing the feature window so z-scores are rebuilt from fresh
in-window statistics.

Usage:
    cd backend
    python scripts/clear_normalization_cache.py
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from app.storage import RedisNormalizationCache, cache  # noqa: E402

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)


async def clear_normalization_cache() -> int:
    """Delete all ``norm:*`` keys, returning how many were removed."""
    await cache.init_cache()
    try:
        if not cache.is_cache_available():
            logger.error("Redis unavailable, nothing cleared")
            return 0
        return await RedisNormalizationCache().clear()
    finally:
        await cache.close_cache()


def main() -> None:
    parser = argparse.ArgumentParser(description="Clear the normalization cache")
    parser.parse_args()
    asyncio.run(clear_normalization_cache())


if __name__ == "__main__":
    main()
