"""Feature construction from bar windows."""

from core.features.cache import (
    InMemoryNormalizationCache,
    NormalizationCache,
    NullNormalizationCache,
    normalization_key,
)
from core.features.factory import (
    FeatureBuilder,
    classify_regime,
    compute_returns,
    compute_trend_strength,
    volatility_bucket,
    z_score,
)
from core.features.models import FeatureConfig, VolatilityBuckets
from core.features.outbox import CacheWriteOutbox

__all__ = [
    "FeatureBuilder",
    "FeatureConfig",
    "VolatilityBuckets",
    "CacheWriteOutbox",
    "NormalizationCache",
    "NullNormalizationCache",
    "InMemoryNormalizationCache",
    "normalization_key",
    "classify_regime",
    "compute_returns",
    "compute_trend_strength",
    "volatility_bucket",
    "z_score",
]
