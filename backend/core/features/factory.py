"""Feature factory: turns a window of bars into a FeatureVector.

Computes returns, moving averages, RSI, ATR, MACD, rolling volatility,
trend strength, a z-score of the latest close and a regime label.

The z-score reference (mean/stddev of closes) comes from an optional
NormalizationCache; a miss falls back to the in-window SMA-20/stddev and
the fallback values are written back through a best-effort outbox that
is never awaited by the build.
"""

from __future__ import annotations

import logging
import math
from typing import Iterable, Mapping

from core.features.cache import NormalizationCache, normalization_key
from core.features.models import FeatureConfig, VolatilityBuckets
from core.features.outbox import CacheWriteOutbox
from core.indicators import (
    NAN,
    atr,
    ema,
    log_return,
    macd,
    rsi,
    simple_return,
    sma,
    stddev,
)
from core.models.bar import Bar
from core.models.features import (
    FEATURE_ATR,
    FEATURE_CLOSE,
    FEATURE_EMA_FAST,
    FEATURE_EMA_SLOW,
    FEATURE_LOG_RETURN,
    FEATURE_MACD,
    FEATURE_MACD_HISTOGRAM,
    FEATURE_MACD_SIGNAL,
    FEATURE_RETURN,
    FEATURE_RSI,
    FEATURE_SMA,
    FEATURE_TREND_STRENGTH,
    FEATURE_VOL_BUCKET,
    FEATURE_VOLATILITY,
    FEATURE_Z_SCORE,
    FeatureVector,
    Regime,
)

logger = logging.getLogger(__name__)

SMA_PERIOD = 20
TREND_FAST_PERIOD = 10
TREND_SLOW_PERIOD = 20

VOLATILE_THRESHOLD = 2.0
TRENDING_THRESHOLD = 0.6

VOL_BUCKET_CODES = {"low": 0.0, "medium": 1.0, "high": 2.0}


# =============================================================================
# Pure feature helpers
# =============================================================================

def compute_returns(bars: list[Bar]) -> tuple[float, float]:
    """Latest simple and log return of closes, NaN with fewer than 2 bars."""
    if len(bars) < 2:
        return NAN, NAN

    current = bars[-1].c
    previous = bars[-2].c
    return simple_return(current, previous), log_return(current, previous)


def z_score(value: float, mean: float, std: float) -> float:
    """Standardize ``value``; NaN if ``std`` is zero or undefined."""
    if std == 0 or math.isnan(std):
        return NAN
    return (value - mean) / std


def volatility_bucket(volatility: float, buckets: VolatilityBuckets) -> str:
    """Classify volatility as 'low', 'medium' or 'high'."""
    if volatility < buckets.low:
        return "low"
    if volatility > buckets.high:
        return "high"
    return "medium"


def compute_trend_strength(bars: list[Bar], config: FeatureConfig) -> float:
    """
    Trend strength as (EMA10 - EMA20) / ATR, clamped to [-1, 1].

    Positive values indicate an uptrend, negative a downtrend, near zero a
    range. NaN when the window is short, an EMA is undefined or ATR is 0.
    """
    if len(bars) < config.window:
        return NAN

    closes = [b.c for b in bars]
    highs = [b.h for b in bars]
    lows = [b.l for b in bars]

    fast = ema(closes, TREND_FAST_PERIOD)
    slow = ema(closes, TREND_SLOW_PERIOD)
    atr_value = atr(highs, lows, closes, config.atr_period)

    if math.isnan(fast) or math.isnan(slow) or math.isnan(atr_value) or atr_value == 0:
        return NAN

    strength = (fast - slow) / atr_value
    return max(-1.0, min(1.0, strength))


def classify_regime(trend_strength: float, normalized_volatility: float) -> Regime:
    """
    Classify market regime.

    Args:
        trend_strength: Trend strength in [-1, 1]
        normalized_volatility: Volatility divided by mean price

    Returns:
        VOLATILE above the volatility threshold, otherwise TRENDING_UP /
        TRENDING_DOWN for strong trends and RANGING for everything else
    """
    if normalized_volatility > VOLATILE_THRESHOLD:
        return Regime.VOLATILE

    if abs(trend_strength) > TRENDING_THRESHOLD:
        return Regime.TRENDING_UP if trend_strength > 0 else Regime.TRENDING_DOWN

    return Regime.RANGING


# =============================================================================
# FeatureBuilder
# =============================================================================

class FeatureBuilder:
    """Build FeatureVectors for a single exchange/symbol/timeframe stream."""

    def __init__(
        self,
        config: FeatureConfig | None = None,
        cache: NormalizationCache | None = None,
        outbox: CacheWriteOutbox | None = None,
    ):
        self.config = config or FeatureConfig()
        self._cache = cache
        if outbox is None and cache is not None:
            outbox = CacheWriteOutbox(cache)
        self._outbox = outbox

    @property
    def outbox(self) -> CacheWriteOutbox | None:
        return self._outbox

    def build_sync(self, bars: Iterable[Bar | Mapping]) -> FeatureVector:
        """Build features from in-window statistics only (no cache)."""
        window = self._prepare(bars)
        vals = self._compute(window)
        return self._finish(window, vals, vals[FEATURE_SMA], vals[FEATURE_VOLATILITY])

    async def build(self, bars: Iterable[Bar | Mapping]) -> FeatureVector:
        """Build features, using the normalization cache for the z-score.

        Raises:
            ValueError: If fewer than ``config.window`` bars are supplied or
                the bars do not belong to a single stream.
            pydantic.ValidationError: If a bar is malformed.
        """
        window = self._prepare(bars)
        vals = self._compute(window)
        sma20 = vals[FEATURE_SMA]
        volatility = vals[FEATURE_VOLATILITY]

        if self._cache is None:
            return self._finish(window, vals, sma20, volatility)

        latest = window[-1]
        key = normalization_key(latest.exch, latest.symbol, latest.tf)
        cached_mean, cached_std = await self._read_cache(key)

        mean_close = cached_mean if cached_mean is not None else sma20
        std_close = cached_std if cached_std is not None else volatility

        if self._outbox is not None:
            write_mean = sma20 if cached_mean is None and not math.isnan(sma20) else None
            write_std = volatility if cached_std is None and not math.isnan(volatility) else None
            if self._outbox.submit(key, mean=write_mean, std=write_std):
                self._outbox.schedule_flush()

        return self._finish(window, vals, mean_close, std_close)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _prepare(self, bars: Iterable[Bar | Mapping]) -> list[Bar]:
        window = [b if isinstance(b, Bar) else Bar.model_validate(b) for b in bars]

        if len(window) < self.config.window:
            raise ValueError(
                f"Insufficient data: need {self.config.window} bars, got {len(window)}"
            )

        stream = window[-1].stream_key
        for bar in window:
            if bar.stream_key != stream:
                raise ValueError(
                    f"bar at t={bar.t} belongs to {bar.stream_key}, expected {stream}"
                )
        return window

    async def _read_cache(self, key: str) -> tuple[float | None, float | None]:
        try:
            mean = await self._cache.get_mean(key)
            std = await self._cache.get_std_dev(key)
        except Exception as e:
            logger.warning(f"Normalization cache read failed for {key}: {e}")
            return None, None
        return mean, std

    def _compute(self, bars: list[Bar]) -> dict[str, float]:
        cfg = self.config
        closes = [b.c for b in bars]
        highs = [b.h for b in bars]
        lows = [b.l for b in bars]

        ret, log_ret = compute_returns(bars)
        macd_result = macd(closes, cfg.macd_fast, cfg.macd_slow, cfg.macd_signal)

        return {
            FEATURE_CLOSE: bars[-1].c,
            FEATURE_RETURN: ret,
            FEATURE_LOG_RETURN: log_ret,
            FEATURE_SMA: sma(closes, SMA_PERIOD),
            FEATURE_EMA_FAST: ema(closes, cfg.macd_fast),
            FEATURE_EMA_SLOW: ema(closes, cfg.macd_slow),
            FEATURE_RSI: rsi(closes, cfg.rsi_period),
            FEATURE_ATR: atr(highs, lows, closes, cfg.atr_period),
            FEATURE_MACD: macd_result.macd,
            FEATURE_MACD_SIGNAL: macd_result.signal,
            FEATURE_MACD_HISTOGRAM: macd_result.histogram,
            FEATURE_VOLATILITY: stddev(closes, cfg.window),
            FEATURE_TREND_STRENGTH: compute_trend_strength(bars, cfg),
        }

    def _finish(
        self,
        bars: list[Bar],
        vals: dict[str, float],
        mean_close: float,
        std_close: float,
    ) -> FeatureVector:
        latest = bars[-1]
        volatility = vals[FEATURE_VOLATILITY]

        if math.isnan(mean_close) or mean_close <= 0:
            normalized_vol = NAN
        else:
            normalized_vol = volatility / mean_close

        vals[FEATURE_Z_SCORE] = z_score(latest.c, mean_close, std_close)
        vals[FEATURE_VOL_BUCKET] = (
            NAN
            if math.isnan(normalized_vol)
            else VOL_BUCKET_CODES[volatility_bucket(normalized_vol, self.config.vol_buckets)]
        )

        # Classified last so it sees the final feature values
        regime = classify_regime(vals[FEATURE_TREND_STRENGTH], normalized_vol)

        logger.debug(
            f"Features {latest.stream_key} t={latest.t}: regime={regime.value} "
            f"close={latest.c} atr={vals[FEATURE_ATR]}"
        )

        return FeatureVector(
            t=latest.t,
            exch=latest.exch,
            symbol=latest.symbol,
            tf=latest.tf,
            vals=vals,
            regime=regime,
        )
