"""Feature vector and market regime models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from core.models.bar import TIMEFRAME_PATTERN


class Regime(str, Enum):
    """Coarse market-state label."""

    TRENDING_UP = "trending_up"
    TRENDING_DOWN = "trending_down"
    RANGING = "ranging"
    VOLATILE = "volatile"


# Feature keys published in FeatureVector.vals
FEATURE_CLOSE = "close"
FEATURE_RETURN = "return_1"
FEATURE_LOG_RETURN = "log_return_1"
FEATURE_SMA = "sma_20"
FEATURE_EMA_FAST = "ema_12"
FEATURE_EMA_SLOW = "ema_26"
FEATURE_RSI = "rsi_14"
FEATURE_ATR = "atr_14"
FEATURE_MACD = "macd"
FEATURE_MACD_SIGNAL = "macd_signal"
FEATURE_MACD_HISTOGRAM = "macd_histogram"
FEATURE_VOLATILITY = "volatility_20"
FEATURE_TREND_STRENGTH = "trend_strength"
FEATURE_Z_SCORE = "z_score_close"
FEATURE_VOL_BUCKET = "vol_bucket"


class FeatureVector(BaseModel):
    """Feature values computed from a window of bars.

    Values may be NaN to mark an indicator as undefined for the window.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    t: int = Field(gt=0)
    exch: str = Field(min_length=1)
    symbol: str = Field(min_length=1)
    tf: str = Field(pattern=TIMEFRAME_PATTERN)
    vals: dict[str, float]
    regime: Regime | None = None

    def get(self, name: str) -> float | None:
        """Return a feature value, or None if it was not computed."""
        return self.vals.get(name)
