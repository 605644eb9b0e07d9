"""Feature builder configuration."""

from pydantic import BaseModel, ConfigDict, Field, model_validator


class VolatilityBuckets(BaseModel):
    """Relative-volatility thresholds for low/medium/high buckets."""

    model_config = ConfigDict(extra="forbid")

    low: float = Field(default=0.01, gt=0)
    high: float = Field(default=0.03, gt=0)

    @model_validator(mode="after")
    def _validate(self):
        if self.low > self.high:
            raise ValueError(
                f"vol_buckets.low ({self.low}) must not exceed vol_buckets.high ({self.high})"
            )
        return self


class FeatureConfig(BaseModel):
    """Configuration for the feature builder.

    Feature keys are fixed names (``rsi_14``, ``atr_14``, ``ema_12``,
    ``ema_26``, ``sma_20``, ``volatility_20``) whatever periods are set
    here; downstream consumers read them by name, so a non-default period
    changes the value behind a key, not the key itself.
    """

    model_config = ConfigDict(extra="forbid")

    # Rolling window (bars required per build)
    window: int = Field(default=20, gt=0)

    # Indicator periods
    rsi_period: int = Field(default=14, gt=0)
    atr_period: int = Field(default=14, gt=0)
    macd_fast: int = Field(default=12, gt=0)
    macd_slow: int = Field(default=26, gt=0)
    macd_signal: int = Field(default=9, gt=0)

    vol_buckets: VolatilityBuckets = Field(default_factory=VolatilityBuckets)
