"""Risk context, limits and verdict models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from core.models.action import Action


class RiskContext(BaseModel):
    """Snapshot of account/feed state used to gate one action."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    symbol: str
    exch: str
    pnl: float
    exposure: float
    max_daily_loss: float
    max_exposure: float
    leverage: float
    max_leverage: float
    feed_stale: bool = False


class RiskLimits(BaseModel):
    """Configured numeric limits for the risk evaluator."""

    model_config = ConfigDict(extra="forbid")

    max_daily_loss: float = Field(default=1000.0, ge=0)
    max_exposure: float = Field(default=10000.0, ge=0)
    max_leverage: float = Field(default=3.0, ge=0)
    # Feed is stale when the last update is older than this
    max_feed_age_sec: float = Field(default=120.0, gt=0)

    def context(
        self,
        symbol: str,
        exch: str,
        pnl: float,
        exposure: float,
        leverage: float,
        last_update_ms: int | None = None,
        now_ms: int | None = None,
    ) -> RiskContext:
        """Build a RiskContext from these limits and live account values.

        ``feed_stale`` is derived from ``last_update_ms``/``now_ms``; when
        either is missing the feed is considered fresh.
        """
        feed_stale = False
        if last_update_ms is not None and now_ms is not None:
            feed_stale = (now_ms - last_update_ms) > self.max_feed_age_sec * 1000

        return RiskContext(
            symbol=symbol,
            exch=exch,
            pnl=pnl,
            exposure=exposure,
            max_daily_loss=self.max_daily_loss,
            max_exposure=self.max_exposure,
            leverage=leverage,
            max_leverage=self.max_leverage,
            feed_stale=feed_stale,
        )


class RiskVerdict(BaseModel):
    """Result of a risk check."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    allow: bool
    reason: str | None = None
    # Adjusted action when a rule reduces size instead of rejecting
    adjusted: Action | None = None
