"""Pure risk rules.

Each rule maps a RiskContext to a RiskVerdict and has no side effects,
so rules can be evaluated in any order and from any thread.
"""

from __future__ import annotations

from typing import Callable

from core.models.risk import RiskContext, RiskVerdict

RiskRule = Callable[[RiskContext], RiskVerdict]

ALLOW = RiskVerdict(allow=True)


def max_daily_loss_rule(ctx: RiskContext) -> RiskVerdict:
    """Block once the day's loss exceeds ``max_daily_loss``."""
    if ctx.pnl < -ctx.max_daily_loss:
        return RiskVerdict(allow=False, reason="max daily loss")
    return ALLOW


def max_exposure_rule(ctx: RiskContext) -> RiskVerdict:
    if ctx.exposure > ctx.max_exposure:
        return RiskVerdict(allow=False, reason="max exposure")
    return ALLOW


def leverage_cap_rule(ctx: RiskContext) -> RiskVerdict:
    if ctx.leverage > ctx.max_leverage:
        return RiskVerdict(allow=False, reason="leverage cap")
    return ALLOW


def stale_feed_rule(ctx: RiskContext) -> RiskVerdict:
    if ctx.feed_stale:
        return RiskVerdict(allow=False, reason="stale feed")
    return ALLOW


DEFAULT_RULES: tuple[RiskRule, ...] = (
    max_daily_loss_rule,
    max_exposure_rule,
    leverage_cap_rule,
    stale_feed_rule,
)
