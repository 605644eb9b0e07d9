"""Risk rules and evaluator."""

from core.risk.evaluator import RiskEvaluator
from core.risk.rules import (
    DEFAULT_RULES,
    RiskRule,
    leverage_cap_rule,
    max_daily_loss_rule,
    max_exposure_rule,
    stale_feed_rule,
)

__all__ = [
    "RiskEvaluator",
    "RiskRule",
    "DEFAULT_RULES",
    "max_daily_loss_rule",
    "max_exposure_rule",
    "leverage_cap_rule",
    "stale_feed_rule",
]
