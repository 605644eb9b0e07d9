"""Tests for risk rules and the risk evaluator."""

import pytest

from core.models import RiskContext, RiskVerdict
from core.risk import (
    DEFAULT_RULES,
    RiskEvaluator,
    leverage_cap_rule,
    max_daily_loss_rule,
    max_exposure_rule,
    stale_feed_rule,
)


def make_context(**overrides) -> RiskContext:
    data = dict(
        symbol="BTCUSDT", exch="binance",
        pnl=0.0, exposure=0.0, max_daily_loss=100.0, max_exposure=1000.0,
        leverage=1.0, max_leverage=3.0, feed_stale=False,
    )
    data.update(overrides)
    return RiskContext(**data)


class TestRules:
    def test_daily_loss_breached(self):
        verdict = max_daily_loss_rule(make_context(pnl=-101.0))
        assert verdict.allow is False
        assert verdict.reason == "max daily loss"

    def test_daily_loss_within_limit(self):
        assert max_daily_loss_rule(make_context(pnl=-99.0)).allow is True

    def test_daily_loss_at_limit_allowed(self):
        assert max_daily_loss_rule(make_context(pnl=-100.0)).allow is True

    def test_exposure(self):
        assert max_exposure_rule(make_context(exposure=1000.0)).allow is True
        verdict = max_exposure_rule(make_context(exposure=1000.01))
        assert verdict == RiskVerdict(allow=False, reason="max exposure")

    def test_leverage(self):
        assert leverage_cap_rule(make_context(leverage=3.0)).allow is True
        assert leverage_cap_rule(make_context(leverage=3.5)).reason == "leverage cap"

    def test_stale_feed(self):
        assert stale_feed_rule(make_context()).allow is True
        assert stale_feed_rule(make_context(feed_stale=True)).reason == "stale feed"

    def test_default_rule_order(self):
        assert DEFAULT_RULES == (
            max_daily_loss_rule,
            max_exposure_rule,
            leverage_cap_rule,
            stale_feed_rule,
        )


class TestRiskEvaluator:
    def test_allow(self):
        verdict = RiskEvaluator().evaluate(make_context(pnl=-99.0))
        assert verdict.allow is True
        assert verdict.reason is None

    def test_daily_loss_block(self):
        verdict = RiskEvaluator().evaluate(make_context(pnl=-101.0))
        assert verdict.allow is False
        assert verdict.reason == "max daily loss"

    def test_first_block_wins(self):
        ctx = make_context(pnl=-500.0, leverage=10.0, feed_stale=True)
        assert RiskEvaluator().evaluate(ctx).reason == "max daily loss"

    def test_implied_exposure_counts(self):
        ctx = make_context(exposure=900.0)
        evaluator = RiskEvaluator()
        assert evaluator.evaluate(ctx, implied_exposure=50.0).allow is True
        assert evaluator.evaluate(ctx, implied_exposure=150.0).reason == "max exposure"
        # Context itself is not modified
        assert ctx.exposure == 900.0

    def test_evaluate_all(self):
        ctx = make_context(leverage=10.0, feed_stale=True)
        verdicts = RiskEvaluator().evaluate_all(ctx)
        assert [v.allow for v in verdicts] == [True, True, False, False]
        assert [v.reason for v in verdicts if not v.allow] == ["leverage cap", "stale feed"]

    def test_custom_rules(self):
        def no_sol(ctx: RiskContext) -> RiskVerdict:
            if ctx.symbol.startswith("SOL"):
                return RiskVerdict(allow=False, reason="symbol blocked")
            return RiskVerdict(allow=True)

        evaluator = RiskEvaluator(rules=[no_sol])
        assert evaluator.evaluate(make_context(symbol="SOLUSDT")).reason == "symbol blocked"
        # Default rules are not applied
        assert evaluator.evaluate(make_context(pnl=-1000.0)).allow is True

    def test_rules_are_pure(self):
        ctx = make_context(pnl=-101.0)
        evaluator = RiskEvaluator()
        assert evaluator.evaluate(ctx) == evaluator.evaluate(ctx)
