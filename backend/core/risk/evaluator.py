"""Risk evaluator: runs rules against a context in a fixed order."""

from __future__ import annotations

import logging
from typing import Sequence

from core.models.risk import RiskContext, RiskVerdict
from core.risk.rules import ALLOW, DEFAULT_RULES, RiskRule

logger = logging.getLogger(__name__)


class RiskEvaluator:
    """Gate actions through an ordered list of risk rules.

    The evaluator holds no mutable state and may be shared across streams.
    """

    def __init__(self, rules: Sequence[RiskRule] = DEFAULT_RULES):
        self.rules: tuple[RiskRule, ...] = tuple(rules)

    def _effective(self, ctx: RiskContext, implied_exposure: float) -> RiskContext:
        if implied_exposure == 0:
            return ctx
        return ctx.model_copy(update={"exposure": ctx.exposure + implied_exposure})

    def evaluate(self, ctx: RiskContext, implied_exposure: float = 0.0) -> RiskVerdict:
        """
        Evaluate rules in order and return the first blocking verdict.

        Args:
            ctx: Account and feed snapshot
            implied_exposure: Exposure the proposed action would add

        Returns:
            The first verdict with ``allow=False``, else an allowing verdict
        """
        effective = self._effective(ctx, implied_exposure)
        for rule in self.rules:
            verdict = rule(effective)
            if not verdict.allow:
                logger.info(f"Risk blocked {ctx.exch}:{ctx.symbol}: {verdict.reason}")
                return verdict
        return ALLOW

    def evaluate_all(
        self,
        ctx: RiskContext,
        implied_exposure: float = 0.0,
    ) -> list[RiskVerdict]:
        """Every rule's verdict, in rule order (for auditing)."""
        effective = self._effective(ctx, implied_exposure)
        return [rule(effective) for rule in self.rules]
