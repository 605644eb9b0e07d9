"""Decision pipeline: bar -> features -> signal -> action -> risk verdict.

A DecisionPipeline owns the bar buffer and the stateful alpha and policy
of exactly one exchange/symbol/timeframe stream. Bars must be fed in
timestamp order by a single caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from core.alpha import create_alpha
from core.alpha.protocol import AlphaModel
from core.features.cache import NormalizationCache
from core.features.factory import FeatureBuilder
from core.models.action import Action
from core.models.bar import Bar, BarBuffer
from core.models.config import PipelineConfig
from core.models.features import FEATURE_CLOSE, FeatureVector
from core.models.risk import RiskContext, RiskVerdict
from core.models.signal import AlphaSignal
from core.policy.threshold_atr import ThresholdAtrPolicy
from core.risk.evaluator import RiskEvaluator

logger = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    """Outputs of one bar.

    Attributes:
        features: Features for the bar, None until the window is full.
        signal: Alpha signal, if the model emitted one.
        action: Policy action, if the signal triggered one.
        verdict: Risk verdict, when an action and a risk context exist.
    """

    features: FeatureVector | None = None
    signal: AlphaSignal | None = None
    action: Action | None = None
    verdict: RiskVerdict | None = None

    @property
    def approved_action(self) -> Action | None:
        """The action if it passed risk (or no risk check was requested)."""
        if self.action is None or self.verdict is None:
            return self.action
        if not self.verdict.allow:
            return None
        return self.verdict.adjusted or self.action


def implied_exposure(action: Action, close: float | None) -> float:
    """Exposure added by an action: notional for opens, zero for closes."""
    if not action.is_open or close is None:
        return 0.0
    return action.size * close


class DecisionPipeline:
    """Sequential per-stream decision chain."""

    def __init__(
        self,
        builder: FeatureBuilder,
        alpha: AlphaModel,
        policy: ThresholdAtrPolicy,
        evaluator: RiskEvaluator | None = None,
        buffer_size: int = 200,
    ):
        if buffer_size < builder.config.window:
            raise ValueError(
                f"buffer_size ({buffer_size}) must hold at least one feature "
                f"window ({builder.config.window})"
            )
        self.builder = builder
        self.alpha = alpha
        self.policy = policy
        self.evaluator = evaluator or RiskEvaluator()
        self.buffer_size = buffer_size
        self._buffer: BarBuffer | None = None

    @classmethod
    def from_config(
        cls,
        config: PipelineConfig,
        cache: NormalizationCache | None = None,
    ) -> "DecisionPipeline":
        """Build a pipeline from configuration.

        Raises:
            KeyError: If ``config.alpha_model`` is not a registered alpha.
        """
        alpha_config = config.alpha_config()
        kwargs = {"config": alpha_config} if alpha_config is not None else {}
        alpha = create_alpha(config.alpha_model, **kwargs)

        return cls(
            builder=FeatureBuilder(config.features, cache=cache),
            alpha=alpha,
            policy=ThresholdAtrPolicy(config.policy),
            evaluator=RiskEvaluator(),
            buffer_size=config.buffer_size,
        )

    @property
    def buffer(self) -> BarBuffer | None:
        return self._buffer

    async def process_bar(
        self,
        bar: Bar,
        risk_context: RiskContext | None = None,
    ) -> PipelineResult:
        """Feed one closed bar through the chain.

        Raises:
            ValueError: If the bar belongs to another stream or does not
                advance the timestamp.
        """
        if self._buffer is None:
            self._buffer = BarBuffer(
                exch=bar.exch, symbol=bar.symbol, tf=bar.tf, max_size=self.buffer_size
            )
        self._buffer.add(bar)

        if len(self._buffer) < self.builder.config.window:
            logger.debug(
                f"{bar.stream_key} warming up: {len(self._buffer)}/{self.builder.config.window} bars"
            )
            return PipelineResult()

        features = await self.builder.build(self._buffer.bars)
        result = PipelineResult(features=features)

        result.signal = self.alpha.generate_signal(features)
        if result.signal is None:
            return result

        prev_state = self.policy.state
        result.action = self.policy.generate_action(result.signal, features)
        if result.action is None or risk_context is None:
            return result

        result.verdict = self.evaluator.evaluate(
            risk_context,
            implied_exposure=implied_exposure(result.action, features.get(FEATURE_CLOSE)),
        )
        if not result.verdict.allow:
            # Blocked actions leave the position unchanged
            self.policy.restore(prev_state)
        return result

    def reset(self) -> None:
        """Forget all bars and return alpha and policy to their initial state."""
        self.alpha.reset()
        self.policy.reset()
        self._buffer = None

    async def drain(self) -> None:
        """Flush pending normalization cache writes."""
        if self.builder.outbox is not None:
            await self.builder.outbox.drain()
